"""Pure data types for readloop.core.

These are small frozen dataclasses with no behavior coupling. A read attempt
produces exactly one ReadOutcome; an evaluated line produces exactly one
LoopVerdict.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class OutcomeKind(Enum):
    """Result kinds for a single read attempt."""

    LINE = auto()  # A line of text was read
    END_OF_SESSION = auto()  # Explicit end-of-session keystroke (Ctrl-D at a prompt)
    INTERRUPTED = auto()  # User cancelled the read (Ctrl-C)
    NO_MORE_INPUT = auto()  # Input is exhausted or broken beyond recovery


@dataclass(frozen=True)
class ReadOutcome:
    """Tagged result of one read attempt.

    Only LINE outcomes carry text. Use the module-level constants for the
    other kinds instead of constructing them.

    Attributes:
        kind: Which outcome this is.
        text: The line read, for LINE outcomes.
    """

    kind: OutcomeKind
    text: str | None = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.LINE and self.text is None:
            raise ValueError("LINE outcomes require text")
        if self.kind is not OutcomeKind.LINE and self.text is not None:
            raise ValueError(f"{self.kind.name} outcomes carry no text")

    @classmethod
    def line(cls, text: str) -> "ReadOutcome":
        """Build a LINE outcome."""
        return cls(OutcomeKind.LINE, text)

    @property
    def is_line(self) -> bool:
        return self.kind is OutcomeKind.LINE


END_OF_SESSION = ReadOutcome(OutcomeKind.END_OF_SESSION)
INTERRUPTED = ReadOutcome(OutcomeKind.INTERRUPTED)
NO_MORE_INPUT = ReadOutcome(OutcomeKind.NO_MORE_INPUT)


class VerdictKind(Enum):
    """What the loop should do after the evaluator handled a line."""

    CONTINUE = auto()
    STOP_WITH_VALUE = auto()  # Deliberate exit, start() returns the value
    STOP_WITH_EXCEPTION = auto()  # Fatal exit, start() raises the exception


@dataclass(frozen=True)
class LoopVerdict:
    """The evaluator's decision for one forwarded line.

    Attributes:
        kind: Continue, stop with a value, or stop by raising.
        value: Exit value for STOP_WITH_VALUE.
        exception: Exception to re-raise for STOP_WITH_EXCEPTION.
    """

    kind: VerdictKind
    value: Any = None
    exception: BaseException | None = None

    @classmethod
    def proceed(cls) -> "LoopVerdict":
        return cls(VerdictKind.CONTINUE)

    @classmethod
    def stop(cls, value: Any = None) -> "LoopVerdict":
        return cls(VerdictKind.STOP_WITH_VALUE, value=value)

    @classmethod
    def raise_up(cls, exception: BaseException) -> "LoopVerdict":
        return cls(VerdictKind.STOP_WITH_EXCEPTION, exception=exception)

    @property
    def should_continue(self) -> bool:
        return self.kind is VerdictKind.CONTINUE
