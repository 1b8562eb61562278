"""REPL configuration.

A single immutable ReplConfig is built at startup and injected into every
REPL. Nothing reads process-wide state during a session.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from readloop.core.indent import IndentRules
    from readloop.core.output import OutputSink

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_MAX_READ_RETRIES = 5

# Exception kinds the read-error policy reports and retries. Everything else
# propagates.
DEFAULT_RESCUABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    OSError,
    RuntimeError,
    UnicodeDecodeError,
    ValueError,
)


def _default_input() -> Any:
    from readloop.core.sources import default_source

    return default_source()


def _default_output() -> OutputSink:
    from readloop.core.output import OutputSink

    return OutputSink()


def _default_rules() -> IndentRules:
    from readloop.core.indent import KEYWORD_END_RULES

    return KEYWORD_END_RULES


@dataclass(frozen=True)
class ReplConfig:
    """Tunables for REPL behavior.

    Attributes:
        input_factory: Builds the process default line source. The
            end-of-input policy falls back to a fresh one when the active
            source runs dry.
        output_factory: Builds the output sink when none is passed to the REPL.
        rescuable_exceptions: Exception kinds that are reported and retried
            while reading.
        auto_indent: Prefix prompts with the indentation of the open constructs.
        correct_indent: Repaint an echoed line when its indentation changed.
        max_read_retries: Consecutive rescuable errors tolerated per read.
        indent_width: Spaces per nesting level.
        indent_rules: Keyword and bracket rules for the indentation tracker.
    """

    input_factory: Callable[[], Any] = _default_input
    output_factory: Callable[[], OutputSink] = _default_output
    rescuable_exceptions: tuple[type[Exception], ...] = DEFAULT_RESCUABLE_EXCEPTIONS
    auto_indent: bool = True
    correct_indent: bool = True
    max_read_retries: int = DEFAULT_MAX_READ_RETRIES
    indent_width: int = 2
    indent_rules: IndentRules = field(default_factory=_default_rules)

    def __post_init__(self) -> None:
        if self.max_read_retries <= 0:
            raise ValueError("max_read_retries must be > 0")
        if self.indent_width <= 0:
            raise ValueError("indent_width must be > 0")
        for kind in self.rescuable_exceptions:
            if not (isinstance(kind, type) and issubclass(kind, Exception)):
                raise ValueError(f"rescuable_exceptions must be Exception subclasses, got {kind!r}")

    @classmethod
    def from_env(cls, base: ReplConfig | None = None) -> ReplConfig:
        """Apply environment overrides on top of ``base``.

        Environment Variables:
            READLOOP_AUTO_INDENT: Enable/disable auto-indent.
            READLOOP_CORRECT_INDENT: Enable/disable on-terminal correction.
            READLOOP_MAX_READ_RETRIES: Retry budget per read.
        """
        config = base or cls()
        overrides: dict[str, Any] = {}

        auto_indent = _env_flag("READLOOP_AUTO_INDENT")
        if auto_indent is not None:
            overrides["auto_indent"] = auto_indent

        correct_indent = _env_flag("READLOOP_CORRECT_INDENT")
        if correct_indent is not None:
            overrides["correct_indent"] = correct_indent

        retries = os.environ.get("READLOOP_MAX_READ_RETRIES")
        if retries:
            try:
                overrides["max_read_retries"] = int(retries)
            except ValueError:
                raise ValueError(
                    f"READLOOP_MAX_READ_RETRIES must be an integer, got {retries!r}"
                ) from None

        return replace(config, **overrides) if overrides else config


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")
