"""Evaluator protocol: what the REPL needs from the code that runs input."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from readloop.core.types import LoopVerdict


@runtime_checkable
class Evaluator(Protocol):
    """Protocol for the evaluation side of a REPL.

    The REPL decides what to read next; the evaluator owns the evaluation
    buffer, decides when it holds a complete unit, runs it and reports
    whether the loop should keep going.

    Optional members, probed with getattr:

    - ``current_binding()``: context object handed to session hooks. Hooks
      get None when the evaluator has no such method.
    - ``push_binding(target)``: required only when the REPL is given a target.
    """

    def current_prompt(self) -> str:
        """Prompt for the next read, without indentation."""
        ...

    def eval(self, line: str | None) -> LoopVerdict:
        """Handle one line.

        Args:
            line: The (corrected) line, or None for an end-of-session keystroke.
        """
        ...

    def reset_buffer(self) -> None:
        """Discard accumulated partial input."""
        ...

    def is_buffer_empty(self) -> bool:
        ...

    def complete(self, partial: str) -> Iterable[str]:
        """Completion candidates for ``partial``."""
        ...

    def exec_hook(self, name: str, *args: Any) -> Any:
        """Fire the hooks registered for ``name``."""
        ...
