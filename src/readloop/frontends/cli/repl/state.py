"""REPL state management."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class REPLState:
    """State for the bundled Python evaluator.

    Attributes:
        namespace: Globals user code runs in.
        history: Complete statements evaluated so far.
        bindings: Targets pushed into the session, innermost last.
        last_exception: Most recent exception raised by user code.
    """

    namespace: dict[str, Any] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)
    bindings: list[Any] = field(default_factory=list)
    last_exception: BaseException | None = None
