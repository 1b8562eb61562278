"""Session - the mutable state of one running REPL.

A Session lives exactly as long as one ``REPL.start()`` call. It is owned
and mutated by the loop alone, so nothing here is locked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from readloop.core.indent import IndentTracker

if TYPE_CHECKING:
    from readloop.core.config import ReplConfig
    from readloop.core.evaluator import Evaluator
    from readloop.core.output import OutputSink

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """State shared by the loop, the resilience policies and the indenter.

    Attributes:
        evaluator: Owns the evaluation buffer.
        config: Immutable configuration injected at construction.
        source: Current line source. Replaced at runtime, e.g. when the
            end-of-input policy falls back to the default input.
        output: Output sink.
        indent: Indentation tracker for the current evaluation buffer.
    """

    evaluator: Evaluator
    config: ReplConfig
    source: Any
    output: OutputSink
    indent: IndentTracker = field(init=False)

    def __post_init__(self) -> None:
        self.indent = IndentTracker(self.config.indent_rules, width=self.config.indent_width)

    def switch_source(self, source: Any) -> None:
        """Make ``source`` the active line source."""
        logger.debug("source_switched: from=%r, to=%r", self.source, source)
        self.source = source

    def buffer_is_empty(self) -> bool:
        return self.evaluator.is_buffer_empty()
