"""Core - the loop, its input layer and its recovery rules.

This package knows nothing about any particular language. Evaluators plug
in through the Evaluator protocol; input plugs in through line sources.

Architecture:
    types          ReadOutcome and LoopVerdict
    sources        Line source adapters and capability probes
    resilience     Recovery policies around each read
    indent         Indentation tracking and on-terminal correction
    repl           The loop controller
    config         Immutable configuration injected into each REPL

Example:
    >>> from readloop.core import REPL, IterableSource
    >>> repl = REPL(evaluator, source=IterableSource(["x = 1", "exit x"]))
    >>> repl.start()
    1
"""

from readloop.core.config import ReplConfig
from readloop.core.evaluator import Evaluator
from readloop.core.hooks import Hooks
from readloop.core.indent import KEYWORD_END_RULES, PYTHON_RULES, IndentRules, IndentTracker
from readloop.core.output import OutputSink
from readloop.core.repl import REPL
from readloop.core.resilience import (
    EndOfInputPolicy,
    InterruptPolicy,
    ReadErrorPolicy,
    RecoveryPolicy,
    ResiliencePipeline,
)
from readloop.core.session import Session
from readloop.core.sources import (
    InputSource,
    IterableSource,
    LineSource,
    PromptToolkitSource,
    StreamSource,
    default_source,
)
from readloop.core.types import (
    END_OF_SESSION,
    INTERRUPTED,
    NO_MORE_INPUT,
    LoopVerdict,
    OutcomeKind,
    ReadOutcome,
    VerdictKind,
)

__all__ = [
    # Loop
    "REPL",
    "ReplConfig",
    "Session",
    "Evaluator",
    "Hooks",
    "OutputSink",
    # Outcomes
    "ReadOutcome",
    "OutcomeKind",
    "LoopVerdict",
    "VerdictKind",
    "END_OF_SESSION",
    "INTERRUPTED",
    "NO_MORE_INPUT",
    # Sources
    "LineSource",
    "PromptToolkitSource",
    "InputSource",
    "StreamSource",
    "IterableSource",
    "default_source",
    # Resilience
    "RecoveryPolicy",
    "InterruptPolicy",
    "EndOfInputPolicy",
    "ReadErrorPolicy",
    "ResiliencePipeline",
    # Indentation
    "IndentTracker",
    "IndentRules",
    "KEYWORD_END_RULES",
    "PYTHON_RULES",
]
