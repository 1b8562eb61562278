"""readloop - a resilient read-eval-print loop front end.

readloop reads one line at a time from a swappable line source, keeps the
prompt indented to the constructs still open, repaints lines whose
indentation changed, and hands the result to an evaluator. Input failures
never crash the session: cancellation clears the line, an exhausted source
falls back to the default input, and transient read errors are retried a
bounded number of times.

Layers:
    core/       The loop, its input layer and recovery rules
    frontends/  User interfaces (CLI with a bundled Python evaluator)

Quick Start:
    >>> from readloop import REPL, IterableSource
    >>> from readloop.frontends.cli.repl import PythonEvaluator
    >>>
    >>> repl = REPL(PythonEvaluator(), source=IterableSource(["x = 6 * 7", "exit x"]))
    >>> repl.start()
    42
"""

from readloop.__version__ import __version__
from readloop.core import (
    REPL,
    InputSource,
    IterableSource,
    LoopVerdict,
    OutputSink,
    PromptToolkitSource,
    ReadOutcome,
    ReplConfig,
    StreamSource,
)

__all__ = [
    "__version__",
    "REPL",
    "ReplConfig",
    "ReadOutcome",
    "LoopVerdict",
    "OutputSink",
    "PromptToolkitSource",
    "InputSource",
    "StreamSource",
    "IterableSource",
]
