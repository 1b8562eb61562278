"""Bundled Python REPL for readloop.

Public API:
    PythonEvaluator: Evaluator running Python statements
    REPLState: Namespace, history and bindings
    dispatch_command: REPL command dispatch
"""

from __future__ import annotations

from readloop.frontends.cli.repl.evaluator import PythonEvaluator
from readloop.frontends.cli.repl.registry import (
    COMMANDS,
    CommandAction,
    CommandContext,
    CommandResult,
    dispatch_command,
)
from readloop.frontends.cli.repl.state import REPLState

__all__ = [
    "PythonEvaluator",
    "REPLState",
    "COMMANDS",
    "CommandAction",
    "CommandContext",
    "CommandResult",
    "dispatch_command",
]
