"""Command registry and dispatch for the REPL.

This module provides:
- CommandContext: State command handlers work on
- CommandResult: Result of a command with its control flow signal
- Command handlers and the COMMANDS registry

Commands are only recognized at the start of a statement, i.e. when the
evaluation buffer is empty. ``!`` is the exception: it discards a pending
multi-line statement.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from readloop.frontends.cli.repl.display import print_help, print_history

if TYPE_CHECKING:
    from readloop.core.output import OutputSink
    from readloop.frontends.cli.repl.evaluator import PythonEvaluator
    from readloop.frontends.cli.repl.state import REPLState

logger = logging.getLogger(__name__)


class CommandAction(Enum):
    """Control flow actions from command handlers."""

    CONTINUE = auto()  # Continue REPL loop
    BREAK = auto()  # Exit REPL loop with a value
    RAISE_UP = auto()  # Exit REPL loop by raising an exception


@dataclass
class CommandContext:
    """All state needed by command handlers."""

    evaluator: PythonEvaluator
    state: REPLState
    output: OutputSink


@dataclass
class CommandResult:
    """Result from a command handler."""

    action: CommandAction = CommandAction.CONTINUE
    value: Any = None
    exception: BaseException | None = None


CommandHandler = Callable[[CommandContext, str], CommandResult]

CLEAR_COMMAND = "!"

_CODE_CONTINUATIONS = frozenset({"=", ".", "(", "[", ",", ":"})


class CommandError(Exception):
    """A command was used incorrectly. The message is shown to the user."""


# =============================================================================
# Helper Functions
# =============================================================================


def _evaluate_argument(ctx: CommandContext, expression: str) -> Any:
    try:
        return eval(expression, ctx.state.namespace)
    except Exception as e:
        raise CommandError(f"could not evaluate {expression!r}: {type(e).__name__}: {e}") from e


def _as_exception(value: Any) -> BaseException:
    if isinstance(value, BaseException):
        return value
    if isinstance(value, type) and issubclass(value, BaseException):
        return value()
    if isinstance(value, str):
        return RuntimeError(value)
    raise CommandError(f"cannot raise {type(value).__name__} (expected an exception or message)")


# =============================================================================
# Command Handlers
# =============================================================================


def cmd_help(ctx: CommandContext, args: str) -> CommandResult:
    """Show help."""
    print_help(ctx.output)
    return CommandResult()


def cmd_history(ctx: CommandContext, args: str) -> CommandResult:
    """Show evaluated statements, optionally only the last N."""
    last: int | None = None
    if args:
        try:
            last = int(args)
        except ValueError:
            raise CommandError("Usage: history [N]") from None
    print_history(ctx.output, ctx.state.history, last)
    return CommandResult()


def cmd_clear(ctx: CommandContext, args: str) -> CommandResult:
    """Discard the current multi-line input."""
    ctx.evaluator.reset_buffer()
    ctx.output.puts("Input buffer cleared!")
    return CommandResult()


def cmd_exit(ctx: CommandContext, args: str) -> CommandResult:
    """Exit the REPL, returning the value of the optional expression."""
    value = _evaluate_argument(ctx, args) if args else None
    return CommandResult(action=CommandAction.BREAK, value=value)


def cmd_raise_up(ctx: CommandContext, args: str) -> CommandResult:
    """Exit the REPL by raising an exception to the caller."""
    if args:
        exception = _as_exception(_evaluate_argument(ctx, args))
    elif ctx.state.last_exception is not None:
        exception = ctx.state.last_exception
    else:
        raise CommandError("raise-up: no exception to raise")
    return CommandResult(action=CommandAction.RAISE_UP, exception=exception)


# =============================================================================
# Command Registry
# =============================================================================

COMMANDS: dict[str, CommandHandler] = {
    "help": cmd_help,
    "history": cmd_history,
    CLEAR_COMMAND: cmd_clear,
    "exit": cmd_exit,
    "quit": cmd_exit,  # Alias
    "raise-up": cmd_raise_up,
}


def dispatch_command(ctx: CommandContext, line: str) -> CommandResult | None:
    """Dispatch a command line to its handler.

    Args:
        ctx: Command context.
        line: The raw input line.

    Returns:
        CommandResult if the line was a command, None otherwise.
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return None

    handler = COMMANDS.get(parts[0])
    if handler is None:
        return None

    args = parts[1].strip() if len(parts) > 1 else ""
    if args[:1] in _CODE_CONTINUATIONS:
        # `help = 3`, `exit (1)`: Python code that shadows a command name.
        return None

    logger.debug("command: name=%s, args=%r", parts[0], args)
    try:
        return handler(ctx, args)
    except CommandError as e:
        ctx.output.error(f"Error: {e}")
        return CommandResult()
