"""Display and output formatting utilities for the REPL."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readloop.core.output import OutputSink

HELP_TEXT = """
readloop - interactive Python with auto-indentation

Commands (at the start of a statement):
    help                  Show this help
    history               Show evaluated statements
    !                     Discard the current multi-line input
    exit [expr]           Leave the REPL, returning the value of expr
    quit [expr]           Alias for exit
    raise-up [expr]       Leave the REPL by raising expr (default: last exception)

Keys:
    Ctrl-C                Discard the current line and input buffer
    Ctrl-D                Discard multi-line input, or leave on an empty prompt
    Tab                   Complete names from the session namespace
"""


def print_help(output: OutputSink) -> None:
    """Print usage help."""
    output.puts(HELP_TEXT.strip("\n"))


def print_history(output: OutputSink, history: list[str], last: int | None = None) -> None:
    """Print evaluated statements, numbered from 1."""
    if not history:
        output.puts("No history")
        return

    start = max(len(history) - last, 0) if last else 0
    for index, statement in enumerate(history[start:], start + 1):
        lines = statement.split("\n")
        output.puts(f"{index:>4}: {lines[0]}")
        for continuation in lines[1:]:
            output.puts(f"      {continuation}")
