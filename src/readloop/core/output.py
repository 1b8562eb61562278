"""Output sink for the REPL.

Wraps a rich Console. Diagnostics go through rich so they pick up styles
and tracebacks; plain text and escape sequences are written straight to the
console's file so nothing is re-interpreted as markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.traceback import Traceback

ERROR_STYLE = "bold red"
FATAL_STYLE = "bold white on red"
HINT_STYLE = "dim"


class OutputSink:
    """Where the loop, the resilience policies and the indenter write.

    Example:
        >>> sink = OutputSink(Console(file=io.StringIO(), force_terminal=False))
        >>> sink.puts("hello")
        >>> sink.is_tty
        False
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @property
    def is_tty(self) -> bool:
        """True when the console writes to an interactive terminal."""
        return self.console.is_terminal

    @property
    def width(self) -> int:
        return self.console.width

    def print(self, text: str) -> None:
        """Write text verbatim, without a trailing newline."""
        self.console.file.write(text)

    def puts(self, text: str = "") -> None:
        """Write text verbatim followed by a newline."""
        self.console.file.write(f"{text}\n")

    def error(self, message: str, style: str = ERROR_STYLE) -> None:
        """Write a styled diagnostic line."""
        self.console.print(message, style=style, markup=False, highlight=False)

    def hint(self, message: str) -> None:
        self.console.print(message, style=HINT_STYLE, markup=False, highlight=False)

    def print_traceback(self, exc: BaseException) -> None:
        """Render the traceback of ``exc``."""
        self.console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))

    def flush(self) -> None:
        self.console.file.flush()

    def __repr__(self) -> str:
        return f"OutputSink(tty={self.is_tty})"
