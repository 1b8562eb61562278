"""Line sources: where the REPL reads its input from.

A line source is anything with a ``read_line`` method. Sources differ in
their calling convention (some take the prompt, some don't) and in whether
they can drive tab completion, so callers probe capabilities instead of
assuming a signature:

- ``read_line(prompt) -> str | None`` or ``read_line() -> str | None``
- ``None`` means an explicit end-of-session keystroke (Ctrl-D at a prompt)
- ``EOFError`` means the stream ran dry
- a settable ``completion_proc`` attribute means completion is supported

Plain text streams (``sys.stdin``, ``io.StringIO``) are accepted as well and
are read with ``readline()``.
"""

from __future__ import annotations

import inspect
import logging
import re
import sys
from collections.abc import Callable, Iterable, Iterator
from typing import IO, TYPE_CHECKING, Any, Protocol

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

if TYPE_CHECKING:
    from prompt_toolkit import PromptSession

logger = logging.getLogger(__name__)

CompletionProc = Callable[[str], Iterable[str]]

# prompt_toolkit matches this against the reversed text before the cursor.
_NAME_BEFORE_CURSOR = re.compile(r"^[\w.]+")

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


class LineSource(Protocol):
    """Protocol for REPL input sources."""

    def read_line(self, prompt: str) -> str | None:
        """Read one line, showing ``prompt``.

        Returns:
            The line without its trailing newline, or None on an explicit
            end-of-session keystroke.

        Raises:
            EOFError: If the underlying stream is exhausted.
            KeyboardInterrupt: If the user cancelled the read.
        """
        ...


# =============================================================================
# Capability probes
# =============================================================================


def accepts_prompt(source: Any) -> bool:
    """True if ``source.read_line`` takes the prompt as an argument."""
    reader = getattr(source, "read_line", None)
    if reader is None:
        return False
    try:
        signature = inspect.signature(reader)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures: assume the common form.
        return True
    return any(p.kind in _POSITIONAL for p in signature.parameters.values())


def supports_completion(source: Any) -> bool:
    """True if ``source`` can drive tab completion."""
    return hasattr(source, "completion_proc")


def install_completion(source: Any, complete: CompletionProc) -> bool:
    """Bind ``complete`` as the source's completion callback, if supported.

    Returns:
        True if the callback was installed.
    """
    if not supports_completion(source):
        return False
    source.completion_proc = complete
    return True


def read_from(source: Any, prompt: str) -> str | None:
    """Read one line from ``source`` using whichever convention it supports.

    Raises:
        EOFError: If the source is exhausted.
        TypeError: If ``source`` is not a line source at all.
    """
    if hasattr(source, "read_line"):
        if accepts_prompt(source):
            return source.read_line(prompt)
        return source.read_line()

    if hasattr(source, "readline"):
        line = source.readline()
        if not line:
            raise EOFError(f"{describe_source(source)} is exhausted")
        return line.rstrip("\n").rstrip("\r")

    raise TypeError(f"{source!r} is not a line source (no read_line or readline method)")


def describe_source(source: Any) -> str:
    """Human-readable name for diagnostics."""
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return f"{type(source).__name__}({name})"
    return repr(source)


# =============================================================================
# Completion bridge
# =============================================================================


class SessionCompleter(Completer):
    """prompt_toolkit completer that delegates to a completion callback.

    The callback is swapped before every read so it always reflects the
    live evaluation session. Completes the dotted name before the cursor,
    so ``print(alpha_v`` asks for ``alpha_v``.
    """

    def __init__(self, complete: CompletionProc | None = None) -> None:
        self.complete = complete

    def get_completions(self, document: Document, complete_event: object) -> Iterator[Completion]:
        if self.complete is None:
            return

        word = document.get_word_before_cursor(pattern=_NAME_BEFORE_CURSOR)
        try:
            candidates = list(self.complete(word))
        except Exception:
            # Completion errors are logged, never raised into the prompt.
            logger.debug("completion failed for %r", word, exc_info=True)
            return

        for candidate in candidates:
            yield Completion(candidate, start_position=-len(word))


# =============================================================================
# Concrete sources
# =============================================================================


class PromptToolkitSource:
    """Interactive source backed by a prompt_toolkit PromptSession.

    Ctrl-C raises KeyboardInterrupt. Ctrl-D ends the session (returns None)
    rather than raising EOFError, since the terminal itself is still live.
    """

    name = "prompt_toolkit"

    def __init__(self, session: PromptSession[str] | None = None) -> None:
        self._completer = SessionCompleter()
        self._session = session
        if session is not None:
            session.completer = self._completer

    @property
    def session(self) -> PromptSession[str]:
        """The PromptSession, created on first use."""
        if self._session is None:
            from prompt_toolkit import PromptSession

            self._session = PromptSession(completer=self._completer, complete_while_typing=False)
        return self._session

    @property
    def completion_proc(self) -> CompletionProc | None:
        return self._completer.complete

    @completion_proc.setter
    def completion_proc(self, complete: CompletionProc | None) -> None:
        self._completer.complete = complete

    def read_line(self, prompt: str) -> str | None:
        try:
            return self.session.prompt(prompt)
        except EOFError:
            return None

    def __repr__(self) -> str:
        return "PromptToolkitSource()"


class InputSource:
    """Source backed by the builtin ``input()``.

    EOF (Ctrl-D on a terminal, or a closed pipe) raises EOFError.
    """

    name = "input"

    def read_line(self, prompt: str) -> str | None:
        return input(prompt)

    def __repr__(self) -> str:
        return "InputSource()"


class StreamSource:
    """Source reading from a text stream.

    Args:
        stream: Stream to read lines from.
        echo: Optional stream the prompt is written to before each read.
    """

    def __init__(self, stream: IO[str], echo: IO[str] | None = None) -> None:
        self.stream = stream
        self.echo = echo

    @property
    def name(self) -> str:
        return str(getattr(self.stream, "name", "<stream>"))

    def read_line(self, prompt: str) -> str | None:
        if self.echo is not None:
            self.echo.write(prompt)
            self.echo.flush()
        line = self.stream.readline()
        if not line:
            raise EOFError(f"{self.name} is exhausted")
        return line.rstrip("\n").rstrip("\r")

    def __repr__(self) -> str:
        return f"StreamSource({self.name})"


class IterableSource:
    """Source feeding pre-supplied lines, e.g. a pasted block or a script.

    Takes no prompt. Raises EOFError once every line has been consumed.
    """

    def __init__(self, lines: Iterable[str], name: str = "<lines>") -> None:
        self._lines = iter(lines)
        self.name = name

    def read_line(self) -> str | None:
        try:
            line = next(self._lines)
        except StopIteration:
            raise EOFError(f"{self.name} is exhausted") from None
        return line.rstrip("\n")

    def __repr__(self) -> str:
        return f"IterableSource({self.name})"


def default_source() -> PromptToolkitSource | StreamSource:
    """The process default input: prompt_toolkit on a terminal, stdin otherwise."""
    if sys.stdin is not None and sys.stdin.isatty():
        return PromptToolkitSource()
    return StreamSource(sys.stdin)
