"""Indentation tracking and on-terminal correction.

IndentTracker follows the constructs opened across the whole evaluation
buffer (brackets, keyword blocks, colon blocks) and answers two questions:

- what prefix the next prompt should carry (``current_prefix``)
- how the line just submitted should have been indented (``indent``)

When the answer to the second question differs from what the user already
saw echoed, ``correct_indentation`` builds the escape sequence that repaints
the line in place.

Rules are data (IndentRules), so the same tracker serves ``if ... end`` style
languages and Python-style colon blocks.

Strings and comments are skipped token by token. Strings spanning several
lines are not tracked.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from readloop.core.terminal import cursor_down, cursor_up, is_windows_ansi

_TOKEN_RE = re.compile(
    r"""
    (?P<string>"(?:\\.|[^"\\])*"?|'(?:\\.|[^'\\])*'?)
  | (?P<comment>\#.*)
  | (?P<word>[A-Za-z_][A-Za-z0-9_]*[?!]?)
  | (?P<number>\d[\w.]*)
  | (?P<punct>[^\s\w])
    """,
    re.VERBOSE,
)

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

# Readline's "invisible text" markers around escape sequences in prompts.
_INVISIBLE_MARKERS = "\001\002"

COLON_BLOCK = ":"

# Tokens after which an opening keyword still starts a block (``x = if y``).
_EXPRESSION_STARTERS = frozenset({"=", "(", ",", "[", "{", "|", "&"})

# Tokens after which a word is a method name or symbol, never a keyword.
_NON_KEYWORD_PREFIXES = frozenset({".", ":", "@", "$"})


@dataclass(frozen=True)
class IndentRules:
    """Which tokens open, continue and close indented constructs.

    Attributes:
        open_keywords: Keywords opening a block when they start a statement.
        inline_open_keywords: Keywords opening a block anywhere on a line.
        close_keywords: Keywords closing the innermost keyword block.
        mid_keywords: Keywords that continue a block one level out
            (``else``, ``rescue``...).
        loop_keywords: Statement keywords whose optional inline opener on the
            same line does not open a second block (``while x do``).
        brackets: Opening bracket -> closing bracket.
        colon_blocks: A line ending in ``:`` opens a block.
        dedent_after: Keywords after which the innermost colon block ends.
    """

    open_keywords: frozenset[str] = frozenset()
    inline_open_keywords: frozenset[str] = frozenset()
    close_keywords: frozenset[str] = frozenset()
    mid_keywords: frozenset[str] = frozenset()
    loop_keywords: frozenset[str] = frozenset()
    brackets: dict[str, str] = field(
        default_factory=lambda: {"(": ")", "[": "]", "{": "}"}
    )
    colon_blocks: bool = False
    dedent_after: frozenset[str] = frozenset()

    @property
    def closing_brackets(self) -> dict[str, str]:
        return {close: open_ for open_, close in self.brackets.items()}


KEYWORD_END_RULES = IndentRules(
    open_keywords=frozenset(
        {"if", "unless", "while", "until", "for", "def", "class", "module", "case", "begin"}
    ),
    inline_open_keywords=frozenset({"do"}),
    close_keywords=frozenset({"end"}),
    mid_keywords=frozenset({"else", "elsif", "when", "rescue", "ensure"}),
    loop_keywords=frozenset({"while", "until", "for"}),
)

PYTHON_RULES = IndentRules(
    mid_keywords=frozenset({"else", "elif", "except", "finally"}),
    colon_blocks=True,
    dedent_after=frozenset({"return", "pass", "break", "continue", "raise"}),
)


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str


def _tokenize(line: str) -> list[_Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(line):
        kind = match.lastgroup or "punct"
        if kind == "comment":
            break
        tokens.append(_Token(kind, match.group()))
    return tokens


def strip_ansi(text: str) -> str:
    """Remove color codes and readline invisible markers."""
    for marker in _INVISIBLE_MARKERS:
        text = text.replace(marker, "")
    return _ANSI_RE.sub("", text)


class IndentTracker:
    """Stateful indentation tracker for one evaluation buffer.

    Example:
        >>> tracker = IndentTracker(KEYWORD_END_RULES)
        >>> tracker.indent("if true")
        'if true'
        >>> tracker.current_prefix
        '  '
        >>> tracker.indent("puts 1")
        '  puts 1'
        >>> tracker.indent("end")
        'end'
        >>> tracker.depth
        0
    """

    def __init__(self, rules: IndentRules = KEYWORD_END_RULES, width: int = 2) -> None:
        self.rules = rules
        self.width = width
        self._stack: list[str] = []

    def reset(self) -> None:
        """Forget every open construct."""
        self._stack.clear()

    @property
    def stack(self) -> tuple[str, ...]:
        """Open-construct markers, outermost first."""
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def is_reset(self) -> bool:
        return not self._stack

    @property
    def current_prefix(self) -> str:
        """Indentation the next line should start with."""
        return self._prefix(self.depth)

    def _prefix(self, depth: int) -> str:
        return " " * (self.width * max(depth, 0))

    def indent(self, text: str) -> str:
        """Advance over ``text`` and return it re-indented.

        ``text`` may hold several lines; each is re-indented to the depth its
        own leading closers or mid-block keyword imply. Blank lines stay blank.
        """
        return "\n".join(self._indent_line(line) for line in text.split("\n"))

    def _indent_line(self, line: str) -> str:
        code = line.strip()
        if not code:
            return ""

        tokens = _tokenize(code)
        leading = len(line) - len(line.lstrip())
        if leading and self.rules.colon_blocks and not self._top_is_bracket():
            self._resync(leading, tokens)

        line_depth = self.depth - self._leading_dedent(tokens)
        indented = f"{self._prefix(line_depth)}{code}"
        self._advance(tokens)
        return indented

    def _resync(self, leading: int, tokens: list[_Token]) -> None:
        # Explicit indentation wins in colon-block languages: close the colon
        # blocks the line has dedented out of.
        level = leading // self.width
        if tokens and tokens[0].kind == "word" and tokens[0].text in self.rules.mid_keywords:
            level += 1
        while self.depth > level and self._top_is(COLON_BLOCK):
            self._stack.pop()

    def _leading_dedent(self, tokens: list[_Token]) -> int:
        rules = self.rules
        closing = rules.closing_brackets
        if tokens and tokens[0].kind == "word" and tokens[0].text in rules.mid_keywords:
            return 1 if self._stack else 0

        dedent = 0
        for token in tokens:
            is_closer = (token.kind == "word" and token.text in rules.close_keywords) or (
                token.kind == "punct" and token.text in closing
            )
            if not is_closer:
                break
            dedent += 1
        return min(dedent, self.depth)

    def _advance(self, tokens: list[_Token]) -> None:
        rules = self.rules
        closing = rules.closing_brackets
        first_word = tokens[0].text if tokens and tokens[0].kind == "word" else None

        if first_word in rules.mid_keywords and rules.colon_blocks and self._top_is(COLON_BLOCK):
            self._stack.pop()

        previous: _Token | None = None
        for token in tokens:
            if token.kind == "punct":
                if token.text in rules.brackets:
                    self._stack.append(token.text)
                elif token.text in closing and self._top_is(closing[token.text]):
                    self._stack.pop()
            elif token.kind == "word" and not (
                previous is not None and previous.text in _NON_KEYWORD_PREFIXES
            ):
                self._advance_keyword(token.text, previous, first_word)
            previous = token

        last = tokens[-1] if tokens else None
        if (
            rules.colon_blocks
            and last is not None
            and last.text == COLON_BLOCK
            and not self._top_is_bracket()
        ):
            self._stack.append(COLON_BLOCK)
        elif first_word in rules.dedent_after and self._top_is(COLON_BLOCK):
            self._stack.pop()

    def _advance_keyword(self, word: str, previous: _Token | None, first_word: str | None) -> None:
        rules = self.rules
        if word in rules.open_keywords:
            if previous is None or previous.text in _EXPRESSION_STARTERS:
                self._stack.append(word)
        elif word in rules.inline_open_keywords:
            if first_word not in rules.loop_keywords:
                self._stack.append(word)
        elif word in rules.close_keywords:
            if self._stack and self._top_is_keyword():
                self._stack.pop()

    def _top_is(self, marker: str) -> bool:
        return bool(self._stack) and self._stack[-1] == marker

    def _top_is_bracket(self) -> bool:
        return bool(self._stack) and self._stack[-1] in self.rules.brackets

    def _top_is_keyword(self) -> bool:
        return bool(self._stack) and self._stack[-1] not in self.rules.brackets

    def correct_indentation(
        self,
        prompt: str,
        code: str,
        overhang: int = 0,
        *,
        columns: int = 0,
        windows_ansi: bool | None = None,
    ) -> str:
        """Escape sequence repainting the previous line as ``prompt + code``.

        Args:
            prompt: The prompt the line was read with (may contain colors).
            code: The corrected line.
            overhang: How many more characters the echoed line had than the
                corrected one; blanked out so no stale text remains.
            columns: Terminal width, used to count wrapped rows. 0 = unknown.
            windows_ansi: Terminal family; probed when None.
        """
        if windows_ansi is None:
            windows_ansi = is_windows_ansi()

        visible_prompt = prompt
        for marker in _INVISIBLE_MARKERS:
            visible_prompt = visible_prompt.replace(marker, "")
        measured = len(strip_ansi(prompt)) + len(code)
        rows = 1 if columns <= 0 else measured // columns + 1
        whitespace = " " * max(overhang, 0)

        return (
            f"{cursor_up(rows, windows_ansi)}{visible_prompt}{code}{whitespace}"
            f"{cursor_down(rows, windows_ansi)}"
        )
