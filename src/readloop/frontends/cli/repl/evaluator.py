"""Python evaluator for the bundled REPL.

Accumulates input until ``code.compile_command`` reports a complete
statement, then runs it in the session namespace. Expression results are
echoed through the output sink and bound to ``_``.
"""

from __future__ import annotations

import logging
import rlcompleter
import sys
import traceback
from code import compile_command
from collections.abc import Mapping
from types import CodeType
from typing import Any

from readloop.core.hooks import Hooks
from readloop.core.output import OutputSink
from readloop.core.types import LoopVerdict
from readloop.frontends.cli.repl.registry import (
    CLEAR_COMMAND,
    CommandAction,
    CommandContext,
    dispatch_command,
)
from readloop.frontends.cli.repl.state import REPLState

logger = logging.getLogger(__name__)

PS1 = ">>> "
PS2 = "... "
FILENAME = "<readloop>"


class PythonEvaluator:
    """Evaluator running Python statements.

    Args:
        state: Namespace and history to use. A fresh one by default.
        output: Where results and errors are written.
        hooks: Hook registry for session events.

    Example:
        >>> evaluator = PythonEvaluator()
        >>> evaluator.eval("x = 40 + 2").should_continue
        True
        >>> evaluator.state.namespace["x"]
        42
    """

    def __init__(
        self,
        state: REPLState | None = None,
        output: OutputSink | None = None,
        hooks: Hooks | None = None,
    ) -> None:
        self.state = state or REPLState()
        self.output = output or OutputSink()
        self.hooks = hooks or Hooks()
        self.state.namespace.setdefault("__name__", "__readloop__")
        self._buffer: list[str] = []
        self._completer = rlcompleter.Completer(self.state.namespace)
        self._commands = CommandContext(evaluator=self, state=self.state, output=self.output)

    # =========================================================================
    # Buffer
    # =========================================================================

    @property
    def eval_string(self) -> str:
        """The pending multi-line input."""
        return "\n".join(self._buffer)

    def is_buffer_empty(self) -> bool:
        return not self._buffer

    def reset_buffer(self) -> None:
        self._buffer.clear()

    def current_prompt(self) -> str:
        return PS2 if self._buffer else PS1

    # =========================================================================
    # Bindings and hooks
    # =========================================================================

    def push_binding(self, target: Any) -> None:
        """Make ``target`` the current binding.

        Mappings are merged into the namespace; any other object becomes
        available as ``this``.
        """
        self.state.bindings.append(target)
        if isinstance(target, Mapping):
            self.state.namespace.update(target)
        else:
            self.state.namespace["this"] = target

    def current_binding(self) -> Any:
        if self.state.bindings:
            return self.state.bindings[-1]
        return self.state.namespace

    def exec_hook(self, name: str, *args: Any) -> Any:
        return self.hooks.exec_hook(name, *args)

    # =========================================================================
    # Completion
    # =========================================================================

    def complete(self, partial: str) -> list[str]:
        """Names and attributes in the namespace starting with ``partial``."""
        if not partial:
            return []

        candidates: list[str] = []
        index = 0
        while True:
            candidate = self._completer.complete(partial, index)
            if candidate is None:
                break
            if candidate not in candidates:
                candidates.append(candidate)
            index += 1
        return candidates

    # =========================================================================
    # Evaluation
    # =========================================================================

    def eval(self, line: str | None) -> LoopVerdict:
        """Handle one line of input.

        Args:
            line: Input line, or None for Ctrl-D. Ctrl-D discards pending
                multi-line input, or ends the session on an empty buffer.
        """
        if line is None:
            if self._buffer:
                self.reset_buffer()
                return LoopVerdict.proceed()
            return LoopVerdict.stop(None)

        if not self._buffer or line.strip() == CLEAR_COMMAND:
            result = dispatch_command(self._commands, line)
            if result is not None:
                if result.action is CommandAction.BREAK:
                    return LoopVerdict.stop(result.value)
                if result.action is CommandAction.RAISE_UP:
                    assert result.exception is not None
                    return LoopVerdict.raise_up(result.exception)
                return LoopVerdict.proceed()

        if not self._buffer and not line.strip():
            return LoopVerdict.proceed()

        self._buffer.append(line)
        source = self.eval_string

        try:
            code = compile_command(source, FILENAME, "single")
        except (SyntaxError, OverflowError, ValueError) as e:
            self.reset_buffer()
            self._show_syntax_error(e)
            return LoopVerdict.proceed()

        if code is None:
            return LoopVerdict.proceed()

        self.reset_buffer()
        self.state.history.append(source)
        return self._run(code)

    def _run(self, code: CodeType) -> LoopVerdict:
        previous_hook = sys.displayhook
        sys.displayhook = self._display
        try:
            exec(code, self.state.namespace)
        except SystemExit as e:
            logger.debug("user_exit: code=%r", e.code)
            return LoopVerdict.stop(e.code)
        except KeyboardInterrupt:
            self.output.error("KeyboardInterrupt")
        except Exception as e:
            self.state.last_exception = e
            self.state.namespace["_ex_"] = e
            self.output.print_traceback(e)
        finally:
            sys.displayhook = previous_hook
        return LoopVerdict.proceed()

    def _display(self, value: Any) -> None:
        if value is None:
            return
        self.state.namespace["_"] = value
        self.output.puts(repr(value))

    def _show_syntax_error(self, error: BaseException) -> None:
        self.state.last_exception = error
        message = "".join(traceback.format_exception_only(type(error), error)).rstrip()
        self.output.error(message)
