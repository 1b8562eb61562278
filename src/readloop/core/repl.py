"""The read-eval-print loop controller.

The REPL decides what to read next and how to recover when reading fails;
the evaluator decides what the input means. One ``start()`` call runs:

    prologue   before_session hook, reset a stray partial terminal line
    loop       read -> correct indentation -> evaluate -> verdict
    epilogue   after_session hook, on every exit path

Per iteration, on the read outcome:

    INTERRUPTED      newline, discard the evaluation buffer, keep looping
    NO_MORE_INPUT    newline on a terminal, leave the loop
    END_OF_SESSION   newline on a terminal, forward None to the evaluator
    LINE             forward the corrected line to the evaluator
"""

from __future__ import annotations

import logging
from typing import Any

from readloop.core.config import ReplConfig
from readloop.core.evaluator import Evaluator
from readloop.core.output import OutputSink
from readloop.core.resilience import ResiliencePipeline
from readloop.core.session import Session
from readloop.core.sources import install_completion, read_from
from readloop.core.terminal import line_start_sequence
from readloop.core.types import END_OF_SESSION, OutcomeKind, ReadOutcome, VerdictKind

logger = logging.getLogger(__name__)


class REPL:
    """Drive an evaluator from a line source.

    Args:
        evaluator: Owns the evaluation buffer and runs complete input.
        config: Injected configuration. Defaults to ``ReplConfig()``.
        source: Initial line source. Defaults to ``config.input_factory()``.
        output: Output sink. Defaults to ``config.output_factory()``.
        pipeline: Recovery policies around each read.
        target: Initial binding pushed into the evaluator before starting.

    Example:
        >>> evaluator = PythonEvaluator()
        >>> REPL(evaluator, source=IterableSource(["x = 1", "exit x"])).start()
        1
    """

    def __init__(
        self,
        evaluator: Evaluator,
        config: ReplConfig | None = None,
        *,
        source: Any = None,
        output: OutputSink | None = None,
        pipeline: ResiliencePipeline | None = None,
        target: Any = None,
    ) -> None:
        self.config = config or ReplConfig()
        self.session = Session(
            evaluator=evaluator,
            config=self.config,
            source=source if source is not None else self.config.input_factory(),
            output=output or self.config.output_factory(),
        )
        self.pipeline = pipeline or ResiliencePipeline()

        if target is not None:
            push_binding = getattr(evaluator, "push_binding", None)
            if push_binding is None:
                raise TypeError(f"{type(evaluator).__name__} does not accept a target binding")
            push_binding(target)

    @classmethod
    def start_with(cls, evaluator: Evaluator, **options: Any) -> Any:
        """Build a REPL around ``evaluator`` and run it."""
        return cls(evaluator, **options).start()

    @property
    def evaluator(self) -> Evaluator:
        return self.session.evaluator

    @property
    def output(self) -> OutputSink:
        return self.session.output

    @property
    def source(self) -> Any:
        return self.session.source

    def binding(self) -> Any:
        """The evaluator's current binding, or None if it keeps none."""
        current_binding = getattr(self.evaluator, "current_binding", None)
        if current_binding is None:
            return None
        return current_binding()

    def start(self) -> Any:
        """Run the loop until input runs out or the evaluator stops it.

        Returns:
            The value the evaluator stopped with, or None when input ran out.

        Raises:
            BaseException: Whatever exception the evaluator asked to raise up.
        """
        try:
            self._prologue()
            return self._loop()
        finally:
            self._epilogue()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _prologue(self) -> None:
        logger.debug("session_start: source=%r, output=%r", self.source, self.output)
        self.evaluator.exec_hook("before_session", self.output, self.binding(), self.session)

        # Cancel any partial line the host terminal left before our first prompt.
        if self.config.correct_indent and self.output.is_tty:
            self.output.print(line_start_sequence())
            self.output.flush()

    def _loop(self) -> Any:
        output = self.output
        while True:
            outcome = self.read(self.evaluator.current_prompt())

            if outcome.kind is OutcomeKind.INTERRUPTED:
                output.puts()
                self.evaluator.reset_buffer()
                continue

            if outcome.kind is OutcomeKind.NO_MORE_INPUT:
                if output.is_tty:
                    output.puts()
                logger.debug("session_exhausted")
                return None

            if outcome.kind is OutcomeKind.END_OF_SESSION:
                if output.is_tty:
                    output.puts()
                line = None
            else:
                line = outcome.text

            verdict = self.evaluator.eval(line)
            if verdict.should_continue:
                continue

            if verdict.kind is VerdictKind.STOP_WITH_EXCEPTION:
                logger.debug("session_raise_up: exception=%r", verdict.exception)
                assert verdict.exception is not None
                raise verdict.exception

            logger.debug("session_break: value=%r", verdict.value)
            return verdict.value

    def _epilogue(self) -> None:
        self.evaluator.exec_hook("after_session", self.output, self.binding(), self.session)
        logger.debug("session_end")

    # =========================================================================
    # Reading
    # =========================================================================

    def read(self, prompt: str) -> ReadOutcome:
        """Read the next line with ``prompt`` plus the indentation prefix.

        Returns:
            A LINE outcome carrying the corrected line, or the non-line
            outcome the resilience pipeline settled on.
        """
        indent = self.session.indent
        if self.session.buffer_is_empty():
            indent.reset()

        indentation = indent.current_prefix if self.config.auto_indent else ""
        outcome = self.pipeline.read(self.session, lambda: self._read_line(f"{prompt}{indentation}"))

        if outcome.is_line:
            assert outcome.text is not None
            return ReadOutcome.line(self._fix_indentation(outcome.text, indentation, prompt))
        return outcome

    def _read_line(self, prompt: str) -> ReadOutcome:
        source = self.session.source
        install_completion(source, self.evaluator.complete)
        text = read_from(source, prompt)
        if text is None:
            return END_OF_SESSION
        return ReadOutcome.line(text)

    def _fix_indentation(self, line: str, indentation: str, prompt: str) -> str:
        if not self.config.auto_indent:
            return line

        indent = self.session.indent
        output = self.output
        original_line = f"{indentation}{line}"
        indented_line = indent.indent(line)

        if output.is_tty and self.config.correct_indent and indented_line != original_line:
            output.print(
                indent.correct_indentation(
                    prompt,
                    indented_line,
                    len(original_line) - len(indented_line),
                    columns=output.width,
                )
            )
            output.flush()

        return indented_line
