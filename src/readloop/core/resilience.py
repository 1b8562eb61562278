"""Recovery policies wrapped around a single read.

A read attempt is a zero-argument callable returning a ReadOutcome. Each
policy wraps the attempt it is given and turns one class of failure into
either a retry or a final outcome. ResiliencePipeline composes an ordered
list of policies, first element innermost.

Default order (innermost first):
    InterruptPolicy     Ctrl-C -> INTERRUPTED
    EndOfInputPolicy    EOFError -> fall back to the default input once,
                        then NO_MORE_INPUT
    ReadErrorPolicy     rescuable errors -> report and retry up to the
                        budget, then FATAL and NO_MORE_INPUT

Since interrupts are handled innermost, Ctrl-C during a retry is a
cancellation and never counts against the retry budget.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from readloop.core.output import FATAL_STYLE
from readloop.core.sources import describe_source
from readloop.core.types import INTERRUPTED, NO_MORE_INPUT, ReadOutcome

if TYPE_CHECKING:
    from readloop.core.session import Session

logger = logging.getLogger(__name__)

Attempt = Callable[[], ReadOutcome]


class RecoveryPolicy:
    """Base class for recovery policies."""

    def run(self, attempt: Attempt, session: Session) -> ReadOutcome:
        """Run ``attempt`` and recover from the failures this policy owns."""
        raise NotImplementedError

    def wrap(self, attempt: Attempt, session: Session) -> Attempt:
        """Return ``attempt`` guarded by this policy."""

        def guarded() -> ReadOutcome:
            return self.run(attempt, session)

        return guarded

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class InterruptPolicy(RecoveryPolicy):
    """Turn a user interrupt during the blocking read into INTERRUPTED."""

    def run(self, attempt: Attempt, session: Session) -> ReadOutcome:
        try:
            return attempt()
        except KeyboardInterrupt:
            logger.debug("read_interrupted: source=%r", session.source)
            return INTERRUPTED


class EndOfInputPolicy(RecoveryPolicy):
    """Fall back to the default input when the active source runs dry.

    The first EOFError swaps the session's source for a fresh default source
    and retries once. A second EOFError means there is nothing left to read.
    """

    def run(self, attempt: Attempt, session: Session) -> ReadOutcome:
        should_retry = True
        while True:
            try:
                return attempt()
            except EOFError:
                exhausted = session.source
                session.switch_source(session.config.input_factory())
                if should_retry:
                    should_retry = False
                    logger.info(
                        "input_fallback: exhausted=%r, now=%r", exhausted, session.source
                    )
                    continue
                logger.warning("no_more_input: ran out of things to read from")
                return NO_MORE_INPUT


class ReadErrorPolicy(RecoveryPolicy):
    """Report and retry rescuable errors, giving up after the retry budget.

    The budget is local to one ``run`` call: every read starts from zero.
    """

    def run(self, attempt: Attempt, session: Session) -> ReadOutcome:
        config = session.config
        output = session.output
        failures = 0

        while True:
            try:
                return attempt()
            except config.rescuable_exceptions as e:
                failures += 1
                output.error(f"Error: {e}")
                output.print_traceback(e)
                logger.warning(
                    "read_failed: attempt=%d/%d, source=%r, error=%s",
                    failures,
                    config.max_read_retries,
                    session.source,
                    e,
                )
                if failures < config.max_read_retries:
                    continue

                self.report_fatal(session)
                return NO_MORE_INPUT

    def report_fatal(self, session: Session) -> None:
        """Explain that input is broken and how to point the REPL elsewhere."""
        output = session.output
        source = describe_source(session.source)
        logger.error("read_fatal: source=%s", source)
        output.error(f"FATAL: readloop failed to get user input using `{source}`.", FATAL_STYLE)
        output.puts("To fix this you may be able to pass input and output explicitly, e.g.")
        output.puts("  ReplConfig(input_factory=lambda: StreamSource(sys.stdin))")
        output.puts("  REPL(evaluator, source=StreamSource(sys.stdin), output=OutputSink())")
        output.puts("or from the command line: readloop --no-correct-indent < input.txt")


def default_policies() -> list[RecoveryPolicy]:
    return [InterruptPolicy(), EndOfInputPolicy(), ReadErrorPolicy()]


class ResiliencePipeline:
    """Ordered composition of recovery policies.

    Example:
        >>> pipeline = ResiliencePipeline()
        >>> outcome = pipeline.read(session, lambda: ReadOutcome.line(input("> ")))
    """

    def __init__(self, policies: Iterable[RecoveryPolicy] | None = None) -> None:
        self.policies = list(policies) if policies is not None else default_policies()

    def read(self, session: Session, attempt: Attempt) -> ReadOutcome:
        """Run ``attempt`` under every policy, first policy innermost."""
        guarded = attempt
        for policy in self.policies:
            guarded = policy.wrap(guarded, session)
        return guarded()

    def __repr__(self) -> str:
        return f"ResiliencePipeline({self.policies!r})"
