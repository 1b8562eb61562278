"""Tests for read outcomes and loop verdicts."""

from __future__ import annotations

import dataclasses

import pytest

from readloop.core.types import (
    END_OF_SESSION,
    INTERRUPTED,
    NO_MORE_INPUT,
    LoopVerdict,
    OutcomeKind,
    ReadOutcome,
    VerdictKind,
)


class TestReadOutcome:
    """Tests for ReadOutcome."""

    def test_line_carries_text(self):
        """LINE outcomes carry the text read."""
        outcome = ReadOutcome.line("puts 1")
        assert outcome.kind is OutcomeKind.LINE
        assert outcome.text == "puts 1"
        assert outcome.is_line

    def test_empty_line_is_still_a_line(self):
        """An empty string is a valid line."""
        assert ReadOutcome.line("").is_line

    def test_line_requires_text(self):
        """LINE outcomes without text are rejected."""
        with pytest.raises(ValueError, match="require text"):
            ReadOutcome(OutcomeKind.LINE)

    def test_other_kinds_carry_no_text(self):
        """Non-line outcomes cannot carry text."""
        with pytest.raises(ValueError, match="carry no text"):
            ReadOutcome(OutcomeKind.INTERRUPTED, "x")

    def test_constants(self):
        """Module constants cover the non-line kinds."""
        assert END_OF_SESSION.kind is OutcomeKind.END_OF_SESSION
        assert INTERRUPTED.kind is OutcomeKind.INTERRUPTED
        assert NO_MORE_INPUT.kind is OutcomeKind.NO_MORE_INPUT
        assert not any(o.is_line for o in (END_OF_SESSION, INTERRUPTED, NO_MORE_INPUT))

    def test_frozen(self):
        """Outcomes are immutable."""
        outcome = ReadOutcome.line("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            outcome.text = "y"


class TestLoopVerdict:
    """Tests for LoopVerdict."""

    def test_proceed(self):
        """proceed() keeps the loop going."""
        verdict = LoopVerdict.proceed()
        assert verdict.kind is VerdictKind.CONTINUE
        assert verdict.should_continue

    def test_stop_with_value(self):
        """stop() carries the exit value."""
        verdict = LoopVerdict.stop(42)
        assert verdict.kind is VerdictKind.STOP_WITH_VALUE
        assert verdict.value == 42
        assert not verdict.should_continue

    def test_stop_defaults_to_none(self):
        """stop() without a value exits with None."""
        assert LoopVerdict.stop().value is None

    def test_raise_up(self):
        """raise_up() carries the exception."""
        error = RuntimeError("boom")
        verdict = LoopVerdict.raise_up(error)
        assert verdict.kind is VerdictKind.STOP_WITH_EXCEPTION
        assert verdict.exception is error
        assert not verdict.should_continue
