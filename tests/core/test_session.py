"""Tests for Session."""

from __future__ import annotations

from readloop.core.config import ReplConfig
from readloop.core.indent import PYTHON_RULES
from readloop.core.session import Session


class TestSession:
    """Tests for the per-run session state."""

    def test_indent_tracker_follows_config(self, evaluator, output, scripted):
        config = ReplConfig(indent_rules=PYTHON_RULES, indent_width=4)
        session = Session(evaluator=evaluator, config=config, source=scripted(), output=output)
        assert session.indent.rules is PYTHON_RULES
        assert session.indent.width == 4
        assert session.indent.is_reset

    def test_switch_source(self, evaluator, config, output, scripted):
        first, second = scripted(name="first"), scripted(name="second")
        session = Session(evaluator=evaluator, config=config, source=first, output=output)
        session.switch_source(second)
        assert session.source is second

    def test_buffer_is_empty(self, evaluator, config, output, scripted):
        session = Session(evaluator=evaluator, config=config, source=scripted(), output=output)
        assert session.buffer_is_empty()
        evaluator.eval("if x")
        assert not session.buffer_is_empty()
