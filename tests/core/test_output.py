"""Tests for the output sink."""

from __future__ import annotations


class TestOutputSink:
    """Tests for OutputSink."""

    def test_tty_detection(self, output, tty_output):
        """is_tty follows the console's terminal detection."""
        assert output.is_tty is False
        assert tty_output.is_tty is True

    def test_print_is_verbatim(self, output):
        """print() writes text as-is, without markup or newline."""
        output.print("[bold]x[/bold]\x1b[0G")
        assert output.console.file.getvalue() == "[bold]x[/bold]\x1b[0G"

    def test_puts_appends_newline(self, output):
        """puts() terminates the line."""
        output.puts("hello")
        output.puts()
        assert output.console.file.getvalue() == "hello\n\n"

    def test_error_ignores_markup(self, output):
        """Diagnostics are not interpreted as rich markup."""
        output.error("Error: [red] is not a tag")
        assert "Error: [red] is not a tag" in output.console.file.getvalue()

    def test_hint(self, output):
        """Hints are written as plain lines."""
        output.hint("try again")
        assert "try again" in output.console.file.getvalue()

    def test_print_traceback(self, output):
        """Tracebacks name the exception type and message."""
        try:
            raise ValueError("bad value")
        except ValueError as e:
            output.print_traceback(e)
        text = output.console.file.getvalue()
        assert "ValueError" in text
        assert "bad value" in text

    def test_print_traceback_without_frames(self, output):
        """Exceptions that were never raised render too."""
        output.print_traceback(RuntimeError("never raised"))
        assert "never raised" in output.console.file.getvalue()

    def test_width(self, output):
        """Width comes from the console."""
        assert output.width == 200
