"""CLI entry point."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import rich_click as click

from readloop.core.config import ReplConfig
from readloop.core.indent import PYTHON_RULES
from readloop.core.logging_config import configure_logging
from readloop.core.output import OutputSink
from readloop.core.repl import REPL
from readloop.core.sources import IterableSource
from readloop.frontends.cli.repl.evaluator import PythonEvaluator

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.ERRORS_EPILOGUE = ""
click.rich_click.MAX_WIDTH = 100

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_config(
    auto_indent: bool = True,
    correct_indent: bool = True,
    max_retries: int | None = None,
    indent_width: int = 4,
) -> ReplConfig:
    """Configuration for the Python REPL: environment first, flags on top."""
    config = ReplConfig.from_env(ReplConfig(indent_rules=PYTHON_RULES, indent_width=indent_width))
    overrides: dict[str, object] = {}
    if not auto_indent:
        overrides["auto_indent"] = False
    if not correct_indent:
        overrides["correct_indent"] = False
    if max_retries is not None:
        overrides["max_read_retries"] = max_retries
    return replace(config, **overrides) if overrides else config


@click.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--no-auto-indent", is_flag=True, help="Don't indent prompts inside open blocks")
@click.option(
    "--no-correct-indent", is_flag=True, help="Don't repaint lines whose indentation changed"
)
@click.option("--indent-width", default=4, show_default=True, help="Spaces per nesting level")
@click.option("--max-retries", type=int, default=None, help="Read errors tolerated per prompt")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: READLOOP_LOG_LEVEL or WARNING)",
)
@click.option("--log-file", default=None, help="Also write logs to this file")
@click.version_option(package_name="readloop")
def cli(
    file: str | None,
    no_auto_indent: bool,
    no_correct_indent: bool,
    indent_width: int,
    max_retries: int | None,
    log_level: str | None,
    log_file: str | None,
) -> None:
    """Interactive Python with auto-indentation.

    Reads from the terminal, or from stdin when it is not a terminal.

    With **FILE**, its lines are fed to the REPL as if typed, then the REPL
    continues on the terminal.

    **Examples:**

        readloop

        readloop setup.py

        readloop --no-auto-indent < script.py
    """
    configure_logging(level=log_level, file_path=log_file)

    try:
        config = build_config(
            auto_indent=not no_auto_indent,
            correct_indent=not no_correct_indent,
            max_retries=max_retries,
            indent_width=indent_width,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    output = OutputSink()
    evaluator = PythonEvaluator(output=output)
    source = None
    if file:
        source = IterableSource(Path(file).read_text(encoding="utf-8").splitlines(), name=file)

    if output.is_tty:
        output.console.print("[bold]readloop[/] | Type 'help' for commands")

    try:
        value = REPL(evaluator, config, source=source, output=output).start()
    except Exception as e:
        output.print_traceback(e)
        sys.exit(1)

    if value is not None:
        output.puts(repr(value))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
