"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from io import StringIO
from typing import Any

import pytest
from rich.console import Console

from readloop.core.config import ReplConfig
from readloop.core.hooks import Hooks
from readloop.core.output import OutputSink
from readloop.core.types import LoopVerdict


def make_output(tty: bool = False) -> OutputSink:
    """Output sink writing to a StringIO, with a wide console so nothing wraps."""
    console = Console(file=StringIO(), force_terminal=tty, width=200, color_system=None)
    return OutputSink(console)


class ScriptedSource:
    """Line source replaying a script of results.

    Each step is returned (strings and None) or raised (exceptions and
    exception classes). Running past the end raises EOFError.
    """

    def __init__(self, steps: Iterable[Any] = (), name: str = "scripted") -> None:
        self.steps = list(steps)
        self.name = name
        self.prompts: list[str] = []

    def read_line(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self.steps:
            raise EOFError(f"{self.name} is exhausted")
        step = self.steps.pop(0)
        if isinstance(step, BaseException) or (
            isinstance(step, type) and issubclass(step, BaseException)
        ):
            raise step
        return step

    def __repr__(self) -> str:
        return f"ScriptedSource({self.name})"


class CompletingSource(ScriptedSource):
    """Scripted source that also accepts a completion callback."""

    def __init__(self, steps: Iterable[Any] = (), name: str = "completing") -> None:
        super().__init__(steps, name)
        self.completion_proc = None


class BlockEvaluator:
    """Evaluator for a tiny ``if ... end`` language.

    A statement is complete once every ``if`` has its ``end``. Lines are
    recorded as forwarded. ``quit`` stops with a value, ``fail`` stops by
    raising, ``None`` (Ctrl-D) stops with None.
    """

    def __init__(self, prompt: str = "> ", hooks: Hooks | None = None) -> None:
        self.prompt = prompt
        self.hooks = hooks or Hooks()
        self.forwarded: list[str | None] = []
        self.buffer: list[str] = []
        self.resets = 0
        self.stop_value: Any = "bye"
        self.failure: BaseException = RuntimeError("evaluator failure")
        self.bindings: list[Any] = []

    def current_prompt(self) -> str:
        return self.prompt

    def is_buffer_empty(self) -> bool:
        return not self.buffer

    def reset_buffer(self) -> None:
        self.resets += 1
        self.buffer.clear()

    def complete(self, partial: str) -> list[str]:
        return [word for word in ("puts", "print", "if", "end") if word.startswith(partial)]

    def exec_hook(self, name: str, *args: Any) -> Any:
        return self.hooks.exec_hook(name, *args)

    def current_binding(self) -> Any:
        return self.bindings[-1] if self.bindings else None

    def push_binding(self, target: Any) -> None:
        self.bindings.append(target)

    def eval(self, line: str | None) -> LoopVerdict:
        self.forwarded.append(line)
        if line is None:
            return LoopVerdict.stop(None)
        if line.strip() == "quit":
            return LoopVerdict.stop(self.stop_value)
        if line.strip() == "fail":
            return LoopVerdict.raise_up(self.failure)

        self.buffer.append(line)
        words = " ".join(self.buffer).split()
        if words.count("if") <= words.count("end"):
            self.buffer.clear()
        return LoopVerdict.proceed()


@pytest.fixture
def output() -> OutputSink:
    """Non-interactive output sink."""
    return make_output(tty=False)


@pytest.fixture
def tty_output() -> OutputSink:
    """Interactive (terminal) output sink."""
    return make_output(tty=True)


@pytest.fixture
def evaluator() -> BlockEvaluator:
    return BlockEvaluator()


@pytest.fixture
def fallback_sources() -> list[ScriptedSource]:
    """Sources handed out by the config's input factory, in order."""
    return []


@pytest.fixture
def config(fallback_sources: list[ScriptedSource]) -> ReplConfig:
    """Config whose default input is an (initially empty) scripted source."""

    def input_factory() -> ScriptedSource:
        source = ScriptedSource(name=f"default-{len(fallback_sources)}")
        fallback_sources.append(source)
        return source

    return ReplConfig(input_factory=input_factory, output_factory=lambda: make_output())


@pytest.fixture
def make_sink():
    """Factory for output sinks: ``make_sink(tty=True)``."""
    return make_output


@pytest.fixture
def scripted():
    """Factory for scripted line sources: ``scripted(["a", EOFError])``."""
    return ScriptedSource


@pytest.fixture
def completing():
    """Factory for scripted line sources that accept a completion callback."""
    return CompletingSource
