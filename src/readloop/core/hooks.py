"""Named extension hooks around a REPL session.

Standard events:
    before_session: Called once before the first prompt.
        Args: (output, binding, session)
    after_session: Called once after the loop ends, on every exit path.
        Args: (output, binding, session)

Any other event name can be registered and fired by evaluators.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

HookFn = Callable[..., Any]


@dataclass
class HookError:
    """A hook that raised while executing."""

    event: str
    name: str
    exception: Exception


@dataclass
class Hooks:
    """Registry of named hooks per event.

    Hooks for one event run in registration order. A failing hook is logged,
    recorded in ``errors`` and reported to the output passed as the first
    hook argument, then the remaining hooks still run.

    Example:
        >>> hooks = Hooks()
        >>> hooks.add_hook("before_session", "greet", lambda out, binding, session: out.puts("hi"))
        >>> hooks.exec_hook("before_session", output, None, session)
    """

    _hooks: dict[str, dict[str, HookFn]] = field(default_factory=dict)
    errors: list[HookError] = field(default_factory=list)

    def add_hook(self, event: str, name: str, fn: HookFn) -> Hooks:
        """Register ``fn`` under ``name`` for ``event``.

        Raises:
            ValueError: If a hook with that name already exists for the event.
        """
        hooks = self._hooks.setdefault(event, {})
        if name in hooks:
            raise ValueError(f"{name} hook already defined for {event}")
        hooks[name] = fn
        return self

    def delete_hook(self, event: str, name: str) -> HookFn | None:
        """Remove and return a hook, or None if it was not registered."""
        return self._hooks.get(event, {}).pop(name, None)

    def get_hooks(self, event: str) -> dict[str, HookFn]:
        return dict(self._hooks.get(event, {}))

    def hook_exists(self, event: str, name: str) -> bool:
        return name in self._hooks.get(event, {})

    def exec_hook(self, event: str, *args: Any) -> Any:
        """Run every hook for ``event``.

        Returns:
            The result of the last hook that ran successfully, or None.
        """
        result = None
        for name, fn in self._hooks.get(event, {}).items():
            try:
                result = fn(*args)
            except Exception as e:
                logger.warning("hook_failed: event=%s, name=%s, error=%s", event, name, e)
                self.errors.append(HookError(event=event, name=name, exception=e))
                output = args[0] if args else None
                if output is not None and hasattr(output, "error"):
                    output.error(f"{event} hook failed: {type(e).__name__}: {e}")
        return result
