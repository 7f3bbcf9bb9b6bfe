"""
Hook bus for build lifecycle events.

Hooks let the host and modules run custom logic at named points:
- ``modules:before``: before declared modules are applied
- ``modules:done``: after all declared modules are applied
- ``ready``: after the host finished module processing
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class HookBus:
    """
    Manages hook registration and execution.

    Listeners run in registration order. Async listeners are awaited
    before the next one starts. A failing listener aborts the call.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[Callable[..., Any]]] = {}

    def hook(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a listener for a hook."""
        self._hooks.setdefault(name, []).append(fn)

    async def call_hook(self, name: str, *args: Any) -> None:
        """
        Run all listeners for a hook.

        Args:
            name: Hook name
            *args: Arguments passed to every listener
        """
        listeners = list(self._hooks.get(name, []))
        logger.debug("Calling hook %s (%d listeners)", name, len(listeners))
        for fn in listeners:
            result = fn(*args)
            if inspect.isawaitable(result):
                await result
