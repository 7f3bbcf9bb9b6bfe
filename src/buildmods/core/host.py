"""
Host context for a build.

The host owns the build configuration, the hook bus and the module
resolver, and creates the module container that applies the declared
modules.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .container import ModuleContainer
from .hooks import HookBus
from .options import BuildOptions
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)


class BuildHost:
    """
    One build of a project.

    Usage:
        host = BuildHost(BuildOptions(root_dir=project_dir, modules=["~/modules/seo.py"]))
        host.hook("modules:done", report)
        await host.ready()
    """

    def __init__(
        self,
        options: BuildOptions | None = None,
        resolver: ModuleResolver | None = None,
    ) -> None:
        self.options = options or BuildOptions()
        self.hooks = HookBus()
        self.resolver = resolver or ModuleResolver(self.options.root_dir)
        self._module_container: ModuleContainer | None = None
        self._ready = False

    @property
    def module_container(self) -> ModuleContainer:
        """The module container, created on first access."""
        if self._module_container is None:
            self._module_container = ModuleContainer(self)
        return self._module_container

    def hook(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a hook listener."""
        self.hooks.hook(name, fn)

    async def call_hook(self, name: str, *args: Any) -> None:
        """Emit a hook to all listeners."""
        await self.hooks.call_hook(name, *args)

    async def ready(self) -> BuildHost:
        """
        Apply all declared modules once and emit ``ready``.

        Returns:
            The host itself
        """
        if self._ready:
            return self

        await self.module_container.ready()
        self._ready = True
        logger.info(
            "Applied %d modules (%d templates, %d plugins)",
            len(self.module_container.required_modules),
            len(self.options.build.templates),
            len(self.options.plugins),
        )
        await self.call_hook("ready", self)
        return self
