"""
Module container.

The container sits between the host build process and the registered
modules. Each module handler is called with the container, so it can
register templates, plugins, layouts, server middleware and build hooks,
or pull in further modules.

Handlers are called as ``handler(container, options)`` and may be sync or
async::

    @define_module(name="sitemap")
    async def sitemap(container, options):
        container.add_plugin({"src": "~/templates/sitemap.js", "options": options})
        container.extend_routes(add_sitemap_route)
"""

from __future__ import annotations

import inspect
import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from . import utils
from .errors import InvalidModuleError, InvalidTemplateError, TemplateNotFoundError
from .options import BuildOptions, PluginEntry, TemplateInput, TemplateSpec
from .specifier import RequiredModule, module_key, normalize_specifier

if TYPE_CHECKING:
    from .host import BuildHost

logger = logging.getLogger(__name__)


class ModuleContainer:
    """
    Registers modules and mediates their changes to the build configuration.

    Attributes:
        host: Host context (options, hooks, resolver)
        required_modules: Registry of applied modules keyed by module key
    """

    def __init__(self, host: BuildHost) -> None:
        self.host = host
        self.options: BuildOptions = getattr(host, "options", None)  # type: ignore[assignment]
        self.required_modules: dict[str, RequiredModule] = {}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def ready(self) -> None:
        """
        Apply all declared modules.

        Emits ``modules:before``, applies ``build_modules`` (unless the host
        only starts a production build) and ``modules`` in declared order,
        then emits ``modules:done``. The first failing module aborts.
        """
        await self.host.call_hook("modules:before", self, self.options.modules)

        if self.options.build_modules and not self.options.start_only:
            for specifier in self.options.build_modules:
                await self.add_module(specifier)

        for specifier in self.options.modules:
            await self.add_module(specifier)

        await self.host.call_hook("modules:done", self)

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def require_module(self, specifier: Any) -> Any:
        """Apply a module at most once (``add_module`` with ``require_once``)."""
        return self.add_module(specifier, True)

    async def add_module(self, specifier: Any, require_once: bool = False) -> Any:
        """
        Apply a module.

        Args:
            specifier: Path, handler, ``(path, options)`` pair or descriptor
            require_once: Skip the module if its key is already registered

        Returns:
            Whatever the handler returned (awaited), or None if skipped

        Raises:
            InvalidModuleError: If no callable handler can be obtained
        """
        normalized = normalize_specifier(specifier)
        src, options, handler = normalized.src, normalized.options, normalized.handler

        if handler is None:
            handler = self.host.resolver.resolve(src)

        if not callable(handler):
            raise InvalidModuleError(src if src is not None else specifier)

        key = module_key(handler, src)

        # Registered before the handler runs so re-entrant requires see it
        if key is not None:
            if require_once and key in self.required_modules:
                logger.debug("Module %s already applied, skipping", key)
                return None
            self.required_modules[key] = RequiredModule(src=src, options=options, handler=handler)

        logger.debug("Applying %s module %s", normalized.kind.value, key or src)
        result = handler(self, options if options is not None else {})
        if inspect.isawaitable(result):
            result = await result
        return result

    # -------------------------------------------------------------------------
    # Templates, plugins, layouts
    # -------------------------------------------------------------------------

    def add_template(self, template: Any) -> TemplateSpec:
        """
        Register a template to be generated into the build directory.

        Args:
            template: Source path, or mapping/``TemplateInput`` with ``src``,
                ``options`` and ``file_name``

        Returns:
            The registered TemplateSpec

        Raises:
            InvalidTemplateError: If no source can be extracted
            TemplateNotFoundError: If the source path does not exist
        """
        spec = self._template_input(template)
        src = spec.src
        if not src:
            raise InvalidTemplateError(template)

        if not utils.path_exists(src):
            raise TemplateNotFoundError(src)

        dst = spec.file_name or self._template_dst(src)
        template_spec = TemplateSpec(src=src, dst=dst, options=spec.options)
        self.options.build.templates.append(template_spec)
        return template_spec

    def add_plugin(self, template: Any) -> None:
        """Register a template and add the generated file as a plugin."""
        dst = self.add_template(template).dst
        spec = self._template_input(template)
        self.options.plugins.append(
            PluginEntry(
                src=str(Path(self.options.build_dir) / dst),
                ssr=spec.ssr,
                mode=spec.mode,
            )
        )

    def add_layout(self, template: Any, name: str | None = None) -> None:
        """
        Register a template as a named layout.

        ``name`` defaults to the template file stem. The ``error`` layout is
        also registered as the error page.
        """
        registered = self.add_template(template)
        layout_name = name or Path(registered.src).stem

        existing = self.options.layouts.get(layout_name)
        if existing:
            logger.warning(
                'Duplicate layout registration, "%s" has been registered as "%s"',
                layout_name,
                existing,
            )

        self.options.layouts[layout_name] = f"./{registered.dst}"

        if layout_name == "error":
            self.add_error_layout(registered.dst)

    def add_error_layout(self, dst: str) -> None:
        """Set the error page to a generated file inside the build directory."""
        relative_build_dir = utils.relative_posix(
            Path(self.options.build_dir), Path(self.options.root_dir)
        )
        self.options.error_page = f"~/{relative_build_dir}/{dst}"

    # -------------------------------------------------------------------------
    # Configuration mutators
    # -------------------------------------------------------------------------

    def add_server_middleware(self, middleware: Any) -> None:
        """Append a server middleware."""
        self.options.server_middleware.append(middleware)

    def extend_build(self, fn: Callable[..., Any]) -> None:
        """Chain ``fn`` after the existing ``build.extend`` hook."""
        self.options.build.extend = utils.chain_fn(self.options.build.extend, fn)

    def extend_routes(self, fn: Callable[..., Any]) -> None:
        """Chain ``fn`` after the existing ``router.extend_routes`` hook."""
        self.options.router.extend_routes = utils.chain_fn(
            self.options.router.extend_routes, fn
        )

    def add_vendor(self, *args: Any, **kwargs: Any) -> None:
        """Deprecated. Vendor bundling is handled by the bundler."""
        logger.warning("add_vendor has been deprecated, vendor chunks are split automatically")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _template_input(self, template: Any) -> TemplateInput:
        if isinstance(template, TemplateInput):
            return template
        if isinstance(template, str | os.PathLike):
            return TemplateInput(src=os.fspath(template))
        if isinstance(template, Mapping):
            try:
                return TemplateInput.model_validate(dict(template))
            except ValidationError as e:
                raise InvalidTemplateError(template) from e
        raise InvalidTemplateError(template)

    def _template_dst(self, src: str) -> str:
        source = Path(src)
        namespace = self.options.build.template_namespace
        return f"{namespace}.{source.stem}.{utils.hash_sum(src)}{source.suffix}"
