"""
Module specifiers.

A module can be declared in four shapes:

- PATH: ``"my_pkg.sitemap"`` or ``"~/modules/sitemap.py"``
- PAIR: ``("my_pkg.sitemap", {"hostname": "example.com"})``
- FUNCTION: a handler callable, optionally decorated with ``define_module``
- DESCRIPTOR: ``ModuleDescriptor(src=..., options=..., handler=...)`` or a
  mapping with the same keys

``normalize_specifier`` turns any of them into a ``NormalizedModule``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import InvalidModuleError


class SpecifierKind(Enum):
    """Shape a module was declared in."""

    PATH = "path"
    FUNCTION = "function"
    PAIR = "pair"
    DESCRIPTOR = "descriptor"


@dataclass(frozen=True)
class ModuleMeta:
    """Metadata a handler can declare about itself."""

    name: str


@dataclass
class ModuleDescriptor:
    """Fully explicit module declaration."""

    src: Any = None
    options: Any = None
    handler: Callable[..., Any] | None = None


@dataclass
class NormalizedModule:
    """
    Canonical form of a specifier.

    ``handler`` is None when it still has to be resolved from ``src``.
    """

    kind: SpecifierKind
    src: Any
    options: Any = None
    handler: Callable[..., Any] | None = None


@dataclass
class RequiredModule:
    """Registry record for an applied module."""

    src: Any
    options: Any
    handler: Callable[..., Any]


def define_module(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach ``ModuleMeta`` to a handler so it is deduplicated by name.

    Example:
        @define_module(name="sitemap")
        async def sitemap(container, options):
            container.add_plugin({"src": "plugins/sitemap.js"})
    """

    def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
        handler.meta = ModuleMeta(name=name)  # type: ignore[attr-defined]
        return handler

    return decorator


def _is_path(value: Any) -> bool:
    return isinstance(value, str | os.PathLike) and not callable(value)


def _descriptor(specifier: Any, src: Any, options: Any, handler: Any) -> NormalizedModule:
    if handler is None:
        if callable(src):
            handler = src
        elif not _is_path(src):
            raise InvalidModuleError(specifier)
    return NormalizedModule(
        kind=SpecifierKind.DESCRIPTOR, src=src, options=options, handler=handler
    )


def normalize_specifier(specifier: Any) -> NormalizedModule:
    """
    Normalize any supported specifier shape.

    Args:
        specifier: Module specifier as declared by the user or a module

    Returns:
        NormalizedModule with kind, src, options and (maybe) handler

    Raises:
        InvalidModuleError: If the specifier has an unsupported shape
    """
    if callable(specifier):
        return NormalizedModule(kind=SpecifierKind.FUNCTION, src=specifier, handler=specifier)

    if _is_path(specifier):
        return NormalizedModule(kind=SpecifierKind.PATH, src=specifier)

    if isinstance(specifier, list | tuple):
        if len(specifier) not in (1, 2) or not _is_path(specifier[0]):
            raise InvalidModuleError(specifier)
        options = specifier[1] if len(specifier) == 2 else None
        return NormalizedModule(kind=SpecifierKind.PAIR, src=specifier[0], options=options)

    if isinstance(specifier, ModuleDescriptor):
        return _descriptor(specifier, specifier.src, specifier.options, specifier.handler)

    if isinstance(specifier, Mapping):
        return _descriptor(
            specifier, specifier.get("src"), specifier.get("options"), specifier.get("handler")
        )

    raise InvalidModuleError(specifier)


def module_key(handler: Callable[..., Any], src: Any) -> str | None:
    """
    Derive the registry key of a module.

    Prefers the handler's declared ``meta.name``, then a path-like ``src``.

    Returns:
        Key string, or None if the module cannot be deduplicated
    """
    meta = getattr(handler, "meta", None)
    if isinstance(meta, Mapping):
        name = meta.get("name")
    else:
        name = getattr(meta, "name", None)
    if isinstance(name, str) and name:
        return name

    if _is_path(src):
        return os.fspath(src)
    return None
