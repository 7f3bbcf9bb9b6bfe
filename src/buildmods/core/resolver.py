"""
Module resolution.

Turns a path-like module specifier into a handler callable:

- ``"pkg.mod:attr"`` imports ``pkg.mod`` and returns ``attr``
- ``"~/modules/sitemap.py"`` or ``"./modules/sitemap"`` loads the file and
  returns its ``module`` attribute (``"file.py:attr"`` picks another one)
- ``"pkg.mod"`` imports the module and returns its ``module`` attribute

Anything that cannot be found resolves to None. Errors raised while
executing the target module propagate.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any

from .utils import hash_sum

logger = logging.getLogger(__name__)

DEFAULT_EXPORT = "module"
ROOT_ALIASES = ("~/", "@/")


class ModuleResolver:
    """
    Resolves module specifiers relative to a project root.

    Loaded files are cached so that resolving the same file twice returns
    the same handler object.
    """

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)
        self._file_modules: dict[Path, ModuleType] = {}

    def resolve(self, specifier: str | os.PathLike[str]) -> Callable[..., Any] | None:
        """
        Resolve a specifier to a handler.

        Args:
            specifier: Import path or file path, optionally with ``:attr``

        Returns:
            Callable handler, or None if nothing callable was found
        """
        target, attr = self._split(os.fspath(specifier))

        if self._looks_like_path(target):
            module = self._load_file(self.resolve_path(target))
        else:
            module = self._import(target)

        if module is None:
            return None

        handler = self._get_attr(module, attr)
        if handler is None or not callable(handler):
            logger.debug("No callable %r exported by %s", attr, specifier)
            return None
        return handler

    def resolve_path(self, path: str) -> Path:
        """Expand root aliases and make ``path`` absolute against the root."""
        for alias in ROOT_ALIASES:
            if path.startswith(alias):
                return self.root_dir / path[len(alias) :]
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = self.root_dir / resolved
        return resolved

    def _split(self, specifier: str) -> tuple[str, str]:
        # Windows drive letters ("C:\\...") are not attribute separators
        head, sep, tail = specifier.rpartition(":")
        if sep and tail and "/" not in tail and "\\" not in tail and len(head) > 1:
            return head, tail
        return specifier, DEFAULT_EXPORT

    def _looks_like_path(self, target: str) -> bool:
        return (
            target.endswith(".py")
            or "/" in target
            or os.sep in target
            or target.startswith(ROOT_ALIASES)
        )

    def _import(self, name: str) -> ModuleType | None:
        try:
            return importlib.import_module(name)
        except ModuleNotFoundError as e:
            # Only swallow the miss for the requested module itself
            if e.name and (name == e.name or name.startswith(e.name + ".")):
                logger.debug("Module %s not found", name)
                return None
            raise

    def _load_file(self, path: Path) -> ModuleType | None:
        if path.is_dir():
            path = path / "__init__.py"
        elif not path.exists() and path.suffix != ".py":
            path = path.with_suffix(".py")

        if not path.exists():
            logger.debug("Module file %s not found", path)
            return None

        path = path.resolve()
        if path in self._file_modules:
            return self._file_modules[path]

        module_name = f"buildmods_modules.{path.stem}_{hash_sum(path)}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            return None

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception:
            del sys.modules[module_name]
            raise

        self._file_modules[path] = module
        logger.debug("Loaded module file %s", path)
        return module

    def _get_attr(self, module: ModuleType, attr: str) -> Any:
        obj: Any = module
        for part in attr.split("."):
            obj = getattr(obj, part, None)
            if obj is None:
                return None
        return obj
