"""
buildmods - Module container for web application builds.

Lets first- and third-party build modules register templates, plugins,
layouts, server middleware and build hooks into a shared build
configuration.
"""

from __future__ import annotations

from ._version import get_version
from .core.container import ModuleContainer
from .core.errors import (
    BuildModsError,
    ConfigError,
    InvalidModuleError,
    InvalidTemplateError,
    TemplateNotFoundError,
)
from .core.host import BuildHost
from .core.options import BuildOptions
from .core.specifier import ModuleDescriptor, ModuleMeta, define_module

__version__ = get_version()

__all__ = [
    "__version__",
    "BuildHost",
    "BuildOptions",
    "ModuleContainer",
    "ModuleDescriptor",
    "ModuleMeta",
    "define_module",
    "BuildModsError",
    "ConfigError",
    "InvalidModuleError",
    "InvalidTemplateError",
    "TemplateNotFoundError",
]
