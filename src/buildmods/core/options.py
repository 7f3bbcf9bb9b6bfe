"""
Build configuration types.

The build configuration is a single mutable object owned by the host and
shared with every module through the container. Modules may attach custom
fields (``extra="allow"``); structured subtrees (templates, plugins,
layouts) are mutated through the container's methods.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

DEFAULT_BUILD_DIR = ".buildmods"
DEFAULT_TEMPLATE_NAMESPACE = "nuxt"


class PluginMode(StrEnum):
    """Where a plugin runs."""

    CLIENT = "client"
    SERVER = "server"
    ALL = "all"


class TemplateSpec(BaseModel):
    """
    A registered template.

    Attributes:
        src: Source file of the template
        dst: File name inside the build directory
        options: Arbitrary data handed to the template renderer
    """

    src: str
    dst: str
    options: Any = None


class TemplateInput(BaseModel):
    """
    Object form accepted by ``add_template``/``add_plugin``/``add_layout``.

    ``file_name`` also accepts the ``fileName`` and ``filename`` spellings.
    """

    model_config = ConfigDict(populate_by_name=True)

    src: str | None = None
    options: Any = None
    file_name: str | None = Field(
        default=None, validation_alias=AliasChoices("file_name", "fileName", "filename")
    )
    ssr: bool = True
    mode: PluginMode = PluginMode.ALL


class PluginEntry(BaseModel):
    """A plugin registered by a module."""

    src: str
    ssr: bool = True
    mode: PluginMode = PluginMode.ALL


class BuildConfig(BaseModel):
    """The ``build`` subtree of the build configuration."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    templates: list[TemplateSpec] = Field(default_factory=list)
    extend: Callable[..., Any] | None = None
    template_namespace: str = DEFAULT_TEMPLATE_NAMESPACE


class RouterConfig(BaseModel):
    """The ``router`` subtree of the build configuration."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    extend_routes: Callable[..., Any] | None = None


class BuildOptions(BaseModel):
    """
    Build configuration shared between the host and all modules.

    Attributes:
        root_dir: Project root
        build_dir: Directory generated files are written to
        modules: Declared module specifiers, processed in order
        build_modules: Modules only needed while building (skipped on start)
        start_only: Production start; build modules are not loaded
        plugins: Ordered plugin list
        layouts: Layout name to template reference
        error_page: Template reference of the error layout
        server_middleware: Ordered middleware list
        build: Build subtree (templates, extend hook)
        router: Router subtree (extend_routes hook)
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    root_dir: Path = Field(default_factory=Path.cwd)
    build_dir: Path | None = None
    modules: list[Any] = Field(default_factory=list)
    build_modules: list[Any] = Field(default_factory=list)
    start_only: bool = False
    plugins: list[Any] = Field(default_factory=list)
    layouts: dict[str, str] = Field(default_factory=dict)
    error_page: str | None = None
    server_middleware: list[Any] = Field(default_factory=list)
    build: BuildConfig = Field(default_factory=BuildConfig)
    router: RouterConfig = Field(default_factory=RouterConfig)

    @model_validator(mode="after")
    def _resolve_build_dir(self) -> BuildOptions:
        if self.build_dir is None:
            self.build_dir = self.root_dir / DEFAULT_BUILD_DIR
        elif not self.build_dir.is_absolute():
            self.build_dir = self.root_dir / self.build_dir
        return self
