"""Shared pytest fixtures for buildmods tests."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from buildmods.core import utils
from buildmods.core.container import ModuleContainer
from buildmods.core.options import BuildOptions


@pytest.fixture
def build_options() -> BuildOptions:
    """Return build options rooted at a fixed, non-existent project dir."""
    return BuildOptions(
        root_dir=Path("/var/nuxt"),
        build_dir=Path("/var/nuxt/build"),
        build={"template_namespace": "nuxt"},
    )


@pytest.fixture
def host(build_options: BuildOptions) -> SimpleNamespace:
    """Return a stand-in host with mocked hooks and resolver."""
    return SimpleNamespace(
        options=build_options,
        call_hook=AsyncMock(),
        resolver=MagicMock(),
    )


@pytest.fixture
def container(host: SimpleNamespace) -> ModuleContainer:
    """Return a module container bound to the stand-in host."""
    return ModuleContainer(host)


@pytest.fixture
def fake_hash(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make template hashes readable and every template source exist."""
    monkeypatch.setattr(utils, "hash_sum", lambda src: f"hash({src})")
    monkeypatch.setattr(utils, "path_exists", lambda path: True)
