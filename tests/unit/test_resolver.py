"""Tests for module resolution from files and import paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildmods.core.resolver import ModuleResolver


@pytest.fixture
def project(tmp_path: Path) -> Path:
    modules_dir = tmp_path / "modules"
    modules_dir.mkdir()
    (modules_dir / "seo.py").write_text(
        "def module(container, options):\n"
        "    return 'seo'\n"
        "\n"
        "def setup(container, options):\n"
        "    return 'setup'\n"
        "\n"
        "not_callable = 42\n"
    )
    (modules_dir / "empty.py").write_text("VALUE = 1\n")
    (modules_dir / "broken.py").write_text("raise RuntimeError('broken module')\n")
    package = modules_dir / "analytics"
    package.mkdir()
    (package / "__init__.py").write_text("def module(container, options):\n    return 'analytics'\n")
    return tmp_path


class TestFileResolution:
    def test_alias(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve("~/modules/seo.py")(None, {}) == "seo"
        assert resolver.resolve("@/modules/seo.py")(None, {}) == "seo"

    def test_relative_without_suffix(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve("./modules/seo")(None, {}) == "seo"

    def test_absolute(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve(project / "modules" / "seo.py")(None, {}) == "seo"

    def test_directory_package(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve("~/modules/analytics")(None, {}) == "analytics"

    def test_attribute_suffix(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve("~/modules/seo.py:setup")(None, {}) == "setup"

    def test_same_handler_on_repeat(self, project: Path) -> None:
        resolver = ModuleResolver(project)

        assert resolver.resolve("~/modules/seo.py") is resolver.resolve("./modules/seo.py")

    def test_missing_file(self, project: Path) -> None:
        assert ModuleResolver(project).resolve("~/modules/missing.py") is None

    def test_missing_export(self, project: Path) -> None:
        assert ModuleResolver(project).resolve("~/modules/empty.py") is None

    def test_non_callable_export(self, project: Path) -> None:
        assert ModuleResolver(project).resolve("~/modules/seo.py:not_callable") is None

    def test_execution_error_propagates(self, project: Path) -> None:
        with pytest.raises(RuntimeError, match="broken module"):
            ModuleResolver(project).resolve("~/modules/broken.py")


class TestImportResolution:
    @pytest.fixture
    def package(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
        name = "bm_resolver_fixture_pkg"
        pkg = tmp_path / "site" / name
        pkg.mkdir(parents=True)
        (pkg / "__init__.py").write_text("")
        (pkg / "sitemap.py").write_text(
            "def module(container, options):\n"
            "    return 'sitemap'\n"
            "\n"
            "class Factory:\n"
            "    @staticmethod\n"
            "    def build(container, options):\n"
            "        return 'built'\n"
        )
        (pkg / "needs_missing.py").write_text("import bm_definitely_missing_dep\n")
        monkeypatch.syspath_prepend(str(tmp_path / "site"))
        return name

    def test_default_export(self, package: str, tmp_path: Path) -> None:
        handler = ModuleResolver(tmp_path).resolve(f"{package}.sitemap")

        assert handler(None, {}) == "sitemap"

    def test_dotted_attribute(self, package: str, tmp_path: Path) -> None:
        handler = ModuleResolver(tmp_path).resolve(f"{package}.sitemap:Factory.build")

        assert handler(None, {}) == "built"

    def test_missing_module(self, tmp_path: Path) -> None:
        assert ModuleResolver(tmp_path).resolve("bm_no_such_module.sub") is None

    def test_missing_dependency_propagates(self, package: str, tmp_path: Path) -> None:
        with pytest.raises(ModuleNotFoundError):
            ModuleResolver(tmp_path).resolve(f"{package}.needs_missing")
