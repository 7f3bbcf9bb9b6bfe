"""End-to-end tests for the build host applying real module files."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildmods.core.errors import InvalidModuleError
from buildmods.core.hooks import HookBus
from buildmods.core.host import BuildHost
from buildmods.core.options import BuildOptions, PluginMode


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "analytics.js").write_text("// analytics\n")
    (tmp_path / "templates" / "error.html").write_text("<h1>Error</h1>\n")
    modules_dir = tmp_path / "modules"
    modules_dir.mkdir()
    (modules_dir / "analytics.py").write_text(
        "from pathlib import Path\n"
        "from buildmods import define_module\n"
        "\n"
        "@define_module(name='analytics')\n"
        "async def module(container, options):\n"
        "    root = Path(container.options.root_dir)\n"
        "    container.add_plugin({\n"
        "        'src': str(root / 'templates' / 'analytics.js'),\n"
        "        'options': options,\n"
        "        'mode': 'client',\n"
        "    })\n"
        "    await container.require_module('~/modules/errors.py')\n"
        "    container.add_server_middleware('analytics-mw')\n"
        "    return options\n"
    )
    (modules_dir / "errors.py").write_text(
        "from pathlib import Path\n"
        "\n"
        "def module(container, options):\n"
        "    root = Path(container.options.root_dir)\n"
        "    container.add_layout(str(root / 'templates' / 'error.html'), 'error')\n"
        "    container.extend_routes(lambda routes: routes.append('/error'))\n"
    )
    return tmp_path


class TestBuildHost:
    @pytest.mark.asyncio
    async def test_applies_declared_modules(self, project: Path) -> None:
        options = BuildOptions(
            root_dir=project,
            modules=[
                ["~/modules/analytics.py", {"id": "UA-1"}],
                "~/modules/errors.py",
            ],
        )
        host = BuildHost(options)
        events: list[str] = []
        host.hook("modules:before", lambda container, modules: events.append("before"))
        host.hook("modules:done", lambda container: events.append("done"))
        host.hook("ready", lambda h: events.append("ready"))

        await host.ready()

        assert events == ["before", "done", "ready"]
        container = host.module_container
        assert list(container.required_modules) == ["analytics", "~/modules/errors.py"]
        assert container.required_modules["analytics"].options == {"id": "UA-1"}

        # errors.py is required by analytics and declared again without require_once
        assert options.build.templates[1].dst == options.build.templates[2].dst
        assert options.layouts == {"error": f"./{options.build.templates[1].dst}"}
        assert options.error_page == f"~/.buildmods/{options.build.templates[1].dst}"
        assert [t.options for t in options.build.templates][0] == {"id": "UA-1"}
        assert options.plugins[0].mode == PluginMode.CLIENT
        assert options.plugins[0].src.startswith(str(project / ".buildmods"))
        assert options.server_middleware == ["analytics-mw"]

        routes: list[str] = []
        options.router.extend_routes(routes)
        assert routes == ["/error", "/error"]

    @pytest.mark.asyncio
    async def test_ready_is_idempotent(self, project: Path) -> None:
        host = BuildHost(BuildOptions(root_dir=project, modules=["~/modules/errors.py"]))

        await host.ready()
        await host.ready()

        assert len(host.options.build.templates) == 1

    @pytest.mark.asyncio
    async def test_unresolvable_module_fails(self, project: Path) -> None:
        host = BuildHost(BuildOptions(root_dir=project, modules=["~/modules/missing.py"]))

        with pytest.raises(InvalidModuleError, match="missing.py"):
            await host.ready()


class TestHookBus:
    @pytest.mark.asyncio
    async def test_listeners_run_in_order(self) -> None:
        bus = HookBus()
        calls: list[str] = []

        async def second(value):
            calls.append(f"second:{value}")

        bus.hook("build:done", lambda value: calls.append(f"first:{value}"))
        bus.hook("build:done", second)

        await bus.call_hook("build:done", 1)

        assert calls == ["first:1", "second:1"]

    @pytest.mark.asyncio
    async def test_unknown_hook_is_noop(self) -> None:
        await HookBus().call_hook("nothing")

    @pytest.mark.asyncio
    async def test_failing_listener_aborts(self) -> None:
        bus = HookBus()
        calls: list[str] = []

        def fail():
            raise ValueError("listener failed")

        bus.hook("x", fail)
        bus.hook("x", lambda: calls.append("after"))

        with pytest.raises(ValueError):
            await bus.call_hook("x")
        assert calls == []
