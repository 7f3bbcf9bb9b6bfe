"""
buildmods command line interface.

Commands:
- modules: apply the project's modules and show what they registered
- version: print the installed version
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ._version import get_version
from .core.errors import BuildModsError
from .core.host import BuildHost
from .core.manifest import MANIFEST_NAME, find_manifest, load_build_options

app = typer.Typer(
    help="Inspect build modules and what they register",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("modules")
def modules_command(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Path to {MANIFEST_NAME} (default: search upwards)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Apply declared modules and list registered modules, templates, plugins and layouts."""
    _configure_logging(verbose)

    manifest = config or find_manifest(Path.cwd())
    if manifest is None:
        console.print(f"[red]No {MANIFEST_NAME} found[/red]")
        raise typer.Exit(code=1)

    try:
        options = load_build_options(manifest)
        host = asyncio.run(BuildHost(options).ready())
    except BuildModsError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1) from e

    container = host.module_container

    modules_table = Table(title="Modules")
    modules_table.add_column("Key", style="cyan")
    modules_table.add_column("Source")
    modules_table.add_column("Options", style="dim")
    for key, record in container.required_modules.items():
        modules_table.add_row(escape(key), escape(str(record.src)), escape(repr(record.options)))
    console.print(modules_table)

    templates_table = Table(title="Templates")
    templates_table.add_column("Destination", style="cyan")
    templates_table.add_column("Source")
    for template in options.build.templates:
        templates_table.add_row(template.dst, template.src)
    console.print(templates_table)

    if options.plugins:
        plugins_table = Table(title="Plugins")
        plugins_table.add_column("Source", style="cyan")
        plugins_table.add_column("SSR")
        plugins_table.add_column("Mode")
        for plugin in options.plugins:
            src = getattr(plugin, "src", plugin)
            plugins_table.add_row(
                escape(str(src)), str(getattr(plugin, "ssr", "")), str(getattr(plugin, "mode", ""))
            )
        console.print(plugins_table)

    if options.layouts:
        layouts_table = Table(title="Layouts")
        layouts_table.add_column("Name", style="cyan")
        layouts_table.add_column("Template")
        for name, ref in options.layouts.items():
            layouts_table.add_row(name, ref)
        console.print(layouts_table)

    if options.error_page:
        console.print(f"Error page: [cyan]{options.error_page}[/cyan]")


@app.command("version")
def version_command() -> None:
    """Print the buildmods version."""
    typer.echo(get_version())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
