"""
Build manifest loading.

A project declares its modules and build settings in ``buildmods.toml``::

    build_dir = ".buildmods"
    modules = [
        "my_pkg.analytics",
        ["~/modules/sitemap.py", { hostname = "https://example.com" }],
        { src = "~/modules/seo.py:setup", options = { lang = "en" } },
    ]
    build_modules = ["~/modules/lint.py"]

    [build]
    template_namespace = "site"

    [layouts]
    blog = "./layouts/blog"
"""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigError
from .options import BuildOptions

MANIFEST_NAME = "buildmods.toml"


def find_manifest(start: Path) -> Path | None:
    """
    Find the nearest manifest walking up from ``start``.

    Args:
        start: Directory (or file) to start searching from

    Returns:
        Path to the manifest, or None if none was found
    """
    current = start.resolve()
    if current.is_file():
        current = current.parent

    for directory in (current, *current.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def load_build_options(path: Path) -> BuildOptions:
    """
    Load build options from a manifest file.

    ``root_dir`` defaults to the manifest's directory; a relative
    ``root_dir`` is resolved against it.

    Args:
        path: Path to ``buildmods.toml``

    Returns:
        Validated BuildOptions

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read manifest {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    manifest_dir = path.resolve().parent
    root_dir = Path(data.pop("root_dir", manifest_dir))
    if not root_dir.is_absolute():
        root_dir = manifest_dir / root_dir

    try:
        return BuildOptions.model_validate({**data, "root_dir": root_dir})
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e
