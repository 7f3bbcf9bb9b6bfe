"""Installed version of buildmods."""

from importlib.metadata import PackageNotFoundError, version

UNKNOWN_VERSION = "0.0.0+unknown"


def get_version() -> str:
    """Return the installed distribution version, or a placeholder when running from a checkout."""
    try:
        return version("buildmods")
    except PackageNotFoundError:
        return UNKNOWN_VERSION
