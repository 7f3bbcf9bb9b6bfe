"""
Common utilities for the module container.

Provides helper functions shared across the container:
- Deterministic hashing for template file names
- Function chaining for extend hooks
- Path helpers
"""

from __future__ import annotations

import hashlib
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any


def hash_sum(value: Any) -> str:
    """
    Compute a short, stable hash of a value.

    Args:
        value: Anything with a stable ``str()`` form (usually a path)

    Returns:
        First 8 hex characters of the SHA-256 digest
    """
    return hashlib.sha256(str(value).encode()).hexdigest()[:8]


def chain_fn(base: Callable[..., Any] | None, fn: Callable[..., Any] | None) -> Any:
    """
    Compose two functions so that ``base`` runs before ``fn``.

    The wrapper calls ``base`` with the original arguments. If ``base``
    returns None the first argument is assumed to have been mutated in
    place and is passed on. ``fn`` then receives that result followed by
    the remaining arguments.

    Args:
        base: Existing function (or None)
        fn: Function to run after ``base``

    Returns:
        The composed function, or ``base`` unchanged if ``fn`` is not callable
    """
    if not callable(fn):
        return base

    def chained(*args: Any, **kwargs: Any) -> Any:
        if not callable(base):
            return fn(*args, **kwargs)

        base_result = base(*args, **kwargs)
        if base_result is None and args:
            base_result = args[0]

        fn_result = fn(base_result, *args[1:], **kwargs)
        if fn_result is None:
            return base_result
        return fn_result

    chained.__name__ = getattr(fn, "__name__", "chained")
    chained.__wrapped__ = fn  # type: ignore[attr-defined]
    return chained


def path_exists(path: str | os.PathLike[str]) -> bool:
    """Check whether a template source exists on disk."""
    return os.path.exists(path)


def relative_posix(path: Path, start: Path) -> str:
    """
    Express ``path`` relative to ``start`` using forward slashes.

    Args:
        path: Target path
        start: Base directory

    Returns:
        POSIX-style relative path (may contain ``..``)
    """
    return Path(os.path.relpath(path, start)).as_posix()
