"""
Error types for module registration and template handling.
"""

from typing import Any


class BuildModsError(Exception):
    """Base exception for all buildmods errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidModuleError(BuildModsError):
    """
    Raised when a module specifier does not yield a callable handler.

    Examples:
    - Resolver could not find the module
    - Module file has no ``module`` attribute
    - Specifier of an unsupported shape
    """

    def __init__(self, specifier: Any):
        self.specifier = specifier
        super().__init__(f"Module should export a callable: {specifier!r}")


class InvalidTemplateError(BuildModsError):
    """Raised when no template source can be extracted from the input."""

    def __init__(self, template: Any):
        self.template = template
        super().__init__(f"Invalid template: {template!r}")


class TemplateNotFoundError(BuildModsError):
    """Raised when a template source path does not exist."""

    def __init__(self, src: str):
        self.src = src
        super().__init__(f"Template src not found: {src}")


class ConfigError(BuildModsError):
    """
    Raised when a build manifest cannot be loaded.

    Examples:
    - Invalid TOML syntax
    - Fields of the wrong type
    """

    pass
