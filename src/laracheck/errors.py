"""Exception hierarchy shared by the loader, scanner and CLI."""

from __future__ import annotations


class LaraCheckError(Exception):
    """Base class for fatal laracheck errors."""


class ConfigError(LaraCheckError, ValueError):
    """Invalid configuration. Raised before any scanning starts."""


class RuleConfigError(ConfigError):
    """Rule definitions are malformed."""


class ProjectRootError(LaraCheckError):
    """The project root does not exist or cannot be read."""


class ScanLimitError(LaraCheckError):
    """The configured file-count or time ceiling was exceeded."""
