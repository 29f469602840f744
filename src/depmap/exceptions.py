"""Dependency-manager exceptions.

Every error carries a human-readable message and an optional context dict
(paths, names) so callers can report failures without parsing strings.
"""


class DependencyError(Exception):
    """Base exception for dependency operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (file paths, names, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class DependencyValidationError(DependencyError):
    """Malformed dependency record, output mapping or registry file."""


class DependencyNotFoundError(DependencyError):
    """Referenced dependency is not declared in the registry."""


class DuplicateDependencyError(DependencyError):
    """Two dependencies share the same name."""


class SourceMissingError(DependencyError):
    """A resolved source path does not exist at copy time."""


class ExternalToolError(DependencyError):
    """Version-control invocation exited with a non-zero status."""

    def __init__(self, message: str, returncode: int | None = None, output: str = "", context: dict | None = None):
        super().__init__(message, context)
        self.returncode = returncode
        self.output = output


class DependencyInstallError(DependencyError):
    """Copying or removing files for a dependency failed."""
