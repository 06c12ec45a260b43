"""Exception hierarchy for releasebox.

Every error carries a ``context`` dictionary with the values that were in
play when it was raised, so CLI handlers and logs can report them without
parsing messages.
"""

from pathlib import Path
from typing import Any


class ReleaseboxError(Exception):
    """Base class for all releasebox errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(ReleaseboxError):
    """Invalid or missing pipeline configuration."""


class TriggerError(ReleaseboxError):
    """The run is not allowed for the given ref or event."""


class BuildError(ReleaseboxError):
    """A target failed to build."""


class ArtifactStoreError(ReleaseboxError):
    """Uploading to or downloading from the artifact store failed."""


class FileSystemError(ReleaseboxError):
    """A file operation failed."""


class AggregationError(ReleaseboxError):
    """The aggregation root or an artifact directory could not be read."""


class NamingError(ReleaseboxError):
    """A destination name could not be produced under the active policy."""


class NameCollisionError(NamingError):
    """Two files mapped to the same destination name."""


class StagingError(ReleaseboxError):
    """The flat output directory cannot be used for staging."""


class PublishError(ReleaseboxError):
    """Creating the release or uploading an asset failed."""


def create_file_error(
    path: Path,
    operation: str,
    error: Exception,
    details: dict[str, Any] | None = None,
) -> FileSystemError:
    """Wrap a low level exception raised by a file operation.

    Args:
        path: Path the operation was working on
        operation: Name of the operation (e.g. ``"list_directory"``)
        error: Original exception
        details: Extra values to attach to the error context

    Returns:
        FileSystemError ready to be raised
    """
    context: dict[str, Any] = {
        "path": str(path),
        "operation": operation,
        "error_type": type(error).__name__,
    }
    if details:
        context.update(details)
    return FileSystemError(
        f"File operation '{operation}' failed on '{path}': {error}", context
    )


__all__ = [
    "AggregationError",
    "ArtifactStoreError",
    "BuildError",
    "ConfigError",
    "FileSystemError",
    "NameCollisionError",
    "NamingError",
    "PublishError",
    "ReleaseboxError",
    "StagingError",
    "TriggerError",
    "create_file_error",
]
