"""Core infrastructure: errors and logging."""

from releasebox.core.errors import (
    AggregationError,
    ArtifactStoreError,
    BuildError,
    ConfigError,
    FileSystemError,
    NameCollisionError,
    NamingError,
    PublishError,
    ReleaseboxError,
    StagingError,
    TriggerError,
)
from releasebox.core.logging import get_logger, setup_logging


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
    "get_logger",
    "setup_logging",
]
