"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

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
from releasebox.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

# Most specific first: NameCollisionError is a NamingError
_ERROR_EVENTS: list[tuple[type[Exception], str]] = [
    (ConfigError, "configuration_error"),
    (TriggerError, "trigger_rejected"),
    (BuildError, "build_error"),
    (ArtifactStoreError, "artifact_store_error"),
    (AggregationError, "aggregation_error"),
    (NameCollisionError, "name_collision_error"),
    (NamingError, "naming_error"),
    (StagingError, "staging_error"),
    (PublishError, "publish_error"),
    (FileSystemError, "filesystem_error"),
    (ReleaseboxError, "release_error"),
    (FileNotFoundError, "file_not_found"),
]


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Each known error family is logged as its own event and the command
    exits with status 1. Nothing is retried.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            event = next(
                (name for kind, name in _ERROR_EVENTS if isinstance(e, kind)), None
            )
            if event is None:
                exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
                logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            else:
                logger.error(event, error=str(e))
            print(f"Error: {e}", file=sys.stderr)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-v", "-vv", "--verbose", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
