"""Utility helpers."""

from releasebox.utils.stream_process import (
    DefaultOutputMiddleware,
    OutputMiddleware,
    ProcessResult,
    run_command,
)


__all__ = [
    "DefaultOutputMiddleware",
    "OutputMiddleware",
    "ProcessResult",
    "run_command",
]
