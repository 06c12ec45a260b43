"""Command-line interface for releasebox."""

from releasebox.cli.app import app, main


__all__ = ["app", "main"]
