"""CLI command modules."""

import typer

from releasebox.cli.commands.release import register_commands as register_release_commands
from releasebox.cli.commands.targets import register_commands as register_targets_commands


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_targets_commands(app)
    register_release_commands(app)
