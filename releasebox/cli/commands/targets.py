"""Targets command: show what a release would contain."""

import logging

import typer

from releasebox.cli.app import AppContext
from releasebox.cli.decorators import handle_errors
from releasebox.cli.helpers import print_targets_table, print_warning_message


logger = logging.getLogger(__name__)


@handle_errors
def targets(ctx: typer.Context) -> None:
    """Show configured targets, their artifacts and asset names."""
    app_ctx: AppContext = ctx.obj
    config = app_ctx.pipeline_config

    if not config.targets:
        print_warning_message("No targets configured")
        return

    print_targets_table(config)
    for identifier in config.duplicate_identifiers():
        print_warning_message(
            f"Artifact {identifier} is produced by more than one target"
        )


def register_commands(app: typer.Typer) -> None:
    """Register targets commands with the main app."""
    app.command(name="targets")(targets)
