"""Main CLI application for releasebox."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer

from releasebox.cli.decorators.error_handling import print_stack_trace_if_verbose
from releasebox.config.models import PipelineConfig
from releasebox.config.user_config import (
    ReleaseboxSettings,
    create_settings,
    load_pipeline_config,
)
from releasebox.core.logging import setup_logging


__all__ = ["AppContext", "app", "main"]

try:
    __version__ = package_version("releasebox")
except PackageNotFoundError:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            config_file: Path to pipeline configuration file
        """
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.settings: ReleaseboxSettings = create_settings()
        self._pipeline_config: PipelineConfig | None = None

    @property
    def pipeline_config(self) -> PipelineConfig:
        """Pipeline configuration, loaded on first use.

        Raises:
            ConfigError: If no configuration file is found or it is invalid
        """
        if self._pipeline_config is None:
            self._pipeline_config = load_pipeline_config(self.config_file)
        return self._pipeline_config


app = typer.Typer(
    name="releasebox",
    help=f"""releasebox v{__version__}

Build a binary for every target, collect the per-target artifacts, rename
each file to <project>-<platform>-<arch><suffix> and publish them together
as one draft release.

Build → Artifact Store → Aggregate → Rename → Draft Release

Common workflows:
  • Show targets:     releasebox targets
  • Stage artifacts:  releasebox stage artifacts/ out/ --project wasabi
  • Full run:         releasebox run --ref v1.2.0""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Also log JSON lines to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """releasebox release packaging tool."""
    if version:
        print(f"releasebox v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    app_context = AppContext(
        verbose=verbose, log_file=log_file, config_file=config_file
    )
    ctx.obj = app_context

    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = app_context.settings.log_level

    setup_logging(log_level_name=log_level_name, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        from releasebox.cli.commands import register_all_commands

        register_all_commands(app)

        app()
        exit_code = 0

    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
