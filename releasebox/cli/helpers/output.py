"""Helper functions for CLI output formatting with Rich integration."""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from releasebox.config.models import PipelineConfig
from releasebox.models.results import PipelineResult, PublishResult, StagingResult
from releasebox.release.naming import destination_name


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


def print_success_message(message: str) -> None:
    """Print a success message with a checkmark."""
    _console().print(Text.assemble(("✓ ", "bold green"), message))


def print_error_message(message: str) -> None:
    """Print an error message with an X symbol."""
    _console().print(Text.assemble(("✗ ", "bold red"), message))


def print_warning_message(message: str) -> None:
    _console().print(Text.assemble(("! ", "bold yellow"), message))


def print_list_item(item: str, indent: int = 1) -> None:
    """Print a list item with bullet and indentation.

    Args:
        item: The list item to print
        indent: Number of indentation levels (default: 1)
    """
    _console().print(f"{' ' * (indent * 2)}• {item}", markup=False)


def print_targets_table(config: PipelineConfig) -> None:
    """Print every target with its artifact identifier and asset name."""
    table = Table(
        title=f"Targets for {config.project_name}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Artifact", style="bold")
    table.add_column("Asset", style="green")

    for target in config.targets:
        identifier = target.artifact_identifier(config.project_name)
        binary = config.binary_name + (".exe" if target.is_windows else "")
        asset = destination_name(
            identifier,
            binary,
            config.project_name,
            config.naming.on_missing_project_name,
        )
        table.add_row(target.name, identifier, asset)

    _console().print(table)


def print_staging_result(result: StagingResult) -> None:
    print_success_message(
        f"Staged {len(result.staged)} files into {result.output_dir}"
    )
    for staged in result.staged:
        print_list_item(f"{staged.name}  <-  {staged.artifact_identifier}")
    for identifier in result.skipped:
        print_warning_message(f"Artifact {identifier} is empty, nothing staged")
    for collision in result.collisions:
        print_warning_message(
            f"{collision.name} from {collision.replaced_source} was overwritten "
            f"by {collision.replaced_by}"
        )


def print_publish_result(result: PublishResult) -> None:
    kind = "draft release" if result.draft else "release"
    print_success_message(f"Published {kind} {result.tag}")
    if result.url:
        print_list_item(f"url: {result.url}")
    for asset in result.assets:
        print_list_item(asset)
    for message in result.messages:
        print_list_item(message)


def print_pipeline_result(result: PipelineResult) -> None:
    """Print the outcome of a whole pipeline run."""
    print_success_message(f"Built {len(result.built)} targets for {result.ref}")
    if result.staging is not None:
        print_staging_result(result.staging)
    if result.publish is not None:
        print_publish_result(result.publish)
    for message in result.messages:
        print_list_item(message)
