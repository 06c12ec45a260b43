"""Release commands: stage, publish and run the full pipeline."""

import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from releasebox.adapters import create_file_adapter
from releasebox.build import create_cargo_build_driver
from releasebox.cli.app import AppContext
from releasebox.cli.decorators import handle_errors
from releasebox.cli.helpers import (
    print_pipeline_result,
    print_publish_result,
    print_staging_result,
)
from releasebox.config.models import (
    CollisionPolicy,
    MissingProjectNamePolicy,
    NamingSettings,
    PipelineConfig,
    StagingMode,
)
from releasebox.core.errors import ConfigError, PublishError
from releasebox.models.results import DEFAULT_RELEASE_BODY, ReleaseRecord
from releasebox.protocols import ReleasePublisherProtocol
from releasebox.publish import (
    create_github_release_publisher,
    create_local_release_publisher,
)
from releasebox.release import Trigger, create_artifact_stager, create_release_pipeline
from releasebox.store import create_local_artifact_store


logger = logging.getLogger(__name__)

DEFAULT_WORK_DIR = Path(".releasebox")


def _naming_settings(
    base: NamingSettings,
    on_missing: MissingProjectNamePolicy | None,
    on_collision: CollisionPolicy | None,
    copy: bool,
) -> NamingSettings:
    overrides: dict[str, Any] = {}
    if on_missing is not None:
        overrides["on_missing_project_name"] = on_missing
    if on_collision is not None:
        overrides["on_collision"] = on_collision
    if copy:
        overrides["mode"] = StagingMode.COPY
    return NamingSettings.model_validate({**base.to_dict_full(), **overrides})


def _github_publisher(
    app_ctx: AppContext, config: PipelineConfig | None
) -> ReleasePublisherProtocol:
    settings = app_ctx.settings
    repository = (config.release.repository if config else None) or (
        settings.github_repository
    )
    if not repository:
        raise PublishError(
            "No repository configured; set release.repository or GITHUB_REPOSITORY"
        )
    return create_github_release_publisher(
        repository, settings.github_token, api_url=settings.github_api_url
    )


@handle_errors
def stage(
    ctx: typer.Context,
    artifacts_dir: Annotated[
        Path, typer.Argument(help="Directory holding one subdirectory per artifact")
    ],
    output_dir: Annotated[Path, typer.Argument(help="Flat release directory")],
    project: Annotated[
        str | None,
        typer.Option("--project", "-p", help="Project name (default: from config)"),
    ] = None,
    on_missing: Annotated[
        MissingProjectNamePolicy | None,
        typer.Option(
            "--on-missing", help="Files not starting with the project name"
        ),
    ] = None,
    on_collision: Annotated[
        CollisionPolicy | None,
        typer.Option("--on-collision", help="Two files mapping to one name"),
    ] = None,
    copy: Annotated[
        bool, typer.Option("--copy", help="Copy files instead of moving them")
    ] = False,
    clean: Annotated[
        bool, typer.Option("--clean", help="Empty a non-empty output directory")
    ] = False,
) -> None:
    """Collect artifacts and rename them into one flat directory."""
    app_ctx: AppContext = ctx.obj

    if project:
        base = NamingSettings()
    else:
        config = app_ctx.pipeline_config
        project = config.project_name
        base = config.naming

    naming = _naming_settings(base, on_missing, on_collision, copy)
    stager = create_artifact_stager(project, naming=naming)
    result = stager.stage(artifacts_dir, output_dir, clean=clean)
    print_staging_result(result)


@handle_errors
def publish(
    ctx: typer.Context,
    output_dir: Annotated[Path, typer.Argument(help="Flat release directory")],
    tag: Annotated[str, typer.Option("--tag", "-t", help="Release tag")],
    dry_run: Annotated[
        Path | None,
        typer.Option("--dry-run", help="Write the release to this directory instead"),
    ] = None,
    body: Annotated[
        str | None, typer.Option("--body", help="Release body text")
    ] = None,
) -> None:
    """Publish every file in OUTPUT_DIR as a draft release."""
    app_ctx: AppContext = ctx.obj
    if not output_dir.is_dir():
        raise ConfigError(
            f"Output directory does not exist: {output_dir}",
            {"output_dir": str(output_dir)},
        )

    try:
        config: PipelineConfig | None = app_ctx.pipeline_config
    except ConfigError:
        if app_ctx.config_file:
            raise
        config = None

    record = ReleaseRecord(
        tag=tag,
        draft=config.release.draft if config else True,
        body=body or (config.release.body if config else DEFAULT_RELEASE_BODY),
    )

    publisher: ReleasePublisherProtocol
    if dry_run is not None:
        publisher = create_local_release_publisher(dry_run)
    else:
        publisher = _github_publisher(app_ctx, config)

    result = publisher.publish(output_dir, record)
    print_publish_result(result)


@handle_errors
def run(
    ctx: typer.Context,
    ref: Annotated[
        str | None,
        typer.Option(
            "--ref",
            help="Git ref, or a tag (push) or branch (manual) name "
            "(default: $GITHUB_REF)",
        ),
    ] = None,
    event: Annotated[
        str | None,
        typer.Option(
            "--event",
            help="push or workflow_dispatch (default: $GITHUB_EVENT_NAME)",
        ),
    ] = None,
    dry_run: Annotated[
        Path | None,
        typer.Option("--dry-run", help="Write the release to this directory instead"),
    ] = None,
    work_dir: Annotated[
        Path | None,
        typer.Option("--work-dir", help="Scratch directory for the run"),
    ] = None,
) -> None:
    """Build all targets, stage their artifacts and draft the release."""
    app_ctx: AppContext = ctx.obj
    config = app_ctx.pipeline_config

    if ref is None and event is None:
        trigger = Trigger.from_environment()
    else:
        trigger = Trigger.from_ref(
            ref if ref is not None else os.environ.get("GITHUB_REF", ""),
            event or "push",
        )
    logger.info("Run triggered by %s on %s", trigger.event, trigger.ref or "(no ref)")
    trigger.validate_for(config.release.tag_pattern)

    work_dir = work_dir or app_ctx.settings.work_dir or DEFAULT_WORK_DIR
    store_root = work_dir / "store"
    file_adapter = create_file_adapter()
    if file_adapter.exists(store_root):
        file_adapter.remove_dir(store_root)

    publisher: ReleasePublisherProtocol | None = None
    if dry_run is not None:
        publisher = create_local_release_publisher(dry_run)
    elif trigger.should_publish(config.release.tag_pattern):
        publisher = _github_publisher(app_ctx, config)

    build = config.build
    driver = create_cargo_build_driver(
        config.project_name,
        project_dir=build.project_dir,
        toolchain=build.toolchain,
        binary_name=config.binary_name,
    )
    pipeline = create_release_pipeline(
        config,
        driver,
        create_local_artifact_store(store_root),
        publisher=publisher,
    )
    result = pipeline.run(trigger, work_dir)
    print_pipeline_result(result)


def register_commands(app: typer.Typer) -> None:
    """Register release commands with the main app."""
    app.command(name="stage")(stage)
    app.command(name="publish")(publish)
    app.command(name="run")(run)
