"""End-to-end release pipeline: build, store, stage, publish."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from releasebox.adapters import create_file_adapter
from releasebox.config.models import (
    CollisionPolicy,
    MissingProjectNamePolicy,
    PipelineConfig,
)
from releasebox.core.errors import (
    BuildError,
    ConfigError,
    FileSystemError,
    NameCollisionError,
    NamingError,
    StagingError,
)
from releasebox.core.structlog_logger import StructlogMixin
from releasebox.models.results import PipelineResult, ReleaseRecord
from releasebox.models.target import BuiltArtifact, Target
from releasebox.protocols import (
    ArtifactStoreProtocol,
    BuildDriverProtocol,
    FileAdapterProtocol,
    ReleasePublisherProtocol,
)
from releasebox.release.staging import ArtifactStager
from releasebox.release.trigger import Trigger


class ReleasePipeline(StructlogMixin):
    """Coordinate one release run across all configured targets.

    Builds run in parallel and the first failure aborts the run before
    anything is uploaded. Uploads, aggregation and renaming are sequential
    and ordered. A release is drafted only when every target built and the
    trigger is a tag.
    """

    def __init__(
        self,
        config: PipelineConfig,
        build_driver: BuildDriverProtocol,
        artifact_store: ArtifactStoreProtocol,
        publisher: ReleasePublisherProtocol | None = None,
        file_adapter: FileAdapterProtocol | None = None,
    ) -> None:
        super().__init__()
        self.config = config
        self.build_driver = build_driver
        self.artifact_store = artifact_store
        self.publisher = publisher
        self.file_adapter = file_adapter or create_file_adapter()
        self.stager = ArtifactStager(
            config.project_name, naming=config.naming, file_adapter=self.file_adapter
        )

    def check_targets(self) -> None:
        """Reject configurations that cannot produce a correct release.

        Raises:
            ConfigError: If no targets are configured
            NameCollisionError: If targets share an artifact identifier and
                collisions are configured as errors
            NamingError: If the binary name does not start with the project
                name and such files are rejected
        """
        if not self.config.targets:
            raise ConfigError(
                "No build targets configured",
                {"project_name": self.config.project_name},
            )

        self._check_binary_name()

        duplicates = self.config.duplicate_identifiers()
        if not duplicates:
            return
        if CollisionPolicy(self.config.naming.on_collision) == CollisionPolicy.ERROR:
            raise NameCollisionError(
                "Targets share artifact identifiers: " + ", ".join(duplicates),
                {"duplicates": duplicates},
            )
        self.logger.warning("duplicate_artifact_identifiers", duplicates=duplicates)

    def _check_binary_name(self) -> None:
        # Published names replace the leading project name of each file.
        project_name = self.config.project_name
        binary_name = self.config.binary_name
        if binary_name.startswith(project_name):
            return
        policy = MissingProjectNamePolicy(self.config.naming.on_missing_project_name)
        if policy == MissingProjectNamePolicy.REJECT:
            raise NamingError(
                f"Binary name '{binary_name}' does not start with project name "
                f"'{project_name}'",
                {"binary_name": binary_name, "project_name": project_name},
            )
        self.logger.warning(
            "binary_name_without_project_prefix",
            binary_name=binary_name,
            project_name=project_name,
        )

    def build_all(self, targets: list[Target]) -> list[BuiltArtifact]:
        """Build every target in parallel, failing on the first error.

        Returns:
            Built artifacts sorted by (artifact name, target triple)

        Raises:
            BuildError: If any target fails; pending builds are cancelled
        """
        max_workers = self.config.build.max_workers or len(targets)
        built: list[BuiltArtifact] = []
        self.logger.info(
            "builds_started", target_count=len(targets), max_workers=max_workers
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_target = {
                executor.submit(self.build_driver.build, target): target
                for target in targets
            }
            try:
                for future in as_completed(future_to_target):
                    artifact = future.result()
                    self.logger.info(
                        "target_built",
                        target=artifact.target.name,
                        artifact=artifact.artifact_name,
                    )
                    built.append(artifact)
            except Exception as e:
                for pending in future_to_target:
                    pending.cancel()
                failed = next(
                    (
                        t
                        for f, t in future_to_target.items()
                        if f.done() and not f.cancelled() and f.exception() is e
                    ),
                    None,
                )
                self.log_error_with_context(
                    "build_failed", e, target=failed.name if failed else None
                )
                if isinstance(e, BuildError):
                    raise
                raise BuildError(
                    f"Build failed for {failed.name if failed else 'a target'}: {e}",
                    {"target": failed.name if failed else None},
                ) from e

        return sorted(built, key=lambda a: (a.artifact_name, a.target.name))

    def upload_all(self, built: list[BuiltArtifact]) -> None:
        """Upload every built artifact in order; a repeated name merges."""
        for artifact in built:
            self.artifact_store.upload(artifact.artifact_name, [artifact.path])

    def _fresh_dir(self, path: Path) -> Path:
        try:
            if self.file_adapter.exists(path):
                self.file_adapter.remove_dir(path)
            self.file_adapter.mkdir(path)
        except FileSystemError as e:
            raise StagingError(
                f"Cannot prepare working directory {path}: {e}", {"path": str(path)}
            ) from e
        return path

    def run(
        self,
        trigger: Trigger,
        work_dir: Path,
        output_dir: Path | None = None,
    ) -> PipelineResult:
        """Run the pipeline for ``trigger``.

        Args:
            trigger: Event and ref that started the run
            work_dir: Scratch directory for downloaded artifacts
            output_dir: Flat release directory, ``<work_dir>/out`` by default

        Returns:
            PipelineResult; ``publish`` is None when the trigger does not publish

        Raises:
            ReleaseboxError: Any failure aborts the run without publishing
        """
        release_settings = self.config.release
        trigger.validate_for(release_settings.tag_pattern)
        self.check_targets()

        result = PipelineResult(ref=trigger.ref, event=trigger.event, tag=trigger.tag)

        result.built = self.build_all(list(self.config.targets))
        self.upload_all(result.built)

        downloads = self._fresh_dir(work_dir / "artifacts")
        artifacts_root = self.artifact_store.download_all(downloads)

        output_dir = output_dir or work_dir / "out"
        result.staging = self.stager.stage(artifacts_root, output_dir, clean=True)

        if trigger.should_publish(release_settings.tag_pattern) and trigger.tag:
            if self.publisher is None:
                result.add_message("No publisher configured; release not drafted")
            else:
                record = ReleaseRecord(
                    tag=trigger.tag,
                    draft=release_settings.draft,
                    body=release_settings.body,
                )
                result.publish = self.publisher.publish(output_dir, record)
        else:
            result.add_message(
                f"Ref '{trigger.ref or '(none)'}' is not a release tag; "
                "staged without publishing"
            )

        self.logger.info(
            "pipeline_finished",
            ref=trigger.ref,
            built=len(result.built),
            staged=len(result.staging.staged),
            published=result.published,
        )
        return result


def create_release_pipeline(
    config: PipelineConfig,
    build_driver: BuildDriverProtocol,
    artifact_store: ArtifactStoreProtocol,
    publisher: ReleasePublisherProtocol | None = None,
) -> ReleasePipeline:
    """Create a release pipeline instance."""
    return ReleasePipeline(config, build_driver, artifact_store, publisher=publisher)


__all__ = ["ReleasePipeline", "create_release_pipeline"]
