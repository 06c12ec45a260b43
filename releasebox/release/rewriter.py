"""Rename aggregated artifact files into a flat output directory."""

from dataclasses import dataclass
from pathlib import Path

from releasebox.adapters import create_file_adapter
from releasebox.config.models import (
    CollisionPolicy,
    MissingProjectNamePolicy,
    NamingSettings,
    StagingMode,
)
from releasebox.core.errors import FileSystemError, NameCollisionError, StagingError
from releasebox.core.structlog_logger import StructlogMixin
from releasebox.models.results import NameCollision, StagedFile, StagingResult
from releasebox.protocols import FileAdapterProtocol
from releasebox.release.naming import destination_name, split_artifact_identifier


@dataclass(frozen=True)
class PlannedRename:
    """Destination chosen for one source file."""

    artifact_identifier: str
    source: Path
    name: str


class NameRewriter(StructlogMixin):
    """Write every aggregated file under its public asset name.

    Artifacts are processed in lexicographic identifier order and files in
    the order given. The whole plan is computed before anything is written,
    so naming errors and (under ``CollisionPolicy.ERROR``) collisions leave
    the output directory untouched.
    """

    def __init__(
        self,
        project_name: str,
        settings: NamingSettings | None = None,
        file_adapter: FileAdapterProtocol | None = None,
    ) -> None:
        super().__init__()
        self.project_name = project_name
        self.settings = settings or NamingSettings()
        self.file_adapter = file_adapter or create_file_adapter()

    @property
    def missing_policy(self) -> MissingProjectNamePolicy:
        return MissingProjectNamePolicy(self.settings.on_missing_project_name)

    @property
    def collision_policy(self) -> CollisionPolicy:
        return CollisionPolicy(self.settings.on_collision)

    @property
    def mode(self) -> StagingMode:
        return StagingMode(self.settings.mode)

    def plan(self, aggregated: dict[str, list[Path]]) -> list[PlannedRename]:
        """Compute destination names without touching the filesystem.

        Raises:
            NamingError: Under ``REJECT`` when a base name lacks the project name
        """
        planned: list[PlannedRename] = []
        for identifier in sorted(aggregated):
            if split_artifact_identifier(identifier, self.project_name) is None:
                self.logger.warning(
                    "foreign_artifact_identifier",
                    artifact=identifier,
                    project_name=self.project_name,
                )
            for source in aggregated[identifier]:
                name = destination_name(
                    identifier, source.name, self.project_name, self.missing_policy
                )
                planned.append(PlannedRename(identifier, source, name))
        return planned

    def find_collisions(self, planned: list[PlannedRename]) -> dict[str, list[Path]]:
        """Destination names claimed by more than one source, with those sources."""
        claims: dict[str, list[Path]] = {}
        for item in planned:
            claims.setdefault(item.name, []).append(item.source)
        return {name: sources for name, sources in claims.items() if len(sources) > 1}

    def prepare_output_dir(self, output_dir: Path, clean: bool = False) -> None:
        """Create the output directory, which must end up empty.

        Raises:
            StagingError: If it holds files and ``clean`` is False, or it
                cannot be created or emptied
        """
        try:
            if self.file_adapter.exists(output_dir):
                if not self.file_adapter.is_dir(output_dir):
                    raise StagingError(
                        f"Output path is not a directory: {output_dir}",
                        {"output_dir": str(output_dir)},
                    )
                existing = self.file_adapter.list_directory(output_dir)
                if existing and not clean:
                    raise StagingError(
                        f"Output directory is not empty: {output_dir}",
                        {
                            "output_dir": str(output_dir),
                            "entries": sorted(p.name for p in existing),
                        },
                    )
                for entry in existing:
                    if self.file_adapter.is_dir(entry):
                        self.file_adapter.remove_dir(entry)
                    else:
                        self.file_adapter.remove_file(entry)
            self.file_adapter.mkdir(output_dir)
        except FileSystemError as e:
            raise StagingError(
                f"Cannot prepare output directory {output_dir}: {e}",
                {"output_dir": str(output_dir)},
            ) from e

    def rewrite(
        self,
        aggregated: dict[str, list[Path]],
        output_dir: Path,
        clean: bool = False,
    ) -> StagingResult:
        """Rename aggregated files into ``output_dir``.

        Args:
            aggregated: Artifact identifier to ordered file paths
            output_dir: Flat destination directory
            clean: Empty a non-empty output directory instead of failing

        Returns:
            StagingResult listing the files now present in ``output_dir``

        Raises:
            NamingError: If a name cannot be produced under the active policy
            NameCollisionError: If names collide under ``CollisionPolicy.ERROR``
            StagingError: If the output directory cannot be used or written
        """
        planned = self.plan(aggregated)

        collisions = self.find_collisions(planned)
        if collisions and self.collision_policy == CollisionPolicy.ERROR:
            name, sources = next(iter(collisions.items()))
            raise NameCollisionError(
                f"Destination name '{name}' is produced by {len(sources)} files: "
                + ", ".join(str(s) for s in sources),
                {"collisions": {n: [str(s) for s in ss] for n, ss in collisions.items()}},
            )

        self.prepare_output_dir(output_dir, clean=clean)

        result = StagingResult(output_dir=output_dir)
        written: dict[str, StagedFile] = {}
        for item in planned:
            destination = output_dir / item.name
            previous = written.get(item.name)
            if previous is not None:
                self.logger.warning(
                    "name_collision",
                    name=item.name,
                    replaced_source=str(previous.source),
                    replaced_by=str(item.source),
                )
                result.collisions.append(
                    NameCollision(
                        name=item.name,
                        replaced_source=previous.source,
                        replaced_by=item.source,
                    )
                )
                result.staged.remove(previous)

            self._write(item.source, destination)
            staged = StagedFile(
                artifact_identifier=item.artifact_identifier,
                source=item.source,
                destination=destination,
                overwrote=previous is not None,
            )
            written[item.name] = staged
            result.staged.append(staged)
            self.logger.info(
                "artifact_file_staged",
                artifact=item.artifact_identifier,
                source=str(item.source),
                name=item.name,
            )

        result.add_message(
            f"Staged {len(result.staged)} files into {output_dir}"
            + (f" ({len(result.collisions)} overwritten)" if result.collisions else "")
        )
        return result

    def _write(self, source: Path, destination: Path) -> None:
        try:
            if self.file_adapter.exists(destination):
                self.file_adapter.remove_file(destination)
            if self.mode == StagingMode.COPY:
                self.file_adapter.copy_file(source, destination)
            else:
                self.file_adapter.move_file(source, destination)
        except FileSystemError as e:
            raise StagingError(
                f"Cannot write {destination}: {e}",
                {"source": str(source), "destination": str(destination)},
            ) from e


def create_name_rewriter(
    project_name: str,
    settings: NamingSettings | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> NameRewriter:
    """Create a name rewriter instance."""
    return NameRewriter(project_name, settings=settings, file_adapter=file_adapter)


__all__ = ["NameRewriter", "PlannedRename", "create_name_rewriter"]
