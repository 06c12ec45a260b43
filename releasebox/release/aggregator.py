"""Artifact aggregation from an artifact store download root."""

from dataclasses import dataclass, field
from pathlib import Path

from releasebox.adapters import create_file_adapter
from releasebox.core.errors import AggregationError, FileSystemError
from releasebox.core.structlog_logger import StructlogMixin
from releasebox.protocols import FileAdapterProtocol


@dataclass
class AggregatedArtifact:
    """One artifact directory and the files found inside it."""

    identifier: str
    directory: Path
    files: list[Path] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files


class ArtifactAggregator(StructlogMixin):
    """Collect per-target artifact directories into one ordered mapping.

    The root holds one subdirectory per artifact identifier. Nested
    directories inside an artifact are flattened. Identifiers are processed
    in lexicographic order, and so are files within an artifact (by their
    relative POSIX path). Downstream collision handling depends on this
    order.
    """

    def __init__(self, file_adapter: FileAdapterProtocol | None = None) -> None:
        super().__init__()
        self.file_adapter = file_adapter or create_file_adapter()

    def collect(self, root: Path) -> list[AggregatedArtifact]:
        """Scan every artifact directory under ``root``, empty ones included.

        Raises:
            AggregationError: If the root or any artifact directory cannot be read
        """
        root = root.resolve()
        if not self.file_adapter.is_dir(root):
            raise AggregationError(
                f"Artifact root is not a readable directory: {root}",
                {"root": str(root)},
            )

        try:
            entries = self.file_adapter.list_directory(root)
        except FileSystemError as e:
            raise AggregationError(
                f"Cannot read artifact root {root}: {e}", {"root": str(root)}
            ) from e

        artifacts: list[AggregatedArtifact] = []
        for entry in sorted(entries, key=lambda p: p.name):
            if not self.file_adapter.is_dir(entry):
                self.logger.warning(
                    "stray_file_in_artifact_root", path=str(entry), root=str(root)
                )
                continue

            try:
                files = self.file_adapter.walk_files(entry)
            except FileSystemError as e:
                raise AggregationError(
                    f"Cannot read artifact directory {entry}: {e}",
                    {"root": str(root), "artifact": entry.name},
                ) from e

            files.sort(key=lambda p: p.relative_to(entry).as_posix())
            artifacts.append(
                AggregatedArtifact(identifier=entry.name, directory=entry, files=files)
            )
            self.logger.debug(
                "artifact_scanned", artifact=entry.name, file_count=len(files)
            )

        return artifacts

    def aggregate(self, root: Path) -> dict[str, list[Path]]:
        """Map each non-empty artifact identifier to its ordered file paths.

        Artifacts with zero files contribute nothing and are not an error.

        Raises:
            AggregationError: If the root or any artifact directory cannot be read
        """
        aggregated: dict[str, list[Path]] = {}
        for artifact in self.collect(root):
            if artifact.is_empty:
                self.logger.info("artifact_empty_skipped", artifact=artifact.identifier)
                continue
            aggregated[artifact.identifier] = artifact.files

        self.logger.info(
            "artifacts_aggregated",
            root=str(root),
            artifact_count=len(aggregated),
            file_count=sum(len(files) for files in aggregated.values()),
        )
        return aggregated


def create_artifact_aggregator(
    file_adapter: FileAdapterProtocol | None = None,
) -> ArtifactAggregator:
    """Create an artifact aggregator instance."""
    return ArtifactAggregator(file_adapter=file_adapter)


__all__ = ["AggregatedArtifact", "ArtifactAggregator", "create_artifact_aggregator"]
