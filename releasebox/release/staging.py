"""Aggregate downloaded artifacts and rename them into the release directory."""

from pathlib import Path

from releasebox.config.models import NamingSettings
from releasebox.core.structlog_logger import StructlogMixin
from releasebox.models.results import StagingResult
from releasebox.protocols import FileAdapterProtocol
from releasebox.release.aggregator import ArtifactAggregator
from releasebox.release.rewriter import NameRewriter


class ArtifactStager(StructlogMixin):
    """Run the aggregator and the name rewriter back to back."""

    def __init__(
        self,
        project_name: str,
        naming: NamingSettings | None = None,
        file_adapter: FileAdapterProtocol | None = None,
        aggregator: ArtifactAggregator | None = None,
        rewriter: NameRewriter | None = None,
    ) -> None:
        super().__init__()
        self.aggregator = aggregator or ArtifactAggregator(file_adapter=file_adapter)
        self.rewriter = rewriter or NameRewriter(
            project_name, settings=naming, file_adapter=file_adapter
        )

    def stage(
        self, artifacts_root: Path, output_dir: Path, clean: bool = False
    ) -> StagingResult:
        """Stage every artifact under ``artifacts_root`` into ``output_dir``.

        Empty artifacts are listed in ``StagingResult.skipped``.

        Raises:
            AggregationError: If the root or an artifact directory is unreadable
            NamingError: If a name cannot be produced under the active policy
            StagingError: If the output directory cannot be used
        """
        artifacts = self.aggregator.collect(artifacts_root)
        skipped = [a.identifier for a in artifacts if a.is_empty]
        aggregated = {a.identifier: a.files for a in artifacts if not a.is_empty}
        for identifier in skipped:
            self.logger.info("artifact_empty_skipped", artifact=identifier)

        result = self.rewriter.rewrite(aggregated, output_dir, clean=clean)
        result.skipped = skipped
        self.logger.info(
            "artifacts_staged",
            output_dir=str(output_dir),
            staged=len(result.staged),
            skipped=len(skipped),
            collisions=len(result.collisions),
        )
        return result


def create_artifact_stager(
    project_name: str,
    naming: NamingSettings | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> ArtifactStager:
    """Create an artifact stager instance."""
    return ArtifactStager(project_name, naming=naming, file_adapter=file_adapter)


__all__ = ["ArtifactStager", "create_artifact_stager"]
