"""Release staging and pipeline coordination."""

from releasebox.release.aggregator import (
    AggregatedArtifact,
    ArtifactAggregator,
    create_artifact_aggregator,
)
from releasebox.release.naming import (
    base_name,
    destination_name,
    extract_suffix,
    split_artifact_identifier,
)
from releasebox.release.pipeline import ReleasePipeline, create_release_pipeline
from releasebox.release.rewriter import NameRewriter, PlannedRename, create_name_rewriter
from releasebox.release.staging import ArtifactStager, create_artifact_stager
from releasebox.release.trigger import (
    BRANCH_REF_PREFIX,
    TAG_REF_PREFIX,
    Trigger,
    TriggerEvent,
)


__all__ = [
    "AggregatedArtifact",
    "ArtifactAggregator",
    "ArtifactStager",
    "BRANCH_REF_PREFIX",
    "NameRewriter",
    "PlannedRename",
    "ReleasePipeline",
    "TAG_REF_PREFIX",
    "Trigger",
    "TriggerEvent",
    "base_name",
    "create_artifact_aggregator",
    "create_artifact_stager",
    "create_name_rewriter",
    "create_release_pipeline",
    "destination_name",
    "extract_suffix",
    "split_artifact_identifier",
]
