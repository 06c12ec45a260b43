"""Data models shared across releasebox."""

from releasebox.models.base import ReleaseboxBaseModel
from releasebox.models.results import (
    DEFAULT_RELEASE_BODY,
    BaseResult,
    NameCollision,
    PipelineResult,
    PublishResult,
    ReleaseRecord,
    StagedFile,
    StagingResult,
)
from releasebox.models.target import BuiltArtifact, Target, platform_from_triple


__all__ = [
    "BaseResult",
    "BuiltArtifact",
    "DEFAULT_RELEASE_BODY",
    "NameCollision",
    "PipelineResult",
    "PublishResult",
    "ReleaseRecord",
    "ReleaseboxBaseModel",
    "StagedFile",
    "StagingResult",
    "Target",
    "platform_from_triple",
]
