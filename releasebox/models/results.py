"""Result models for staging, publishing and whole pipeline runs."""

from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator

from releasebox.core.structlog_logger import get_struct_logger
from releasebox.models.base import ReleaseboxBaseModel
from releasebox.models.target import BuiltArtifact


logger = get_struct_logger(__name__)

DEFAULT_RELEASE_BODY = "A new draft release."


class BaseResult(ReleaseboxBaseModel):
    """Base class for all operation results."""

    success: bool = True
    timestamp: datetime = Field(default_factory=datetime.now)
    messages: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_success_consistency(self) -> "BaseResult":
        """Ensure success flag is consistent with errors."""
        if self.errors and self.success:
            logger.warning("result_success_mismatch", error_count=len(self.errors))
            # Bypass validate_assignment to avoid re-entering this validator
            object.__setattr__(self, "success", False)
        return self

    def add_message(self, message: str) -> None:
        """Add an informational message."""
        self.messages.append(message)

    def add_error(self, error: str) -> None:
        """Add an error message and mark the result failed."""
        self.errors.append(error)
        logger.error("result_error_added", error=error)
        self.success = False

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the result."""
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "message_count": len(self.messages),
            "error_count": len(self.errors),
            "errors": self.errors if self.errors else None,
        }


class StagedFile(ReleaseboxBaseModel):
    """One file written into the flat output directory."""

    artifact_identifier: str
    source: Path
    destination: Path
    overwrote: bool = False

    @property
    def name(self) -> str:
        return self.destination.name


class NameCollision(ReleaseboxBaseModel):
    """Two sources that mapped to the same destination name."""

    name: str
    replaced_source: Path
    replaced_by: Path


class StagingResult(BaseResult):
    """Outcome of aggregating and renaming artifacts into the output directory."""

    output_dir: Path
    staged: list[StagedFile] = Field(default_factory=list)
    skipped: list[str] = Field(
        default_factory=list, description="Artifact identifiers with zero files"
    )
    collisions: list[NameCollision] = Field(default_factory=list)

    @property
    def destination_names(self) -> list[str]:
        """Names present in the output directory, in processing order."""
        names: list[str] = []
        for staged in self.staged:
            if staged.name not in names:
                names.append(staged.name)
        return names


class ReleaseRecord(ReleaseboxBaseModel):
    """Release object to create: tag, title, body and draft flag."""

    tag: str
    name: str | None = None
    draft: bool = True
    body: str = DEFAULT_RELEASE_BODY

    @property
    def title(self) -> str:
        return self.name or self.tag


class PublishResult(BaseResult):
    """Outcome of publishing a release."""

    tag: str
    draft: bool = True
    release_id: int | None = None
    url: str | None = None
    assets: list[str] = Field(default_factory=list)


class PipelineResult(BaseResult):
    """Outcome of a whole pipeline run."""

    ref: str
    event: str
    tag: str | None = None
    built: list[BuiltArtifact] = Field(default_factory=list)
    staging: StagingResult | None = None
    publish: PublishResult | None = None

    @property
    def published(self) -> bool:
        return self.publish is not None and self.publish.success


__all__ = [
    "BaseResult",
    "DEFAULT_RELEASE_BODY",
    "NameCollision",
    "PipelineResult",
    "PublishResult",
    "ReleaseRecord",
    "StagedFile",
    "StagingResult",
]
