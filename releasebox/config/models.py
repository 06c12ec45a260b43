"""Pipeline configuration models."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator

from releasebox.models.base import ReleaseboxBaseModel
from releasebox.models.results import DEFAULT_RELEASE_BODY
from releasebox.models.target import Target


class MissingProjectNamePolicy(str, Enum):
    """What to do when a file's base name does not start with the project name."""

    FALLBACK = "fallback"
    REJECT = "reject"


class CollisionPolicy(str, Enum):
    """What to do when two files map to the same destination name."""

    OVERWRITE = "overwrite"
    ERROR = "error"


class StagingMode(str, Enum):
    """How files reach the flat output directory."""

    MOVE = "move"
    COPY = "copy"


class BuildSettings(ReleaseboxBaseModel):
    """Settings handed to the build driver."""

    toolchain: str = Field(default="nightly", description="Toolchain channel")
    project_dir: Path = Field(default=Path("."), description="Crate root")
    binary_name: str | None = Field(
        default=None,
        description=(
            "Binary name, defaults to the project name. The leading project name "
            "is replaced by the artifact name, so wasabi-cli.exe is published as "
            "wasabi-windows-x64-cli.exe"
        ),
    )
    max_workers: int | None = Field(
        default=None, ge=1, description="Parallel builds, defaults to one per target"
    )


class NamingSettings(ReleaseboxBaseModel):
    """Policies applied by the name rewriter."""

    on_missing_project_name: MissingProjectNamePolicy = (
        MissingProjectNamePolicy.FALLBACK
    )
    on_collision: CollisionPolicy = CollisionPolicy.OVERWRITE
    mode: StagingMode = StagingMode.MOVE


class ReleaseSettings(ReleaseboxBaseModel):
    """Release record defaults and trigger pattern."""

    body: str = DEFAULT_RELEASE_BODY
    draft: bool = True
    tag_pattern: str = Field(default="v*", description="fnmatch pattern for tags")
    repository: str | None = Field(
        default=None, description="owner/name of the hosting repository"
    )

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        if v is not None and v.count("/") != 1:
            raise ValueError(f"repository must look like 'owner/name', got {v!r}")
        return v


class PipelineConfig(ReleaseboxBaseModel):
    """Complete configuration of a release pipeline run."""

    project_name: str = Field(description="Project and binary base name")
    platform: str | None = Field(
        default=None, description="Platform applied to targets that omit one"
    )
    targets: list[Target] = Field(default_factory=list)
    build: BuildSettings = Field(default_factory=BuildSettings)
    naming: NamingSettings = Field(default_factory=NamingSettings)
    release: ReleaseSettings = Field(default_factory=ReleaseSettings)

    @model_validator(mode="before")
    @classmethod
    def apply_default_platform(cls, data: Any) -> Any:
        """Give every target without a platform the top-level one."""
        if not isinstance(data, dict):
            return data
        platform = data.get("platform")
        targets = data.get("targets")
        if platform and isinstance(targets, list):
            data = {
                **data,
                "targets": [
                    {**t, "platform": t.get("platform") or platform}
                    if isinstance(t, dict)
                    else t
                    for t in targets
                ],
            }
        return data

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        if not v:
            raise ValueError("project_name must not be empty")
        if "/" in v or "\\" in v:
            raise ValueError(f"project_name must not contain path separators: {v!r}")
        return v

    @property
    def binary_name(self) -> str:
        return self.build.binary_name or self.project_name

    def artifact_identifiers(self) -> list[str]:
        """Artifact identifiers for all targets, in configuration order."""
        return [t.artifact_identifier(self.project_name) for t in self.targets]

    def duplicate_identifiers(self) -> list[str]:
        """Artifact identifiers shared by more than one target."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for identifier in self.artifact_identifiers():
            if identifier in seen and identifier not in duplicates:
                duplicates.append(identifier)
            seen.add(identifier)
        return duplicates


__all__ = [
    "BuildSettings",
    "CollisionPolicy",
    "MissingProjectNamePolicy",
    "NamingSettings",
    "PipelineConfig",
    "ReleaseSettings",
    "StagingMode",
]
