"""Target and built artifact models."""

from pathlib import Path
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from releasebox.models.base import ReleaseboxBaseModel


# Triple components mapped to the platform identifier used in artifact names
PLATFORM_ALIASES: dict[str, str] = {
    "windows": "windows",
    "darwin": "macos",
    "linux": "linux",
    "freebsd": "freebsd",
    "netbsd": "netbsd",
    "android": "android",
}


def platform_from_triple(triple: str) -> str | None:
    """Derive the platform identifier from a toolchain target triple.

    ``x86_64-pc-windows-msvc`` gives ``windows``, ``aarch64-apple-darwin``
    gives ``macos``. Returns None when no component is recognized.
    """
    for part in triple.lower().split("-"):
        if part in PLATFORM_ALIASES:
            return PLATFORM_ALIASES[part]
    return None


def _check_name_component(value: str, field_name: str) -> str:
    if not value:
        raise ValueError(f"{field_name} must not be empty")
    if "/" in value or "\\" in value:
        raise ValueError(f"{field_name} must not contain path separators: {value!r}")
    return value


class Target(ReleaseboxBaseModel):
    """A platform/architecture pair, the unit of build parallelism.

    ``name`` is the toolchain target triple and ``arch`` the human-readable
    architecture label. ``platform`` is derived from the triple when it is
    not given explicitly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Toolchain target triple")
    arch: str = Field(description="Architecture label used in public names")
    platform: str = Field(description="Platform identifier used in public names")

    @model_validator(mode="before")
    @classmethod
    def derive_platform(cls, data: Any) -> Any:
        """Fill in ``platform`` from the triple when it is missing."""
        if isinstance(data, dict) and data.get("name") and not data.get("platform"):
            triple = str(data["name"])
            platform = platform_from_triple(triple)
            if platform is None:
                raise ValueError(
                    f"Cannot derive platform from target triple {triple!r}; "
                    "set 'platform' explicitly"
                )
            data = {**data, "platform": platform}
        return data

    @field_validator("name", "arch", "platform")
    @classmethod
    def validate_component(cls, v: str, info: Any) -> str:
        return _check_name_component(v, info.field_name)

    @property
    def qualifier(self) -> str:
        """Platform and architecture label, e.g. ``windows-x64``."""
        return f"{self.platform}-{self.arch}"

    def artifact_identifier(self, project_name: str) -> str:
        """Artifact name for this target: ``<project>-<platform>-<arch>``."""
        return f"{project_name}-{self.qualifier}"

    @property
    def is_windows(self) -> bool:
        return self.platform == "windows"

    def __str__(self) -> str:
        return f"{self.name} ({self.arch})"


class BuiltArtifact(ReleaseboxBaseModel):
    """Structured record of one target's build output.

    Carries the target alongside the binary so later stages never need to
    recover triple or label from a file name.
    """

    target: Target
    artifact_name: str
    path: Path
    role: str = "binary"


__all__ = ["BuiltArtifact", "PLATFORM_ALIASES", "Target", "platform_from_triple"]
