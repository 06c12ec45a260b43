"""releasebox - build, rename and publish multi-target release binaries."""

from importlib.metadata import PackageNotFoundError, version

from .models.results import PipelineResult, PublishResult, StagingResult
from .models.target import BuiltArtifact, Target


try:
    __version__ = version(__package__ or "releasebox")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BuiltArtifact",
    "PipelineResult",
    "PublishResult",
    "StagingResult",
    "Target",
    "__version__",
]
