"""Protocol definition for build drivers."""

from typing import Protocol, runtime_checkable

from releasebox.models.target import BuiltArtifact, Target


@runtime_checkable
class BuildDriverProtocol(Protocol):
    """Builds one binary for one target."""

    def build(self, target: Target) -> BuiltArtifact:
        """Build the project for a target.

        Implementations must produce exactly one artifact or fail; there is
        no partial output and no retry.

        Args:
            target: Target triple and architecture label to build for

        Returns:
            BuiltArtifact describing the produced binary

        Raises:
            BuildError: If toolchain setup or compilation fails
        """
        ...
