"""Protocol definition for artifact stores."""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ArtifactStoreProtocol(Protocol):
    """Holds named artifacts, each as a directory of files."""

    def upload(self, name: str, files: list[Path]) -> None:
        """Store files under an artifact name.

        Raises:
            ArtifactStoreError: If the files cannot be stored
        """
        ...

    def list_artifacts(self) -> list[str]:
        """Names of all stored artifacts, sorted."""
        ...

    def download_all(self, destination: Path) -> Path:
        """Place every artifact as ``destination/<name>/...``.

        Returns:
            The destination root, ready for aggregation

        Raises:
            ArtifactStoreError: If any artifact cannot be transferred
        """
        ...
