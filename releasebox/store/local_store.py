"""Artifact store backed by a local directory."""

import logging
from pathlib import Path

from releasebox.adapters import create_file_adapter
from releasebox.core.errors import ArtifactStoreError, FileSystemError
from releasebox.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)


class LocalArtifactStore:
    """Keep each artifact as ``<root>/<name>/<file base name>``.

    Uploading the same name twice merges into one directory; a file with an
    already stored base name replaces the earlier copy.
    """

    def __init__(
        self, root: Path, file_adapter: FileAdapterProtocol | None = None
    ) -> None:
        self.root = root
        self.file_adapter = file_adapter or create_file_adapter()

    def _artifact_dir(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ArtifactStoreError(
                f"Invalid artifact name: {name!r}", {"artifact": name}
            )
        return self.root / name

    def upload(self, name: str, files: list[Path]) -> None:
        """Copy files into the artifact's directory."""
        artifact_dir = self._artifact_dir(name)
        try:
            self.file_adapter.mkdir(artifact_dir)
            for path in files:
                destination = artifact_dir / path.name
                if self.file_adapter.exists(destination):
                    logger.warning(
                        "Artifact %s already holds %s, replacing it", name, path.name
                    )
                self.file_adapter.copy_file(path, destination)
        except FileSystemError as e:
            logger.error("Upload of artifact %s failed: %s", name, e)
            raise ArtifactStoreError(
                f"Failed to upload artifact '{name}': {e}",
                {"artifact": name, "files": [str(p) for p in files]},
            ) from e
        logger.info("Uploaded artifact %s (%d files)", name, len(files))

    def list_artifacts(self) -> list[str]:
        if not self.file_adapter.is_dir(self.root):
            return []
        try:
            entries = self.file_adapter.list_directory(self.root)
        except FileSystemError as e:
            raise ArtifactStoreError(
                f"Cannot list artifact store {self.root}: {e}", {"root": str(self.root)}
            ) from e
        return sorted(p.name for p in entries if self.file_adapter.is_dir(p))

    def download_all(self, destination: Path) -> Path:
        """Copy every artifact directory below ``destination``."""
        try:
            self.file_adapter.mkdir(destination)
            for name in self.list_artifacts():
                source_dir = self.root / name
                target_dir = destination / name
                self.file_adapter.mkdir(target_dir)
                for path in self.file_adapter.walk_files(source_dir):
                    relative = path.relative_to(source_dir)
                    self.file_adapter.copy_file(path, target_dir / relative)
        except FileSystemError as e:
            logger.error("Download of artifacts to %s failed: %s", destination, e)
            raise ArtifactStoreError(
                f"Failed to download artifacts to {destination}: {e}",
                {"root": str(self.root), "destination": str(destination)},
            ) from e
        logger.info("Downloaded artifacts from %s to %s", self.root, destination)
        return destination


def create_local_artifact_store(
    root: Path, file_adapter: FileAdapterProtocol | None = None
) -> LocalArtifactStore:
    """Create a local artifact store instance."""
    return LocalArtifactStore(root, file_adapter=file_adapter)
