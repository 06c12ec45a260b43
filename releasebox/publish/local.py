"""Dry-run publisher that writes the release into a local directory."""

import logging
from pathlib import Path

from releasebox.adapters import create_file_adapter
from releasebox.core.errors import FileSystemError, PublishError
from releasebox.models.results import PublishResult, ReleaseRecord
from releasebox.protocols import FileAdapterProtocol
from releasebox.publish.github import list_release_files


logger = logging.getLogger(__name__)

RELEASE_RECORD_FILE = "release.json"


class LocalReleasePublisher:
    """Copy assets to ``<release_dir>/<tag>/assets`` and record the release.

    The release record is written next to the assets as ``release.json``,
    so a run can be inspected without touching any hosting service.
    """

    def __init__(
        self, release_dir: Path, file_adapter: FileAdapterProtocol | None = None
    ) -> None:
        self.release_dir = release_dir
        self.file_adapter = file_adapter or create_file_adapter()

    def publish(self, output_dir: Path, record: ReleaseRecord) -> PublishResult:
        target_dir = self.release_dir / record.tag
        assets_dir = target_dir / "assets"
        try:
            files = list_release_files(output_dir)
            if self.file_adapter.exists(target_dir):
                self.file_adapter.remove_dir(target_dir)
            self.file_adapter.mkdir(assets_dir)
            for path in files:
                self.file_adapter.copy_file(path, assets_dir / path.name)
            self.file_adapter.write_json(
                target_dir / RELEASE_RECORD_FILE,
                {**record.to_dict_full(), "assets": [p.name for p in files]},
            )
        except (FileSystemError, OSError) as e:
            logger.error("Local publish of %s failed: %s", record.tag, e)
            raise PublishError(
                f"Failed to write release {record.tag} to {target_dir}: {e}",
                {"tag": record.tag, "release_dir": str(self.release_dir)},
            ) from e

        logger.info(
            "Wrote release %s with %d assets to %s", record.tag, len(files), target_dir
        )
        result = PublishResult(
            tag=record.tag,
            draft=record.draft,
            url=target_dir.resolve().as_uri(),
            assets=[p.name for p in files],
        )
        result.add_message(f"Dry run: release {record.tag} written to {target_dir}")
        return result


def create_local_release_publisher(release_dir: Path) -> LocalReleasePublisher:
    """Create a local release publisher instance."""
    return LocalReleasePublisher(release_dir)
