"""Protocol definition for release publishers."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from releasebox.models.results import PublishResult, ReleaseRecord


@runtime_checkable
class ReleasePublisherProtocol(Protocol):
    """Creates a release and attaches every file of a flat directory."""

    def publish(self, output_dir: Path, record: ReleaseRecord) -> PublishResult:
        """Create the release described by ``record``.

        Files are attached under their current names, without validation
        or deduplication.

        Raises:
            PublishError: If the release or any asset cannot be created
        """
        ...
