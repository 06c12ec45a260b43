"""Release publishers."""

from releasebox.publish.github import (
    GitHubReleasePublisher,
    create_github_release_publisher,
    list_release_files,
)
from releasebox.publish.local import LocalReleasePublisher, create_local_release_publisher


__all__ = [
    "GitHubReleasePublisher",
    "LocalReleasePublisher",
    "create_github_release_publisher",
    "create_local_release_publisher",
    "list_release_files",
]
