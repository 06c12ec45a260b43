"""Artifact stores."""

from releasebox.store.local_store import LocalArtifactStore, create_local_artifact_store


__all__ = ["LocalArtifactStore", "create_local_artifact_store"]
