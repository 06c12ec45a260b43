"""Protocol definitions for releasebox adapters and external collaborators.

The build driver, artifact store and release publisher are contracts: the
pipeline only talks to them through these protocols, so any
implementation satisfying them can be swapped in.
"""

from .artifact_store_protocol import ArtifactStoreProtocol
from .build_driver_protocol import BuildDriverProtocol
from .file_adapter_protocol import FileAdapterProtocol
from .release_publisher_protocol import ReleasePublisherProtocol


__all__ = [
    "ArtifactStoreProtocol",
    "BuildDriverProtocol",
    "FileAdapterProtocol",
    "ReleasePublisherProtocol",
]
