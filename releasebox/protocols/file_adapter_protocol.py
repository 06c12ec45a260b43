"""Protocol definition for file system operations."""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FileAdapterProtocol(Protocol):
    """Protocol for file system operations."""

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a file."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory.

        Raises:
            FileSystemError: If directory cannot be created
        """
        ...

    def list_directory(self, path: Path) -> list[Path]:
        """List all items in a directory.

        Raises:
            FileSystemError: If path is not a readable directory
        """
        ...

    def walk_files(self, path: Path) -> list[Path]:
        """List every regular file below a directory, recursively.

        Raises:
            FileSystemError: If path or one of its subdirectories cannot be read
        """
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy the byte content of a file; metadata is not preserved.

        Raises:
            FileSystemError: If file cannot be copied
        """
        ...

    def move_file(self, src: Path, dst: Path) -> None:
        """Move a file, replacing the destination if it exists.

        Raises:
            FileSystemError: If file cannot be moved
        """
        ...

    def remove_file(self, path: Path) -> None:
        """Remove a file.

        Raises:
            FileSystemError: If file cannot be removed
        """
        ...

    def remove_dir(self, path: Path, recursive: bool = True) -> None:
        """Remove a directory.

        Raises:
            FileSystemError: If directory cannot be removed
        """
        ...

    def write_json(
        self, path: Path, data: dict[str, Any], encoding: str = "utf-8", indent: int = 2
    ) -> None:
        """Write data as JSON to a file.

        Raises:
            FileSystemError: If file cannot be written or data cannot be serialized
        """
        ...
