"""File adapter for abstracting file system operations."""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

from releasebox.core.errors import FileSystemError, create_file_error


logger = logging.getLogger(__name__)


class FileSystemAdapter:
    """File system adapter implementation.

    Every failure is re-raised as :class:`FileSystemError` carrying the
    path and operation, so callers only handle one exception family.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a file."""
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory."""
        try:
            logger.debug("Creating directory: %s", path)
            path.mkdir(parents=parents, exist_ok=exist_ok)
        except PermissionError as e:
            error = create_file_error(
                path, "mkdir", e, {"parents": parents, "exist_ok": exist_ok}
            )
            logger.error("Permission denied creating directory: %s", path)
            raise error from e
        except Exception as e:
            error = create_file_error(
                path, "mkdir", e, {"parents": parents, "exist_ok": exist_ok}
            )
            logger.error("Error creating directory %s: %s", path, e)
            raise error from e

    def list_directory(self, path: Path) -> list[Path]:
        """List all items in a directory."""
        try:
            logger.debug("Listing directory contents: %s", path)
            if not self.is_dir(path):
                error = create_file_error(
                    path, "list_directory", NotADirectoryError("Not a directory"), {}
                )
                logger.error("Path is not a directory: %s", path)
                raise error

            items = list(path.iterdir())
            logger.debug("Found %d items in %s", len(items), path)
            return items
        except FileSystemError:
            raise
        except Exception as e:
            error = create_file_error(path, "list_directory", e, {})
            logger.error("Error listing directory %s: %s", path, e)
            raise error from e

    def walk_files(self, path: Path) -> list[Path]:
        """List every regular file below a directory, recursively."""
        files: list[Path] = []
        for item in self.list_directory(path):
            if item.is_dir():
                files.extend(self.walk_files(item))
            elif item.is_file():
                files.append(item)
        return files

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy the byte content of a file; metadata is not preserved."""
        try:
            self.mkdir(dst.parent)

            logger.debug("Copying file: %s -> %s", src, dst)
            shutil.copyfile(src, dst)
        except FileNotFoundError as e:
            error = create_file_error(
                src, "copy_file", e, {"source": str(src), "destination": str(dst)}
            )
            logger.error("Source file not found: %s", src)
            raise error from e
        except PermissionError as e:
            error = create_file_error(
                src, "copy_file", e, {"source": str(src), "destination": str(dst)}
            )
            logger.error("Permission denied copying file: %s -> %s", src, dst)
            raise error from e
        except FileSystemError:
            # Let FileSystemError from mkdir pass through
            raise
        except Exception as e:
            error = create_file_error(
                src, "copy_file", e, {"source": str(src), "destination": str(dst)}
            )
            logger.error("Error copying file %s to %s: %s", src, dst, e)
            raise error from e

    def move_file(self, src: Path, dst: Path) -> None:
        """Move a file, replacing the destination if it exists."""
        try:
            self.mkdir(dst.parent)

            logger.debug("Moving file: %s -> %s", src, dst)
            try:
                os.replace(src, dst)
            except OSError:
                # Cross-device move: copy the content then drop the source
                shutil.copyfile(src, dst)
                src.unlink()
        except FileSystemError:
            raise
        except Exception as e:
            error = create_file_error(
                src, "move_file", e, {"source": str(src), "destination": str(dst)}
            )
            logger.error("Error moving file %s to %s: %s", src, dst, e)
            raise error from e

    def remove_file(self, path: Path) -> None:
        """Remove a file."""
        try:
            logger.debug("Removing file: %s", path)
            path.unlink(missing_ok=True)
        except Exception as e:
            error = create_file_error(path, "remove_file", e, {})
            logger.error("Error removing file %s: %s", path, e)
            raise error from e

    def remove_dir(self, path: Path, recursive: bool = True) -> None:
        """Remove a directory."""
        try:
            logger.debug("Removing directory: %s (recursive=%s)", path, recursive)
            if recursive:
                shutil.rmtree(path)
            else:
                path.rmdir()
        except FileNotFoundError:
            return
        except Exception as e:
            error = create_file_error(path, "remove_dir", e, {"recursive": recursive})
            logger.error("Error removing directory %s: %s", path, e)
            raise error from e

    def write_json(
        self,
        path: Path,
        data: dict[str, Any],
        encoding: str = "utf-8",
        indent: int = 2,
    ) -> None:
        """Write data as JSON to a file."""
        try:
            self.mkdir(path.parent)

            logger.debug("Writing JSON file: %s", path)
            content = json.dumps(data, indent=indent, ensure_ascii=False)
            path.write_text(content + "\n", encoding=encoding)
        except TypeError as e:
            error = create_file_error(
                path,
                "write_json",
                e,
                {"encoding": encoding, "data_type": type(data).__name__},
            )
            logger.error("Cannot serialize data to JSON for file %s: %s", path, e)
            raise error from e
        except FileSystemError:
            raise
        except Exception as e:
            error = create_file_error(path, "write_json", e, {"encoding": encoding})
            logger.error("Error writing JSON file %s: %s", path, e)
            raise error from e


def create_file_adapter() -> FileSystemAdapter:
    """Create a file adapter with default implementation."""
    return FileSystemAdapter()
