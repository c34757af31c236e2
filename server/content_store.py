"""Manages whole-file content on disk: write, delete and existence checks."""

from pathlib import Path
from typing import Union

from common.logging_config import get_logger

logger = get_logger(__name__)


def is_valid_file_id(file_id: str) -> bool:
    """
    Check that a file id is safe to use as a single path component.

    Args:
        file_id: Identifier to check

    Returns:
        True if the id contains no separators and is not '.' or '..'
    """
    if not file_id or file_id in (".", ".."):
        return False
    return "/" not in file_id and "\\" not in file_id and "\x00" not in file_id


class ContentStore:
    """
    Filesystem-backed content store. A file id doubles as its file name
    inside the base directory.
    """

    def __init__(self, base_dir: Union[str, Path]):
        """
        Initialize the store and create its base directory.

        Args:
            base_dir: Directory holding stored files
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, file_id: str) -> Path:
        """
        Get file path for a stored file.

        Args:
            file_id: Identifier of the file

        Returns:
            Path object inside the base directory

        Raises:
            ValueError: If the id is not a valid single path component
        """
        if not is_valid_file_id(file_id):
            raise ValueError(f"Invalid file id: {file_id!r}")
        return self.base_dir / file_id

    def exists(self, file_id: str) -> bool:
        """
        Check if a file exists on disk. Invalid ids never exist.

        Args:
            file_id: Identifier of the file

        Returns:
            True if a regular file is stored under the id
        """
        if not is_valid_file_id(file_id):
            return False
        return self.path_for(file_id).is_file()

    def write(self, file_id: str, data: bytes) -> None:
        """
        Write file content to disk.

        Args:
            file_id: Identifier of the file
            data: Complete file content

        Raises:
            OSError: If write operation fails
        """
        filepath = self.path_for(file_id)
        filepath.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {filepath}")

    def delete(self, file_id: str) -> None:
        """
        Delete file content from disk.

        Args:
            file_id: Identifier of the file

        Raises:
            OSError: If the file is missing or cannot be removed
        """
        filepath = self.path_for(file_id)
        filepath.unlink()
        logger.debug(f"Removed {filepath}")
