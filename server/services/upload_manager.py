"""Upload and deduplication manager: the single entry point for file mutations."""

import asyncio
import sqlite3
import zlib
from pathlib import Path, PurePath
from typing import List, Optional, Tuple

from common.constants import PAGE_SIZE
from common.logging_config import get_logger
from server.content_store import ContentStore, is_valid_file_id
from server.exceptions import (
    FileExistsConflict,
    IdGenerationExhaustedError,
    MetadataWriteError,
    QueryFailedError,
    StorageDeleteError,
    StorageWriteError,
    StoredFileNotFoundError,
)
from server.id_generator import generate_unique_file_id
from server.repositories.file_repository import FileRepository
from server.types import FileRecord
from server.upload_sessions import UploadSessionRegistry

logger = get_logger(__name__)


def file_extension(filename: str) -> Optional[str]:
    """
    Extract the extension of the final path component, without the dot.

    Args:
        filename: Original file name as sent by the client

    Returns:
        Extension string, or None for names without one (and dotfiles)
    """
    name = PurePath(filename.replace("\\", "/")).name
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem or not extension:
        return None
    if not is_valid_file_id(extension):
        return None
    return extension


class UploadManager:
    """
    Orchestrates id generation, chunk sessions, the content store and the
    metadata index.

    Every operation runs under one lock so the duplicate check and the commit
    that follows it cannot interleave with another upload.
    """

    def __init__(
        self,
        store: ContentStore,
        size_limit: int,
        repository=FileRepository,
    ):
        """
        Initialize the manager.

        Args:
            store: Content store receiving committed files
            size_limit: Largest declared size for a chunked session
            repository: Metadata index (FileRepository interface)
        """
        self.store = store
        self.repository = repository
        self.sessions = UploadSessionRegistry(size_limit)
        self.lock = asyncio.Lock()

    async def list_files(self, page: int) -> Tuple[int, List[FileRecord]]:
        """
        Return one page of file records and the total record count.

        Args:
            page: 1-indexed page number; values below 1 are treated as 1

        Raises:
            QueryFailedError: If the metadata index query fails
        """
        page = max(page, 1)
        offset = PAGE_SIZE * (page - 1)

        async with self.lock:
            try:
                total = self.repository.count()
                files = self.repository.list(PAGE_SIZE, offset)
            except sqlite3.Error as e:
                logger.error(f"Listing page {page} failed: {e}", exc_info=True)
                raise QueryFailedError() from e

        return total, files

    async def commit_file(self, filename: str, data: bytes) -> str:
        """
        Store a complete file unless identical content is already stored.

        Returns:
            Id of the newly stored file

        Raises:
            FileExistsConflict: If a file with the same size and CRC-32 exists
            IdGenerationExhaustedError: If no unused id could be generated
            StorageWriteError: If writing to the content store fails
            MetadataWriteError: If inserting the file record fails
            QueryFailedError: If a metadata index lookup fails
        """
        async with self.lock:
            return self._commit_locked(filename, data)

    def _commit_locked(self, filename: str, data: bytes) -> str:
        file_id = generate_unique_file_id(file_extension(filename), id_exists=self.repository.exists)

        if self.store.exists(file_id):
            logger.error(f"Generated id {file_id} is already present in the content store")
            raise IdGenerationExhaustedError(f"Generated id {file_id} already exists on disk")

        size = len(data)
        fingerprint = zlib.crc32(data)

        try:
            existing = self.repository.find_by_content(size, fingerprint)
        except sqlite3.Error as e:
            logger.error(f"Duplicate lookup failed for {filename}: {e}", exc_info=True)
            raise QueryFailedError() from e

        if existing is not None:
            logger.warning(f"Upload of {filename} matches existing file {existing.id}")
            raise FileExistsConflict(existing.id)

        try:
            self.store.write(file_id, data)
        except OSError as e:
            logger.error(f"Failed to write {file_id} to content store: {e}", exc_info=True)
            raise StorageWriteError(f"Failed to store file: {e}") from e

        record = FileRecord(id=file_id, filename=filename, bytes=size, fingerprint=fingerprint)
        try:
            self.repository.insert(record)
        except sqlite3.Error as e:
            logger.error(f"Failed to insert record for {file_id}: {e}", exc_info=True)
            self._remove_orphan(file_id)
            raise MetadataWriteError(f"Failed to record file metadata: {e}") from e

        logger.info(f"Stored {filename} as {file_id} ({size} bytes, crc {fingerprint:08x})")
        return file_id

    def _remove_orphan(self, file_id: str) -> None:
        try:
            self.store.delete(file_id)
            logger.info(f"Removed orphaned content for {file_id}")
        except OSError as e:
            logger.error(f"Failed to remove orphaned content for {file_id}: {e}")

    async def delete_file(self, file_id: str) -> None:
        """
        Delete a stored file and then its record.

        Raises:
            StoredFileNotFoundError: If no content is stored under the id
            StorageDeleteError: If the content could not be removed (record kept)
            QueryFailedError: If the record could not be removed after the content was
        """
        async with self.lock:
            if not self.store.exists(file_id):
                raise StoredFileNotFoundError(file_id)

            try:
                self.store.delete(file_id)
            except OSError as e:
                logger.error(f"Failed to delete content for {file_id}: {e}", exc_info=True)
                raise StorageDeleteError(f"Failed to delete file: {e}") from e

            try:
                self.repository.delete_by_id(file_id)
            except sqlite3.Error as e:
                logger.error(f"Content for {file_id} deleted but record removal failed: {e}", exc_info=True)
                raise QueryFailedError() from e

        logger.info(f"Deleted file {file_id}")

    async def begin_chunked(self, filename: str, size: int) -> str:
        """
        Open a chunked upload session.

        Raises:
            FileTooLargeError: If size exceeds the chunked upload limit
            InvalidRequestError: If size is negative
        """
        async with self.lock:
            session_id = self.sessions.begin(filename, size)

        logger.info(f"Started chunked upload {session_id} for {filename} ({size} bytes)")
        return session_id

    async def write_chunk(self, session_id: str, data: bytes, offset: int) -> None:
        """
        Write one chunk into a session.

        Raises:
            InvalidUploadIdError: If the session does not exist
            ChunkOutOfBoundsError: If the chunk exceeds the declared size
        """
        async with self.lock:
            self.sessions.write_chunk(session_id, data, offset)

        logger.debug(f"Wrote {len(data)} bytes at offset {offset} to upload {session_id}")

    async def finish_chunked(self, session_id: str) -> str:
        """
        Close a session and commit its assembled content.

        The session is gone afterwards whatever the commit outcome.

        Raises:
            InvalidUploadIdError: If the session does not exist
            plus everything commit_file raises
        """
        async with self.lock:
            filename, data = self.sessions.finish(session_id)
            logger.info(f"Finishing chunked upload {session_id} for {filename}")
            return self._commit_locked(filename, data)

    async def discard_chunked(self, session_id: str) -> None:
        """Drop a session; unknown ids are ignored."""
        async with self.lock:
            dropped = self.sessions.discard(session_id)

        if dropped:
            logger.info(f"Discarded chunked upload {session_id}")

    async def expire_idle_sessions(self, max_idle_seconds: float) -> List[str]:
        """
        Drop sessions idle for longer than max_idle_seconds.

        Returns:
            Ids of the dropped sessions
        """
        async with self.lock:
            expired = self.sessions.expire_idle(max_idle_seconds)

        if expired:
            logger.info(f"Expired {len(expired)} idle chunked uploads: {', '.join(expired)}")
        return expired

    def open_file(self, file_id: str) -> Path:
        """
        Resolve a stored file id to its path on disk.

        Raises:
            StoredFileNotFoundError: If the id is invalid or nothing is stored under it
        """
        if not self.store.exists(file_id):
            raise StoredFileNotFoundError(file_id)
        return self.store.path_for(file_id)
