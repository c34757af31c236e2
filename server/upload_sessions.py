"""Registry of in-progress chunked upload sessions."""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from common.logging_config import get_logger
from server.chunk_buffer import ChunkAssemblyBuffer
from server.exceptions import FileTooLargeError, InvalidRequestError, InvalidUploadIdError
from server.id_generator import generate_random_id

logger = get_logger(__name__)


@dataclass
class UploadSession:
    """
    One chunked upload held in memory until it is finished or dropped.
    """
    session_id: str
    buffer: ChunkAssemblyBuffer
    last_activity: float = field(default_factory=time.monotonic)

    @property
    def filename(self) -> str:
        return self.buffer.filename

    def touch(self) -> None:
        self.last_activity = time.monotonic()


class UploadSessionRegistry:
    """
    Maps session ids to their assembly buffers.

    Not safe for concurrent use on its own; the upload manager serializes
    every call.
    """

    def __init__(self, size_limit: int):
        """
        Initialize an empty registry.

        Args:
            size_limit: Largest declared size accepted by begin()
        """
        self.size_limit = size_limit
        self._sessions: Dict[str, UploadSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def begin(self, filename: str, declared_size: int) -> str:
        """
        Open a new session with a zero-filled buffer of the declared size.

        Args:
            filename: Original file name, kept until the session is finished
            declared_size: Total size of the assembled file in bytes

        Returns:
            New session id

        Raises:
            FileTooLargeError: If declared_size exceeds the size limit
            InvalidRequestError: If declared_size is negative
        """
        if declared_size < 0:
            raise InvalidRequestError(f"Invalid declared size: {declared_size}")
        if declared_size > self.size_limit:
            raise FileTooLargeError(declared_size, self.size_limit)

        session_id = generate_random_id()
        while session_id in self._sessions:
            session_id = generate_random_id()

        self._sessions[session_id] = UploadSession(
            session_id=session_id,
            buffer=ChunkAssemblyBuffer(declared_size, filename),
        )
        return session_id

    def write_chunk(self, session_id: str, data: bytes, offset: int) -> None:
        """
        Write a chunk into a session's buffer.

        Raises:
            InvalidUploadIdError: If the session does not exist
            ChunkOutOfBoundsError: If the chunk does not fit the declared size
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise InvalidUploadIdError(session_id)

        session.buffer.write_chunk(data, offset)
        session.touch()

    def finish(self, session_id: str) -> Tuple[str, bytes]:
        """
        Remove a session and hand its content to the caller.

        Returns:
            Tuple of (filename, assembled bytes)

        Raises:
            InvalidUploadIdError: If the session does not exist
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise InvalidUploadIdError(session_id)

        covered = session.buffer.covered_bytes
        if covered < session.buffer.size:
            logger.warning(
                f"Finishing session {session_id} with {covered} of "
                f"{session.buffer.size} bytes covered; unwritten ranges stay zero"
            )

        return session.filename, session.buffer.take()

    def discard(self, session_id: str) -> bool:
        """
        Drop a session if it exists.

        Returns:
            True if a session was dropped, False if none existed
        """
        return self._sessions.pop(session_id, None) is not None

    def expire_idle(self, max_idle_seconds: float, now: Optional[float] = None) -> List[str]:
        """
        Drop every session idle for longer than max_idle_seconds.

        Args:
            max_idle_seconds: Idle threshold in seconds
            now: Monotonic timestamp to compare against (defaults to now)

        Returns:
            Ids of dropped sessions
        """
        if now is None:
            now = time.monotonic()

        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_activity > max_idle_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]

        return expired
