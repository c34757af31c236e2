"""File repository for metadata index operations."""

import sqlite3
from typing import List, Optional

from common.logging_config import get_logger
from server.database import get_db_connection
from server.types import FileRecord

logger = get_logger(__name__)


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        id=row["id"],
        filename=row["filename"],
        bytes=row["bytes"],
        fingerprint=row["crc"],
    )


class FileRepository:
    """
    Metadata index backed by the ``files`` table.

    Every method raises ``sqlite3.Error`` on failure; callers decide how to
    surface it.
    """

    @staticmethod
    def count() -> int:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM files")
            return cursor.fetchone()[0]

    @staticmethod
    def list(limit: int, offset: int) -> List[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, filename, bytes, crc
                FROM files
                ORDER BY rowid
                LIMIT ? OFFSET ?
                """,
                (limit, offset)
            )
            return [_row_to_record(row) for row in cursor.fetchall()]

    @staticmethod
    def find_by_content(size: int, fingerprint: int) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, filename, bytes, crc FROM files WHERE bytes = ? AND crc = ? ORDER BY rowid LIMIT 1",
                (size, fingerprint)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_record(row)

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, filename, bytes, crc FROM files WHERE id = ?",
                (file_id,)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_record(row)

    @staticmethod
    def exists(file_id: str) -> bool:
        """Check whether a record is stored under file_id (used for id collision checks)."""
        return FileRepository.get_by_id(file_id) is not None

    @staticmethod
    def insert(record: FileRecord) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO files (id, filename, bytes, crc)
                VALUES (?, ?, ?, ?)
                """,
                (record.id, record.filename, record.bytes, record.fingerprint)
            )
            conn.commit()
            logger.debug(f"Inserted file record {record.id}")

    @staticmethod
    def delete_by_id(file_id: str) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM files WHERE id = ?", (file_id,))
            conn.commit()
            logger.debug(f"Deleted file record {file_id}")
