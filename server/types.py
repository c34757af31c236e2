"""Server-specific data type definitions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata for one stored file.

    ``bytes`` and ``fingerprint`` (CRC-32 of the content) together form the
    duplicate-detection key.
    """
    id: str
    filename: str
    bytes: int
    fingerprint: int
