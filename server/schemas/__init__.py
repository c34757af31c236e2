"""Pydantic schemas for API requests and responses."""

from server.schemas.files import (
    FileInfo,
    ListFilesResponse,
    UploadResult,
    BeginChunksRequest,
    BeginChunksResponse,
    EndChunksRequest
)
from server.schemas.common import ErrorResponse, StatusResponse

__all__ = [
    "FileInfo",
    "ListFilesResponse",
    "UploadResult",
    "BeginChunksRequest",
    "BeginChunksResponse",
    "EndChunksRequest",
    "ErrorResponse",
    "StatusResponse"
]
