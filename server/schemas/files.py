"""Pydantic schemas for file management endpoints."""

from typing import List
from pydantic import BaseModel


class FileInfo(BaseModel):
    """Response model for one stored file."""
    id: str
    filename: str
    bytes: int


class ListFilesResponse(BaseModel):
    """Response model for paginated file listing."""
    files: List[FileInfo]
    total: int


class UploadResult(BaseModel):
    """Response model for whole-file and chunked uploads."""
    id: str
    existed: bool


class BeginChunksRequest(BaseModel):
    """Request model for opening a chunked upload."""
    filename: str


class BeginChunksResponse(BaseModel):
    """Response model for opening a chunked upload."""
    id: str


class EndChunksRequest(BaseModel):
    """Request model for finishing a chunked upload."""
    id: str
