"""Service layer for business logic."""

from server.services.upload_manager import UploadManager

__all__ = [
    "UploadManager",
]
