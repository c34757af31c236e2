"""Service locator for the process-wide upload manager."""

from typing import Optional

from server.config import CHUNKED_SIZE_LIMIT, STORAGE_PATH
from server.content_store import ContentStore
from server.services.upload_manager import UploadManager

_upload_manager: Optional[UploadManager] = None


def set_upload_manager(manager: Optional[UploadManager]):
    """Set global upload manager instance"""
    global _upload_manager
    _upload_manager = manager


def get_upload_manager() -> UploadManager:
    """Get global upload manager instance, creating it on first use"""
    global _upload_manager
    if _upload_manager is None:
        _upload_manager = UploadManager(ContentStore(STORAGE_PATH), CHUNKED_SIZE_LIMIT)
    return _upload_manager
