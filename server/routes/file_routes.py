"""Public file download routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from server.service_locator import get_upload_manager
from server.services.upload_manager import UploadManager

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{file_id}")
async def get_file(
    file_id: str,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Serve a stored file by id. No token required.

    Raises:
        - 404: Nothing stored under file_id
    """
    path = manager.open_file(file_id)
    return FileResponse(path)
