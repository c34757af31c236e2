"""Token-protected file management routes."""

from fastapi import APIRouter, Depends, Query, Request
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException

from common.constants import CHUNK_FIELD_NAME, UPLOAD_FIELD_NAME
from common.logging_config import get_logger
from server.auth import require_token
from server.exceptions import FileExistsConflict, InvalidRequestError
from server.schemas.common import ErrorResponse, StatusResponse
from server.schemas.files import (
    BeginChunksRequest,
    BeginChunksResponse,
    EndChunksRequest,
    FileInfo,
    ListFilesResponse,
    UploadResult,
)
from server.service_locator import get_upload_manager
from server.services.upload_manager import UploadManager

logger = get_logger(__name__)

router = APIRouter(
    prefix="/manage",
    tags=["Manage"],
    dependencies=[Depends(require_token)],
    responses={403: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def parse_content_range(value: str | None) -> int:
    """
    Parse the bare integer carried in the Content-Range header.

    Args:
        value: Header value, or None when absent

    Returns:
        Parsed non-negative integer; 0 if the header is missing or malformed
    """
    if value is None:
        return 0
    value = value.strip()
    if not value.isdigit():
        return 0
    return int(value)


async def read_multipart_field(request: Request, field_name: str) -> tuple[str | None, bytes]:
    """
    Read a single uploaded file field from a multipart body.

    Args:
        request: Incoming request
        field_name: Expected form field name

    Returns:
        Tuple of (client file name, content)

    Raises:
        InvalidRequestError: If the body is not multipart or the field is missing
    """
    try:
        form = await request.form()
    except MultiPartException as e:
        raise InvalidRequestError(f"Bad Request (invalid multipart): {e}") from e

    upload = form.get(field_name)
    if not isinstance(upload, UploadFile):
        raise InvalidRequestError(f"Bad Request (invalid multipart): missing '{field_name}' field")

    try:
        data = await upload.read()
    finally:
        await upload.close()

    return upload.filename, data


@router.get("/files", response_model=ListFilesResponse)
async def list_files(
    page: int = Query(1, description="1-indexed page number"),
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    List stored files, ten per page.

    Returns:
        - files: Records on the requested page
        - total: Number of stored files across all pages
    """
    total, files = await manager.list_files(page)

    return ListFilesResponse(
        files=[FileInfo(id=f.id, filename=f.filename, bytes=f.bytes) for f in files],
        total=total,
    )


@router.post("/upload/file", response_model=UploadResult)
async def upload_file(
    request: Request,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Upload a whole file (multipart field 'file').

    Returns:
        - id: Id of the stored file
        - existed: True if identical content was already stored under id

    Raises:
        - 400: Missing or misnamed multipart field
        - 403: Missing or invalid token
        - 413: Request body too large
        - 500: Storage or metadata failure
    """
    filename, data = await read_multipart_field(request, UPLOAD_FIELD_NAME)
    if not filename:
        raise InvalidRequestError("Bad Request (invalid multipart): missing file name")

    try:
        file_id = await manager.commit_file(filename, data)
    except FileExistsConflict as e:
        return UploadResult(id=e.existing_id, existed=True)

    return UploadResult(id=file_id, existed=False)


@router.post("/upload/begin_chunks", response_model=BeginChunksResponse)
async def begin_chunks(
    body: BeginChunksRequest,
    request: Request,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Open a chunked upload. The total size is sent in the Content-Range header.

    Raises:
        - 413: Declared size above the chunked upload limit
    """
    size = parse_content_range(request.headers.get("content-range"))
    session_id = await manager.begin_chunked(body.filename, size)
    return BeginChunksResponse(id=session_id)


@router.post("/upload/chunk/{session_id}", response_model=StatusResponse)
async def upload_chunk(
    session_id: str,
    request: Request,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Write one chunk (multipart field 'chunk') at the offset given in the
    Content-Range header.

    Raises:
        - 400: Missing or misnamed multipart field
        - 404: Unknown upload id
        - 416: Chunk outside the declared size
    """
    offset = parse_content_range(request.headers.get("content-range"))
    _, data = await read_multipart_field(request, CHUNK_FIELD_NAME)

    await manager.write_chunk(session_id, data, offset)
    return StatusResponse()


@router.post("/upload/end_chunks", response_model=UploadResult)
async def end_chunks(
    body: EndChunksRequest,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Finish a chunked upload and store the assembled file.

    Returns:
        Same payload as /manage/upload/file
    """
    try:
        file_id = await manager.finish_chunked(body.id)
    except FileExistsConflict as e:
        return UploadResult(id=e.existing_id, existed=True)

    return UploadResult(id=file_id, existed=False)


@router.post("/upload/discard/{session_id}", response_model=StatusResponse)
async def discard_upload(
    session_id: str,
    manager: UploadManager = Depends(get_upload_manager)
):
    """Drop a chunked upload. Unknown ids are accepted silently."""
    await manager.discard_chunked(session_id)
    return StatusResponse()


@router.delete("/files/{file_id}", response_model=StatusResponse)
async def delete_file(
    file_id: str,
    manager: UploadManager = Depends(get_upload_manager)
):
    """
    Delete a stored file and its record.

    Raises:
        - 404: Nothing stored under file_id
        - 500: Storage or metadata failure
    """
    await manager.delete_file(file_id)
    return StatusResponse()
