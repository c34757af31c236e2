"""Entry point for the FileDrop server."""

import time
import uuid
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from common.logging_config import setup_logging
from server import config
from server.database import init_database
from server.exceptions import (
    FileDropException,
    FileExistsConflict,
    IdGenerationExhaustedError,
    FileTooLargeError,
    InvalidUploadIdError,
    ChunkOutOfBoundsError,
    StoredFileNotFoundError,
    InvalidRequestError,
    StorageWriteError,
    StorageDeleteError,
    MetadataWriteError,
    QueryFailedError,
    RequestTooLargeError,
)
from server.middleware import RequestBodyLimitMiddleware
from server.routes.file_routes import router as file_router
from server.routes.manage_routes import router as manage_router
from server.service_locator import get_upload_manager
from server.session_sweeper import SessionSweeper

logger = setup_logging('server')

app = FastAPI(
    title="FileDrop",
    description="File upload service with chunked uploads and content deduplication",
    version="1.0.0"
)

app.add_middleware(RequestBodyLimitMiddleware, path_prefix="/manage")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "Content-Range"],
)

session_sweeper = None


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database, the upload manager and the session sweeper.
    """
    global session_sweeper

    logger.info("FileDrop server starting up...")

    init_database()
    logger.info("Database initialized")

    manager = get_upload_manager()
    logger.info(f"Content store at {manager.store.base_dir}")

    if not config.MANAGEMENT_TOKEN:
        logger.warning("FILEDROP_TOKEN is not set; all management requests will be refused")

    if config.SESSION_TTL_SECONDS > 0:
        session_sweeper = SessionSweeper(
            manager,
            ttl_seconds=config.SESSION_TTL_SECONDS,
            interval_seconds=config.SESSION_SWEEP_INTERVAL_SECONDS,
        )
        await session_sweeper.start()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background tasks on application shutdown.
    """
    global session_sweeper

    logger.info("FileDrop server shutting down...")

    if session_sweeper:
        await session_sweeper.stop()
        session_sweeper = None


def _error_response(request: Request, exc: Exception, status_code: int, code: str, log_error: bool = False):
    request_id = getattr(request.state, 'request_id', 'unknown')
    message = f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    if log_error:
        logger.error(message, exc_info=True)
    else:
        logger.warning(message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code}
    )


@app.exception_handler(StoredFileNotFoundError)
async def file_not_found_handler(request: Request, exc: StoredFileNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND")


@app.exception_handler(InvalidUploadIdError)
async def invalid_upload_id_handler(request: Request, exc: InvalidUploadIdError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "INVALID_UPLOAD_ID")


@app.exception_handler(FileExistsConflict)
async def file_exists_handler(request: Request, exc: FileExistsConflict):
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "FILE_EXISTS")


@app.exception_handler(IdGenerationExhaustedError)
async def id_generation_handler(request: Request, exc: IdGenerationExhaustedError):
    return _error_response(request, exc, status.HTTP_503_SERVICE_UNAVAILABLE, "ID_GENERATION_EXHAUSTED", log_error=True)


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError):
    return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "FILE_TOO_LARGE")


@app.exception_handler(ChunkOutOfBoundsError)
async def chunk_out_of_bounds_handler(request: Request, exc: ChunkOutOfBoundsError):
    return _error_response(request, exc, status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE, "CHUNK_OUT_OF_BOUNDS")


@app.exception_handler(RequestTooLargeError)
async def request_too_large_handler(request: Request, exc: RequestTooLargeError):
    return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "REQUEST_TOO_LARGE")


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST")


@app.exception_handler(StorageWriteError)
async def storage_write_handler(request: Request, exc: StorageWriteError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_WRITE_FAILED", log_error=True)


@app.exception_handler(StorageDeleteError)
async def storage_delete_handler(request: Request, exc: StorageDeleteError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_DELETE_FAILED", log_error=True)


@app.exception_handler(MetadataWriteError)
async def metadata_write_handler(request: Request, exc: MetadataWriteError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "METADATA_WRITE_FAILED", log_error=True)


@app.exception_handler(QueryFailedError)
async def query_failed_handler(request: Request, exc: QueryFailedError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "QUERY_FAILED", log_error=True)


@app.exception_handler(FileDropException)
async def filedrop_exception_handler(request: Request, exc: FileDropException):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", log_error=True)


@app.exception_handler(403)
async def forbidden_handler(request: Request, exc):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Forbidden: missing or invalid token [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": getattr(exc, "detail", "Forbidden"), "code": "FORBIDDEN"}
    )


app.include_router(manage_router)
app.include_router(file_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "filedrop"}


if Path(config.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
    )


if __name__ == "__main__":
    main()
