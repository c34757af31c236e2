"""Project-wide constants shared by the server and the CLI client."""

PAGE_SIZE: int = 10

RANDOM_ID_BYTES: int = 8
MAX_ID_ATTEMPTS: int = 5

CHUNKED_UPLOAD_SIZE_LIMIT: int = 1024 * 1024 * 1024  # 1 GiB per chunked session
MAX_REQUEST_BODY_BYTES: int = 90 * 1024 * 1024  # 90 MiB per management request

CHUNKED_UPLOAD_THRESHOLD: int = 80 * 1024 * 1024
CLIENT_CHUNK_SIZE: int = 50 * 1024 * 1024

UPLOAD_FIELD_NAME: str = "file"
CHUNK_FIELD_NAME: str = "chunk"
