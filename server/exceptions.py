"""Custom exception classes for the FileDrop server."""


class FileDropException(Exception):
    """
    Base exception class for all upload manager errors.
    """
    pass


class FileExistsConflict(FileDropException):
    """
    Raised when uploaded content matches a file that is already stored.

    Not a failure from the client's point of view: the upload routes answer
    with the existing id instead of an error.
    """

    def __init__(self, existing_id: str):
        super().__init__(f"File already exists: {existing_id}")
        self.existing_id = existing_id


class IdGenerationExhaustedError(FileDropException):
    """
    Raised when no unused file id could be generated.
    """

    def __init__(self, message: str = "Unable to generate a unique id"):
        super().__init__(message)


class FileTooLargeError(FileDropException):
    """
    Raised when a chunked upload declares a size above the session limit.
    """

    def __init__(self, declared_size: int, limit: int):
        super().__init__(f"File is too large: {declared_size} bytes (max {limit} bytes)")
        self.declared_size = declared_size
        self.limit = limit


class InvalidUploadIdError(FileDropException):
    """
    Raised when a chunk session id does not refer to a live session.
    """

    def __init__(self, session_id: str):
        super().__init__(f"Invalid upload id: {session_id}")
        self.session_id = session_id


class ChunkOutOfBoundsError(FileDropException):
    """
    Raised when a chunk would be written outside the declared upload size.
    """

    def __init__(self, offset: int, length: int, size: int):
        super().__init__(
            f"Chunk out of bounds: offset {offset} + length {length} exceeds size {size}"
        )
        self.offset = offset
        self.length = length
        self.size = size


class RequestTooLargeError(FileDropException):
    """
    Raised while reading a management request body that grows past the
    per-request limit.
    """

    def __init__(self, limit: int):
        super().__init__(f"Request body too large (max {limit} bytes)")
        self.limit = limit


class StoredFileNotFoundError(FileDropException):
    """
    Raised when a requested file has no backing content on disk.
    """

    def __init__(self, file_id: str):
        super().__init__(f"File not found: {file_id}")
        self.file_id = file_id


class InvalidRequestError(FileDropException):
    """
    Raised when a request is malformed (bad multipart field, bad size header).
    """
    pass


class StorageWriteError(FileDropException):
    """
    Raised when file content could not be written to the content store.
    """
    pass


class StorageDeleteError(FileDropException):
    """
    Raised when file content could not be removed from the content store.
    """
    pass


class MetadataWriteError(FileDropException):
    """
    Raised when a file record could not be inserted into the metadata index.
    """
    pass


class QueryFailedError(FileDropException):
    """
    Raised when a metadata index query fails.
    """

    def __init__(self, message: str = "Database query failed"):
        super().__init__(message)
