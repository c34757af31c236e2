"""HTTP client for the FileDrop management API."""

import os
import sys
import time
import uuid
from typing import Optional

import httpx

from common.constants import (
    CHUNK_FIELD_NAME,
    PAGE_SIZE,
    UPLOAD_FIELD_NAME,
)
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RESET
from cli.utils import chunk_ranges, format_file_size, page_count

logger = get_logger(__name__)


class UploadError(Exception):
    """Raised when an upload step is rejected by the server."""
    pass


class FileDropClient:
    """HTTP client for the management API with retry logic and error handling."""

    def __init__(self, config: Config, chunk_size: Optional[int] = None,
                 chunked_threshold: Optional[int] = None):
        """
        Initialize client.

        Args:
            config: Configuration instance
            chunk_size: Chunk length for chunked uploads (config value if None)
            chunked_threshold: Files larger than this are uploaded in chunks (config value if None)
        """
        self.config = config
        upload_config = config.get_upload_config()
        self.chunk_size = chunk_size or upload_config['chunk_size']
        self.chunked_threshold = (
            chunked_threshold if chunked_threshold is not None else upload_config['chunked_threshold']
        )
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized FileDropClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, size: int) -> float:
        """
        Calculate timeout for an upload request based on its size.

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        return 30.0 + (size / (1024 * 1024)) * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs['headers'] = {**kwargs.get('headers', {}), 'X-Request-ID': self.request_id}

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        if last_exception is not None:
            raise ConnectionError("Cannot connect to FileDrop server. Is it running?")
        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'FORBIDDEN': 'Invalid or missing token. Please run: token <value>',
            'FILE_NOT_FOUND': 'File not found on server.',
            'INVALID_UPLOAD_ID': 'Upload session not found (finished, discarded or expired).',
            'FILE_TOO_LARGE': 'File exceeds the chunked upload size limit.',
            'REQUEST_TOO_LARGE': 'Request body exceeds the server limit.',
            'CHUNK_OUT_OF_BOUNDS': 'Chunk does not fit the declared file size.',
            'INVALID_REQUEST': 'Malformed request.',
            'ID_GENERATION_EXHAUSTED': 'Server could not allocate a file id. Please try again.',
            'STORAGE_WRITE_FAILED': 'Server failed to store the file.',
            'STORAGE_DELETE_FAILED': 'Server failed to delete the file.',
            'METADATA_WRITE_FAILED': 'Server failed to record the file.',
            'QUERY_FAILED': 'Server database query failed.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            403: 'Access forbidden',
            404: 'Not found',
            413: 'File too large',
            416: 'Chunk out of bounds',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def _get_auth_header(self) -> dict:
        """
        Get Authorization header with the management token.

        Raises:
            ValueError: If no token is configured
        """
        token = self.config.get_token()
        if not token:
            raise ValueError("No token set. Please run: token <value>")
        return {'Authorization': f'Bearer {token}'}

    def file_url(self, file_id: str) -> str:
        """Public download URL of a stored file."""
        return f"{self.config.get_base_url()}/files/{file_id}"

    def set_token(self, token: str) -> str:
        self.config.set_token(token)
        logger.info("Management token updated")
        return "Token saved to config."

    def upload_files(self, file_paths: list[str]) -> str:
        """
        Upload files, choosing whole-file or chunked upload by size.

        Args:
            file_paths: Local file paths

        Returns:
            Formatted result message with upload status for each file
        """
        results = []

        try:
            headers = self._get_auth_header()
        except ValueError as e:
            return f"Error: {e}"

        for file_path in file_paths:
            path = os.path.expanduser(file_path)

            if not os.path.exists(path):
                results.append(f"Error: File not found: {file_path}")
                continue

            if not os.path.isfile(path):
                results.append(f"Error: Not a file: {file_path}")
                continue

            filename = os.path.basename(path)
            file_size = os.path.getsize(path)

            try:
                if file_size > self.chunked_threshold:
                    result = self._upload_chunked(path, filename, file_size, headers)
                else:
                    result = self._upload_whole(path, filename, file_size, headers)
            except UploadError as e:
                results.append(f"Error uploading {file_path}: {e}")
                continue
            except ConnectionError as e:
                results.append(f"Error uploading {file_path}: {e}")
                continue
            except httpx.HTTPError as e:
                logger.error(f"Upload of {file_path} failed: {e}", exc_info=True)
                results.append(f"Error uploading {file_path}: {e}")
                continue

            url = self.file_url(result['id'])
            if result['existed']:
                results.append(f"Already stored: {filename} -> {url}")
            else:
                results.append(f"Uploaded: {filename} ({format_file_size(file_size)}) -> {url}")

        return '\n'.join(results) if results else "No files uploaded."

    def _upload_whole(self, path: str, filename: str, file_size: int, headers: dict) -> dict:
        """
        Upload a file in a single multipart request.

        Returns:
            Response payload with 'id' and 'existed'

        Raises:
            UploadError: If the server rejects the upload
        """
        logger.info(f"Uploading {filename} ({file_size} bytes) in one request")
        with open(path, 'rb') as f:
            response = self.session.post(
                '/manage/upload/file',
                files={UPLOAD_FIELD_NAME: (filename, f)},
                headers=headers,
                timeout=self._calculate_upload_timeout(file_size),
            )

        if response.status_code != 200:
            raise UploadError(self._format_error(response))
        return response.json()

    def _upload_chunked(self, path: str, filename: str, file_size: int, headers: dict) -> dict:
        """
        Upload a file through a chunked session. The session is discarded if
        any chunk fails.

        Returns:
            Response payload with 'id' and 'existed'

        Raises:
            UploadError: If the server rejects a step
        """
        response = self._request_with_retry(
            'POST',
            '/manage/upload/begin_chunks',
            json={'filename': filename},
            headers={**headers, 'Content-Range': str(file_size)},
        )
        if response.status_code != 200:
            raise UploadError(self._format_error(response))

        upload_id = response.json()['id']
        ranges = chunk_ranges(file_size, self.chunk_size)
        logger.info(f"Uploading {filename} in {len(ranges)} chunks [upload_id={upload_id}]")

        try:
            with open(path, 'rb') as f:
                for index, (offset, length) in enumerate(ranges):
                    f.seek(offset)
                    data = f.read(length)
                    chunk_response = self.session.post(
                        f'/manage/upload/chunk/{upload_id}',
                        files={CHUNK_FIELD_NAME: (filename, data)},
                        headers={**headers, 'Content-Range': str(offset)},
                        timeout=self._calculate_upload_timeout(length),
                    )
                    if chunk_response.status_code != 200:
                        raise UploadError(self._format_error(chunk_response))

                    progress = ((index + 1) / len(ranges)) * 100
                    sys.stdout.write(
                        f"\rUploading {filename}: chunk {index + 1}/{len(ranges)} ({GREEN}{progress:.1f}%{RESET})"
                    )
                    sys.stdout.flush()
            sys.stdout.write('\n')
            sys.stdout.flush()
        except (UploadError, OSError, httpx.HTTPError):
            sys.stdout.write('\n')
            sys.stdout.flush()
            self._discard_quietly(upload_id, headers)
            raise

        response = self._request_with_retry(
            'POST',
            '/manage/upload/end_chunks',
            json={'id': upload_id},
            headers=headers,
            timeout=self._calculate_upload_timeout(file_size),
        )
        if response.status_code != 200:
            raise UploadError(self._format_error(response))
        return response.json()

    def _discard_quietly(self, upload_id: str, headers: dict) -> None:
        try:
            self.session.post(f'/manage/upload/discard/{upload_id}', headers=headers)
            logger.info(f"Discarded failed upload {upload_id}")
        except httpx.HTTPError as e:
            logger.warning(f"Could not discard upload {upload_id}: {e}")

    def discard_upload(self, upload_id: str) -> str:
        try:
            headers = self._get_auth_header()
        except ValueError as e:
            return f"Error: {e}"

        try:
            response = self._request_with_retry(
                'POST', f'/manage/upload/discard/{upload_id}', headers=headers
            )
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code == 200:
            return f"Discarded upload {upload_id}"
        return f"Error: {self._format_error(response)}"

    def list_files(self, page: int = 1) -> str:
        """
        List one page of stored files.

        Args:
            page: 1-indexed page number

        Returns:
            Formatted list of files
        """
        try:
            headers = self._get_auth_header()
        except ValueError as e:
            return f"Error: {e}"

        try:
            response = self._request_with_retry(
                'GET',
                '/manage/files',
                headers=headers,
                params={'page': page}
            )
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        data = response.json()
        files = data['files']
        total = data['total']
        pages = page_count(total, PAGE_SIZE)

        if not files:
            return f"No files on page {page} ({total} file(s) stored, {pages} page(s))"

        output = [f"Page {page}/{pages} ({total} file(s) stored):\n"]
        for file_meta in files:
            output.append(
                f"  - {file_meta['filename']} (ID: {file_meta['id']})\n"
                f"    Size: {format_file_size(file_meta['bytes'])}\n"
                f"    URL: {self.file_url(file_meta['id'])}"
            )

        return '\n'.join(output)

    def delete_files(self, file_ids: list[str]) -> str:
        """
        Delete stored files by id.

        Returns:
            One result line per id
        """
        try:
            headers = self._get_auth_header()
        except ValueError as e:
            return f"Error: {e}"

        results = []
        for file_id in file_ids:
            try:
                response = self._request_with_retry(
                    'DELETE', f'/manage/files/{file_id}', headers=headers
                )
            except ConnectionError as e:
                results.append(f"Error deleting {file_id}: {e}")
                continue

            if response.status_code == 200:
                results.append(f"Deleted: {file_id}")
            else:
                results.append(f"Error deleting {file_id}: {self._format_error(response)}")

        return '\n'.join(results)

    def close(self) -> None:
        """Close HTTP session."""
        self.session.close()
