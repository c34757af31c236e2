"""Random identifier generation for stored files and upload sessions."""

import secrets
import sqlite3
from typing import Callable, Optional

from common.constants import MAX_ID_ATTEMPTS, RANDOM_ID_BYTES
from common.logging_config import get_logger
from server.exceptions import IdGenerationExhaustedError, QueryFailedError
from server.repositories.file_repository import FileRepository

logger = get_logger(__name__)


def generate_random_id() -> str:
    """
    Generate a random hex token.

    Returns:
        16 character hex string (8 random bytes); uniqueness is not checked
    """
    return secrets.token_hex(RANDOM_ID_BYTES)


def generate_unique_file_id(
    extension: Optional[str] = None,
    id_exists: Optional[Callable[[str], bool]] = None,
    max_attempts: int = MAX_ID_ATTEMPTS,
) -> str:
    """
    Generate a file id that is not yet used in the metadata index.

    Args:
        extension: Optional file extension appended as '.<extension>'
        id_exists: Lookup used to detect collisions (defaults to FileRepository.exists)
        max_attempts: Number of ids tried before giving up

    Returns:
        Unused file id

    Raises:
        IdGenerationExhaustedError: If every attempt collided
        QueryFailedError: If the collision lookup failed
    """
    if id_exists is None:
        id_exists = FileRepository.exists

    for attempt in range(max_attempts):
        file_id = generate_random_id()
        if extension:
            file_id = f"{file_id}.{extension}"

        try:
            taken = id_exists(file_id)
        except sqlite3.Error as e:
            logger.error(f"Id lookup failed for {file_id}: {e}", exc_info=True)
            raise QueryFailedError() from e

        if not taken:
            return file_id

        logger.warning(f"Generated id {file_id} already in use (attempt {attempt + 1}/{max_attempts})")

    raise IdGenerationExhaustedError(
        f"Unable to generate a unique id after {max_attempts} attempts"
    )
