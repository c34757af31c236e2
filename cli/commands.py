"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    DeleteCommand,
    DiscardCommand,
    ListCommand,
    TokenCommand,
    UploadCommand,
    UrlCommand,
)
from cli.config import Config
from cli.filedrop_client import FileDropClient

logger = get_logger(__name__)


_client: Optional[FileDropClient] = None


def get_client() -> FileDropClient:
    """
    Get or create global FileDropClient instance.

    Returns:
        FileDropClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new FileDropClient instance")
        config = Config(Path.home() / '.filedrop' / 'config.json')
        _client = FileDropClient(config)
    return _client


def handle_token(cmd: TokenCommand, client: Optional[FileDropClient] = None) -> str:
    """Handle 'token' command."""
    if client is None:
        client = get_client()
    return client.set_token(cmd.token)


def handle_upload(cmd: UploadCommand, client: Optional[FileDropClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        client: Optional FileDropClient for dependency injection (testing)

    Returns:
        Success or error message with upload results
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    if client is None:
        client = get_client()
    return client.upload_files(list(cmd.file_list))


def handle_list(cmd: ListCommand, client: Optional[FileDropClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with page number
        client: Optional FileDropClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    if client is None:
        client = get_client()
    return client.list_files(cmd.page)


def handle_delete(cmd: DeleteCommand, client: Optional[FileDropClient] = None) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with file_ids
        client: Optional FileDropClient for dependency injection (testing)

    Returns:
        Success or error message per file
    """
    logger.info(f"Executing delete command: {len(cmd.file_ids)} files")
    if client is None:
        client = get_client()
    return client.delete_files(list(cmd.file_ids))


def handle_discard(cmd: DiscardCommand, client: Optional[FileDropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.discard_upload(cmd.upload_id)


def handle_url(cmd: UrlCommand, client: Optional[FileDropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.file_url(cmd.file_id)
