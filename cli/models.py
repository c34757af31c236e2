"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class TokenCommand:
    """Save the management token."""

    token: str
    command: Literal["token"] = "token"


@dataclass(frozen=True)
class UploadCommand:
    """Upload local files."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListCommand:
    """List one page of stored files."""

    page: int = 1
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete stored files by id."""

    file_ids: tuple[str, ...]
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class DiscardCommand:
    """Drop an unfinished chunked upload."""

    upload_id: str
    command: Literal["discard"] = "discard"


@dataclass(frozen=True)
class UrlCommand:
    """Show the download URL of a stored file."""

    file_id: str
    command: Literal["url"] = "url"


CommandRequest = (
    TokenCommand
    | UploadCommand
    | ListCommand
    | DeleteCommand
    | DiscardCommand
    | UrlCommand
)
