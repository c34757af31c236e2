"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DiscardCommand,
    ListCommand,
    TokenCommand,
    UploadCommand,
    UrlCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "token":
        return _parse_token(tokens[1:])
    elif command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "list":
        return _parse_list(tokens[1:])
    elif command_name == "delete":
        return _parse_delete(tokens[1:])
    elif command_name == "discard":
        return _parse_discard(tokens[1:])
    elif command_name == "url":
        return _parse_url(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_token(args: list[str]) -> TokenCommand:
    """Parse 'token <value>' command."""
    if len(args) != 1:
        raise ParseError("token requires exactly 1 argument: <value>")
    return TokenCommand(token=args[0])


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [<path> ...]' command."""
    if not args:
        raise ParseError("upload requires at least one file")
    return UploadCommand(file_list=tuple(args))


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [page]' command."""
    if not args:
        return ListCommand()
    if len(args) > 1:
        raise ParseError("list takes at most 1 argument: [page]")

    try:
        page = int(args[0])
    except ValueError:
        raise ParseError(f"Invalid page number: {args[0]}")

    if page < 1:
        raise ParseError("Page number must be 1 or greater")

    return ListCommand(page=page)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <id> [<id> ...]' command."""
    if not args:
        raise ParseError("delete requires at least one file id")
    return DeleteCommand(file_ids=tuple(args))


def _parse_discard(args: list[str]) -> DiscardCommand:
    """Parse 'discard <upload-id>' command."""
    if len(args) != 1:
        raise ParseError("discard requires exactly 1 argument: <upload-id>")
    return DiscardCommand(upload_id=args[0])


def _parse_url(args: list[str]) -> UrlCommand:
    """Parse 'url <id>' command."""
    if len(args) != 1:
        raise ParseError("url requires exactly 1 argument: <id>")
    return UrlCommand(file_id=args[0])
