"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    DeleteCommand,
    DiscardCommand,
    ListCommand,
    TokenCommand,
    UploadCommand,
    UrlCommand,
)
from cli.parser import ParseError, parse_command


def test_parse_token():
    assert parse_command("token abc123") == TokenCommand(token="abc123")


def test_parse_upload_multiple_files():
    cmd = parse_command('upload a.txt "my movie.mp4"')
    assert cmd == UploadCommand(file_list=("a.txt", "my movie.mp4"))


def test_parse_list_default_page():
    assert parse_command("list") == ListCommand(page=1)


def test_parse_list_with_page():
    assert parse_command("list 3") == ListCommand(page=3)


def test_parse_delete():
    cmd = parse_command("delete 0123456789abcdef.txt fedcba9876543210")
    assert cmd == DeleteCommand(file_ids=("0123456789abcdef.txt", "fedcba9876543210"))


def test_parse_discard():
    assert parse_command("discard feedfacefeedface") == DiscardCommand(upload_id="feedfacefeedface")


def test_parse_url():
    assert parse_command("url abc.png") == UrlCommand(file_id="abc.png")


@pytest.mark.parametrize("line", [
    "",
    "   ",
    "frobnicate",
    "token",
    "token a b",
    "upload",
    "list x",
    "list 0",
    "list 1 2",
    "delete",
    "discard",
    "url",
    'upload "unterminated',
])
def test_invalid_commands(line):
    with pytest.raises(ParseError):
        parse_command(line)
