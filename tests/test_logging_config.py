"""Tests for sensitive data masking in logs."""

import logging

import pytest

from common.logging_config import SensitiveDataFilter


def make_record(msg, args=()):
    return logging.LogRecord("server", logging.INFO, __file__, 1, msg, args, None)


@pytest.mark.parametrize("message", [
    "Authorization: Bearer s3cret",
    "token=s3cret",
    '{"token": "s3cret"}',
    "secret: s3cret",
])
def test_masks_credentials(message):
    record = make_record(message)
    SensitiveDataFilter().filter(record)

    assert "s3cret" not in record.getMessage()
    assert "***MASKED***" in record.getMessage()


def test_masks_arguments():
    record = make_record("header %s", ("Bearer s3cret",))
    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "header Bearer ***MASKED***"


def test_leaves_plain_messages_alone():
    record = make_record("Stored notes.txt as 0123456789abcdef.txt (11 bytes)")
    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Stored notes.txt as 0123456789abcdef.txt (11 bytes)"
