"""Shared pytest fixtures for all tests."""

from pathlib import Path
from typing import Generator

import pytest

from cli.config import Config
from server.content_store import ContentStore
from server.database import init_database
from server.services.upload_manager import UploadManager

TEST_SIZE_LIMIT = 1024 * 1024


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary metadata database for each test.
    """
    db_path = tmp_path / "data" / "test.db"
    monkeypatch.setattr("server.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("server.config.DATABASE_PATH", str(db_path))
    init_database()
    yield db_path


@pytest.fixture
def content_store(tmp_path) -> ContentStore:
    """
    Content store rooted in a temporary directory.
    """
    return ContentStore(tmp_path / "files")


@pytest.fixture
def manager(test_db, content_store) -> UploadManager:
    """
    Upload manager over the temporary database and content store, with a
    1 MiB chunked upload limit.
    """
    return UploadManager(content_store, TEST_SIZE_LIMIT)


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary CLI config directory.

    Returns:
        Path to temporary .filedrop directory
    """
    config_dir = tmp_path / '.filedrop'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, monkeypatch):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    monkeypatch.delenv('FILEDROP_TOKEN', raising=False)
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
