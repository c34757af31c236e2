"""Configuration management for FileDrop CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.constants import CHUNKED_UPLOAD_THRESHOLD, CLIENT_CHUNK_SIZE


class Config:
    """
    CLI settings persisted as JSON (server address, token, timeouts, retry
    policy and upload chunking). Keys missing from the file fall back to
    DEFAULT_CONFIG.
    """

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("FILEDROP_HOST", "127.0.0.1"),
        "server_port": int(os.environ.get("FILEDROP_PORT", "9999")),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
        "chunk_size": CLIENT_CHUNK_SIZE,
        "chunked_threshold": CHUNKED_UPLOAD_THRESHOLD,
    }

    def __init__(self, config_path: Path):
        """
        Args:
            config_path: Path to config JSON file (typically ~/.filedrop/config.json)
        """
        self.config_path = self._ensure_writable_dir(config_path)
        self.data = self._load()

    @staticmethod
    def _ensure_writable_dir(config_path: Path) -> Path:
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            return config_path
        except PermissionError:
            fallback = Path(tempfile.gettempdir()) / '.filedrop' / config_path.name
            fallback.parent.mkdir(parents=True, exist_ok=True)
            return fallback

    def _load(self) -> dict:
        if not self.config_path.exists():
            self.data = self.DEFAULT_CONFIG.copy()
            self.save()
            return self.data

        try:
            with open(self.config_path, 'r') as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError):
            self._backup_corrupted()
            return self.DEFAULT_CONFIG.copy()

        return {**self.DEFAULT_CONFIG, **stored}

    def _backup_corrupted(self) -> None:
        try:
            shutil.copy(self.config_path, self.config_path.with_suffix('.json.bak'))
        except OSError:
            pass

    def save(self) -> None:
        """Write current configuration to file; unwritable locations are ignored."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError:
            pass

    def get_token(self) -> Optional[str]:
        """
        Get the management token.

        The value saved with `token <value>` wins; FILEDROP_TOKEN from the
        environment is used when none was saved.

        Returns:
            Token string or None if not set
        """
        return self.data.get('token') or os.environ.get('FILEDROP_TOKEN') or None

    def set_token(self, token: str) -> None:
        """
        Set management token and save to file.

        Args:
            token: Token matching the server's FILEDROP_TOKEN
        """
        self.data['token'] = token
        self.save()

    def get_base_url(self) -> str:
        """
        Get server base URL.

        An explicit 'server_url' entry overrides host and port, which allows
        https and reverse proxy setups.

        Returns:
            Base URL string (e.g., "http://127.0.0.1:9999")
        """
        server_url = self.data.get('server_url')
        if server_url:
            return server_url.rstrip('/')

        host = self.data.get('server_host', '127.0.0.1')
        port = self.data.get('server_port', 9999)
        return f"http://{host}:{port}"

    def get_timeout(self) -> int:
        return self.data.get('timeout', 30)

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries', 3),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }

    def get_upload_config(self) -> dict:
        """
        Get upload chunking settings.

        Returns:
            Dictionary with 'chunk_size' and 'chunked_threshold' in bytes
        """
        return {
            'chunk_size': self.data.get('chunk_size', CLIENT_CHUNK_SIZE),
            'chunked_threshold': self.data.get('chunked_threshold', CHUNKED_UPLOAD_THRESHOLD),
        }
