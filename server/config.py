"""Configuration settings for the FileDrop server."""

import os
from common.constants import CHUNKED_UPLOAD_SIZE_LIMIT, MAX_REQUEST_BODY_BYTES


DATABASE_PATH = os.environ.get("FILEDROP_DATABASE_PATH", "./data/metadata.db")

STORAGE_PATH = os.environ.get("FILEDROP_STORAGE_PATH", "./files")

STATIC_DIR = os.environ.get("FILEDROP_STATIC_DIR", "./static")

SERVER_HOST = os.environ.get("FILEDROP_HOST", "127.0.0.1")

SERVER_PORT = int(os.environ.get("FILEDROP_PORT", "9999"))

MANAGEMENT_TOKEN = os.environ.get("FILEDROP_TOKEN", "")

CHUNKED_SIZE_LIMIT = int(os.environ.get("FILEDROP_CHUNKED_SIZE_LIMIT", str(CHUNKED_UPLOAD_SIZE_LIMIT)))

MAX_REQUEST_BODY = int(os.environ.get("FILEDROP_MAX_REQUEST_BODY", str(MAX_REQUEST_BODY_BYTES)))

# Seconds a chunk session may stay idle before the sweeper drops it; 0 disables the sweeper.
SESSION_TTL_SECONDS = int(os.environ.get("FILEDROP_SESSION_TTL", "3600"))

SESSION_SWEEP_INTERVAL_SECONDS = int(os.environ.get("FILEDROP_SESSION_SWEEP_INTERVAL", "300"))
