"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    detail: str
    code: str


class StatusResponse(BaseModel):
    """Response model for operations without a payload."""
    status: str = "ok"
