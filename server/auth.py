"""Management token check for the /manage endpoints."""

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from server import config


def extract_token(authorization: str) -> str:
    """
    Extract the token from an Authorization header value.

    Both the bare token and the "Bearer <token>" form are accepted.

    Args:
        authorization: Authorization header value

    Returns:
        Token string
    """
    value = authorization.strip()
    if value[:7].lower() == "bearer ":
        return value[7:].strip()
    return value


def is_valid_token(candidate: str, expected: str) -> bool:
    """
    Compare a presented token against the configured one.

    Args:
        candidate: Token sent by the client
        expected: Configured management token

    Returns:
        True if both are non-empty and equal
    """
    if not expected or not candidate:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


async def require_token(authorization: Optional[str] = Header(None)) -> None:
    """
    FastAPI dependency guarding management endpoints.

    Args:
        authorization: Authorization header value (raw token or "Bearer <token>")

    Raises:
        HTTPException: 403 if the token is missing or does not match
    """
    if authorization is None or not is_valid_token(extract_token(authorization), config.MANAGEMENT_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )
