"""
API Dependencies
Common dependencies used across API endpoints.

This module provides:
- Numeric identifier parsing for query/path parameters
- Session token extraction (cookie or Authorization header)

Dependencies are injected into FastAPI endpoints using Depends().
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.constants import MAX_ID


# Bearer scheme that does not fail when the header is missing;
# browsers send the session cookie instead
bearer_scheme = HTTPBearer(auto_error=False)


def parse_id(raw: Optional[str], label: str) -> int:
    """
    Parse an identifier taken from the URL.

    Raises:
        HTTPException 400: identifier missing ("User ID not provided")
            or not a number in range ("Invalid user id")
    """
    if raw is None or not raw.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label.capitalize()} ID not provided"
        )

    value = raw.strip()
    if not (value.isascii() and value.isdigit()) or int(value) > MAX_ID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} id"
        )
    return int(value)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Session token from "Authorization: Bearer <token>" or the session cookie.

    Returns:
        The raw token, or None if the caller sent neither
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)

