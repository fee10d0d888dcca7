"""
Session Schemas
Request and response models for /auth/session.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.base import CamelModel


class SignInRequest(CamelModel):
    """
    Credentials sign-in.

    Example:
        {
            "username": "alice01",
            "password": "SecurePass123!",
            "callbackUrl": "http://localhost:3000/dashboard"
        }
    """
    username: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=1)
    callback_url: Optional[str] = Field(
        None,
        description="Where to go after sign-in; honoured only for the application's own origin"
    )


class SessionRole(CamelModel):
    name: str
    permissions: List[str] = Field(default_factory=list)


class SessionUser(CamelModel):
    """
    Identity carried by a session token.

    Built at sign-in and re-embedded in every renewed token.
    """
    id: int
    username: str
    email: str
    role: SessionRole


class SessionResponse(CamelModel):
    user: SessionUser
    expires: datetime


class SignInResponse(SessionResponse):
    session_token: str
    url: str
