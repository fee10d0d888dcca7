"""
Pydantic Schemas Module
Contains request/response schemas for API validation and serialization.

Pydantic schemas are used for:
- Validating incoming request data
- Serializing database models to JSON responses
- Auto-generating OpenAPI documentation
"""

from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserSummary,
    RoleResponse,
    ProfileResponse,
)
from app.schemas.request import (
    RequestCreate,
    RequestUpdate,
    RequestResponse,
    RequestStats,
)
from app.schemas.activity_log import ActivityLogResponse
from app.schemas.auth import (
    SignInRequest,
    SessionUser,
    SessionRole,
    SessionResponse,
    SignInResponse,
)
from app.schemas.mail import MailRequest, MailInfo, MailResponse

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "RoleResponse",
    "ProfileResponse",
    "RequestCreate",
    "RequestUpdate",
    "RequestResponse",
    "RequestStats",
    "ActivityLogResponse",
    "SignInRequest",
    "SessionUser",
    "SessionRole",
    "SessionResponse",
    "SignInResponse",
    "MailRequest",
    "MailInfo",
    "MailResponse",
]
