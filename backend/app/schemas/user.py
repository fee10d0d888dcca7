"""
User Pydantic Schemas
Request and response models for user-related endpoints.

These schemas define the structure of data sent to and received from the API.
They provide automatic validation, serialization, and documentation.
"""

from pydantic import ConfigDict, EmailStr, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

from app.schemas.base import CamelModel


USERNAME_PATTERN = r"^[a-zA-Z0-9]+$"

RoleName = Literal["user", "admin"]

PROFILE_FIELDS = ("first_name", "last_name", "phone", "address")


# ============================================================================
# Request Schemas
# ============================================================================

class UserCreate(CamelModel):
    """
    Schema for user creation request.

    Used in POST /api/v1/users endpoint.
    Unknown fields are rejected.

    Example:
        {
            "username": "alice01",
            "email": "alice@mail.com",
            "password": "SecurePass123!",
            "role": "user",
            "firstName": "Alice",
            "phone": "555-1234"
        }
    """
    model_config = ConfigDict(extra="forbid")

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        pattern=USERNAME_PATTERN,
        description="Alphanumeric login name (3-30 characters)",
        examples=["alice01"]
    )
    email: EmailStr = Field(
        ...,
        description="Valid email address",
        examples=["alice@mail.com"]
    )
    password: str = Field(
        ...,
        min_length=8,
        description="Password (minimum 8 characters)",
        examples=["SecurePass123!"]
    )
    role: RoleName = Field(
        ...,
        description="Role name",
        examples=["user"]
    )
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = Field(None, min_length=1, max_length=255)


class UserUpdate(CamelModel):
    """
    Schema for user update request.

    Used in PUT /api/v1/users/{id}.
    All fields are optional - only provided fields will be updated.
    Unknown fields are ignored.

    Example:
        {
            "phone": "555-1234"
        }
    """
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(
        None,
        min_length=3,
        max_length=30,
        pattern=USERNAME_PATTERN,
    )
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = Field(None, min_length=1, max_length=255)

    def account_fields(self) -> dict:
        """Fields stored on the users row that were provided."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if key in ("username", "email", "password") and value is not None
        }

    def profile_fields(self) -> dict:
        """Profile fields that were provided."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if key in PROFILE_FIELDS and value is not None
        }


# ============================================================================
# Response Schemas
# ============================================================================

class RoleResponse(CamelModel):
    """Role with its permission actions flattened to strings."""
    id: int
    name: str
    permissions: List[str] = Field(default_factory=list)

    @field_validator("permissions", mode="before")
    @classmethod
    def _permission_actions(cls, value):
        # ORM rows carry Permission objects; keep only their action label
        return [getattr(item, "action", item) for item in (value or [])]


class ProfileResponse(CamelModel):
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    address: str = ""


class UserSummary(CamelModel):
    """Owner info embedded in request and activity log responses."""
    id: int
    username: str
    email: str


class UserResponse(CamelModel):
    """
    Schema for user response.

    Never includes the password hash.

    Example:
        {
            "id": 1,
            "username": "alice01",
            "email": "alice@mail.com",
            "roleId": 1,
            "role": {"id": 1, "name": "user", "permissions": ["request:create"]},
            "profile": {"firstName": "Alice", "lastName": "", "phone": "", "address": ""},
            "createdAt": "2024-01-13T10:30:00Z",
            "updatedAt": "2024-01-13T10:30:00Z"
        }
    """
    id: int
    username: str
    email: str
    role_id: int
    role: Optional[RoleResponse] = None
    profile: Optional[ProfileResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
