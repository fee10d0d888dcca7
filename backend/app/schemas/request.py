"""
Service Request Schemas
Request and response models for /requests endpoints.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field

from app.core.constants import MAX_ID, REQUEST_DESCRIPTION_MIN_LENGTH
from app.schemas.base import CamelModel
from app.schemas.user import UserSummary


RequestStatus = Literal["pending", "in-progress", "completed", "rejected"]


class RequestCreate(CamelModel):
    """
    Schema for creating a request.

    Example:
        {
            "userId": 1,
            "description": "Printer on the 2nd floor is jammed",
            "status": "pending"
        }
    """
    model_config = ConfigDict(extra="forbid")

    user_id: int = Field(..., ge=1, le=MAX_ID, description="Owning user")
    description: str = Field(..., min_length=REQUEST_DESCRIPTION_MIN_LENGTH)
    status: RequestStatus = Field("pending", description="Initial status (default: pending)")


class RequestUpdate(CamelModel):
    """
    Schema for updating a request.

    Permissive: every field is optional and unknown fields are ignored,
    but every present field is validated. Any status may replace any other.
    """
    model_config = ConfigDict(extra="ignore")

    user_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    description: Optional[str] = Field(None, min_length=REQUEST_DESCRIPTION_MIN_LENGTH)
    status: Optional[RequestStatus] = None


class RequestResponse(CamelModel):
    id: int
    user_id: int
    description: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class RequestStats(CamelModel):
    """
    Request counts per status.

    pending + in_progress + completed + rejected <= total; rows with a status
    outside the four known values count toward total only.
    """
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    rejected: int = 0
