"""
Activity Log Schemas
"""

from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel
from app.schemas.user import UserSummary


class ActivityLogResponse(CamelModel):
    """Audit entry with its owner (null once the owner has been deleted)."""
    id: int
    user_id: Optional[int] = None
    action: str
    description: str
    created_at: datetime
    user: Optional[UserSummary] = None
