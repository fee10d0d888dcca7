"""
Activity Log Model
Append-only audit trail of request mutations.

Entries are written as a side effect of creating, updating and deleting
service requests, and are never updated or deleted by the application.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


class ActivityLog(Base):
    """
    Activity Log Model

    Inherits Base directly: an audit entry has a creation time but is never
    modified, so it carries no updated_at column.

    user_id uses ON DELETE SET NULL: deleting a user keeps its trail.
    User has no activity_logs collection, the ORM must never touch
    existing entries when a user is deleted.
    """
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    action = Column(String(50), nullable=False, index=True)  # CREATE, UPDATE, DELETE
    description = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    user = relationship("User")

    def __repr__(self):
        return f"<ActivityLog(id={self.id}, action={self.action}, user_id={self.user_id})>"
