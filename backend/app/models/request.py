"""
Service Request Model
A request filed by a user and tracked through its status.

Status values:
- pending (default)
- in-progress
- completed
- rejected

Any status may follow any other; no transition graph is enforced.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.constants import STATUS_PENDING
from app.models.base import BaseModel


class ServiceRequest(BaseModel):
    """
    Service Request Model

    Stored in the "requests" table. Every mutation made through the API
    appends an ActivityLog entry for the owning user.
    """
    __tablename__ = "requests"

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    description = Column(Text, nullable=False)

    # Plain string column: "in-progress" is not a valid enum member name
    status = Column(
        String(20),
        nullable=False,
        default=STATUS_PENDING,
        index=True
    )

    user = relationship("User", back_populates="requests")

    def __repr__(self):
        return f"<ServiceRequest(id={self.id}, user_id={self.user_id}, status={self.status})>"
