"""
User Profile Model
Contact details attached to a user (zero or one per user).
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class UserProfile(BaseModel):
    """
    User profile, keyed by user_id.

    Fields default to empty strings when the profile is created without them.
    """
    __tablename__ = "user_profiles"

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        unique=True,  # Exactly one profile per user
        nullable=False,
        index=True
    )

    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<UserProfile(id={self.id}, user_id={self.user_id})>"
