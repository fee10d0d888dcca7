"""
User Model
Represents accounts that can sign in and file requests.

Each user has:
- Unique username and email
- Bcrypt password hash (never stored in plain text)
- Exactly one role, resolved by name at creation time
- Zero or one profile with contact details
- Zero or more service requests
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class User(BaseModel):
    """
    User model for authentication and request ownership.

    Fields:
        id (int): Primary key, inherited from BaseModel
        username (str): Unique login name (alphanumeric, 3-30 chars)
        email (str): Unique email address
        password_hash (str): Bcrypt hashed password
        role_id (int): Reference to the user's role
        created_at (datetime): Account creation timestamp
        updated_at (datetime): Last update timestamp

    Relationships:
        role: Many-to-one relationship with Role
        profile: Zero-or-one relationship with UserProfile
        requests: One-to-many relationship with ServiceRequest

    Deleting a user does not cascade through the ORM: the profile and the
    requests are removed explicitly first (see user_service.delete_user).
    """

    __tablename__ = "users"

    username = Column(
        String(30),
        unique=True,
        nullable=False,
        index=True,  # Index for fast lookups during sign-in
        comment="Unique login name"
    )

    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User's email address"
    )

    # Password hash - NEVER store plain text passwords
    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role_id = Column(
        Integer,
        ForeignKey("roles.id"),
        nullable=False,
        index=True
    )

    # Relationships
    role = relationship("Role", back_populates="users")
    profile = relationship("UserProfile", back_populates="user", uselist=False)
    requests = relationship("ServiceRequest", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
