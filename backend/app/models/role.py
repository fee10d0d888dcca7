"""
Role Models
A role is a named set of permission actions assigned to users.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Role(BaseModel):
    """
    Named role ("user", "admin").

    A user's role must reference an existing row at creation time;
    roles are seeded on startup (see app/db/seed.py).
    """
    __tablename__ = "roles"

    name = Column(String(50), unique=True, nullable=False, index=True)

    permissions = relationship(
        "Permission",
        back_populates="role",
        cascade="all, delete-orphan",
        order_by="Permission.id",
    )
    users = relationship("User", back_populates="role")

    @property
    def actions(self) -> list:
        return [p.action for p in self.permissions]

    def __repr__(self):
        return f"<Role(id={self.id}, name={self.name})>"


class Permission(BaseModel):
    """Single permission action granted to a role (e.g. "request:update")."""
    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "action", name="uq_permissions_role_action"),
    )

    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    action = Column(String(100), nullable=False)

    role = relationship("Role", back_populates="permissions")
