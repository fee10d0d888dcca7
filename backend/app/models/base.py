"""
Base Model Class
Shared columns for tables that are created and later modified.

Users, profiles, roles and service requests inherit from BaseModel.
Append-only tables (activity_logs) inherit Base directly.
"""

from sqlalchemy import Column, DateTime, Integer, func

from app.db.base import Base


class BaseModel(Base):
    """
    Abstract base: integer id plus created_at / updated_at.

    Ids are integers because they travel in URLs (?id=7, /users/7) and
    are parsed from strings there. Timestamps are set by the database.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # onupdate refreshes this on every ORM UPDATE
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
