"""
SQLAlchemy Declarative Base
Defines the base class for all SQLAlchemy models.

Constraints get deterministic names, so a unique violation on
users.username shows up in logs as uq_users_username.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base


NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# All database models (User, Role, ServiceRequest, ActivityLog) inherit from this base.
#
# Usage:
#     from app.db.base import Base
#
#     class Tag(Base):
#         __tablename__ = "tags"
#         id = Column(Integer, primary_key=True)
Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
