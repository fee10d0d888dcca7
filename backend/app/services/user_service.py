"""
User Service - Business Logic Layer
Handles user CRUD operations, profile upserts and dependent-row cleanup.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.security import hash_password
from app.models.request import ServiceRequest
from app.models.role import Role
from app.models.user import User
from app.models.user_profile import UserProfile
from app.schemas.user import PROFILE_FIELDS, UserCreate, UserUpdate


logger = logging.getLogger("users")


class RoleNotFoundError(Exception):
    """The requested role name has no row in the roles table."""
    pass


class DuplicateUserError(Exception):
    """Username or email already taken."""
    pass


def _with_relations(query):
    return query.options(
        joinedload(User.role).joinedload(Role.permissions),
        joinedload(User.profile),
    )


def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get one user with role and profile attached."""
    return _with_relations(db.query(User)).filter(User.id == user_id).first()


def list_users(db: Session) -> List[User]:
    """Get every user with role and profile attached."""
    return _with_relations(db.query(User)).order_by(User.id.asc()).all()


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    return db.query(Role).filter(Role.name == name).first()


def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Create a user and its profile in one transaction.

    The password is hashed before storage and the role name is resolved to
    a role row. Profile fields not provided are stored as empty strings.

    Raises:
        RoleNotFoundError: the role does not exist
        DuplicateUserError: username or email already exists (nothing is written)
    """
    role = get_role_by_name(db, user_data.role)
    if role is None:
        raise RoleNotFoundError(user_data.role)

    user = User(
        username=user_data.username,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        role_id=role.id,
    )
    user.profile = UserProfile(
        first_name=user_data.first_name or "",
        last_name=user_data.last_name or "",
        phone=user_data.phone or "",
        address=user_data.address or "",
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateUserError("Username or email already exists") from exc

    logger.info(f"USER_CREATED | user_id={user.id} | role={role.name}")
    return get_user(db, user.id)


def update_user(db: Session, user_id: int, user_data: UserUpdate) -> Optional[User]:
    """
    Update account fields and upsert profile fields.

    Only provided fields are changed. The password is re-hashed only when
    supplied. Profile fields are merged into the existing profile, or a new
    profile is created with the missing fields left empty.

    Returns:
        Updated User, or None if the user does not exist

    Raises:
        DuplicateUserError: new username or email already taken
    """
    user = get_user(db, user_id)
    if user is None:
        return None

    for field, value in user_data.account_fields().items():
        if field == "password":
            user.password_hash = hash_password(value)
        else:
            setattr(user, field, value)

    profile_data = user_data.profile_fields()
    if profile_data:
        profile = user.profile
        if profile is None:
            profile = UserProfile(user_id=user.id, **{f: "" for f in PROFILE_FIELDS})
            db.add(profile)
        for field, value in profile_data.items():
            setattr(profile, field, value)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateUserError("Username or email already exists") from exc

    logger.info(
        f"USER_UPDATED | user_id={user_id} | fields={sorted(user_data.account_fields())} | "
        f"profile_fields={sorted(profile_data)}"
    )
    return get_user(db, user_id)


def delete_user(db: Session, user_id: int) -> Optional[Dict[str, int]]:
    """
    Delete a user and the rows that reference it.

    Order: profile, requests, user. Activity log entries are kept (their
    user_id is nulled by the database).

    Returns:
        Count of deleted rows per table, or None if the user does not exist
    """
    exists = db.query(User.id).filter(User.id == user_id).first()
    if exists is None:
        return None

    deleted = {
        "profiles": db.query(UserProfile).filter(
            UserProfile.user_id == user_id
        ).delete(synchronize_session=False),
        "requests": db.query(ServiceRequest).filter(
            ServiceRequest.user_id == user_id
        ).delete(synchronize_session=False),
        "users": db.query(User).filter(
            User.id == user_id
        ).delete(synchronize_session=False),
    }
    db.commit()

    logger.info(
        f"USER_DELETED | user_id={user_id} | profiles={deleted['profiles']} | "
        f"requests={deleted['requests']}"
    )
    return deleted
