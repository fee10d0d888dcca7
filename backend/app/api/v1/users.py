"""
User Endpoints
CRUD operations for user accounts with role and profile.

Endpoints:
- GET /users - List users, or one user with ?id=
- POST /users - Create a user and its profile
- PUT /users?id= / PUT /users/{id} - Update account and profile fields
- DELETE /users?id= / DELETE /users/{id} - Delete a user and dependent rows
- GET /users/{id} - Get one user
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.deps import parse_id
from app.db.session import get_db
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services import user_service
from app.services.error_logging import error_logger
from app.services.user_service import DuplicateUserError, RoleNotFoundError


router = APIRouter(prefix="/users", tags=["Users"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def _server_error(db: Session, exc: Exception, request: Request, message: str, **context) -> HTTPException:
    db.rollback()
    error_logger.log_error(exc, request=request, context=context)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def _get_user(db: Session, user_id: int, request: Request) -> UserResponse:
    try:
        user = user_service.get_user(db, user_id)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error fetching user", user_id=user_id)
    if user is None:
        raise _not_found()
    return user


def _update_user(db: Session, user_id: int, data: UserUpdate, request: Request) -> UserResponse:
    try:
        user = user_service.update_user(db, user_id, data)
    except DuplicateUserError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already exists"
        )
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error updating user", user_id=user_id)
    if user is None:
        raise _not_found()
    return user


def _delete_user(db: Session, user_id: int, request: Request) -> Response:
    try:
        deleted = user_service.delete_user(db, user_id)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error deleting user", user_id=user_id)
    if deleted is None:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=Union[UserResponse, List[UserResponse]],
    summary="List users",
    description="All users with role and profile; a single user when ?id= is given",
)
def get_users(
    request: Request,
    id: Optional[str] = Query(None, description="User ID"),
    db: Session = Depends(get_db)
):
    if id is not None:
        return _get_user(db, parse_id(id, "user"), request)

    try:
        return user_service.list_users(db)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error fetching users")


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    responses={
        201: {
            "description": "User created",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "username": "alice01",
                        "email": "alice@mail.com",
                        "roleId": 1,
                        "role": {"id": 1, "name": "user", "permissions": ["request:create"]},
                        "profile": {
                            "firstName": "Alice",
                            "lastName": "",
                            "phone": "",
                            "address": ""
                        },
                        "createdAt": "2024-01-13T10:30:00Z",
                        "updatedAt": "2024-01-13T10:30:00Z"
                    }
                }
            }
        },
        400: {"description": "Invalid body, unknown role, or username/email taken"}
    }
)
def create_user(
    user_data: UserCreate,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Create a new user.

    Process:
    1. Validate body (every violated constraint is reported at once)
    2. Resolve the role name to a role row
    3. Hash the password
    4. Insert user and profile in one transaction

    Errors:
    - 400: Validation failed, role not found, or username/email taken
    - 500: Database failure

    The password hash is never part of the response.
    """
    try:
        return user_service.create_user(db, user_data)
    except RoleNotFoundError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role not found")
    except DuplicateUserError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already exists"
        )
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error creating user", username=user_data.username)


@router.put("", response_model=UserResponse, summary="Update user by query id")
def update_user_by_query(
    user_data: UserUpdate,
    request: Request,
    id: Optional[str] = Query(None, description="User ID"),
    db: Session = Depends(get_db)
):
    return _update_user(db, parse_id(id, "user"), user_data, request)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user by query id")
def delete_user_by_query(
    request: Request,
    id: Optional[str] = Query(None, description="User ID"),
    db: Session = Depends(get_db)
):
    return _delete_user(db, parse_id(id, "user"), request)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user")
def get_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    """Get one user with role and profile."""
    return _get_user(db, parse_id(user_id, "user"), request)


@router.put("/{user_id}", response_model=UserResponse, summary="Update user")
def update_user(
    user_id: str,
    user_data: UserUpdate,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Update a user.

    Only provided fields change; unknown fields are ignored. A new password
    is re-hashed. Profile fields are merged into the existing profile, or a
    profile is created with the missing fields empty.
    """
    return _update_user(db, parse_id(user_id, "user"), user_data, request)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user")
def delete_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    """
    Delete a user.

    Removes the profile, then the user's requests, then the user.
    Activity log entries survive with their owner cleared.
    """
    return _delete_user(db, parse_id(user_id, "user"), request)
