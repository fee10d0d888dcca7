"""
Service Request Endpoints
CRUD operations for service requests plus status statistics.

Mutations append an activity log entry for the request owner once the
change is committed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.deps import parse_id
from app.db.session import get_db
from app.schemas.request import RequestCreate, RequestResponse, RequestStats, RequestUpdate
from app.services import request_service
from app.services.error_logging import error_logger
from app.services.request_service import RequestOwnerNotFoundError


router = APIRouter(prefix="/requests", tags=["Requests"])


def _owner_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def _request_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")


def _server_error(db: Session, exc: Exception, request: Request, message: str, **context) -> HTTPException:
    db.rollback()
    error_logger.log_error(exc, request=request, context=context)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("/stats", response_model=RequestStats, summary="Request counts per status")
def get_request_stats(request: Request, db: Session = Depends(get_db)):
    """
    Count requests per status.

    Returns:
    - total: All requests
    - pending / inProgress / completed / rejected: Per-status counts
    """
    try:
        return request_service.get_request_stats(db)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error fetching request stats")


@router.get("", response_model=List[RequestResponse], summary="List requests")
def get_requests(request: Request, db: Session = Depends(get_db)):
    """All requests with their owning user."""
    try:
        return request_service.list_requests(db)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error fetching requests")


@router.post(
    "",
    response_model=RequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create request",
    responses={
        201: {
            "description": "Request created",
            "content": {
                "application/json": {
                    "example": {
                        "id": 7,
                        "userId": 1,
                        "description": "Printer on the 2nd floor is jammed",
                        "status": "pending",
                        "createdAt": "2024-01-13T10:30:00Z",
                        "updatedAt": "2024-01-13T10:30:00Z",
                        "user": {"id": 1, "username": "alice01", "email": "alice@mail.com"}
                    }
                }
            }
        },
        404: {"description": "Owner does not exist"}
    }
)
def create_request(
    data: RequestCreate,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Create a request.

    The owner must exist. A CREATE entry is added to the activity log;
    if that write fails the request is still created.
    """
    try:
        return request_service.create_request(db, data)
    except RequestOwnerNotFoundError:
        raise _owner_not_found()
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error creating request", user_id=data.user_id)


@router.put("", response_model=RequestResponse, summary="Update request")
def update_request(
    data: RequestUpdate,
    request: Request,
    id: Optional[str] = Query(None, description="Request ID"),
    db: Session = Depends(get_db)
):
    """
    Update a request.

    Every field is optional; any status may follow any other.
    """
    request_id = parse_id(id, "request")
    try:
        service_request = request_service.update_request(db, request_id, data)
    except RequestOwnerNotFoundError:
        raise _owner_not_found()
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error updating request", request_id=request_id)

    if service_request is None:
        raise _request_not_found()
    return service_request


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Delete request")
def delete_request(
    request: Request,
    id: Optional[str] = Query(None, description="Request ID"),
    db: Session = Depends(get_db)
):
    request_id = parse_id(id, "request")
    try:
        deleted = request_service.delete_request(db, request_id)
    except SQLAlchemyError as exc:
        raise _server_error(db, exc, request, "Error deleting request", request_id=request_id)

    if not deleted:
        raise _request_not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
