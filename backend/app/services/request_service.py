"""
Request Service - Business Logic Layer
Handles service request CRUD, audit entries and status statistics.

Every mutation is committed first; its audit entry is written afterwards
as a separate best-effort write (see activity_log_service.record_activity).
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.constants import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    STATUS_REJECTED,
)
from app.models.request import ServiceRequest
from app.models.user import User
from app.schemas.request import RequestCreate, RequestStats, RequestUpdate
from app.services.activity_log_service import record_activity


logger = logging.getLogger("requests")


class RequestOwnerNotFoundError(Exception):
    """userId does not reference an existing user."""
    pass


def list_requests(db: Session) -> List[ServiceRequest]:
    """All requests with their owning user."""
    return (
        db.query(ServiceRequest)
        .options(joinedload(ServiceRequest.user))
        .order_by(ServiceRequest.id.asc())
        .all()
    )


def get_request(db: Session, request_id: int) -> Optional[ServiceRequest]:
    return (
        db.query(ServiceRequest)
        .options(joinedload(ServiceRequest.user))
        .filter(ServiceRequest.id == request_id)
        .first()
    )


def _user_exists(db: Session, user_id: int) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def create_request(db: Session, data: RequestCreate) -> ServiceRequest:
    """
    Create a request and append a CREATE audit entry for its owner.

    Raises:
        RequestOwnerNotFoundError: userId does not exist
    """
    if not _user_exists(db, data.user_id):
        raise RequestOwnerNotFoundError(data.user_id)

    service_request = ServiceRequest(
        user_id=data.user_id,
        description=data.description,
        status=data.status,
    )
    db.add(service_request)
    db.commit()
    request_id, owner_id = service_request.id, service_request.user_id

    logger.info(f"REQUEST_CREATED | request_id={request_id} | user_id={owner_id} | status={data.status}")
    record_activity(db, owner_id, ACTION_CREATE, f"Created a new request with ID {request_id}")
    return get_request(db, request_id)


def update_request(db: Session, request_id: int, data: RequestUpdate) -> Optional[ServiceRequest]:
    """
    Update the provided fields and append an UPDATE audit entry.

    Status changes are not checked against any transition order.

    Returns:
        Updated request, or None if it does not exist

    Raises:
        RequestOwnerNotFoundError: a new userId does not exist
    """
    service_request = db.query(ServiceRequest).filter(ServiceRequest.id == request_id).first()
    if service_request is None:
        return None

    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "user_id" in update_data and not _user_exists(db, update_data["user_id"]):
        raise RequestOwnerNotFoundError(update_data["user_id"])

    for field, value in update_data.items():
        setattr(service_request, field, value)
    db.commit()
    owner_id = service_request.user_id

    logger.info(f"REQUEST_UPDATED | request_id={request_id} | fields={sorted(update_data)}")
    record_activity(db, owner_id, ACTION_UPDATE, f"Updated request with ID {request_id}")
    return get_request(db, request_id)


def delete_request(db: Session, request_id: int) -> bool:
    """
    Delete a request and append a DELETE audit entry for its former owner.

    Returns:
        True if deleted, False if it did not exist
    """
    service_request = db.query(ServiceRequest).filter(ServiceRequest.id == request_id).first()
    if service_request is None:
        return False

    owner_id = service_request.user_id
    db.delete(service_request)
    db.commit()

    logger.info(f"REQUEST_DELETED | request_id={request_id} | user_id={owner_id}")
    record_activity(db, owner_id, ACTION_DELETE, f"Deleted request with ID {request_id}")
    return True


def get_request_stats(db: Session) -> RequestStats:
    """
    Count requests per status with a single GROUP BY query.

    Statuses outside the known four count toward total only.
    """
    rows = (
        db.query(ServiceRequest.status, func.count(ServiceRequest.id))
        .group_by(ServiceRequest.status)
        .all()
    )
    counts = {status: count for status, count in rows}

    return RequestStats(
        total=sum(counts.values()),
        pending=counts.get(STATUS_PENDING, 0),
        in_progress=counts.get(STATUS_IN_PROGRESS, 0),
        completed=counts.get(STATUS_COMPLETED, 0),
        rejected=counts.get(STATUS_REJECTED, 0),
    )
