"""
Activity Log Endpoints
Read-only access to the request audit trail.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.activity_log import ActivityLogResponse
from app.services import activity_log_service
from app.services.error_logging import error_logger


router = APIRouter(prefix="/activityLogs", tags=["Activity Logs"])


@router.get("", response_model=List[ActivityLogResponse])
def get_activity_logs(request: Request, db: Session = Depends(get_db)):
    """
    Get all activity log entries, newest first.
    """
    try:
        return activity_log_service.list_activity_logs(db)
    except SQLAlchemyError as exc:
        db.rollback()
        error_logger.log_error(exc, request=request)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching activity logs"
        )
