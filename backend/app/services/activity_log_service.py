"""
Activity Log Service
Append-only audit trail for request mutations.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models.activity_log import ActivityLog
from app.services.error_logging import error_logger


logger = logging.getLogger("activity_logs")


def list_activity_logs(db: Session) -> List[ActivityLog]:
    """All entries with their user, most recent first."""
    return (
        db.query(ActivityLog)
        .options(joinedload(ActivityLog.user))
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .all()
    )


def log_activity(db: Session, user_id: Optional[int], action: str, description: str) -> ActivityLog:
    """Append one entry and commit it."""
    entry = ActivityLog(user_id=user_id, action=action, description=description)
    db.add(entry)
    db.commit()
    return entry


def record_activity(db: Session, user_id: Optional[int], action: str, description: str) -> bool:
    """
    Best-effort audit write.

    Called after the audited mutation has been committed. A failure here is
    rolled back and logged, and never undoes the mutation itself: the trail
    can miss an entry if this write fails.

    Returns:
        True if the entry was written
    """
    try:
        log_activity(db, user_id, action, description)
    except SQLAlchemyError as exc:
        db.rollback()
        error_logger.log_error(
            exc,
            severity="error",
            context={"audit_user_id": user_id, "action": action, "description": description},
        )
        return False

    logger.info(f"ACTIVITY | user_id={user_id} | action={action} | {description}")
    return True
