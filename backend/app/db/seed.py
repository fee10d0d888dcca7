"""
Database Seeding Script
Creates the roles users can be assigned and their permission actions.

This script:
    1. Creates every role listed in DEFAULT_ROLE_PERMISSIONS if missing
    2. Adds any permission action a role is missing
    3. Leaves existing roles and permissions untouched

It runs on every application startup (idempotent) and can also be run by hand.

Usage:
    # From backend directory
    python -m app.db.seed
"""

import logging
import sys

from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_ROLE_PERMISSIONS
from app.models.role import Permission, Role


logger = logging.getLogger("seed")


def seed_roles(db: Session) -> int:
    """
    Create missing roles and permissions.

    Args:
        db: Database session (committed by this function)

    Returns:
        Number of rows created (roles + permissions)
    """
    created = 0
    for role_name, actions in DEFAULT_ROLE_PERMISSIONS.items():
        role = db.query(Role).filter(Role.name == role_name).first()
        if role is None:
            role = Role(name=role_name)
            db.add(role)
            db.flush()
            created += 1

        existing_actions = {p.action for p in role.permissions}
        for action in actions:
            if action not in existing_actions:
                db.add(Permission(role_id=role.id, action=action))
                created += 1

    db.commit()
    return created


def main() -> int:
    from app.core.config import settings
    from app.db.session import SessionLocal, init_engine
    from app.models import Base

    engine = init_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = seed_roles(db)
    finally:
        db.close()

    print(f"✓ Roles seeded ({created} rows created)")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
