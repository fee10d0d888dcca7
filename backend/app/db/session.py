"""
Database Session Management
Creates and manages the SQLAlchemy database engine and session factory.

The engine (and its connection pool) is owned by the process: it is created
once on application startup with init_engine() and released on shutdown
with dispose_engine() (see app/main.py). Endpoints receive sessions through
the get_db() dependency.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


# Session factory
# Bound to the engine in init_engine().
#
# Configuration:
# - autocommit=False: Require explicit commit() calls
# - autoflush=False: Require explicit flush() calls
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
)

_engine: Optional[Engine] = None


def init_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the process-wide engine and bind the session factory to it.

    Safe to call more than once; later calls return the existing engine.

    Configuration:
    - pool_pre_ping=True: Verify connections before using them
    - pool_recycle=3600: Recycle connections after 1 hour
    - SQLite needs check_same_thread=False because endpoints run in a thread pool
    """
    global _engine
    if _engine is not None:
        return _engine

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    _engine = create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    SessionLocal.configure(bind=_engine)
    return _engine


def dispose_engine() -> None:
    """Close every pooled connection and forget the engine."""
    global _engine
    if _engine is None:
        return
    _engine.dispose()
    _engine = None


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that provides database sessions to FastAPI endpoints.

    Yields:
        Database session object

    Usage in FastAPI endpoint:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()

    The session is always closed after the endpoint returns,
    even if an exception occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
