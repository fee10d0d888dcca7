"""
Main FastAPI Application
Entry point for the Service Desk API.

This module creates and configures the FastAPI application instance,
sets up middleware, and mounts the v1 API router.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.router import api_router
from app.core.config import settings
from app.db.seed import seed_roles
from app.db.session import SessionLocal, dispose_engine, get_db, init_engine
from app.middleware.cors import setup_cors
from app.middleware.error_handler import setup_error_handling
from app.models import Base
from app.services.error_logging import configure_logging


logger = logging.getLogger("app")

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(_: FastAPI):
    """
    Application startup and shutdown.

    Startup:
    - Configure console (and optional file) logging
    - Create the engine and connection pool
    - Create missing tables and seed roles/permissions (idempotent)

    Note: In production, use Alembic migrations instead of
    Base.metadata.create_all() for schema changes.
    """
    file_logging = configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    logger.info(f"✓ Logging configured (file logging: {'on' if file_logging else 'off'})")

    engine = init_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    Base.metadata.create_all(bind=engine)
    logger.info("✓ Database tables created/verified")

    db = SessionLocal()
    try:
        created = seed_roles(db)
        logger.info(f"✓ Roles seeded ({created} rows created)")
    finally:
        db.close()

    try:
        yield
    finally:
        dispose_engine()
        logger.info("✓ Application shutdown complete")


# Create FastAPI application instance
# - docs_url: Swagger UI endpoint (interactive API documentation)
# - redoc_url: ReDoc endpoint (alternative documentation style)
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    description="""
    Service Desk API.

    Features:
    - User accounts with roles, permissions and profiles
    - Service requests with status tracking and statistics
    - Activity log of request changes
    - Credential sign-in with signed session tokens
    - Email relay over SMTP
    """
)


# Allow the frontend (APP_URL and CORS_ORIGINS) to call the API with cookies
setup_cors(app)

# Uniform {"error": ...} bodies for HTTP, validation and unhandled errors
setup_error_handling(app)


@app.get("/health", tags=["Health"], summary="Health Check")
def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus a database round trip.

    503 when the database does not answer, so container orchestrators
    can restart or drain the instance.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning(f"HEALTH_CHECK_FAILED | {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "database": "unreachable", "api": settings.PROJECT_NAME}
        )
    return {"status": "ok", "database": "ok", "version": APP_VERSION, "api": settings.PROJECT_NAME}


@app.get("/", tags=["Root"], summary="API Root")
def root():
    return {
        "message": settings.PROJECT_NAME,
        "version": APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "api": f"/api/{settings.API_VERSION}",
    }


# All v1 endpoints are prefixed with /api/v1
app.include_router(
    api_router,
    prefix=f"/api/{settings.API_VERSION}",
)
