"""
CORS Middleware Configuration
Enables Cross-Origin Resource Sharing for frontend-backend communication.

CORS is required when the frontend (dev server on port 3000) calls the
backend API (FastAPI on port 8000) from the browser.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Allowed origins come from CORS_ORIGINS; the application's own URL is
    always allowed. Credentials are allowed so the session cookie travels
    with browser requests.

    Args:
        app: FastAPI application instance
    """
    origins = list(settings.CORS_ORIGINS)
    if settings.APP_URL not in origins:
        origins.append(settings.APP_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,  # Allow cookies and auth headers
        allow_methods=["*"],
        allow_headers=["*"],
    )
