"""
Error Handler Middleware

Every error leaves the API as {"error": "<message>"}:
- HTTPException raised by endpoints keeps its status code
- Request validation errors become 400 with every violation listed
- Anything unhandled is logged and becomes a generic 500
"""

from typing import Callable, List

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.services.error_logging import error_logger


_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all unhandled exceptions and logs them.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            # Unhandled exceptions - log as critical, never leak details
            error_logger.log_error(
                exc,
                request=request,
                severity="critical",
                context={"unhandled": True}
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"}
            )


def format_validation_errors(errors: List[dict]) -> str:
    """
    Turn pydantic errors into one readable message.

    Example:
        "username: String should have at least 3 characters, email: value is not a valid email address"
    """
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        msg = err.get("msg", "Invalid value")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return ", ".join(messages) or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": format_validation_errors(exc.errors())},
    )


def setup_error_handling(app: FastAPI) -> None:
    """Register the error middleware and exception handlers."""
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
