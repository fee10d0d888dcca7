"""
Session Endpoints
Handles credential sign-in, session lookup and sign-out.

Endpoints:
- POST /auth/session - Sign in with username and password
- GET /auth/session - Current session (renews the token)
- DELETE /auth/session - Sign out
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.deps import get_session_token
from app.core.config import settings
from app.db.session import get_db
from app.schemas.auth import SessionResponse, SignInRequest, SignInResponse
from app.services import auth_service
from app.services.auth_service import auth_logger
from app.services.error_logging import error_logger


# Create router for session endpoints
# This router will be included in the main app with prefix /api/v1/auth
router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.APP_URL.startswith("https://"),
        path="/",
    )


@router.post(
    "/session",
    response_model=SignInResponse,
    summary="Sign in",
    description="Authenticate with username and password and start a session",
    responses={
        200: {
            "description": "Signed in",
            "content": {
                "application/json": {
                    "example": {
                        "user": {
                            "id": 1,
                            "username": "alice01",
                            "email": "alice@mail.com",
                            "role": {"name": "user", "permissions": ["request:create"]}
                        },
                        "expires": "2024-02-12T10:30:00Z",
                        "sessionToken": "eyJhbGciOiJIUzI1NiIs...",
                        "url": "http://localhost:3000/dashboard"
                    }
                }
            }
        },
        401: {
            "description": "Invalid credentials",
            "content": {
                "application/json": {
                    "example": {
                        "error": "CredentialsSignin",
                        "url": "http://localhost:3000/signin?error=CredentialsSignin"
                    }
                }
            }
        }
    }
)
def sign_in(
    credentials: SignInRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Sign in with username and password.

    Flow:
    1. Load the user with role and permissions
    2. Verify the password against the stored bcrypt hash
    3. Issue a signed session token carrying id, username, email and role
    4. Set it as an HTTP-only cookie and return it with the identity
    5. Resolve callbackUrl: honoured only for the application's own origin

    Errors:
    - 401: Unknown username or wrong password. The message does not say
      which; the body points at the sign-in page, which is also the error page.
    - 500: Database failure (details are only logged)

    Security:
    - No token or cookie is issued on failure
    - Password hashes and tokens are never logged
    """
    client_ip = request.client.host if request.client else "unknown"

    auth_logger.info(f"SIGNIN_ATTEMPT | username={credentials.username} | ip={client_ip}")

    try:
        identity = auth_service.authenticate_user(db, credentials.username, credentials.password)
    except SQLAlchemyError as exc:
        error_logger.log_error(exc, request=request, context={"username": credentials.username})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error signing in", "url": auth_service.signin_error_url("Configuration")}
        )

    if identity is None:
        auth_logger.warning(
            f"SIGNIN_FAILED | username={credentials.username} | ip={client_ip} | reason=invalid_credentials"
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": auth_service.SIGNIN_ERROR, "url": auth_service.signin_error_url()}
        )

    token, expires = auth_service.create_session_token(identity)
    _set_session_cookie(response, token)

    auth_logger.info(
        f"SIGNIN_SUCCESS | user_id={identity.id} | role={identity.role.name} | ip={client_ip}"
    )

    return SignInResponse(
        user=identity,
        expires=expires,
        session_token=token,
        url=auth_service.safe_redirect_url(credentials.callback_url),
    )


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session",
    description="Return the signed-in identity and renew the session token; {} when signed out",
)
def get_session(
    response: Response,
    token: Optional[str] = Depends(get_session_token)
):
    """
    Current session.

    A valid token is re-issued with a fresh expiry; the identity is
    re-embedded from the old token. A missing, expired or tampered token
    yields an empty object.
    """
    renewed = auth_service.renew_session(token)
    if renewed is None:
        return JSONResponse(status_code=status.HTTP_200_OK, content={})

    identity, new_token, expires = renewed
    _set_session_cookie(response, new_token)
    return SessionResponse(user=identity, expires=expires)


@router.delete(
    "/session",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
def sign_out(token: Optional[str] = Depends(get_session_token)):
    """Clear the session cookie."""
    identity = auth_service.verify_session_token(token)
    if identity is not None:
        auth_logger.info(f"SIGNOUT | user_id={identity.id}")

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return response
