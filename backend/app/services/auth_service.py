"""
Authentication Service
Handles credential sign-in, session token issuing/verification and the
post-sign-in redirect guard.

This service provides core authentication functionality:
- User authentication by username and password
- Session token generation (identity embedded, signed with SECRET_KEY)
- Session token verification and renewal
- Same-origin redirect resolution
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from urllib.parse import urlencode, urljoin, urlsplit

from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.security import dummy_verify, verify_password
from app.models.role import Role
from app.models.user import User
from app.schemas.auth import SessionRole, SessionUser


auth_logger = logging.getLogger("auth")

# Algorithm used for signing tokens (HS256 = HMAC with SHA-256)
ALGORITHM = "HS256"

TOKEN_TYPE = "session"

SIGNIN_ERROR = "CredentialsSignin"

_DEFAULT_PORTS = {"http": 80, "https": 443}


# ============================================================================
# User Authentication
# ============================================================================

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Load a user with role and permissions attached."""
    return (
        db.query(User)
        .options(joinedload(User.role).joinedload(Role.permissions))
        .filter(User.username == username)
        .first()
    )


def build_identity(user: User) -> SessionUser:
    """
    Identity object carried by the session.

    Contains no password hash and no profile data.
    """
    return SessionUser(
        id=user.id,
        username=user.username,
        email=user.email,
        role=SessionRole(
            name=user.role.name,
            permissions=user.role.actions,
        ),
    )


def authenticate_user(db: Session, username: str, password: str) -> Optional[SessionUser]:
    """
    Authenticate a user by username and password.

    A failed sign-in is a negative result, not an error. When the username
    is unknown a dummy hash check still runs, so the response time does not
    reveal which factor failed.

    Args:
        db: Database session
        username: Login name
        password: Plain text password to verify

    Returns:
        SessionUser if credentials are valid, None otherwise

    Example:
        identity = authenticate_user(db, "alice01", "SecurePass123!")
    """
    user = get_user_by_username(db, username)

    if user is None:
        dummy_verify()
        return None

    if not verify_password(password, user.password_hash):
        return None

    return build_identity(user)


# ============================================================================
# Session Token Functions
# ============================================================================

def create_session_token(identity: SessionUser) -> Tuple[str, datetime]:
    """
    Create a signed session token for an identity.

    Every issuance embeds id, username, email and role again, so a renewed
    token always carries the full identity.

    Returns:
        (encoded token, expiry time)
    """
    issued_at = datetime.now(timezone.utc)
    expires = issued_at + timedelta(seconds=settings.SESSION_MAX_AGE)

    payload = {
        "sub": str(identity.id),
        "id": identity.id,
        "username": identity.username,
        "email": identity.email,
        "role": {
            "name": identity.role.name,
            "permissions": list(identity.role.permissions),
        },
        "type": TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires.timestamp()),
    }

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)
    return token, datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


def verify_session_token(token: Optional[str]) -> Optional[SessionUser]:
    """
    Verify and decode a session token.

    Validates signature, expiration and type.

    Returns:
        SessionUser if the token is valid, None otherwise
    """
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        # Bad signature, expired, malformed
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    try:
        return SessionUser(
            id=payload.get("id"),
            username=payload.get("username"),
            email=payload.get("email"),
            role=payload.get("role"),
        )
    except ValidationError:
        return None


def renew_session(token: Optional[str]) -> Optional[Tuple[SessionUser, str, datetime]]:
    """
    Re-issue a valid session token with a fresh expiry.

    Returns:
        (identity, new token, expiry) or None if the token is not valid
    """
    identity = verify_session_token(token)
    if identity is None:
        return None
    new_token, expires = create_session_token(identity)
    return identity, new_token, expires


# ============================================================================
# Redirects
# ============================================================================

def _origin(url: str) -> Optional[Tuple[str, str, int]]:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    scheme = (parts.scheme or "").lower()
    host = (parts.hostname or "").lower()
    if scheme not in _DEFAULT_PORTS or not host:
        return None
    return scheme, host, port or _DEFAULT_PORTS[scheme]


def safe_redirect_url(url: Optional[str], base_url: Optional[str] = None) -> str:
    """
    Resolve where to send the browser after sign-in.

    Relative paths are resolved against the application URL. The result is
    used only if its parsed origin (scheme, host, port) equals the
    application's own origin; anything else falls back to base_url.

    Example:
        safe_redirect_url("/dashboard")              # http://localhost:3000/dashboard
        safe_redirect_url("https://evil.example/")   # http://localhost:3000
        safe_redirect_url("//evil.example/path")     # http://localhost:3000
    """
    base_url = base_url or settings.APP_URL
    candidate = (url or "").strip()
    if not candidate:
        return base_url

    base_origin = _origin(base_url)
    resolved = urljoin(base_url, candidate)
    if base_origin is None or _origin(resolved) != base_origin:
        return base_url
    return resolved


def signin_error_url(error: str = SIGNIN_ERROR) -> str:
    """Sign-in page, which doubles as the authentication error page."""
    return f"{urljoin(settings.APP_URL, settings.SIGNIN_PAGE)}?{urlencode({'error': error})}"
