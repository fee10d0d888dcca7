"""
Security Utilities
Password hashing with bcrypt through passlib.

Stored hashes look like "$2b$12$..." and embed their own salt and cost,
so verification needs only the plain password and the stored string.
"""

from passlib.context import CryptContext


# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain text password for storage."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a sign-in password against a stored hash.

    Empty input and malformed hashes return False instead of raising.

    Example:
        >>> stored = hash_password("longpw123")
        >>> verify_password("longpw123", stored)   # True
        >>> verify_password("longpw124", stored)   # False
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def dummy_verify() -> None:
    # Unknown username: one hash round, same cost as a wrong password
    pwd_context.dummy_verify()
