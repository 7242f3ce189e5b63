"""Password hashing and JWT access tokens."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from src.core.config import settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        logger.warning("Password verification failed: %s", e)
        return False


def create_access_token(
    subject: str, roles: list[str] | None = None, expires_delta: timedelta | None = None
) -> str:
    """Create a signed access token for a user id."""
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {
        "sub": subject,
        "roles": roles or [],
        "type": "access",
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str | None:
    """Return the user id of a valid access token, None otherwise."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.PyJWTError as e:
        logger.debug("Rejected access token: %s", e)
        return None
    if payload.get("type") != "access":
        return None
    return payload.get("sub")
