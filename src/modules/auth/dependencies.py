"""Auth dependencies for FastAPI."""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.database import get_database
from src.core.exceptions import UnauthorizedError
from src.modules.auth.models import UserInDB
from src.modules.auth.security import decode_access_token
from src.modules.auth.services import get_user_by_id

# Anonymous callers are allowed through; permissions decide what they may do
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> UserInDB | None:
    """Current user from the bearer token, None for anonymous callers."""
    if not token:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        return None
    user = await get_user_by_id(db, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    user: UserInDB | None = Depends(get_optional_user),
) -> UserInDB:
    """Get current authenticated user from JWT token."""
    if user is None:
        raise UnauthorizedError()
    return user


async def get_current_roles(
    user: UserInDB | None = Depends(get_optional_user),
) -> list[str]:
    """Roles of the caller; empty for anonymous callers."""
    return list(user.roles) if user else []
