"""Auth services - business logic for user management."""

import logging
from collections.abc import Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.config import settings
from src.core.exceptions import ConflictError
from src.modules.auth.models import UserInDB
from src.modules.auth.schemas import UserCreate
from src.modules.auth.security import hash_password, verify_password

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


async def get_user_by_email(db: AsyncIOMotorDatabase, email: str) -> UserInDB | None:
    """Get user by email."""
    doc = await db[USERS_COLLECTION].find_one({"email": email})
    return UserInDB.from_mongo(doc) if doc else None


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> UserInDB | None:
    """Get user by identity id."""
    doc = await db[USERS_COLLECTION].find_one({"user_id": user_id})
    return UserInDB.from_mongo(doc) if doc else None


async def get_user_by_username(
    db: AsyncIOMotorDatabase, username: str
) -> UserInDB | None:
    """Get user by username."""
    doc = await db[USERS_COLLECTION].find_one({"username": username})
    return UserInDB.from_mongo(doc) if doc else None


async def create_user(db: AsyncIOMotorDatabase, user_data: UserCreate) -> UserInDB:
    """Register a user with the default role."""
    if await get_user_by_username(db, user_data.username):
        raise ConflictError("Username already taken")
    if await get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    properties = {}
    if user_data.first_name is not None:
        properties["FirstName"] = user_data.first_name
    if user_data.last_name is not None:
        properties["LastName"] = user_data.last_name

    user = UserInDB(
        username=user_data.username,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        phone=user_data.phone,
        roles=[settings.DEFAULT_USER_ROLE],
        properties=properties,
    )
    result = await db[USERS_COLLECTION].insert_one(user.to_mongo())
    user.id = str(result.inserted_id)
    logger.info("Registered user %s", user.username)
    return user


async def authenticate_user(
    db: AsyncIOMotorDatabase, username_or_email: str, password: str
) -> UserInDB | None:
    """Authenticate by username or email and password."""
    user = await get_user_by_username(db, username_or_email)
    if user is None:
        user = await get_user_by_email(db, username_or_email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    return user


async def load_user_index(
    db: AsyncIOMotorDatabase, user_ids: Iterable[str]
) -> dict[str, dict]:
    """Profiles of the given users keyed by id, for user picker enrichment."""
    user_ids = list(user_ids)
    if not user_ids:
        return {}
    cursor = db[USERS_COLLECTION].find({"user_id": {"$in": user_ids}})
    docs = await cursor.to_list(length=None)
    users = [UserInDB.from_mongo(d) for d in docs]
    return {user.user_id: user.to_profile() for user in users}


async def list_user_roles(db: AsyncIOMotorDatabase) -> list[str]:
    """Role names held by any user."""
    roles = await db[USERS_COLLECTION].distinct("roles")
    return [r for r in roles if isinstance(r, str) and r]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for auth collections."""
    await db[USERS_COLLECTION].create_index("user_id", unique=True)
    await db[USERS_COLLECTION].create_index("email", unique=True)
    await db[USERS_COLLECTION].create_index("username", unique=True)
