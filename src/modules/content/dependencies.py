"""Permission dependencies for content routes."""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.config import settings
from src.core.database import get_database
from src.core.exceptions import ForbiddenError
from src.modules.auth.dependencies import get_current_roles
from src.modules.content.permissions import (
    PermissionLookup,
    build_permission_lookup,
    is_allowed,
)
from src.modules.content.services import fetch_clean_content


async def load_permission_lookup(db: AsyncIOMotorDatabase) -> PermissionLookup:
    """Read every permission item and build the role lookup."""
    documents = await fetch_clean_content(
        db, settings.PERMISSIONS_CONTENT_TYPE, populate=False
    )
    return build_permission_lookup(documents)


async def check_permission(
    db: AsyncIOMotorDatabase, roles: list[str], content_type: str, method: str
) -> None:
    lookup = await load_permission_lookup(db)
    if not is_allowed(lookup, roles, content_type, method):
        raise ForbiddenError(method.upper(), content_type)


def require_permission(method: str):
    """Dependency factory: the caller may use ``method`` on the path's content type."""

    async def dependency(
        content_type: str,
        db: AsyncIOMotorDatabase = Depends(get_database),
        roles: list[str] = Depends(get_current_roles),
    ) -> list[str]:
        await check_permission(db, roles, content_type, method)
        return roles

    return dependency
