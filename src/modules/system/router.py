"""System router - content types and roles."""

from fastapi import APIRouter, Depends

from src.core.config import settings
from src.core.dependencies import MongoDB
from src.core.exceptions import ForbiddenError, UnauthorizedError
from src.modules.auth.dependencies import get_optional_user
from src.modules.auth.models import UserInDB
from src.modules.auth.services import list_user_roles
from src.modules.content.definitions import list_definitions, save_definition
from src.modules.content.dependencies import check_permission
from src.modules.content.models import ContentTypeDefinition
from src.modules.content.permissions import ANONYMOUS_ROLE, split_delimited
from src.modules.content.services import fetch_clean_content
from src.modules.content.store import CONTENT_ITEMS_COLLECTION
from src.modules.system.schemas import (
    ContentTypeDefinitionResponse,
    ContentTypeDefinitionUpdate,
)

router = APIRouter(prefix="/api/system", tags=["system"])

SYSTEM_RESOURCE = "system"


def is_administrator(user: UserInDB | None) -> bool:
    return user is not None and settings.ADMIN_ROLE in user.roles


async def require_system_read(
    db: MongoDB,
    user: UserInDB | None = Depends(get_optional_user),
) -> None:
    """Administrators always pass; others need GET on ``system``."""
    if is_administrator(user):
        return
    await check_permission(db, user.roles if user else [], SYSTEM_RESOURCE, "GET")


async def require_administrator(
    user: UserInDB | None = Depends(get_optional_user),
) -> UserInDB:
    if user is None:
        raise UnauthorizedError()
    if not is_administrator(user):
        raise ForbiddenError("PUT", SYSTEM_RESOURCE)
    return user


@router.get("/content-types", dependencies=[Depends(require_system_read)])
async def list_content_types(db: MongoDB) -> list[str]:
    """Names of defined content types and of types that have items."""
    names = {definition.name for definition in await list_definitions(db)}
    names.update(await db[CONTENT_ITEMS_COLLECTION].distinct("ContentType"))
    return sorted(n for n in names if isinstance(n, str) and n)


@router.get("/roles", dependencies=[Depends(require_system_read)])
async def list_roles(db: MongoDB) -> list[str]:
    """Every role known to users, permissions and configuration."""
    roles = {settings.ADMIN_ROLE, settings.DEFAULT_USER_ROLE, ANONYMOUS_ROLE}
    roles.update(await list_user_roles(db))
    permissions = await fetch_clean_content(
        db, settings.PERMISSIONS_CONTENT_TYPE, populate=False
    )
    for permission in permissions:
        roles.update(split_delimited(permission.get("roles")))
    return sorted(roles)


@router.put(
    "/content-types/{name}",
    response_model=ContentTypeDefinitionResponse,
    dependencies=[Depends(require_administrator)],
)
async def put_content_type(
    name: str,
    definition_data: ContentTypeDefinitionUpdate,
    db: MongoDB,
) -> ContentTypeDefinitionResponse:
    """Create or replace a content type definition."""
    definition = ContentTypeDefinition(
        name=name,
        display_name=definition_data.display_name or name,
        fields=definition_data.fields,
        parts=definition_data.parts,
    )
    await save_definition(db, definition)
    return ContentTypeDefinitionResponse(
        name=definition.name,
        display_name=definition.display_name,
        fields=definition.fields,
        parts=definition.parts,
    )
