"""Content router - generic CRUD over every content type."""

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.database import get_database
from src.core.exceptions import BadRequestError
from src.modules.auth.dependencies import get_optional_user
from src.modules.auth.models import UserInDB
from src.modules.content.dependencies import require_permission
from src.modules.content.query_filters import apply_query_filters
from src.modules.content.schemas import ContentDeleteResponse, ContentWriteResponse
from src.modules.content.services import (
    create_content_item,
    delete_content_item,
    fetch_clean_content,
    fetch_raw_content,
    update_content_item,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["content"])
expand_router = APIRouter(prefix="/api/expand", tags=["content"])
raw_router = APIRouter(prefix="/api/raw", tags=["content"])


def not_found_null() -> JSONResponse:
    """Single item misses answer with a literal ``null``."""
    return JSONResponse(content=None, status_code=status.HTTP_404_NOT_FOUND)


def find_item(items: list[dict], key: str, item_id: str) -> dict | None:
    return next((item for item in items if item.get(key) == item_id), None)


async def read_body(request: Request) -> dict:
    """Parse a non-empty JSON object body."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug("Unreadable request body: %s", e)
        raise BadRequestError() from e
    if not isinstance(body, dict) or not body:
        raise BadRequestError()
    return body


# Populated reads


@expand_router.get("/{content_type}", dependencies=[Depends(require_permission("GET"))])
async def list_expanded(
    content_type: str,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """List items with references resolved."""
    items = await fetch_clean_content(db, content_type, populate=True)
    return apply_query_filters(request.query_params, items)


@expand_router.get(
    "/{content_type}/{item_id}", dependencies=[Depends(require_permission("GET"))]
)
async def get_expanded(
    content_type: str,
    item_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Get one item with references resolved."""
    items = await fetch_clean_content(db, content_type, populate=True)
    item = find_item(items, "id", item_id)
    return item if item is not None else not_found_null()


# Raw reads


@raw_router.get("/{content_type}", dependencies=[Depends(require_permission("GET"))])
async def list_raw(
    content_type: str,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """List items exactly as stored."""
    items = await fetch_raw_content(db, content_type)
    return apply_query_filters(request.query_params, items)


@raw_router.get(
    "/{content_type}/{item_id}", dependencies=[Depends(require_permission("GET"))]
)
async def get_raw(
    content_type: str,
    item_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Get one item exactly as stored."""
    items = await fetch_raw_content(db, content_type)
    item = find_item(items, "ContentItemId", item_id)
    return item if item is not None else not_found_null()


# Flat reads and writes


@router.get("/{content_type}", dependencies=[Depends(require_permission("GET"))])
async def list_items(
    content_type: str,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """List items in the flattened shape."""
    items = await fetch_clean_content(db, content_type, populate=False)
    return apply_query_filters(request.query_params, items)


@router.get("/{content_type}/{item_id}", dependencies=[Depends(require_permission("GET"))])
async def get_item(
    content_type: str,
    item_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Get one item in the flattened shape."""
    items = await fetch_clean_content(db, content_type, populate=False)
    item = find_item(items, "id", item_id)
    return item if item is not None else not_found_null()


@router.post(
    "/{content_type}",
    response_model=ContentWriteResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("POST"))],
)
async def create_item(
    content_type: str,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: UserInDB | None = Depends(get_optional_user),
) -> ContentWriteResponse:
    """Create an item from a flat JSON body."""
    body = await read_body(request)
    owner = current_user.username if current_user else None
    item = await create_content_item(db, content_type, body, owner=owner)
    return ContentWriteResponse(id=item.content_item_id, title=item.display_text)


@router.put(
    "/{content_type}/{item_id}",
    response_model=ContentWriteResponse,
    dependencies=[Depends(require_permission("PUT"))],
)
async def update_item(
    content_type: str,
    item_id: str,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> ContentWriteResponse:
    """Update the fields named in a flat JSON body."""
    body = await read_body(request)
    item = await update_content_item(db, content_type, item_id, body)
    return ContentWriteResponse(id=item.content_item_id, title=item.display_text)


@router.delete(
    "/{content_type}/{item_id}",
    response_model=ContentDeleteResponse,
    dependencies=[Depends(require_permission("DELETE"))],
)
async def delete_item(
    content_type: str,
    item_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> ContentDeleteResponse:
    """Remove an item."""
    await delete_content_item(db, content_type, item_id)
    return ContentDeleteResponse(id=item_id)
