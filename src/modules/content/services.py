"""Content services - read pipeline and create/update/delete."""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.exceptions import AppException, DatabaseError, InvalidFieldsError, NotFoundError
from src.core.models import generate_id, utc_now
from src.modules.auth.services import load_user_index
from src.modules.content import store
from src.modules.content.cleanup import clean_object
from src.modules.content.definitions import get_definition, new_content_item
from src.modules.content.mapping import apply_body
from src.modules.content.models import ContentItem
from src.modules.content.references import (
    collect_content_item_ids,
    collect_user_ids,
    index_by_id,
    populate_content_item_ids,
)
from src.modules.content.validation import get_valid_fields, validate_fields

logger = logging.getLogger(__name__)

ANONYMOUS_OWNER = "anonymous"


async def _populate_raw(db: AsyncIOMotorDatabase, raw_items: list[dict]) -> list[dict]:
    ids: set[str] = set()
    for item in raw_items:
        collect_content_item_ids(item, ids)
    if not ids:
        return raw_items
    index = index_by_id(await store.get_by_ids(db, ids))
    return [populate_content_item_ids(item, index) for item in raw_items]


async def _populate_clean(
    db: AsyncIOMotorDatabase, clean_items: list[dict], user_index: dict
) -> list[dict]:
    """Second pass over flattened output.

    Flattening can produce ``xxxId`` keys that were not visible in the stored
    shape (bag members, references of embedded items). Those targets are
    fetched, flattened on their own and spliced in under ``xxx``.
    """
    ids: set[str] = set()
    for item in clean_items:
        collect_content_item_ids(item, ids)
    if not ids:
        return clean_items

    targets = await store.get_by_ids(db, ids)
    missing_users = collect_user_ids(targets) - set(user_index)
    if missing_users:
        user_index = {**user_index, **await load_user_index(db, missing_users)}

    index = {
        target["ContentItemId"]: clean_object(target, target["ContentType"], user_index)
        for target in targets
    }
    return [populate_content_item_ids(item, index) for item in clean_items]


async def build_clean_content(
    db: AsyncIOMotorDatabase,
    raw_items: list[dict],
    content_type: str,
    populate: bool,
) -> list[dict]:
    """Flatten raw items, resolving references first when ``populate`` is set."""
    items = await _populate_raw(db, raw_items) if populate else raw_items

    user_index = await load_user_index(db, collect_user_ids(items))
    cleaned = [clean_object(item, content_type, user_index) for item in items]

    if populate:
        cleaned = await _populate_clean(db, cleaned, user_index)
    return cleaned


async def fetch_clean_content(
    db: AsyncIOMotorDatabase, content_type: str, populate: bool = True
) -> list[dict]:
    """Published items of a type in the flattened shape."""
    raw_items = await store.list_published(db, content_type)
    return await build_clean_content(db, raw_items, content_type, populate)


async def fetch_raw_content(db: AsyncIOMotorDatabase, content_type: str) -> list[dict]:
    """Published items of a type exactly as stored."""
    return await store.list_published(db, content_type)


async def _check_fields(db: AsyncIOMotorDatabase, content_type: str, body: dict) -> None:
    valid_fields = await get_valid_fields(db, content_type)
    invalid_fields = validate_fields(body, valid_fields)
    if invalid_fields:
        logger.warning("Rejected %s write with invalid fields %s", content_type, invalid_fields)
        raise InvalidFieldsError(invalid_fields, valid_fields)


async def create_content_item(
    db: AsyncIOMotorDatabase, content_type: str, body: dict, owner: str | None = None
) -> ContentItem:
    """Validate and store a new item built from a flat body."""
    await _check_fields(db, content_type, body)
    try:
        definition = await get_definition(db, content_type)
        raw = new_content_item(content_type, definition).to_raw()
        apply_body(raw, content_type, body, is_create=True)
        raw["Owner"] = owner or ANONYMOUS_OWNER
        raw["Author"] = raw["Owner"]

        item = await store.insert_item(db, ContentItem.model_validate(raw))
    except AppException:
        raise
    except Exception as e:
        logger.exception("Failed to create %s item", content_type)
        raise DatabaseError(str(e)) from e

    logger.info("Created %s %s", content_type, item.content_item_id)
    return item


async def _get_typed(db: AsyncIOMotorDatabase, content_type: str, content_item_id: str) -> dict:
    raw = await store.get_by_id(db, content_item_id)
    if raw is None or raw.get("ContentType") != content_type:
        raise NotFoundError()
    return raw


async def update_content_item(
    db: AsyncIOMotorDatabase, content_type: str, content_item_id: str, body: dict
) -> ContentItem:
    """Apply a flat body to an existing item of ``content_type``."""
    raw = await _get_typed(db, content_type, content_item_id)
    await _check_fields(db, content_type, body)
    try:
        apply_body(raw, content_type, body, is_create=False)
        now = utc_now()
        raw["ContentItemVersionId"] = generate_id()
        raw["ModifiedUtc"] = now
        raw["PublishedUtc"] = now

        item = ContentItem.model_validate(raw)
        if not await store.replace_item(db, item):
            raise NotFoundError()
    except AppException:
        raise
    except Exception as e:
        logger.exception("Failed to update %s %s", content_type, content_item_id)
        raise DatabaseError(str(e)) from e

    logger.info("Updated %s %s", content_type, content_item_id)
    return item


async def delete_content_item(
    db: AsyncIOMotorDatabase, content_type: str, content_item_id: str
) -> None:
    """Remove an item of ``content_type``; references to it are left dangling."""
    await _get_typed(db, content_type, content_item_id)
    try:
        await store.remove_item(db, content_item_id)
    except Exception as e:
        logger.exception("Failed to delete %s %s", content_type, content_item_id)
        raise DatabaseError(str(e)) from e
    logger.info("Deleted %s %s", content_type, content_item_id)
