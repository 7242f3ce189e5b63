"""Field whitelist for writes, inferred from stored items of the same type."""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.modules.content import store
from src.modules.content.cleanup import clean_object
from src.modules.content.definitions import (
    definition_field_names,
    get_definition,
    new_content_item,
)
from src.modules.content.mapping import is_reserved

logger = logging.getLogger(__name__)

SCHEMA_SAMPLE_TITLE = "_temp_schema_item"


async def _sample_fields(db: AsyncIOMotorDatabase, content_type: str, definition) -> set[str]:
    """Store a blank item, read its clean keys back and remove it again."""
    sample = new_content_item(content_type, definition)
    sample.display_text = SCHEMA_SAMPLE_TITLE
    await store.insert_item(db, sample)
    try:
        raw = await store.get_by_id(db, sample.content_item_id)
        return set(clean_object(raw, content_type)) if raw else set()
    finally:
        await store.remove_item(db, sample.content_item_id)


async def get_valid_fields(db: AsyncIOMotorDatabase, content_type: str) -> list[str]:
    """Sorted field names accepted on write for ``content_type``."""
    definition = await get_definition(db, content_type)

    items = await store.list_published(db, content_type)
    if items:
        fields = set(clean_object(items[0], content_type))
    else:
        logger.debug("No %s items yet, sampling schema", content_type)
        fields = await _sample_fields(db, content_type, definition)

    fields |= definition_field_names(definition)
    return sorted(fields)


def validate_fields(body: dict, valid_fields: list[str]) -> list[str]:
    """Body keys that are neither reserved nor valid (case-insensitive)."""
    allowed = {name.lower() for name in valid_fields}
    return [key for key in body if not is_reserved(key) and key.lower() not in allowed]
