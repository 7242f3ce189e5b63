"""Content item storage - queries over the content_items collection."""

from collections.abc import Iterable
from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from src.modules.content.models import ContentItem

CONTENT_ITEMS_COLLECTION = "content_items"


def _published(content_type: str) -> dict:
    return {"ContentType": content_type, "Published": True}


async def _to_raw_list(cursor) -> list[dict]:
    docs = await cursor.to_list(length=None)
    return [ContentItem.from_mongo(d).to_raw() for d in docs]


async def list_published(db: AsyncIOMotorDatabase, content_type: str) -> list[dict]:
    """Published items of a type in creation order."""
    cursor = db[CONTENT_ITEMS_COLLECTION].find(_published(content_type)).sort(
        [("CreatedUtc", ASCENDING), ("_id", ASCENDING)]
    )
    return await _to_raw_list(cursor)


async def list_created_after(
    db: AsyncIOMotorDatabase, content_type: str, since: datetime
) -> list[dict]:
    """Published items of a type created after ``since``."""
    query = {**_published(content_type), "CreatedUtc": {"$gt": since}}
    cursor = db[CONTENT_ITEMS_COLLECTION].find(query).sort(
        [("CreatedUtc", ASCENDING), ("_id", ASCENDING)]
    )
    return await _to_raw_list(cursor)


async def get_by_ids(db: AsyncIOMotorDatabase, ids: Iterable[str]) -> list[dict]:
    """Published items whose id is in ``ids``, of any type."""
    ids = list(ids)
    if not ids:
        return []
    cursor = db[CONTENT_ITEMS_COLLECTION].find(
        {"ContentItemId": {"$in": ids}, "Published": True}
    )
    return await _to_raw_list(cursor)


async def get_by_id(db: AsyncIOMotorDatabase, content_item_id: str) -> dict | None:
    doc = await db[CONTENT_ITEMS_COLLECTION].find_one(
        {"ContentItemId": content_item_id, "Published": True}
    )
    return ContentItem.from_mongo(doc).to_raw() if doc else None


async def insert_item(db: AsyncIOMotorDatabase, item: ContentItem) -> ContentItem:
    result = await db[CONTENT_ITEMS_COLLECTION].insert_one(item.to_mongo())
    item.id = str(result.inserted_id)
    return item


async def replace_item(db: AsyncIOMotorDatabase, item: ContentItem) -> bool:
    data = item.to_mongo()
    data.pop("_id", None)
    result = await db[CONTENT_ITEMS_COLLECTION].replace_one(
        {"ContentItemId": item.content_item_id}, data
    )
    return result.matched_count > 0


async def remove_item(db: AsyncIOMotorDatabase, content_item_id: str) -> bool:
    result = await db[CONTENT_ITEMS_COLLECTION].delete_one(
        {"ContentItemId": content_item_id}
    )
    return result.deleted_count > 0


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for the content collection."""
    await db[CONTENT_ITEMS_COLLECTION].create_index("ContentItemId", unique=True)
    await db[CONTENT_ITEMS_COLLECTION].create_index(
        [("ContentType", ASCENDING), ("Published", ASCENDING), ("CreatedUtc", ASCENDING)]
    )
