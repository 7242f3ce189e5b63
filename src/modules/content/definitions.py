"""Content type definitions - field lists used to build blank items."""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.models import utc_now
from src.modules.content.cleanup import to_camel_case
from src.modules.content.models import ContentItem, ContentTypeDefinition, FieldType

logger = logging.getLogger(__name__)

CONTENT_DEFINITIONS_COLLECTION = "content_definitions"

DEFAULT_FIELD_VALUES = {
    FieldType.TEXT: lambda: {"Text": ""},
    FieldType.HTML: lambda: {"Html": ""},
    FieldType.NUMERIC: lambda: {"Value": None},
    FieldType.BOOLEAN: lambda: {"Value": False},
    FieldType.DATE: lambda: {"Value": None},
    FieldType.CONTENT_PICKER: lambda: {"ContentItemIds": []},
    FieldType.USER_PICKER: lambda: {"UserIds": [], "UserNames": []},
    FieldType.MULTI_TEXT: lambda: {"Values": []},
    FieldType.MEDIA: lambda: {"Paths": [], "MediaTexts": []},
}


async def get_definition(
    db: AsyncIOMotorDatabase, name: str
) -> ContentTypeDefinition | None:
    doc = await db[CONTENT_DEFINITIONS_COLLECTION].find_one({"name": name})
    return ContentTypeDefinition.from_mongo(doc) if doc else None


async def list_definitions(db: AsyncIOMotorDatabase) -> list[ContentTypeDefinition]:
    cursor = db[CONTENT_DEFINITIONS_COLLECTION].find().sort("name", 1)
    docs = await cursor.to_list(length=None)
    return [ContentTypeDefinition.from_mongo(d) for d in docs]


async def save_definition(
    db: AsyncIOMotorDatabase, definition: ContentTypeDefinition
) -> ContentTypeDefinition:
    """Create or replace the definition with the same name."""
    data = definition.to_mongo()
    data.pop("_id", None)
    await db[CONTENT_DEFINITIONS_COLLECTION].replace_one(
        {"name": definition.name}, data, upsert=True
    )
    logger.info("Saved content type definition %s", definition.name)
    return definition


def new_content_item(
    content_type: str, definition: ContentTypeDefinition | None = None
) -> ContentItem:
    """Blank item with a default value for every defined field."""
    section = {}
    extra = {}
    if definition is not None:
        for field in definition.fields:
            section[field.name] = DEFAULT_FIELD_VALUES[field.field_type]()
        if definition.has_bag:
            extra["BagPart"] = {"ContentItems": []}

    now = utc_now()
    return ContentItem(
        content_type=content_type,
        created_utc=now,
        modified_utc=now,
        published_utc=now,
        **{content_type: section},
        **extra,
    )


def definition_field_names(definition: ContentTypeDefinition | None) -> set[str]:
    """Flat field names a definition accepts on write."""
    if definition is None:
        return set()
    names = set()
    for field in definition.fields:
        name = to_camel_case(field.name)
        if field.field_type == FieldType.CONTENT_PICKER:
            name += "Id"
        names.add(name)
    if definition.has_bag:
        names.add("items")
    return names
