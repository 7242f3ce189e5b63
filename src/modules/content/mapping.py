"""Write path: flat client JSON back into the stored field-wrapper shape."""

import logging
from typing import Any

from src.core.models import generate_id

logger = logging.getLogger(__name__)

RESERVED_FIELDS = frozenset(
    name.lower()
    for name in (
        "id",
        "contentItemId",
        "title",
        "displayText",
        "owner",
        "author",
        "createdUtc",
        "modifiedUtc",
        "publishedUtc",
        "contentType",
        "published",
        "latest",
    )
)

BAG_ITEM_SKIPPED_KEYS = frozenset({"contentType", "id", "title"})
PUSH_OPERATOR = "$push"
DEFAULT_TITLE = "Untitled"


def is_reserved(key: str) -> bool:
    return key.lower() in RESERVED_FIELDS


def to_pascal_case(name: str) -> str:
    """Uppercase the first character only (``firstName`` -> ``FirstName``)."""
    if not name or name[0].isupper():
        return name
    return name[0].upper() + name[1:]


def looks_like_content_item_id(value: Any) -> bool:
    """Heuristic for strings that are probably content item ids.

    More than 20 ASCII letters or digits. Opaque tokens of that shape are
    misclassified as references.
    """
    return (
        isinstance(value, str)
        and len(value) > 20
        and value.isascii()
        and value.isalnum()
    )


def _is_reference_key(key: str) -> bool:
    return len(key) > 2 and key.endswith("Id")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_media_value(value: dict) -> bool:
    return isinstance(value.get("paths"), list) and isinstance(
        value.get("mediaTexts"), list
    )


def _is_user_picker_value(value: list) -> bool:
    first = value[0] if value else None
    return isinstance(first, dict) and "id" in first and "username" in first


def convert_to_pascal(value: Any) -> Any:
    """Recursively PascalCase object keys; numbers widen to float."""
    if isinstance(value, dict):
        return {to_pascal_case(k): convert_to_pascal(v) for k, v in value.items()}
    if isinstance(value, list):
        return [convert_to_pascal(v) for v in value]
    if _is_number(value):
        return float(value)
    return value


def _strings(values: list) -> list[str]:
    return [v for v in values if isinstance(v, str)]


def map_field_value(value: Any) -> dict | None:
    """Wrap one non-reference field value. Returns None for values that write nothing."""
    if value is None:
        return None
    if isinstance(value, bool):
        return {"Value": value}
    if _is_number(value):
        return {"Value": float(value)}
    if isinstance(value, str):
        return {"Text": value}
    if isinstance(value, dict):
        if _is_media_value(value):
            return {
                "Paths": _strings(value["paths"]),
                "MediaTexts": _strings(value["mediaTexts"]),
            }
        return convert_to_pascal(value)
    if isinstance(value, list):
        if _is_user_picker_value(value):
            users = [u for u in value if isinstance(u, dict)]
            return {
                "UserIds": [u["id"] for u in users if isinstance(u.get("id"), str)],
                "UserNames": [
                    u["username"] for u in users if isinstance(u.get("username"), str)
                ],
            }
        if value and all(looks_like_content_item_id(v) for v in value):
            return {"ContentItemIds": list(value)}
        return {"Values": [convert_to_pascal(v) for v in value if v is not None]}
    return None


def map_reference_value(value: Any) -> dict | None:
    """Wrap an ``xxxId`` value as a content picker; empty input writes nothing."""
    if isinstance(value, str):
        return {"ContentItemIds": [value]}
    if isinstance(value, list):
        ids = _strings(value)
        if ids:
            return {"ContentItemIds": ids}
    return None


def create_bag_item(element: dict, content_type: str) -> dict:
    """Build a stored bag member of ``content_type`` from a flat element."""
    section: dict[str, Any] = {}
    for key, value in element.items():
        if key in BAG_ITEM_SKIPPED_KEYS or value is None:
            continue
        pascal_key = to_pascal_case(key)

        if _is_reference_key(key):
            if isinstance(value, str):
                section[pascal_key[:-2]] = {"ContentItemIds": [value]}
        elif looks_like_content_item_id(value):
            section[pascal_key] = {"ContentItemIds": [value]}
        elif isinstance(value, str):
            section[pascal_key] = {"Text": value}
        elif isinstance(value, bool):
            section[pascal_key] = {"Value": value}
        elif _is_number(value):
            section[pascal_key] = {"Value": float(value)}
        elif isinstance(value, list):
            section[pascal_key] = {"Values": _strings(value)}
        elif isinstance(value, dict):
            section[pascal_key] = convert_to_pascal(value)

    return {
        "ContentItemId": generate_id(),
        "ContentType": content_type,
        content_type: section,
    }


def build_bag_items(elements: list, default_type: str | None = None) -> list[dict]:
    """Convert flat bag elements; elements without a content type are skipped."""
    items = []
    for element in elements:
        if not isinstance(element, dict):
            continue
        element_type = element.get("contentType")
        if not isinstance(element_type, str) or not element_type:
            element_type = default_type
        if not element_type:
            logger.debug("Skipping bag element without a content type")
            continue
        items.append(create_bag_item(element, element_type))
    return items


def _existing_bag_items(item: dict) -> list:
    bag = item.get("BagPart")
    if isinstance(bag, dict) and isinstance(bag.get("ContentItems"), list):
        return bag["ContentItems"]
    return []


def _is_bag_value(value: Any) -> bool:
    return isinstance(value, list) or (isinstance(value, dict) and PUSH_OPERATOR in value)


def _apply_items(item: dict, value: Any) -> None:
    """Write the ``items`` key into the bag, replacing it or appending on ``$push``."""
    if isinstance(value, list):
        bag_items = build_bag_items(value)
        if bag_items:
            item["BagPart"] = {"ContentItems": bag_items}
    elif isinstance(value, dict) and isinstance(value.get(PUSH_OPERATOR), list):
        existing = _existing_bag_items(item)
        inferred = next(
            (
                member.get("ContentType")
                for member in existing
                if isinstance(member, dict) and member.get("ContentType")
            ),
            None,
        )
        pushed = build_bag_items(value[PUSH_OPERATOR], default_type=inferred)
        if pushed:
            item["BagPart"] = {"ContentItems": [*existing, *pushed]}


def build_type_section(content_type: str, body: dict, section: dict | None = None) -> dict:
    """Map the non-reserved keys of ``body`` into a type section.

    An ``items`` list or ``$push`` belongs to the bag and is skipped here; any
    other ``items`` value is an ordinary field.
    """
    section = dict(section or {})
    for key, value in body.items():
        if is_reserved(key) or (key == "items" and _is_bag_value(value)):
            continue
        pascal_key = to_pascal_case(key)

        if _is_reference_key(key) and not _is_number(value) and not isinstance(value, bool):
            wrapped = map_reference_value(value)
            if wrapped is not None:
                section[pascal_key[:-2]] = wrapped
            continue

        wrapped = map_field_value(value)
        if wrapped is not None:
            section[pascal_key] = wrapped
    return section


def apply_body(item: dict, content_type: str, body: dict, is_create: bool) -> dict:
    """Apply a flat client body to a stored item in place and return it."""
    title = body.get("title")
    if title is not None:
        item["DisplayText"] = str(title)
    elif is_create:
        item["DisplayText"] = DEFAULT_TITLE

    existing_section = item.get(content_type)
    item[content_type] = build_type_section(
        content_type,
        body,
        existing_section if isinstance(existing_section, dict) else None,
    )

    if _is_bag_value(body.get("items")):
        _apply_items(item, body["items"])
    return item
