"""Flattening of stored content items into plain camelCase JSON objects.

Stored items wrap every field value in a shape that depends on the field
kind: ``{"Text": ...}``, ``{"Value": ...}``, ``{"ContentItemIds": [...]}``,
``{"UserIds": [...], "UserNames": [...]}`` and so on. ``extract_field_value``
recognises those shapes in a fixed order and returns the bare value, so the
whole flattening rule set lives in one function.
"""

from typing import Any

USER_INDEX_EMAIL = "Email"
USER_INDEX_PHONE = "PhoneNumber"
USER_INDEX_PROPERTIES = "Properties"


def to_camel_case(name: str) -> str:
    """Lowercase the first character only (``FirstName`` -> ``firstName``)."""
    if not name or name[0].islower():
        return name
    return name[0].lower() + name[1:]


def _find_key(obj: dict, name: str) -> str | None:
    for candidate in (name, to_camel_case(name)):
        if candidate in obj:
            return candidate
    return None


def _enrich_user(user: dict, profile: dict) -> None:
    email = profile.get(USER_INDEX_EMAIL)
    if isinstance(email, str):
        user["email"] = email
    phone = profile.get(USER_INDEX_PHONE)
    if isinstance(phone, str):
        user["phone"] = phone
    properties = profile.get(USER_INDEX_PROPERTIES)
    if isinstance(properties, dict):
        for key, value in properties.items():
            if value is not None and key:
                user[to_camel_case(key)] = value


def _zip_users(obj: dict, ids_key: str, names_key: str, user_index: dict | None) -> list:
    ids = [v for v in obj[ids_key] if isinstance(v, str)]
    names = [v for v in obj[names_key] if isinstance(v, str)]
    users = []
    for user_id, username in zip(ids, names):
        user = {"id": user_id, "username": username}
        if user_index and user_id in user_index:
            _enrich_user(user, user_index[user_id])
        users.append(user)
    return users


def _clean_embedded(items: list, user_index: dict | None) -> Any:
    cleaned = [
        clean_object(item, item.get("ContentType") or "", user_index)
        for item in items
        if isinstance(item, dict)
    ]
    if not cleaned:
        return None
    if len(cleaned) == 1:
        return cleaned[0]
    return cleaned


def extract_field_value(value: Any, user_index: dict | None = None) -> tuple[Any, bool]:
    """Unwrap one stored field value.

    Returns ``(value, is_reference)``. ``value`` is None when the field should
    be omitted; ``is_reference`` tells the caller to suffix the key with ``Id``.
    """
    if isinstance(value, dict):
        if "Text" in value and len(value) == 1:
            text = value["Text"]
            if isinstance(text, list):
                text = text[0] if text else None
            return (text if isinstance(text, str) else None), False

        ids_key = _find_key(value, "UserIds")
        names_key = _find_key(value, "UserNames")
        if (
            ids_key
            and names_key
            and isinstance(value[ids_key], list)
            and isinstance(value[names_key], list)
        ):
            return _zip_users(value, ids_key, names_key, user_index), False

        if isinstance(value.get("ContentItemIds"), list):
            ids = [v for v in value["ContentItemIds"] if isinstance(v, str)]
            if not ids:
                return None, False
            if len(ids) == 1:
                return ids[0], True
            return ids, True

        if isinstance(value.get("Items"), list):
            return _clean_embedded(value["Items"], user_index), False

        if len(value) == 1:
            values_key = _find_key(value, "Values")
            if values_key and isinstance(value[values_key], list):
                return _extract_list(value[values_key], user_index), False

        cleaned = {}
        for key, nested in value.items():
            extracted, _ = extract_field_value(nested, user_index)
            if extracted is not None:
                cleaned[to_camel_case(key)] = extracted
        if len(cleaned) == 1:
            return next(iter(cleaned.values())), False
        return cleaned, False

    if isinstance(value, list):
        return _extract_list(value, user_index), False
    if isinstance(value, bool) or isinstance(value, str):
        return value, False
    if isinstance(value, (int, float)):
        return float(value), False
    return None, False


def _extract_list(values: list, user_index: dict | None) -> list:
    result = []
    for element in values:
        extracted, _ = extract_field_value(element, user_index)
        if extracted is not None:
            result.append(extracted)
    return result


def clean_object(raw: dict, content_type: str, user_index: dict | None = None) -> dict:
    """Flatten one stored content item of ``content_type``."""
    clean: dict[str, Any] = {}

    if isinstance(raw.get("ContentItemId"), str):
        clean["id"] = raw["ContentItemId"]
    if isinstance(raw.get("DisplayText"), str):
        clean["title"] = raw["DisplayText"]

    section = raw.get(content_type) if content_type else None
    if isinstance(section, dict):
        for key, field in section.items():
            value, is_reference = extract_field_value(field, user_index)
            if value is None:
                continue
            name = to_camel_case(key)
            if is_reference:
                name += "Id"
            clean[name] = value

    bag = raw.get("BagPart")
    if isinstance(bag, dict) and isinstance(bag.get("ContentItems"), list):
        items = []
        for element in bag["ContentItems"]:
            if not isinstance(element, dict):
                continue
            element_type = element.get("ContentType")
            if not isinstance(element_type, str):
                continue
            cleaned = clean_object(element, element_type, user_index)
            # Kept so the item can be written back unchanged
            cleaned["contentType"] = element_type
            items.append(cleaned)
        if items:
            clean["items"] = items

    return clean
