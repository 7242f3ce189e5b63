"""Reference collection and population over content item trees.

A content item points at other items in two ways: ``ContentItemIds`` arrays
(content picker fields) and singular ``xxxId`` string keys. Collection
gathers those ids so the caller can fetch them in one query; population
splices the fetched documents back into the tree.

Embedded documents are terminal. Values under an ``Items`` key and dict
values that carry their own ``ContentItemId`` were put there by an earlier
population pass, so neither function descends into them. Cleaned documents
carry ``id`` instead; when an index is given, a dict whose ``id`` is in it
is terminal too. That keeps population idempotent on raw and cleaned trees.
"""

from typing import Any

IDENTITY_KEYS = frozenset({"id", "ContentItemId"})


def is_reference_key(key: str) -> bool:
    """True for ``xxxId`` keys that point at another item."""
    return len(key) > 2 and key.endswith("Id") and key not in IDENTITY_KEYS


def _is_embedded(key: str, value: Any, index: dict[str, Any] | None = None) -> bool:
    if key == "Items":
        return True
    if not isinstance(value, dict):
        return False
    return "ContentItemId" in value or (index is not None and value.get("id") in index)


def collect_content_item_ids(
    tree: Any, ids: set[str] | None = None, index: dict[str, Any] | None = None
) -> set[str]:
    """Gather every referenced content item id in a tree.

    Pass the index of documents already fetched to skip the ones embedded
    from it.
    """
    if ids is None:
        ids = set()

    if isinstance(tree, list):
        for element in tree:
            if isinstance(element, (dict, list)):
                collect_content_item_ids(element, ids, index)
        return ids

    if not isinstance(tree, dict):
        return ids

    for key, value in tree.items():
        if key == "ContentItemIds" and isinstance(value, list):
            ids.update(v for v in value if isinstance(v, str))
        elif is_reference_key(key) and isinstance(value, str):
            ids.add(value)
        elif _is_embedded(key, value, index):
            continue
        elif isinstance(value, (dict, list)):
            collect_content_item_ids(value, ids, index)
    return ids


def collect_user_ids(tree: Any, ids: set[str] | None = None) -> set[str]:
    """Gather every user id referenced by a user picker in a tree."""
    if ids is None:
        ids = set()

    if isinstance(tree, list):
        for element in tree:
            collect_user_ids(element, ids)
    elif isinstance(tree, dict):
        for key, value in tree.items():
            if key == "UserIds" and isinstance(value, list):
                ids.update(v for v in value if isinstance(v, str))
            elif isinstance(value, (dict, list)):
                collect_user_ids(value, ids)
    return ids


def index_by_id(items: list[dict], key: str = "ContentItemId") -> dict[str, dict]:
    """Map documents by their id field, skipping documents without one."""
    return {item[key]: item for item in items if isinstance(item.get(key), str)}


def populate_content_item_ids(tree: Any, index: dict[str, Any]) -> Any:
    """Return a copy of ``tree`` with references replaced by indexed documents.

    ``ContentItemIds`` becomes ``Items`` holding the documents found in the
    index (missing ids are dropped). A singular ``xxxId`` found in the index
    becomes ``xxx``; one that is missing is left as it was.
    """
    if isinstance(tree, list):
        return [
            populate_content_item_ids(element, index)
            if isinstance(element, (dict, list))
            else element
            for element in tree
        ]

    if not isinstance(tree, dict):
        return tree

    result: dict[str, Any] = {}
    for key, value in tree.items():
        if key == "ContentItemIds" and isinstance(value, list):
            result["Items"] = [
                index[v] for v in value if isinstance(v, str) and v in index
            ]
        elif is_reference_key(key) and isinstance(value, str):
            if value in index:
                result[key[:-2]] = index[value]
            else:
                result[key] = value
        elif _is_embedded(key, value, index):
            result[key] = value
        elif isinstance(value, (dict, list)):
            result[key] = populate_content_item_ids(value, index)
        else:
            result[key] = value
    return result
