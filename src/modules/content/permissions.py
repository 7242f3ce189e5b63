"""Role based access rules stored as content items.

Each permission item grants a set of REST methods on a set of content types
to a set of roles. Rules are all-or-nothing per content type and method.
"""

from typing import Any

ANONYMOUS_ROLE = "Anonymous"

PermissionLookup = dict[str, dict[str, dict[str, bool]]]


def _unwrap_text(value: Any) -> Any:
    # Older items stored these fields as {"text": "..."}
    if isinstance(value, dict) and "text" in value:
        return value["text"]
    return value


def split_delimited(value: Any) -> list[str]:
    """Comma separated string (or list of them) to a list of trimmed names."""
    value = _unwrap_text(value)
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, list):
        parts = [p for v in value if isinstance(v, str) for p in v.split(",")]
    else:
        return []
    return [p.strip() for p in parts if p.strip()]


def to_string_list(value: Any) -> list[str]:
    """List (or single string) of names to a list of trimmed names."""
    value = _unwrap_text(value)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def build_permission_lookup(documents: list[dict]) -> PermissionLookup:
    """Build ``role -> content type -> METHOD -> True`` from permission items."""
    lookup: PermissionLookup = {}
    for document in documents:
        if not isinstance(document, dict):
            continue
        roles = split_delimited(document.get("roles"))
        content_types = split_delimited(document.get("contentTypes"))
        methods = [m.upper() for m in to_string_list(document.get("restMethods"))]

        for role in roles:
            by_type = lookup.setdefault(role, {})
            for content_type in content_types:
                allowed = by_type.setdefault(content_type, {})
                for method in methods:
                    allowed[method] = True
    return lookup


def effective_roles(roles: list[str] | None) -> list[str]:
    """Caller roles plus the implicit anonymous role."""
    result = list(roles or [])
    if ANONYMOUS_ROLE not in result:
        result.append(ANONYMOUS_ROLE)
    return result


def is_allowed(
    lookup: PermissionLookup, roles: list[str] | None, content_type: str, method: str
) -> bool:
    method = method.upper()
    return any(
        lookup.get(role, {}).get(content_type, {}).get(method, False)
        for role in effective_roles(roles)
    )
