"""Plain dict/list helpers shared by the filter, population and cleanup code."""

import json
from collections.abc import Iterable
from typing import Any


def resolve_path(obj: Any, parts: Iterable[str]) -> Any:
    """Resolve a dotted path, mapping over lists and flattening the results.

    Returns None when nothing resolves.
    """
    current = [obj]
    for part in parts:
        found = []
        for node in current:
            if isinstance(node, dict):
                if part in node and node[part] is not None:
                    found.append(node[part])
            elif isinstance(node, list):
                for element in node:
                    if isinstance(element, dict) and element.get(part) is not None:
                        found.append(element[part])
        # Lists reached mid-path fan out into their elements
        current = []
        for value in found:
            if isinstance(value, list):
                current.extend(v for v in value if v is not None)
            else:
                current.append(value)
        if not current:
            return None

    if len(current) == 1:
        return current[0]
    return current


def to_text(value: Any) -> str:
    """String form used for comparisons and sorting."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return ",".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)
