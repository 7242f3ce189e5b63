"""``where`` / ``orderby`` / ``limit`` / ``offset`` over flattened content items.

The ``where`` grammar is a flat conjunction::

    key OP value [AND key OP value ...]

with ``OP`` one of ``!= >= <= = > < LIKE``. ``_LIKE_`` and ``_AND_`` are
accepted as URL-friendly spellings. A clause string that does not have that
structure is ignored and the items come back unfiltered (fail-open).
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from src.modules.content.containers import resolve_path, to_text

logger = logging.getLogger(__name__)

# Checked in this order at every position
OPERATORS = ("!=", ">=", "<=", "=", ">", "<", "_LIKE_", "_AND_", "LIKE", "AND")
OPERATOR_ALIASES = {"_LIKE_": "LIKE", "_AND_": "AND"}
COMPARISON_OPERATORS = frozenset({"!=", ">=", "<=", "=", ">", "<", "LIKE"})

KEY_SANITIZER = re.compile(r"[^A-Za-z0-9_\-,.]")
DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class WhereClause:
    key: str
    operator: str
    value: str

    @property
    def path(self) -> list[str]:
        return self.key.split(".")


@dataclass(frozen=True)
class Token:
    text: str
    is_operator: bool = False


def sanitize_key(key: str) -> str:
    return KEY_SANITIZER.sub("", key)


def tokenize_where(where: str) -> list[Token]:
    """Split a where string into alternating text and operator tokens."""
    tokens: list[Token] = []
    buffer: list[str] = []
    position = 0
    while position < len(where):
        operator = next((op for op in OPERATORS if where.startswith(op, position)), None)
        if operator is None:
            buffer.append(where[position])
            position += 1
            continue
        tokens.append(Token("".join(buffer)))
        tokens.append(Token(OPERATOR_ALIASES.get(operator, operator), is_operator=True))
        buffer = []
        position += len(operator)
    tokens.append(Token("".join(buffer)))
    return tokens


def parse_where(where: str) -> list[WhereClause] | None:
    """Parse a where string; None when its structure is invalid."""
    tokens = tokenize_where(where)
    if len(tokens) % 4 != 3:
        return None

    clauses = []
    for start in range(0, len(tokens), 4):
        key, operator, value = tokens[start : start + 3]
        if not operator.is_operator or operator.text not in COMPARISON_OPERATORS:
            return None
        if key.is_operator or value.is_operator:
            return None
        if start + 3 < len(tokens):
            joiner = tokens[start + 3]
            if not joiner.is_operator or joiner.text != "AND":
                return None
        clauses.append(
            WhereClause(
                key=sanitize_key(key.text.strip()),
                operator=operator.text,
                value=value.text.strip(),
            )
        )
    return clauses


def _to_number(text: str) -> float | None:
    if "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return None if math.isnan(number) else number


def compare_values(left: str, right: str) -> int:
    """Numeric comparison when both sides parse, ordinal otherwise."""
    left_number = _to_number(left)
    right_number = _to_number(right)
    if left_number is not None and right_number is not None:
        return (left_number > right_number) - (left_number < right_number)
    return (left > right) - (left < right)


def _matches_text(item_text: str, operator: str, value: str) -> bool:
    if operator == "=":
        return item_text == value
    if operator == "!=":
        return item_text != value
    if operator == "LIKE":
        return value.lower() in item_text.lower()

    result = compare_values(item_text, value)
    if operator == ">":
        return result > 0
    if operator == "<":
        return result < 0
    if operator == ">=":
        return result >= 0
    if operator == "<=":
        return result <= 0
    return False


def matches(item: Any, clause: WhereClause) -> bool:
    """True if ``item`` satisfies one clause; missing values never match."""
    value = resolve_path(item, clause.path)
    if value is None:
        return False
    candidates = value if isinstance(value, list) else [value]
    return any(
        _matches_text(to_text(candidate), clause.operator, clause.value)
        for candidate in candidates
        if candidate is not None
    )


def apply_where(items: list, where: str | None) -> list:
    if not where:
        return items
    clauses = parse_where(where)
    if clauses is None:
        logger.debug("Ignoring malformed where clause %r", where)
        return items
    result = items
    for clause in clauses:
        result = [item for item in result if matches(item, clause)]
    return result


def apply_orderby(items: list, orderby: str | None) -> list:
    """Stable multi-key sort on the text form of each key; ``-`` sorts descending."""
    if not orderby:
        return items

    fields = []
    for field in sanitize_key(orderby).split(","):
        field = field.strip()
        descending = field.startswith("-")
        name = field[1:] if descending else field
        fields.append((name.split("."), descending))

    result = list(items)
    # Least significant key first; each pass is stable
    for path, descending in reversed(fields):
        result.sort(key=lambda item: to_text(resolve_path(item, path)), reverse=descending)
    return result


def _parse_count(value: str | None) -> int | None:
    if value and DIGITS.fullmatch(value):
        return int(value)
    return None


def apply_pagination(items: list, limit: str | None, offset: str | None) -> list:
    """Slice by ``limit``/``offset``; malformed numbers are ignored."""
    limit_count = _parse_count(limit)
    offset_count = _parse_count(offset)
    if limit_count is None:
        return items
    start = offset_count or 0
    return items[start : start + limit_count]


def apply_query_filters(params: Mapping[str, str], items: list) -> list:
    """Apply where, then orderby, then limit/offset from request parameters."""
    where = params.get("where")
    orderby = params.get("orderby")
    limit = params.get("limit")
    offset = params.get("offset")
    if not (where or orderby or limit or offset):
        return items

    result = apply_where(items, where)
    result = apply_orderby(result, orderby)
    return apply_pagination(result, limit, offset)


def apply_where_only(items: list, where: str | None) -> list:
    """Where filtering without ordering or paging, used by live updates."""
    return apply_where(items, where)
