"""
In-process evaluation of MongoDB-style filters, sorts and windows over
encoded documents, for the stores that do not run inside MongoDB.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from bson import Decimal128, ObjectId


def _resolve_path(value: Any, parts: list[str]) -> list[Any]:
    """Collect the values reached by a dotted path, descending into arrays."""
    if not parts:
        return [value]
    if isinstance(value, list):
        found: list[Any] = []
        for item in value:
            found.extend(_resolve_path(item, parts))
        return found
    if isinstance(value, dict) and parts[0] in value:
        return _resolve_path(value[parts[0]], parts[1:])
    return []


def _candidates(document: dict[str, Any], key: str) -> list[Any]:
    values = _resolve_path(document, key.split("."))
    # A query value also matches single elements of an array value
    expanded = list(values)
    for value in values:
        if isinstance(value, list):
            expanded.extend(value)
    return expanded


def matches_filter(document: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    """
    Evaluate equality, ``$eq``, ``$ne``, ``$in`` and ``$nin`` conditions over
    (dotted) document keys.

    Raises:
        ValueError: For any other operator
    """
    for key, condition in (filter or {}).items():
        candidates = _candidates(document, key)

        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            for operator, argument in condition.items():
                if operator == "$eq":
                    ok = argument in candidates
                elif operator == "$ne":
                    ok = argument not in candidates
                elif operator == "$in":
                    ok = any(candidate in argument for candidate in candidates)
                elif operator == "$nin":
                    ok = not any(candidate in argument for candidate in candidates)
                else:
                    raise ValueError(f"Unsupported filter operator '{operator}'")
                if not ok:
                    return False
        elif condition not in candidates:
            return False
    return True


def _type_rank(value: Any) -> int:
    # MongoDB's cross-type sort order: null, numbers, strings, objects, arrays,
    # binary, ObjectId, booleans, dates
    if value is None:
        return 0
    if isinstance(value, bool):
        return 7
    if isinstance(value, (int, float, Decimal, Decimal128)):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, dict):
        return 3
    if isinstance(value, list):
        return 4
    if isinstance(value, (bytes, uuid.UUID)):
        return 5
    if isinstance(value, ObjectId):
        return 6
    if isinstance(value, datetime):
        return 8
    return 9


def _comparable(value: Any, rank: int) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, uuid.UUID):
        return value.bytes
    if isinstance(value, datetime) and value.tzinfo is None:
        # Naive datetimes are UTC, as the driver stores them
        return value.replace(tzinfo=timezone.utc)
    if rank in (3, 4, 9):
        return repr(value)
    return value


def _sort_key(document: dict[str, Any], key: str) -> tuple[int, Any]:
    values = _resolve_path(document, key.split("."))
    value = values[0] if values else None
    rank = _type_rank(value)
    return (rank, None if value is None else _comparable(value, rank))


def apply_window(
    documents: list[dict[str, Any]],
    skip: int = 0,
    limit: int = 0,
    sort: list[tuple[str, int]] | None = None,
) -> list[dict[str, Any]]:
    """Sort (stable, by each key in turn), then skip and limit."""
    documents = list(documents)
    for key, direction in reversed(sort or []):
        documents.sort(key=lambda d, k=key: _sort_key(d, k), reverse=direction < 0)

    documents = documents[skip:]
    if limit > 0:
        documents = documents[:limit]
    return documents
