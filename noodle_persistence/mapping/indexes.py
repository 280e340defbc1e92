"""
Secondary index maintenance for mapped collections.

Applies the IndexSpec declarations of a DocumentMapping: indexes that already
match are left alone, mismatching ones are dropped and recreated.
"""

import logging
from typing import Any

from pymongo.errors import PyMongoError

from ..exceptions import IndexManagementError
from .document import DocumentMapping, IndexSpec

logger = logging.getLogger(__name__)


def is_id_index(spec: IndexSpec) -> bool:
    """Check if the index targets _id alone (MongoDB creates that one itself)."""
    return len(spec.keys) == 1 and spec.keys[0][0] == "_id"


def index_matches(existing: dict[str, Any], spec: IndexSpec) -> bool:
    """Compare an index description from list_indexes() with a declaration."""
    if dict(existing.get("key", {})) != dict(spec.keys):
        return False
    if bool(existing.get("unique", False)) != spec.unique:
        return False
    return bool(existing.get("sparse", False)) == spec.sparse


async def ensure_indexes(collection: Any, mapping: DocumentMapping) -> list[str]:
    """
    Create the secondary indexes declared by a mapping.

    Args:
        collection: Motor collection holding the mapped documents
        mapping: Mapping whose indexes should exist

    Returns:
        Names of the indexes created (or recreated)

    Raises:
        IndexManagementError: If listing, dropping or creating an index fails
    """
    log_prefix = f"[{mapping.collection}]"
    created: list[str] = []

    if not mapping.indexes:
        return created

    try:
        existing_indexes = await collection.list_indexes().to_list(None)
    except PyMongoError as e:
        raise IndexManagementError(
            f"Failed to list indexes on '{mapping.collection}': {e}",
            context={"collection": mapping.collection},
        ) from e
    existing_by_name = {index.get("name"): index for index in existing_indexes}

    for spec in mapping.indexes:
        index_name = spec.index_name

        if is_id_index(spec):
            logger.info(f"{log_prefix} Skipping '_id' index '{index_name}'.")
            continue

        existing = existing_by_name.get(index_name)
        try:
            if existing is not None:
                if index_matches(existing, spec):
                    logger.debug(f"{log_prefix} Index '{index_name}' matches; skipping.")
                    continue
                logger.warning(
                    f"{log_prefix} Index '{index_name}' definition mismatch. "
                    f"Existing: keys={dict(existing.get('key', {}))}, "
                    f"Expected: keys={dict(spec.keys)}. Dropping and recreating."
                )
                await collection.drop_index(index_name)

            name = await collection.create_index(list(spec.keys), **spec.options())
        except PyMongoError as e:
            raise IndexManagementError(
                f"Failed to create index '{index_name}' on '{mapping.collection}': {e}",
                index_name=index_name,
                context={"collection": mapping.collection},
            ) from e

        logger.info(f"{log_prefix} Created index '{name}' with keys {list(spec.keys)}.")
        created.append(name)

    return created
