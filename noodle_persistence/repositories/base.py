"""
Abstract Repository Pattern

Defines the CRUD repository interface shared by every store in this package,
plus an in-memory implementation used for the first, database-free step of
the application and for unit tests.
"""

import copy
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from bson import ObjectId

from ..mapping import MappedDocument
from ..mapping.matching import apply_window, matches_filter

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=MappedDocument)


class Repository(ABC, Generic[T]):
    """
    Abstract CRUD repository.

    Type parameter T is a MappedDocument subclass; identifiers are the values
    of its mapping's primary key attribute.

    Example:
        class MenuItemRepository(Repository[MenuItem]):
            async def find_by_ingredients_name_in(self, *names: str) -> list[MenuItem]:
                return await self.find({"ingredients.name": {"$in": list(names)}})
    """

    @abstractmethod
    async def save(self, entity: T) -> T:
        """
        Insert or replace an entity.

        An entity without a key is inserted and receives the generated key;
        an entity with a key replaces the stored one (or is inserted under
        that key).

        Returns:
            The saved entity
        """

    @abstractmethod
    async def save_all(self, entities: list[T]) -> list[T]:
        """Save several entities; see save()."""

    @abstractmethod
    async def find_one(self, id: Any) -> T | None:
        """
        Get a single entity by key.

        Returns:
            Entity if found, None otherwise
        """

    @abstractmethod
    async def find_all(self) -> list[T]:
        """Get every stored entity."""

    @abstractmethod
    async def find(
        self,
        filter: dict[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[T]:
        """
        Find entities matching a filter.

        Args:
            filter: MongoDB-style filter over document keys
            skip: Number of documents to skip
            limit: Maximum documents to return (0 for no limit)
            sort: List of (document_key, direction) tuples

        Returns:
            List of matching entities
        """

    @abstractmethod
    async def exists(self, id: Any) -> bool:
        """Check if an entity with this key is stored."""

    @abstractmethod
    async def count(self, filter: dict[str, Any] | None = None) -> int:
        """Count entities matching a filter (all entities when None)."""

    @abstractmethod
    async def delete(self, id: Any) -> bool:
        """
        Delete an entity by key.

        Returns:
            True if entity was deleted, False if not found
        """

    @abstractmethod
    async def delete_all(self) -> int:
        """
        Delete every entity.

        Returns:
            Number of deleted entities
        """


class InMemoryRepository(Repository[T]):
    """
    In-memory repository implementation.

    Entities are kept as encoded documents, so they go through the same
    mapping as in MongoDB and reads never alias the caller's objects.
    """

    def __init__(self, entity_class: type[T]):
        self._entity_class = entity_class
        self._mapping = entity_class.__mapping__
        self._storage: dict[Any, dict[str, Any]] = {}

    def _new_key(self) -> Any:
        if self._mapping.object_id:
            return str(ObjectId())
        return uuid.uuid4()

    async def save(self, entity: T) -> T:
        id_attribute = self._mapping.id_attribute
        if getattr(entity, id_attribute) is None:
            setattr(entity, id_attribute, self._new_key())
        document = self._mapping.to_document(entity)
        self._storage[document["_id"]] = copy.deepcopy(document)
        logger.debug(f"Saved {self._entity_class.__name__} with id={entity.key}")
        return entity

    async def save_all(self, entities: list[T]) -> list[T]:
        return [await self.save(entity) for entity in entities]

    async def find_one(self, id: Any) -> T | None:
        document = self._storage.get(self._mapping.encode_id(id))
        if document is None:
            return None
        return self._entity_class.from_document(copy.deepcopy(document))

    async def find_all(self) -> list[T]:
        return await self.find()

    async def find(
        self,
        filter: dict[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[T]:
        documents = [d for d in self._storage.values() if matches_filter(d, filter)]
        documents = apply_window(documents, skip=skip, limit=limit, sort=sort)
        return [self._entity_class.from_document(copy.deepcopy(d)) for d in documents]

    async def exists(self, id: Any) -> bool:
        return self._mapping.encode_id(id) in self._storage

    async def count(self, filter: dict[str, Any] | None = None) -> int:
        if not filter:
            return len(self._storage)
        return sum(1 for d in self._storage.values() if matches_filter(d, filter))

    async def delete(self, id: Any) -> bool:
        return self._storage.pop(self._mapping.encode_id(id), None) is not None

    async def delete_all(self) -> int:
        deleted = len(self._storage)
        self._storage.clear()
        return deleted
