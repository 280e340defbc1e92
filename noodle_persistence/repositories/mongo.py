"""
MongoDB Repository Implementation

Implements the Repository interface on a motor collection, translating
records through their DocumentMapping.
"""

import logging
from typing import Any, Generic, TypeVar

from bson.code import Code
from pymongo import ReplaceOne
from pymongo.errors import PyMongoError

from ..exceptions import RepositoryError
from ..mapping import MappedDocument
from ..observability import timed_operation
from .base import Repository

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=MappedDocument)


class MongoRepository(Repository[T], Generic[T]):
    """
    MongoDB implementation of the Repository interface.

    Driver failures are re-raised as RepositoryError carrying the operation
    and collection name.

    Example:
        menu = MongoRepository(db.menu, MenuItem)

        item = await menu.save(MenuItem(name="Yummy Noodles"))
        same = await menu.find_one(item.id)
    """

    def __init__(self, collection: Any, entity_class: type[T]):
        """
        Initialize the MongoDB repository.

        Args:
            collection: AsyncIOMotorCollection holding the documents
            entity_class: MappedDocument subclass stored in the collection
        """
        self._collection = collection
        self._entity_class = entity_class
        self._mapping = entity_class.__mapping__

    @property
    def collection(self) -> Any:
        return self._collection

    @property
    def metrics_tags(self) -> dict[str, Any]:
        return {"collection": self._collection.name}

    def _to_entity(self, doc: dict[str, Any] | None) -> T | None:
        return self._entity_class.from_document(doc)

    def _id_filter(self, id: Any) -> dict[str, Any]:
        return {"_id": self._mapping.encode_id(id)}

    def _error(self, operation: str, error: PyMongoError) -> RepositoryError:
        logger.error(
            f"{self._entity_class.__name__} repository operation '{operation}' failed: {error}"
        )
        return RepositoryError(
            f"Failed to {operation} {self._entity_class.__name__}: {error}",
            operation=operation,
            collection_name=self._collection.name,
        )

    @timed_operation("repository.save")
    async def save(self, entity: T) -> T:
        doc = entity.to_document()
        try:
            if "_id" not in doc:
                result = await self._collection.insert_one(doc)
                setattr(
                    entity,
                    self._mapping.id_attribute,
                    self._mapping.decode_id(result.inserted_id),
                )
            else:
                await self._collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        except PyMongoError as e:
            raise self._error("save", e) from e

        logger.debug(f"Saved {self._entity_class.__name__} with id={entity.key}")
        return entity

    @timed_operation("repository.save_all")
    async def save_all(self, entities: list[T]) -> list[T]:
        new_entities = [e for e in entities if e.key is None]
        replacements = [
            ReplaceOne({"_id": doc["_id"]}, doc, upsert=True)
            for doc in (e.to_document() for e in entities if e.key is not None)
        ]

        try:
            if new_entities:
                result = await self._collection.insert_many(
                    [e.to_document() for e in new_entities]
                )
                for entity, inserted_id in zip(new_entities, result.inserted_ids):
                    setattr(entity, self._mapping.id_attribute, self._mapping.decode_id(inserted_id))
            if replacements:
                await self._collection.bulk_write(replacements, ordered=False)
        except PyMongoError as e:
            raise self._error("save_all", e) from e

        logger.debug(f"Saved {len(entities)} {self._entity_class.__name__} entities")
        return entities

    @timed_operation("repository.find_one")
    async def find_one(self, id: Any) -> T | None:
        try:
            doc = await self._collection.find_one(self._id_filter(id))
        except PyMongoError as e:
            raise self._error("find_one", e) from e
        return self._to_entity(doc)

    async def find_all(self) -> list[T]:
        return await self.find()

    @timed_operation("repository.find")
    async def find(
        self,
        filter: dict[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[T]:
        cursor = self._collection.find(filter or {})

        if skip > 0:
            cursor = cursor.skip(skip)
        if limit > 0:
            cursor = cursor.limit(limit)
        if sort:
            cursor = cursor.sort(sort)

        try:
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._error("find", e) from e
        return [self._to_entity(doc) for doc in docs]

    async def exists(self, id: Any) -> bool:
        try:
            doc = await self._collection.find_one(self._id_filter(id), projection={"_id": 1})
        except PyMongoError as e:
            raise self._error("check", e) from e
        return doc is not None

    async def count(self, filter: dict[str, Any] | None = None) -> int:
        try:
            return await self._collection.count_documents(filter or {})
        except PyMongoError as e:
            raise self._error("count", e) from e

    @timed_operation("repository.delete")
    async def delete(self, id: Any) -> bool:
        try:
            result = await self._collection.delete_one(self._id_filter(id))
        except PyMongoError as e:
            raise self._error("delete", e) from e
        return result.deleted_count > 0

    @timed_operation("repository.delete_all")
    async def delete_all(self) -> int:
        try:
            result = await self._collection.delete_many({})
        except PyMongoError as e:
            raise self._error("delete all", e) from e
        return result.deleted_count

    # Additional MongoDB-specific methods

    @timed_operation("repository.aggregate")
    async def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Run an aggregation pipeline.

        Args:
            pipeline: MongoDB aggregation pipeline

        Returns:
            List of result documents
        """
        try:
            return await self._collection.aggregate(pipeline).to_list(length=None)
        except PyMongoError as e:
            raise self._error("aggregate", e) from e

    @timed_operation("repository.map_reduce")
    async def map_reduce(
        self,
        map_function: str,
        reduce_function: str,
        query: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Run a MapReduce job over the collection with inline output.

        Args:
            map_function: JavaScript map function source
            reduce_function: JavaScript reduce function source
            query: Optional filter selecting the documents to map

        Returns:
            List of ``{"_id": key, "value": reduced}`` documents
        """
        command: dict[str, Any] = {
            "mapReduce": self._collection.name,
            "map": Code(map_function),
            "reduce": Code(reduce_function),
            "out": {"inline": 1},
        }
        if query:
            command["query"] = query

        try:
            response = await self._collection.database.command(command)
        except PyMongoError as e:
            raise self._error("map-reduce", e) from e
        return response.get("results", [])
