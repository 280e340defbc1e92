"""
Key/Value Regions

A region is a named map of keys to mapped records, with continuous-query
style listeners: callers register a predicate and are notified of every write
whose new value satisfies it.

Two backends are provided:
- LocalRegion keeps entries in process memory
- MongoRegion persists entries in the collection named after the region
"""

import asyncio
import copy
import enum
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pymongo.errors import PyMongoError

from ..exceptions import RepositoryError
from ..mapping import MappedDocument
from ..mapping.matching import matches_filter
from ..observability import timed_operation

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=MappedDocument)


class RegionOperation(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


@dataclass(frozen=True)
class RegionEvent(Generic[V]):
    """A write observed by a region listener."""

    region: str
    operation: RegionOperation
    key: Any
    new_value: V | None
    old_value: V | None = None


RegionListener = Callable[[RegionEvent], Awaitable[None] | None]


@dataclass
class _Subscription:
    callback: RegionListener
    predicate: Callable[[Any], bool] | None


class Region(ABC, Generic[V]):
    """
    Abstract region of ``value_class`` records keyed by their primary key.
    """

    def __init__(self, name: str, value_class: type[V]):
        self.name = name
        self._value_class = value_class
        self._subscriptions: list[_Subscription] = []

    @property
    def metrics_tags(self) -> dict[str, Any]:
        return {"region": self.name}

    def register_listener(
        self,
        callback: RegionListener,
        predicate: Callable[[V], bool] | None = None,
    ) -> Callable[[], None]:
        """
        Register a listener for writes to this region.

        Args:
            callback: Sync or async callable receiving a RegionEvent
            predicate: Only writes whose new value satisfies it are delivered
                (destroy events are tested against the removed value)

        Returns:
            Function that unregisters the listener
        """
        subscription = _Subscription(callback=callback, predicate=predicate)
        self._subscriptions.append(subscription)

        def unregister() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unregister

    async def _notify(self, event: RegionEvent) -> None:
        subject = event.new_value if event.new_value is not None else event.old_value
        for subscription in list(self._subscriptions):
            try:
                if subscription.predicate is not None and not subscription.predicate(subject):
                    continue
                result = subscription.callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # Listener failures are logged only; the write already happened
                logger.exception(
                    f"Listener on region '{self.name}' failed for {event.operation.value} "
                    f"of key {event.key}"
                )

    @timed_operation("region.put")
    async def put(self, key: Any, value: V) -> V | None:
        """
        Store a value under a key.

        Returns:
            The value previously stored under the key, if any
        """
        old_value = await self._put(key, value)
        operation = RegionOperation.CREATE if old_value is None else RegionOperation.UPDATE
        await self._notify(RegionEvent(self.name, operation, key, value, old_value))
        return old_value

    @timed_operation("region.remove")
    async def remove(self, key: Any) -> V | None:
        """
        Remove a key.

        Returns:
            The removed value, or None if the key was absent
        """
        old_value = await self._remove(key)
        if old_value is not None:
            await self._notify(RegionEvent(self.name, RegionOperation.DESTROY, key, None, old_value))
        return old_value

    @abstractmethod
    async def _put(self, key: Any, value: V) -> V | None:
        pass

    @abstractmethod
    async def _remove(self, key: Any) -> V | None:
        pass

    @abstractmethod
    async def get(self, key: Any) -> V | None:
        pass

    @abstractmethod
    async def keys(self) -> list[Any]:
        pass

    @abstractmethod
    async def values(self) -> list[V]:
        pass

    @abstractmethod
    async def find(self, filter: dict[str, Any] | None = None) -> list[V]:
        """Values whose encoded document matches a MongoDB-style filter."""

    @abstractmethod
    async def query(self, predicate: Callable[[V], bool]) -> list[V]:
        """Values satisfying a predicate."""

    @abstractmethod
    async def clear(self) -> int:
        """Remove every entry without notifying listeners; returns the count removed."""

    @abstractmethod
    async def size(self) -> int:
        pass

    async def contains_key(self, key: Any) -> bool:
        return await self.get(key) is not None


class LocalRegion(Region[V]):
    """
    Region held in process memory. Values are stored as encoded documents
    so reads never alias stored state.
    """

    def __init__(self, name: str, value_class: type[V]):
        super().__init__(name, value_class)
        self._entries: dict[Any, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def _decode(self, document: dict[str, Any] | None) -> V | None:
        if document is None:
            return None
        return self._value_class.from_document(copy.deepcopy(document))

    async def _put(self, key: Any, value: V) -> V | None:
        async with self._lock:
            old = self._entries.get(key)
            self._entries[key] = copy.deepcopy(value.to_document())
        return self._decode(old)

    async def _remove(self, key: Any) -> V | None:
        async with self._lock:
            old = self._entries.pop(key, None)
        return self._decode(old)

    async def get(self, key: Any) -> V | None:
        return self._decode(self._entries.get(key))

    async def keys(self) -> list[Any]:
        return list(self._entries)

    async def values(self) -> list[V]:
        return [self._decode(document) for document in self._entries.values()]

    async def find(self, filter: dict[str, Any] | None = None) -> list[V]:
        return [
            self._decode(document)
            for document in self._entries.values()
            if matches_filter(document, filter)
        ]

    async def query(self, predicate: Callable[[V], bool]) -> list[V]:
        return [value for value in await self.values() if predicate(value)]

    async def clear(self) -> int:
        async with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    async def size(self) -> int:
        return len(self._entries)


class MongoRegion(Region[V]):
    """
    Region persisted in a MongoDB collection named after the region.
    Keys are stored as ``_id``.
    """

    def __init__(self, collection: Any, value_class: type[V], name: str | None = None):
        super().__init__(name or collection.name, value_class)
        self._collection = collection

    def _error(self, operation: str, error: PyMongoError) -> RepositoryError:
        logger.error(f"Region '{self.name}' operation '{operation}' failed: {error}")
        return RepositoryError(
            f"Region '{self.name}' failed to {operation}: {error}",
            operation=operation,
            collection_name=self._collection.name,
        )

    async def _put(self, key: Any, value: V) -> V | None:
        document = value.to_document()
        document["_id"] = key
        try:
            old = await self._collection.find_one_and_replace({"_id": key}, document, upsert=True)
        except PyMongoError as e:
            raise self._error("put", e) from e
        return self._value_class.from_document(old)

    async def _remove(self, key: Any) -> V | None:
        try:
            old = await self._collection.find_one_and_delete({"_id": key})
        except PyMongoError as e:
            raise self._error("remove", e) from e
        return self._value_class.from_document(old)

    async def get(self, key: Any) -> V | None:
        try:
            document = await self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise self._error("get", e) from e
        return self._value_class.from_document(document)

    async def find(self, filter: dict[str, Any] | None = None) -> list[V]:
        try:
            documents = await self._collection.find(filter or {}).to_list(length=None)
        except PyMongoError as e:
            raise self._error("query", e) from e
        return [self._value_class.from_document(document) for document in documents]

    async def keys(self) -> list[Any]:
        try:
            documents = await self._collection.find({}, projection={"_id": 1}).to_list(length=None)
        except PyMongoError as e:
            raise self._error("list keys", e) from e
        return [document["_id"] for document in documents]

    async def values(self) -> list[V]:
        return await self.find({})

    async def query(self, predicate: Callable[[V], bool]) -> list[V]:
        return [value for value in await self.values() if predicate(value)]

    async def clear(self) -> int:
        try:
            result = await self._collection.delete_many({})
        except PyMongoError as e:
            raise self._error("clear", e) from e
        return result.deleted_count

    async def size(self) -> int:
        try:
            return await self._collection.count_documents({})
        except PyMongoError as e:
            raise self._error("count", e) from e
