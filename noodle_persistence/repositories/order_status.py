"""
Order status repository backed by a key/value region.
"""

import logging
import uuid
from typing import Any

from ..domain import OrderStatus
from ..mapping.matching import apply_window
from ..observability import timed_operation
from ..regions import Region
from .base import Repository

logger = logging.getLogger(__name__)


class OrderStatusRepository(Repository[OrderStatus]):
    """
    Order status updates keyed by their UUID in a Region.

    Example:
        statuses = OrderStatusRepository(LocalRegion("YummyNoodleOrder", OrderStatus))
        await statuses.save(OrderStatus(order_id=order_id, status="Started Cooking"))
        history = await statuses.find_order_history(order_id)
    """

    def __init__(self, region: Region[OrderStatus]):
        self._region = region

    @property
    def region(self) -> Region[OrderStatus]:
        return self._region

    @property
    def metrics_tags(self) -> dict[str, Any]:
        return {"region": self._region.name}

    @timed_operation("order_status.save")
    async def save(self, entity: OrderStatus) -> OrderStatus:
        if entity.id is None:
            entity.id = uuid.uuid4()
        await self._region.put(entity.id, entity)
        logger.debug(f"Saved OrderStatus id={entity.id} for order {entity.order_id}")
        return entity

    async def save_all(self, entities: list[OrderStatus]) -> list[OrderStatus]:
        return [await self.save(entity) for entity in entities]

    async def find_one(self, id: Any) -> OrderStatus | None:
        return await self._region.get(id)

    async def find_all(self) -> list[OrderStatus]:
        return await self._region.values()

    async def find(
        self,
        filter: dict[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[OrderStatus]:
        values = await self._region.find(filter)
        documents = apply_window(
            [value.to_document() for value in values], skip=skip, limit=limit, sort=sort
        )
        return [OrderStatus.from_document(document) for document in documents]

    async def exists(self, id: Any) -> bool:
        return await self._region.contains_key(id)

    async def count(self, filter: dict[str, Any] | None = None) -> int:
        if not filter:
            return await self._region.size()
        return len(await self._region.find(filter))

    async def delete(self, id: Any) -> bool:
        return await self._region.remove(id) is not None

    async def delete_all(self) -> int:
        return await self._region.clear()

    @timed_operation("order_status.find_order_history")
    async def find_order_history(self, order_id: uuid.UUID) -> list[OrderStatus]:
        """
        Every status recorded for an order, oldest first.
        """
        return await self.find(
            {OrderStatus.document_key("order_id"): order_id},
            sort=[(OrderStatus.document_key("status_date"), 1)],
        )

    async def find_latest_status(self, order_id: uuid.UUID) -> OrderStatus | None:
        history = await self.find_order_history(order_id)
        return history[-1] if history else None
