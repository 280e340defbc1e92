"""
Order status persistence service.
"""

import logging
import uuid

from ..observability import log_operation
from ..repositories import OrderStatusRepository
from .details import OrderStatusDetails

logger = logging.getLogger(__name__)


class OrderStatusPersistenceService:
    def __init__(self, order_statuses: OrderStatusRepository):
        self._order_statuses = order_statuses

    async def set_order_status(self, details: OrderStatusDetails) -> OrderStatusDetails:
        """
        Record a status change. A new id is assigned when ``details.id`` is unset.
        """
        status = await self._order_statuses.save(details.to_order_status())
        log_operation(
            logger,
            "order_status.set",
            order_id=str(status.order_id),
            status=status.status,
        )
        return OrderStatusDetails.from_order_status(status)

    async def request_order_status(self, order_id: uuid.UUID) -> OrderStatusDetails | None:
        """Most recent status of an order, or None if nothing was recorded."""
        status = await self._order_statuses.find_latest_status(order_id)
        return OrderStatusDetails.from_order_status(status) if status else None

    async def request_order_history(self, order_id: uuid.UUID) -> list[OrderStatusDetails]:
        history = await self._order_statuses.find_order_history(order_id)
        return [OrderStatusDetails.from_order_status(status) for status in history]
