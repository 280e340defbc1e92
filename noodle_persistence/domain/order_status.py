"""
Order status updates kept in the ``YummyNoodleOrder`` region.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar

from ..constants import ORDER_STATUS_REGION
from ..mapping import DocumentMapping, FieldMapping, MappedDocument


@dataclass
class OrderStatus(MappedDocument):
    """
    A status change of an order. Each change is its own entry, so the entries
    sharing an ``order_id`` form the order's history.
    """

    order_id: uuid.UUID
    status: str
    status_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    __mapping__: ClassVar[DocumentMapping] = DocumentMapping(
        collection=ORDER_STATUS_REGION,
        object_id=False,
        fields=(
            FieldMapping("order_id", key="orderId"),
            FieldMapping("status"),
            FieldMapping("status_date", key="statusDate"),
        ),
    )
