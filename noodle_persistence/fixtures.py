"""
Ready-made records for tests and demos.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from .constants import (
    STATUS_DELIVERED,
    STATUS_FINISHED_COOKING,
    STATUS_ORDER_RECEIVED,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_STARTED_COOKING,
)
from .domain import Ingredient, MenuItem, OrderStatus


def standard_menu_item() -> MenuItem:
    return MenuItem(
        name="Yummy Noodles",
        description="Rich noodles with a peanut and cashew sauce",
        ingredients={
            Ingredient("Noodles", "Crisp, lovely noodles"),
            Ingredient("Egg", "Used in the noodles"),
            Ingredient("Peanuts", "A Nut"),
            Ingredient("Cashews", "A Nut"),
        },
        cost=Decimal("12.99"),
        minutes_to_prepare=5,
    )


def egg_fried_rice() -> MenuItem:
    return MenuItem(
        name="Egg Fried Rice",
        description="Fluffy rice tossed with egg and spring onion",
        ingredients={
            Ingredient("Rice", "Steamed long grain rice"),
            Ingredient("Egg", "Scrambled in the wok"),
            Ingredient("Spring Onion", "Finely sliced"),
        },
        cost=Decimal("6.50"),
        minutes_to_prepare=4,
    )


def satay_skewers() -> MenuItem:
    return MenuItem(
        name="Satay Skewers",
        description="Chicken skewers with peanut dipping sauce",
        ingredients={
            Ingredient("Chicken", "Marinated thigh"),
            Ingredient("Peanuts", "A Nut"),
        },
        cost=Decimal("8.25"),
        minutes_to_prepare=10,
    )


def _status(order_id: uuid.UUID, status: str, status_date: datetime | None) -> OrderStatus:
    return OrderStatus(
        order_id=order_id,
        status=status,
        status_date=status_date or datetime.now(timezone.utc),
    )


def order_received(order_id: uuid.UUID, status_date: datetime | None = None) -> OrderStatus:
    return _status(order_id, STATUS_ORDER_RECEIVED, status_date)


def started_cooking(order_id: uuid.UUID, status_date: datetime | None = None) -> OrderStatus:
    return _status(order_id, STATUS_STARTED_COOKING, status_date)


def finished_cooking(order_id: uuid.UUID, status_date: datetime | None = None) -> OrderStatus:
    return _status(order_id, STATUS_FINISHED_COOKING, status_date)


def out_for_delivery(order_id: uuid.UUID, status_date: datetime | None = None) -> OrderStatus:
    return _status(order_id, STATUS_OUT_FOR_DELIVERY, status_date)


def delivered(order_id: uuid.UUID, status_date: datetime | None = None) -> OrderStatus:
    return _status(order_id, STATUS_DELIVERED, status_date)
