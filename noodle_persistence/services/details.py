"""
Application-facing views of persisted records.

The rest of the application exchanges these validated models with the
persistence layer and never sees documents or mapped records directly.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..domain import Ingredient, MenuItem, OrderStatus


class IngredientDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str | None = None

    @classmethod
    def from_ingredient(cls, ingredient: Ingredient) -> "IngredientDetails":
        return cls(name=ingredient.name, description=ingredient.description)

    def to_ingredient(self) -> Ingredient:
        return Ingredient(name=self.name, description=self.description)


class MenuItemDetails(BaseModel):
    """A menu item as the rest of the application sees it."""

    key: str | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    ingredients: list[IngredientDetails] = Field(default_factory=list)
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    minutes_to_prepare: int = Field(default=0, ge=0)

    @classmethod
    def from_menu_item(cls, item: MenuItem) -> "MenuItemDetails":
        return cls(
            key=item.id,
            name=item.name,
            description=item.description,
            ingredients=[
                IngredientDetails.from_ingredient(i)
                for i in sorted(item.ingredients, key=lambda i: i.name)
            ],
            cost=item.cost,
            minutes_to_prepare=item.minutes_to_prepare,
        )

    def to_menu_item(self) -> MenuItem:
        return MenuItem(
            id=self.key,
            name=self.name,
            description=self.description,
            ingredients={i.to_ingredient() for i in self.ingredients},
            cost=self.cost,
            minutes_to_prepare=self.minutes_to_prepare,
        )


class OrderStatusDetails(BaseModel):
    """A status change of an order."""

    id: uuid.UUID | None = None
    order_id: uuid.UUID
    status: str = Field(..., min_length=1)
    status_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_order_status(cls, status: OrderStatus) -> "OrderStatusDetails":
        return cls(
            id=status.id,
            order_id=status.order_id,
            status=status.status,
            status_date=status.status_date,
        )

    def to_order_status(self) -> OrderStatus:
        status = OrderStatus(
            order_id=self.order_id, status=self.status, status_date=self.status_date
        )
        if self.id is not None:
            status.id = self.id
        return status
