"""
Unit tests for the persistence services and their pydantic models.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from bson import ObjectId
from pydantic import ValidationError

from noodle_persistence.constants import ORDER_STATUS_REGION, STATUS_DELIVERED
from noodle_persistence.domain import OrderStatus
from noodle_persistence.fixtures import standard_menu_item
from noodle_persistence.regions import LocalRegion
from noodle_persistence.repositories import InMemoryMenuItemRepository, OrderStatusRepository
from noodle_persistence.services import (
    IngredientDetails,
    MenuItemDetails,
    MenuPersistenceService,
    OrderStatusDetails,
    OrderStatusPersistenceService,
)


@pytest.mark.unit
class TestMenuItemDetails:
    def test_from_menu_item_sorts_ingredients(self):
        details = MenuItemDetails.from_menu_item(standard_menu_item())

        assert details.name == "Yummy Noodles"
        assert [i.name for i in details.ingredients] == ["Cashews", "Egg", "Noodles", "Peanuts"]
        assert details.cost == Decimal("12.99")

    def test_round_trip(self):
        item = standard_menu_item()
        item.id = str(ObjectId())

        assert MenuItemDetails.from_menu_item(item).to_menu_item() == item

    def test_validation(self):
        with pytest.raises(ValidationError):
            MenuItemDetails(name="")
        with pytest.raises(ValidationError):
            MenuItemDetails(name="Ramen", cost=Decimal("-1"))
        with pytest.raises(ValidationError):
            MenuItemDetails(name="Ramen", minutes_to_prepare=-5)

    def test_cost_accepts_strings(self):
        assert MenuItemDetails(name="Ramen", cost="9.50").cost == Decimal("9.50")

    def test_ingredient_details_are_frozen(self):
        ingredient = IngredientDetails(name="Egg")
        with pytest.raises(ValidationError):
            ingredient.name = "Rice"


@pytest.mark.unit
class TestMenuPersistenceService:
    """Test the menu service over the in-memory repository."""

    @pytest.fixture
    def service(self):
        return MenuPersistenceService(InMemoryMenuItemRepository())

    @pytest.mark.asyncio
    async def test_create_and_request(self, service):
        created = await service.create_menu_item(
            MenuItemDetails(
                name="Ramen",
                ingredients=[IngredientDetails(name="Noodles"), IngredientDetails(name="Egg")],
                cost=Decimal("11.00"),
                minutes_to_prepare=12,
            )
        )

        assert created.key is not None
        assert await service.request_menu_item_details(created.key) == created
        assert await service.request_all_menu_items() == [created]

    @pytest.mark.asyncio
    async def test_unknown_key(self, service):
        assert await service.request_menu_item_details(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_ingredient_popularity_by_name(self, service):
        for name in ("Ramen", "Udon"):
            await service.create_menu_item(
                MenuItemDetails(name=name, ingredients=[IngredientDetails(name="Noodles")])
            )
        await service.create_menu_item(
            MenuItemDetails(name="Rice", ingredients=[IngredientDetails(name="Rice")])
        )

        assert await service.request_ingredient_popularity() == {"Noodles": 2, "Rice": 1}


@pytest.mark.unit
class TestOrderStatusPersistenceService:
    @pytest.fixture
    def service(self):
        region = LocalRegion(ORDER_STATUS_REGION, OrderStatus)
        return OrderStatusPersistenceService(OrderStatusRepository(region))

    @pytest.mark.asyncio
    async def test_set_order_status_assigns_id(self, service, order_id):
        details = await service.set_order_status(
            OrderStatusDetails(order_id=order_id, status="Order Received")
        )

        assert details.id is not None
        assert details.order_id == order_id

    @pytest.mark.asyncio
    async def test_set_order_status_keeps_given_id(self, service, order_id):
        status = OrderStatus(order_id=order_id, status="Order Received")

        details = await service.set_order_status(OrderStatusDetails.from_order_status(status))

        assert details.id == status.id

    @pytest.mark.asyncio
    async def test_request_order_status_and_history(self, service, order_id):
        await service.set_order_status(
            OrderStatusDetails(
                order_id=order_id,
                status="Order Received",
                status_date=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
            )
        )
        await service.set_order_status(
            OrderStatusDetails(
                order_id=order_id,
                status=STATUS_DELIVERED,
                status_date=datetime(2024, 1, 1, 13, tzinfo=timezone.utc),
            )
        )

        latest = await service.request_order_status(order_id)
        history = await service.request_order_history(order_id)

        assert latest.status == STATUS_DELIVERED
        assert [h.status for h in history] == ["Order Received", STATUS_DELIVERED]

    @pytest.mark.asyncio
    async def test_request_unknown_order(self, service, order_id):
        assert await service.request_order_status(order_id) is None
        assert await service.request_order_history(order_id) == []
