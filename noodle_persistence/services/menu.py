"""
Menu persistence service: the seam between the application's menu handling
and the menu repository.
"""

import logging
from typing import Protocol

from ..domain import Ingredient, MenuItem
from ..observability import log_operation
from .details import MenuItemDetails

logger = logging.getLogger(__name__)


class MenuStore(Protocol):
    async def save(self, entity: MenuItem) -> MenuItem: ...

    async def find_one(self, id: str) -> MenuItem | None: ...

    async def find_all(self) -> list[MenuItem]: ...

    async def analyse_ingredients_by_popularity(self) -> dict[Ingredient, int]: ...


class MenuPersistenceService:
    """
    Example:
        service = MenuPersistenceService(persistence.menu_items)
        created = await service.create_menu_item(MenuItemDetails(name="Yummy Noodles"))
        same = await service.request_menu_item_details(created.key)
    """

    def __init__(self, menu_items: MenuStore):
        self._menu_items = menu_items

    async def request_all_menu_items(self) -> list[MenuItemDetails]:
        items = await self._menu_items.find_all()
        return [MenuItemDetails.from_menu_item(item) for item in items]

    async def request_menu_item_details(self, key: str) -> MenuItemDetails | None:
        item = await self._menu_items.find_one(key)
        if item is None:
            logger.debug(f"Menu item {key} not found")
            return None
        return MenuItemDetails.from_menu_item(item)

    async def create_menu_item(self, details: MenuItemDetails) -> MenuItemDetails:
        item = await self._menu_items.save(details.to_menu_item())
        log_operation(logger, "menu.create_item", key=item.id, item_name=item.name)
        return MenuItemDetails.from_menu_item(item)

    async def request_ingredient_popularity(self) -> dict[str, int]:
        """Menu item count per ingredient name."""
        popularity = await self._menu_items.analyse_ingredients_by_popularity()
        return {ingredient.name: count for ingredient, count in popularity.items()}
