"""
Repositories

CRUD repositories over MongoDB collections, key/value regions and process
memory.

Usage:
    from noodle_persistence.repositories import MenuItemRepository

    menu = MenuItemRepository(db.menu)
    item = await menu.save(MenuItem(name="Yummy Noodles", cost=Decimal("9.99")))
    assert await menu.find_one(item.id) == item
"""

from .base import InMemoryRepository, Repository
from .menu import InMemoryMenuItemRepository, MenuItemRepository
from .mongo import MongoRepository
from .order_status import OrderStatusRepository

__all__ = [
    "Repository",
    "InMemoryRepository",
    "MongoRepository",
    "MenuItemRepository",
    "InMemoryMenuItemRepository",
    "OrderStatusRepository",
]
