"""
noodle_persistence - persistence layer of the Yummy Noodle Bar

Maps the menu and order status records to MongoDB, exposes them through
repositories and runs the ingredient popularity MapReduce.
"""

from .config import PersistenceConfig
from .core import NoodlePersistence
from .domain import Ingredient, IngredientAnalysis, MenuItem, OrderStatus
from .repositories import (
    InMemoryMenuItemRepository,
    MenuItemRepository,
    OrderStatusRepository,
)
from .services import MenuPersistenceService, OrderStatusPersistenceService

__version__ = "0.1.0"

__all__ = [
    # Core
    "NoodlePersistence",
    "PersistenceConfig",
    # Records
    "Ingredient",
    "IngredientAnalysis",
    "MenuItem",
    "OrderStatus",
    # Repositories
    "MenuItemRepository",
    "InMemoryMenuItemRepository",
    "OrderStatusRepository",
    # Services
    "MenuPersistenceService",
    "OrderStatusPersistenceService",
]
