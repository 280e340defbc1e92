"""
Services connecting the application's domain to the repositories.
"""

from .details import IngredientDetails, MenuItemDetails, OrderStatusDetails
from .menu import MenuPersistenceService
from .order_status import OrderStatusPersistenceService

__all__ = [
    "IngredientDetails",
    "MenuItemDetails",
    "OrderStatusDetails",
    "MenuPersistenceService",
    "OrderStatusPersistenceService",
]
