"""
Persisted records of the noodle bar.
"""

from .menu import Ingredient, IngredientAnalysis, MenuItem
from .order_status import OrderStatus

__all__ = ["Ingredient", "IngredientAnalysis", "MenuItem", "OrderStatus"]
