"""
Menu item repositories.

MenuItemRepository keeps the menu in MongoDB and asks the database to run the
ingredient popularity analysis; InMemoryMenuItemRepository offers the same
operations without a database.
"""

import logging
from collections import Counter
from typing import Any

from ..analysis import IngredientAnalyser
from ..constants import DEFAULT_ANALYSIS_STRATEGY
from ..domain import Ingredient, MenuItem
from ..observability import get_logger, persistence_context
from .base import InMemoryRepository
from .mongo import MongoRepository

logger = logging.getLogger(__name__)
contextual_logger = get_logger(__name__)


def ingredient_names_filter(names: tuple[str, ...]) -> dict[str, Any]:
    """Filter selecting menu items that use any of the named ingredients."""
    key = f"{MenuItem.document_key('ingredients')}.{Ingredient.document_key('name')}"
    return {key: {"$in": list(names)}}


class MenuItemRepository(MongoRepository[MenuItem]):
    """
    Menu items stored in the ``menu`` collection.

    Example:
        menu = MenuItemRepository(db.menu)
        with_peanuts = await menu.find_by_ingredients_name_in("Peanuts", "Cashews")
        popularity = await menu.analyse_ingredients_by_popularity()
    """

    def __init__(self, collection: Any, analysis_strategy: str = DEFAULT_ANALYSIS_STRATEGY):
        super().__init__(collection, MenuItem)
        self._analyser = IngredientAnalyser(self, strategy=analysis_strategy)

    async def find_by_ingredients_name_in(self, *names: str) -> list[MenuItem]:
        """
        Menu items having at least one ingredient named in ``names``.
        """
        if not names:
            return []
        return await self.find(ingredient_names_filter(names))

    async def analyse_ingredients_by_popularity(self) -> dict[Ingredient, int]:
        """
        Number of menu items using each ingredient.

        Returns:
            Mapping of Ingredient (name only) to menu item count
        """
        with persistence_context(
            collection=self.collection.name, operation="analyse_ingredients_by_popularity"
        ):
            analysis = await self._analyser.analyse()
            contextual_logger.info(
                "Analysed ingredient popularity",
                extra={"strategy": self._analyser.strategy, "ingredients": len(analysis)},
            )
        return {Ingredient(name=row.id): row.value for row in analysis}


class InMemoryMenuItemRepository(InMemoryRepository[MenuItem]):
    """Menu kept in process memory."""

    def __init__(self):
        super().__init__(MenuItem)

    async def find_by_ingredients_name_in(self, *names: str) -> list[MenuItem]:
        if not names:
            return []
        return await self.find(ingredient_names_filter(names))

    async def analyse_ingredients_by_popularity(self) -> dict[Ingredient, int]:
        counts: Counter[str] = Counter()
        for item in await self.find_all():
            counts.update(item.ingredient_names)
        return {Ingredient(name=name): count for name, count in sorted(counts.items())}
