"""
Ingredient popularity analysis.

Counts, for every ingredient name, how many menu items use it. The work is
done by the database: either by the packaged MapReduce script pair or, on
servers without mapReduce, by the equivalent aggregation pipeline.
"""

import logging
from importlib import resources
from typing import TYPE_CHECKING, Any

from ..constants import (
    ANALYSIS_STRATEGY_MAPREDUCE,
    DEFAULT_ANALYSIS_STRATEGY,
    INGREDIENTS_MAP_SCRIPT,
    INGREDIENTS_REDUCE_SCRIPT,
    SUPPORTED_ANALYSIS_STRATEGIES,
)
from ..domain import Ingredient, IngredientAnalysis, MenuItem
from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..repositories.mongo import MongoRepository

logger = logging.getLogger(__name__)


def load_script(name: str) -> str:
    """Read a JavaScript file shipped in ``analysis/scripts``."""
    return resources.files(__package__).joinpath("scripts", name).read_text(encoding="utf-8")


def ingredient_popularity_pipeline() -> list[dict[str, Any]]:
    """Aggregation pipeline producing the same rows as the MapReduce pair."""
    ingredients_key = MenuItem.document_key("ingredients")
    name_key = Ingredient.document_key("name")
    # A name counts once per menu item
    return [
        {"$unwind": f"${ingredients_key}"},
        {"$group": {"_id": {"item": "$_id", "name": f"${ingredients_key}.{name_key}"}}},
        {"$group": {"_id": "$_id.name", "value": {"$sum": 1}}},
    ]


class IngredientAnalyser:
    """
    Runs the ingredient popularity job against a menu repository.
    """

    def __init__(
        self,
        repository: "MongoRepository[MenuItem]",
        strategy: str = DEFAULT_ANALYSIS_STRATEGY,
    ):
        if strategy not in SUPPORTED_ANALYSIS_STRATEGIES:
            raise ConfigurationError(
                f"Unknown ingredient analysis strategy '{strategy}'",
                config_key="analysis_strategy",
                config_value=strategy,
            )
        self._repository = repository
        self.strategy = strategy

    async def analyse(self) -> list[IngredientAnalysis]:
        """
        Returns:
            One IngredientAnalysis per ingredient name, ordered by name
        """
        if self.strategy == ANALYSIS_STRATEGY_MAPREDUCE:
            rows = await self._repository.map_reduce(
                load_script(INGREDIENTS_MAP_SCRIPT),
                load_script(INGREDIENTS_REDUCE_SCRIPT),
            )
        else:
            rows = await self._repository.aggregate(ingredient_popularity_pipeline())

        analysis = sorted((IngredientAnalysis.from_result(row) for row in rows), key=lambda a: a.id)
        logger.debug(f"Ingredient analysis ({self.strategy}) produced {len(analysis)} rows")
        return analysis
