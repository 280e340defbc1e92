"""
Menu records persisted in the ``menu`` collection.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar

from ..constants import MENU_COLLECTION
from ..mapping import DocumentMapping, FieldMapping, IndexSpec, MappedDocument


@dataclass(frozen=True)
class Ingredient(MappedDocument):
    """
    Ingredient embedded in a menu item.

    Equality and hashing use the name only: a menu item holds at most one
    ingredient per name, and popularity keys match the ingredients on items.
    """

    name: str
    description: str | None = field(default=None, compare=False)

    __mapping__: ClassVar[DocumentMapping] = DocumentMapping(
        collection="",
        id_attribute=None,
        fields=(FieldMapping("name"), FieldMapping("description")),
    )


@dataclass
class MenuItem(MappedDocument):
    """
    A dish on the menu.

    ``name`` is stored as ``itemName`` and indexed; ingredients are stored as
    an array of embedded documents so they can be queried with
    ``ingredients.name``.
    """

    id: str | None = None
    name: str = ""
    description: str | None = None
    ingredients: set[Ingredient] = field(default_factory=set)
    cost: Decimal = Decimal("0")
    minutes_to_prepare: int = 0

    __mapping__: ClassVar[DocumentMapping] = DocumentMapping(
        collection=MENU_COLLECTION,
        fields=(
            FieldMapping("name", key="itemName"),
            FieldMapping("description"),
            FieldMapping.embedded("ingredients", Ingredient, many=True, container=set),
            FieldMapping.decimal("cost"),
            FieldMapping("minutes_to_prepare", key="minutesToPrepare"),
        ),
        indexes=(IndexSpec.ascending("itemName"),),
    )

    @property
    def ingredient_names(self) -> set[str]:
        return {ingredient.name for ingredient in self.ingredients}


@dataclass(frozen=True)
class IngredientAnalysis:
    """One row of the ingredient popularity MapReduce: ingredient name and count."""

    id: str
    value: int

    @classmethod
    def from_result(cls, row: dict) -> "IngredientAnalysis":
        # MapReduce emits JavaScript numbers, which arrive as floats
        return cls(id=row["_id"], value=int(row["value"]))
