"""
Initial Menu Seeding

Loads a starting menu into an empty menu repository. Raw item dictionaries
are validated against a JSON schema first, so a bad seed file fails before
anything is written.
"""

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

from .domain import MenuItem
from .exceptions import SeedValidationError
from .repositories import Repository
from .services.details import MenuItemDetails

logger = logging.getLogger(__name__)

MENU_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "additionalProperties": False,
    "properties": {
        "key": {"type": "string"},
        "name": {"type": "string", "minLength": 1},
        "description": {"type": ["string", "null"]},
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "description": {"type": ["string", "null"]},
                },
            },
        },
        "cost": {
            "anyOf": [
                {"type": "number", "minimum": 0},
                {"type": "string", "pattern": r"^\d+(\.\d+)?$"},
            ]
        },
        "minutes_to_prepare": {"type": "integer", "minimum": 0},
    },
}

MENU_SCHEMA: dict[str, Any] = {"type": "array", "items": MENU_ITEM_SCHEMA}

_validator = Draft7Validator(MENU_SCHEMA)


def validate_menu(items: list[dict[str, Any]]) -> None:
    """
    Raises:
        SeedValidationError: Listing the path of every invalid value
    """
    errors = sorted(_validator.iter_errors(items), key=lambda e: list(e.absolute_path))
    if errors:
        paths = ["/".join(str(p) for p in error.absolute_path) or "<root>" for error in errors]
        raise SeedValidationError(
            f"Invalid menu seed data: {errors[0].message}",
            error_paths=paths,
        )


async def seed_menu(repository: Repository[MenuItem], items: list[dict[str, Any]]) -> int:
    """
    Seed the menu if the repository is empty.

    Args:
        repository: Menu item repository
        items: Raw menu item dictionaries (see MENU_ITEM_SCHEMA)

    Returns:
        Number of menu items inserted (0 when the menu already has items)
    """
    validate_menu(items)

    existing = await repository.count()
    if existing > 0:
        logger.info(f"Menu already holds {existing} items, skipping seed to avoid duplicates")
        return 0

    menu_items = [MenuItemDetails(**item).to_menu_item() for item in items]
    await repository.save_all(menu_items)
    logger.info(f"Seeded {len(menu_items)} menu items")
    return len(menu_items)


def load_menu_file(path: str | Path) -> list[dict[str, Any]]:
    """Read a JSON seed file holding an array of menu items."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)
