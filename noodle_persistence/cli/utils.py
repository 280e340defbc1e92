"""
Shared helpers for CLI commands.
"""

import json
from pathlib import Path
from typing import Any

import click

from ..config import PersistenceConfig
from ..exceptions import ConfigurationError
from ..seeding import load_menu_file


def read_menu_file(file_path: Path) -> list[dict[str, Any]]:
    """
    Load a JSON menu seed file.

    Raises:
        click.ClickException: If the file is not valid JSON
    """
    try:
        return load_menu_file(file_path)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in menu file: {e}") from e


def build_config(mongo_uri: str | None, db_name: str | None) -> PersistenceConfig:
    """
    Build a validated configuration from CLI options and the environment.

    Raises:
        click.ClickException: If the configuration is incomplete
    """
    config = PersistenceConfig(mongo_uri=mongo_uri, db_name=db_name)
    try:
        config.validate()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    return config


def with_connection_options(func):
    """Add --mongo-uri and --db-name (falling back to MONGO_URI / DB_NAME)."""
    func = click.option("--db-name", envvar="DB_NAME", help="Database name")(func)
    func = click.option("--mongo-uri", envvar="MONGO_URI", help="MongoDB connection URI")(func)
    return func
