"""
Menu commands: validate and seed menu files, report ingredient popularity.
"""

import asyncio
import sys
from pathlib import Path

import click

from ...core import NoodlePersistence
from ...exceptions import NoodlePersistenceError, SeedValidationError
from ...seeding import seed_menu, validate_menu
from ..utils import build_config, read_menu_file, with_connection_options


@click.command("validate-menu")
@click.argument("menu_file", type=click.Path(exists=True, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Show the path of every invalid value")
def validate_menu_command(menu_file: Path, verbose: bool) -> None:
    """
    Validate a menu seed file without touching the database.

    MENU_FILE: Path to a JSON array of menu items
    """
    items = read_menu_file(menu_file)
    try:
        validate_menu(items)
    except SeedValidationError as e:
        click.echo(click.style(f"Menu file '{menu_file}' is invalid!", fg="red"))
        click.echo(click.style(f"Error: {e.message}", fg="red"))
        if verbose and e.error_paths:
            click.echo("\nError paths:")
            for path in e.error_paths:
                click.echo(f"  - {path}")
        sys.exit(1)

    click.echo(click.style(f"Menu file '{menu_file}' is valid ({len(items)} items).", fg="green"))


@click.command("seed")
@click.argument("menu_file", type=click.Path(exists=True, path_type=Path))
@with_connection_options
def seed_command(menu_file: Path, mongo_uri: str | None, db_name: str | None) -> None:
    """
    Load a menu seed file into an empty menu collection.

    MENU_FILE: Path to a JSON array of menu items
    """
    items = read_menu_file(menu_file)
    config = build_config(mongo_uri, db_name)

    async def run() -> int:
        async with NoodlePersistence(config) as persistence:
            return await seed_menu(persistence.menu_items, items)

    try:
        inserted = asyncio.run(run())
    except NoodlePersistenceError as e:
        raise click.ClickException(str(e)) from e

    if inserted:
        click.echo(f"Seeded {inserted} menu items.")
    else:
        click.echo("Menu already populated; nothing seeded.")


@click.command("popularity")
@with_connection_options
def popularity_command(mongo_uri: str | None, db_name: str | None) -> None:
    """
    Print how many menu items use each ingredient, most used first.
    """
    config = build_config(mongo_uri, db_name)

    async def run():
        async with NoodlePersistence(config) as persistence:
            return await persistence.menu_items.analyse_ingredients_by_popularity()

    try:
        popularity = asyncio.run(run())
    except NoodlePersistenceError as e:
        raise click.ClickException(str(e)) from e

    if not popularity:
        click.echo("No menu items.")
        return
    ranked = sorted(popularity.items(), key=lambda pair: (-pair[1], pair[0].name))
    for ingredient, count in ranked:
        click.echo(f"{ingredient.name}: {count}")
