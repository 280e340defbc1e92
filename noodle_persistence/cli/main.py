"""
Command line entry point.

Usage:
    noodle validate-menu menu.json
    noodle seed menu.json --mongo-uri mongodb://localhost:27017 --db-name noodles
    noodle popularity
    noodle health
"""

import logging

import click

from .commands.health import health_command
from .commands.menu import popularity_command, seed_command, validate_menu_command


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
def cli(log_level: str) -> None:
    """Yummy Noodle Bar persistence tools."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(validate_menu_command)
cli.add_command(seed_command)
cli.add_command(popularity_command)
cli.add_command(health_command)


if __name__ == "__main__":
    cli()
