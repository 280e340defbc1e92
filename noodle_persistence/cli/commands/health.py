"""
Health command: connect and report component health.
"""

import asyncio
import json
import sys

import click

from ...core import NoodlePersistence
from ...exceptions import NoodlePersistenceError
from ..utils import build_config, with_connection_options


@click.command("health")
@with_connection_options
def health_command(mongo_uri: str | None, db_name: str | None) -> None:
    """
    Check MongoDB and the persistence layer; exit 1 unless healthy.
    """
    config = build_config(mongo_uri, db_name)

    async def run():
        async with NoodlePersistence(config) as persistence:
            return await persistence.get_health_status()

    try:
        status = asyncio.run(run())
    except NoodlePersistenceError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(status, indent=2))
    if status["status"] != "healthy":
        sys.exit(1)
