"""Command-line interface for the music catalog.

This is the main entry point that delegates to command modules.
"""

from pathlib import Path
from typing import Any, Optional

import click

from ..config import Config
from ..utils.logging_config import configure_third_party_loggers, setup_logging
from .app import CatalogApp
from .commands import (
    albums_command,
    artists_command,
    delete_artist_command,
    init_command,
    playlist,
    songs_command,
    stats_command,
)


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Set logging level",
)
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.option("--log-sql", is_flag=True, help="Log every SQL statement")
@click.option(
    "--database",
    "database",
    type=click.Path(dir_okay=False),
    help="Catalog database file (overrides MUSIC_CATALOG_DATABASE_PATH)",
)
@click.pass_context
def cli(
    ctx: Any,
    log_level: str,
    log_file: Optional[str],
    log_sql: bool,
    database: Optional[str],
) -> None:
    """Music Catalog.

    Keeps a local catalog of artists, albums and songs seeded from the
    iTunes catalog, and lets you organize the songs into playlists.
    """
    setup_logging(log_level=log_level, log_file=Path(log_file) if log_file else None)
    configure_third_party_loggers(log_sql=log_sql)

    app = CatalogApp(Config(), db_path=Path(database) if database else None)
    ctx.obj = app
    ctx.call_on_close(app.close)


# Register command groups and commands
cli.add_command(init_command)
cli.add_command(stats_command)
cli.add_command(artists_command)
cli.add_command(albums_command)
cli.add_command(songs_command)
cli.add_command(delete_artist_command)
cli.add_command(playlist)


if __name__ == "__main__":
    cli()
