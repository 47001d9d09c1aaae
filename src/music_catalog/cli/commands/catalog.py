"""Catalog commands: ingestion and read access to artists, albums and songs."""

import logging
from typing import Optional, Tuple

import click
from rich.console import Console

from ...core.playlists import filter_songs
from ...exceptions import IngestionError
from ..app import CatalogApp, handle_catalog_errors, pass_app
from ..display import (
    display_albums,
    display_artists,
    display_ingestion_result,
    display_songs,
    display_statistics,
)

console = Console()
logger = logging.getLogger(__name__)


@click.command("init")
@click.option(
    "--term",
    "terms",
    multiple=True,
    help="Search term to ingest (repeatable, overrides the configured terms)",
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    help="Keep going with the next search term when one fails",
)
@click.option("--no-covers", is_flag=True, help="Do not download cover artwork")
@pass_app
def init_command(
    app: CatalogApp, terms: Tuple[str, ...], continue_on_error: bool, no_covers: bool
) -> None:
    """Populate an empty catalog from the iTunes catalog.

    Does nothing once the catalog holds any song.

    Examples:
        music-catalog init
        music-catalog init --term "run the jewels" --term "geese"
    """
    search_terms = list(terms) or app.config.search_terms
    reconciler = app.create_reconciler(fetch_covers=not no_covers)

    console.print(
        f"\n[bold cyan]📥 Ingesting {len(search_terms)} search term(s)...[/bold cyan]"
    )
    try:
        result = reconciler.run(search_terms, continue_on_error=continue_on_error)
    except IngestionError as e:
        logger.error("Ingestion aborted: %s", e)
        console.print(f"\n[red]✗ Ingestion aborted at '{e.term}': {e.cause}[/red]")
        raise click.ClickException(str(e)) from e

    display_ingestion_result(result.get_summary())

    if result.failed_terms:
        console.print(f"\n[red]⚠️  {len(result.failed_terms)} term(s) failed:[/red]")
        for term, error in result.failed_terms.items():
            console.print(f"  • {term}: {error}")


@click.command("stats")
@pass_app
def stats_command(app: CatalogApp) -> None:
    """Show row counts of the catalog."""
    display_statistics(app.db_service.get_statistics())


@click.command("artists")
@pass_app
def artists_command(app: CatalogApp) -> None:
    """List artists."""
    display_artists(app.artists.find_all())


@click.command("albums")
@click.option("--artist", "artist_id", type=int, help="Only albums of this artist")
@click.option("--genre", help="Only albums of this genre")
@pass_app
@handle_catalog_errors("Listing albums")
def albums_command(
    app: CatalogApp, artist_id: Optional[int], genre: Optional[str]
) -> None:
    """List albums."""
    if artist_id is not None:
        albums = app.albums.find_by_artist(app.artists.find_by_id(artist_id))
    elif genre:
        albums = app.albums.find_by_genre(genre)
    else:
        albums = app.albums.find_all()

    if genre and artist_id is not None:
        wanted = genre.strip().lower()
        albums = [a for a in albums if (a.genre or "").lower() == wanted]

    display_albums(albums)


@click.command("songs")
@click.option("--album", "album_id", type=int, help="Only songs of this album")
@click.option("--artist", "artist_id", type=int, help="Only songs of this artist")
@click.option("--filter", "filter_text", help="Match title, artist or album")
@pass_app
@handle_catalog_errors("Listing songs")
def songs_command(
    app: CatalogApp,
    album_id: Optional[int],
    artist_id: Optional[int],
    filter_text: Optional[str],
) -> None:
    """List songs."""
    if album_id is not None and artist_id is not None:
        raise click.UsageError("Use either --album or --artist, not both")

    if album_id is not None:
        songs = app.songs.find_by_album(app.albums.find_by_id(album_id))
    elif artist_id is not None:
        songs = app.songs.find_by_artist(app.artists.find_by_id(artist_id))
    else:
        songs = app.songs.find_all()

    if filter_text:
        songs = filter_songs(songs, filter_text)

    display_songs(songs)


@click.command("delete-artist")
@click.argument("artist_id", type=int)
@click.confirmation_option(
    prompt="Delete this artist with all of its albums and songs?"
)
@pass_app
@handle_catalog_errors("Deleting artist")
def delete_artist_command(app: CatalogApp, artist_id: int) -> None:
    """Delete an artist together with its albums and songs."""
    artist = app.artists.find_by_id(artist_id)
    app.artists.delete(artist)
    console.print(f"[green]✓ Deleted artist {artist.name} ({artist.id})[/green]")
