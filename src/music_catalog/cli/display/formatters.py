"""Display formatters for CLI output."""

import logging
from typing import Any, Dict, Iterable, Sequence

from rich.console import Console
from rich.table import Table

from ...database.models import Album, Artist, Playlist, Song

console = Console()
logger = logging.getLogger(__name__)


def display_ingestion_result(summary: Dict[str, Any]) -> None:
    """Display the counters of an ingestion run.

    Args:
        summary: Result of ``IngestionResult.get_summary()``
    """
    if summary.get("skipped"):
        console.print(
            "[yellow]Catalog already populated - ingestion skipped[/yellow]"
        )
        return

    console.print("\n[bold green]✅ Ingestion completed[/bold green]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entity", style="cyan")
    table.add_column("Saved", style="green", justify="right")
    table.add_column("Already known", style="yellow", justify="right")

    for entity in ("artists", "albums", "songs"):
        table.add_row(
            entity.capitalize(),
            str(summary.get(f"{entity}_saved", 0)),
            str(summary.get(f"{entity}_skipped", 0)),
        )

    console.print(table)
    console.print(
        f"Search terms: {summary.get('terms_processed', 0)} processed, "
        f"{summary.get('terms_failed', 0)} failed; "
        f"covers fetched: {summary.get('covers_fetched', 0)}"
    )


def display_statistics(stats: Dict[str, Any]) -> None:
    """Display database row counts."""
    path = stats["database_path"]
    console.print(f"\n[bold cyan]📊 Catalog at {path}[/bold cyan]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="green", justify="right")

    table.add_row("Artists", str(stats["artists"]))
    table.add_row("Albums", str(stats["albums"]))
    table.add_row("Songs", str(stats["songs"]))
    table.add_row("Playlists", str(stats["playlists"]))
    table.add_row("Playlist-Song Links", str(stats["playlist_songs"]))

    console.print(table)


def display_artists(artists: Sequence[Artist]) -> None:
    """Display artists with their album counts."""
    table = Table(title=f"Artists ({len(artists)})", header_style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Country")
    table.add_column("Albums", justify="right")

    for artist in artists:
        table.add_row(
            str(artist.id),
            artist.name,
            artist.country or "-",
            str(len(artist.albums)),
        )

    console.print(table)


def display_albums(albums: Sequence[Album]) -> None:
    """Display albums."""
    table = Table(title=f"Albums ({len(albums)})", header_style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Artist")
    table.add_column("Genre")
    table.add_column("Year", justify="right")
    table.add_column("Tracks", justify="right")
    table.add_column("Cover", justify="center")

    for album in albums:
        table.add_row(
            str(album.id),
            album.name,
            album.artist.name if album.artist is not None else "Unknown artist",
            album.genre or "-",
            str(album.year) if album.year else "-",
            str(album.track_count) if album.track_count is not None else "-",
            "✓" if album.has_cover else "",
        )

    console.print(table)


def display_songs(songs: Sequence[Song], title: str = "Songs") -> None:
    """Display songs with artist, album and length columns."""
    table = Table(title=f"{title} ({len(songs)})", header_style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Artist")
    table.add_column("Album")
    table.add_column("Length", justify="right")

    for song in songs:
        album = song.album
        artist = album.artist if album is not None else None
        table.add_row(
            str(song.id),
            song.name,
            artist.name if artist is not None else "Unknown artist",
            album.name if album is not None else "Unknown album",
            song.formatted_length,
        )

    console.print(table)


def display_playlists(playlists: Iterable[Playlist]) -> None:
    """Display playlists with their song counts."""
    table = Table(title="Playlists", header_style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Songs", justify="right")
    table.add_column("System", justify="center")

    for playlist in playlists:
        table.add_row(
            str(playlist.id),
            playlist.name,
            str(len(playlist.songs)),
            "🔒" if playlist.is_system else "",
        )

    console.print(table)
