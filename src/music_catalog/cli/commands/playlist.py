"""Playlist commands."""

import logging
from typing import Optional, Tuple

import click
from rich.console import Console

from ...core.playlists import filter_songs
from ..app import CatalogApp, handle_catalog_errors, pass_app
from ..display import display_playlists, display_songs

console = Console()
logger = logging.getLogger(__name__)


@click.group("playlist")
def playlist() -> None:
    """Manage playlists.

    Playlist 1 (Library) holds every ingested song and cannot be edited.
    Playlist 2 (Favorites) takes songs like any playlist but cannot be
    renamed or deleted.
    """
    pass


@playlist.command(name="list")
@pass_app
def playlist_list(app: CatalogApp) -> None:
    """List playlists."""
    display_playlists(app.playlists.find_all())


@playlist.command(name="show")
@click.argument("playlist_id", type=int)
@click.option("--filter", "filter_text", help="Match title, artist or album")
@pass_app
@handle_catalog_errors("Showing playlist")
def playlist_show(
    app: CatalogApp, playlist_id: int, filter_text: Optional[str]
) -> None:
    """Show the songs of a playlist."""
    selected = app.playlists.find_by_id(playlist_id)
    display_songs(filter_songs(selected.songs, filter_text), title=selected.name)


@playlist.command(name="create")
@click.argument("name")
@pass_app
@handle_catalog_errors("Creating playlist")
def playlist_create(app: CatalogApp, name: str) -> None:
    """Create an empty playlist."""
    created = app.playlists.create_playlist(name)
    console.print(f"[green]✓ Created playlist '{created.name}' ({created.id})[/green]")


@playlist.command(name="rename")
@click.argument("playlist_id", type=int)
@click.argument("name")
@pass_app
@handle_catalog_errors("Renaming playlist")
def playlist_rename(app: CatalogApp, playlist_id: int, name: str) -> None:
    """Rename a playlist."""
    manager = app.playlists
    renamed = manager.rename_playlist(manager.find_by_id(playlist_id), name)
    console.print(f"[green]✓ Renamed playlist {renamed.id} to '{renamed.name}'[/green]")


@playlist.command(name="delete")
@click.argument("playlist_id", type=int)
@pass_app
@handle_catalog_errors("Deleting playlist")
def playlist_delete(app: CatalogApp, playlist_id: int) -> None:
    """Delete a playlist; its songs stay in the catalog."""
    manager = app.playlists
    selected = manager.find_by_id(playlist_id)
    manager.delete_playlist(selected)
    console.print(f"[green]✓ Deleted playlist '{selected.name}'[/green]")


@playlist.command(name="add")
@click.argument("playlist_id", type=int)
@click.argument("song_ids", type=int, nargs=-1, required=True)
@pass_app
@handle_catalog_errors("Adding songs")
def playlist_add(app: CatalogApp, playlist_id: int, song_ids: Tuple[int, ...]) -> None:
    """Add songs to a playlist."""
    manager = app.playlists
    selected = manager.find_by_id(playlist_id)
    songs = [app.songs.find_by_id(song_id) for song_id in dict.fromkeys(song_ids)]
    added = manager.add_songs(selected, songs)
    console.print(
        f"[green]✓ Added {added} song(s) to '{selected.name}'[/green]"
        + (f" ({len(songs) - added} already present)" if added < len(songs) else "")
    )


@playlist.command(name="remove")
@click.argument("playlist_id", type=int)
@click.argument("song_id", type=int)
@pass_app
@handle_catalog_errors("Removing song")
def playlist_remove(app: CatalogApp, playlist_id: int, song_id: int) -> None:
    """Remove a song from a playlist; the song stays in the catalog."""
    manager = app.playlists
    selected = manager.find_by_id(playlist_id)
    song = app.songs.find_by_id(song_id)
    if manager.remove_song(selected, song):
        console.print(f"[green]✓ Removed '{song.name}' from '{selected.name}'[/green]")
    else:
        console.print(f"[yellow]'{song.name}' is not in '{selected.name}'[/yellow]")
