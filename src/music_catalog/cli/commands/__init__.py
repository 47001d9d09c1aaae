"""CLI command modules."""

from .catalog import (
    albums_command,
    artists_command,
    delete_artist_command,
    init_command,
    songs_command,
    stats_command,
)
from .playlist import playlist

__all__ = [
    "init_command",
    "stats_command",
    "artists_command",
    "albums_command",
    "songs_command",
    "delete_artist_command",
    "playlist",
]
