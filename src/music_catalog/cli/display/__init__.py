"""CLI display and formatting utilities."""

from .formatters import (
    display_albums,
    display_artists,
    display_ingestion_result,
    display_playlists,
    display_songs,
    display_statistics,
)

__all__ = [
    "display_albums",
    "display_artists",
    "display_ingestion_result",
    "display_playlists",
    "display_songs",
    "display_statistics",
]
