"""Playlist relationship management."""

from .filters import filter_songs, song_matches
from .manager import PlaylistManager

__all__ = ["PlaylistManager", "filter_songs", "song_matches"]
