"""Database package: entity models, storage handle and repositories."""

from .models import (
    FAVORITES_PLAYLIST_ID,
    LIBRARY_PLAYLIST_ID,
    SYSTEM_PLAYLIST_IDS,
    Album,
    Artist,
    Base,
    Playlist,
    Song,
    playlist_songs,
)
from .repositories import (
    AlbumRepository,
    ArtistRepository,
    PlaylistRepository,
    SongRepository,
)
from .service import DatabaseService

__all__ = [
    # Models
    "Artist",
    "Album",
    "Song",
    "Playlist",
    "Base",
    "playlist_songs",
    # System playlists
    "LIBRARY_PLAYLIST_ID",
    "FAVORITES_PLAYLIST_ID",
    "SYSTEM_PLAYLIST_IDS",
    # Storage
    "DatabaseService",
    "ArtistRepository",
    "AlbumRepository",
    "SongRepository",
    "PlaylistRepository",
]
