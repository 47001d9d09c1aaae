"""Music Catalog.

A local catalog of artists, albums and songs seeded from the iTunes catalog,
with user-managed playlists on top.
"""

__version__ = "1.0.0"

from .config import Config
from .core.ingestion import CatalogReconciler, IngestionResult
from .core.playlists import PlaylistManager
from .database import (
    Album,
    AlbumRepository,
    Artist,
    ArtistRepository,
    DatabaseService,
    Playlist,
    PlaylistRepository,
    Song,
    SongRepository,
)
from .models import CatalogRecord

__all__ = [
    "Config",
    "CatalogRecord",
    "Artist",
    "Album",
    "Song",
    "Playlist",
    "DatabaseService",
    "ArtistRepository",
    "AlbumRepository",
    "SongRepository",
    "PlaylistRepository",
    "CatalogReconciler",
    "IngestionResult",
    "PlaylistManager",
]
