"""Shared fixtures for the music catalog tests."""

from typing import Any

import pytest

from music_catalog.database import (
    Album,
    AlbumRepository,
    Artist,
    ArtistRepository,
    DatabaseService,
    PlaylistRepository,
    Song,
    SongRepository,
)
from music_catalog.models import CatalogRecord


def make_record(**overrides: Any) -> CatalogRecord:
    """Build a complete catalog record, overriding selected fields."""
    data = {
        "wrapper_type": "track",
        "kind": "song",
        "artist_id": 7,
        "artist_name": "Geese",
        "country": "USA",
        "album_id": 42,
        "album_name": "3D Country",
        "genre": "Alternative",
        "release_date": "2023-06-23T07:00:00Z",
        "track_count": 11,
        "artwork_url": "https://example.com/42/100x100bb.jpg",
        "song_id": 100,
        "song_name": "2122",
        "length_millis": 215000,
        "preview_url": "https://example.com/100.m4a",
    }
    data.update(overrides)
    return CatalogRecord(**data)


@pytest.fixture
def db_service(tmp_path):
    """Create a temporary catalog database."""
    service = DatabaseService(tmp_path / "catalog.db")
    service.init_db()
    yield service
    service.close()


@pytest.fixture
def artist_repository(db_service):
    """Artist repository on the temporary database."""
    return ArtistRepository(db_service)


@pytest.fixture
def album_repository(db_service):
    """Album repository on the temporary database."""
    return AlbumRepository(db_service)


@pytest.fixture
def song_repository(db_service):
    """Song repository on the temporary database."""
    return SongRepository(db_service)


@pytest.fixture
def playlist_repository(db_service):
    """Playlist repository on the temporary database."""
    return PlaylistRepository(db_service)


@pytest.fixture
def catalog(artist_repository, album_repository, song_repository):
    """Store one artist with two albums and three songs.

    Returns:
        Dictionary of the stored entities by short name
    """
    geese = artist_repository.save(Artist(id=7, name="Geese", country="USA"))
    country = album_repository.save(
        Album(id=42, name="3D Country", genre="Alternative", year=2023, artist_id=7)
    )
    projector = album_repository.save(
        Album(id=43, name="Projector", genre="Rock", year=2021, artist_id=7)
    )
    s2122 = song_repository.save(
        Song(id=100, name="2122", length_millis=215000, album_id=42)
    )
    cowboy = song_repository.save(
        Song(id=101, name="Cowboy Nudes", length_millis=227000, album_id=42)
    )
    disco = song_repository.save(
        Song(id=102, name="Disco", length_millis=180000, album_id=43)
    )
    return {
        "artist": geese,
        "album": country,
        "other_album": projector,
        "song": s2122,
        "other_song": cowboy,
        "third_song": disco,
    }


@pytest.fixture
def record_factory():
    """Factory building complete catalog records."""
    return make_record
