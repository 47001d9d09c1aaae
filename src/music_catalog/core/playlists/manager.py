"""Playlist relationship management.

Applies the protection and validation rules for playlists on top of
``PlaylistRepository``. A rejected request raises before anything is written,
and the objects passed in by the caller are never modified, so a caller's
cached view stays valid after a failure.
"""

import logging
from typing import Iterable, List, Optional

from ...database.models import (
    LIBRARY_PLAYLIST_ID,
    SYSTEM_PLAYLIST_IDS,
    Playlist,
    Song,
)
from ...database.repositories import PlaylistRepository
from ...database.service import DatabaseService
from ...exceptions import InvalidName, NotFound, ProtectedPlaylist

logger = logging.getLogger(__name__)


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidName("Playlist name cannot be empty")
    return cleaned


def _require_id(playlist: Optional[Playlist]) -> int:
    if playlist is None or playlist.id is None:
        raise NotFound("Playlist", None)
    return playlist.id


def _require_song_id(song: Optional[Song]) -> int:
    if song is None or song.id is None:
        raise NotFound("Song", None)
    return song.id


class PlaylistManager:
    """Creates, renames and deletes playlists and edits their membership."""

    def __init__(self, playlist_repository: PlaylistRepository) -> None:
        """Initialize the manager.

        Args:
            playlist_repository: Playlist storage
        """
        self.playlist_repository = playlist_repository

    @classmethod
    def for_database(cls, db_service: DatabaseService) -> "PlaylistManager":
        """Create a manager bound to one database."""
        return cls(PlaylistRepository(db_service))

    def create_playlist(self, name: str) -> Playlist:
        """Create an empty playlist.

        Raises:
            InvalidName: If the name is blank
        """
        playlist = Playlist(name=_clean_name(name))
        self.playlist_repository.save(playlist)
        logger.info("Created playlist: %s (ID: %s)", playlist.name, playlist.id)
        return self.playlist_repository.find_by_id(playlist.id)

    def rename_playlist(self, playlist: Playlist, new_name: str) -> Playlist:
        """Rename a user playlist.

        Returns:
            The playlist as stored after the rename

        Raises:
            ProtectedPlaylist: For the Library and Favorites
            InvalidName: If the new name is blank
            NotFound: If the playlist is not stored
        """
        playlist_id = _require_id(playlist)
        if playlist_id in SYSTEM_PLAYLIST_IDS:
            raise ProtectedPlaylist(playlist_id, "rename")
        name = _clean_name(new_name)

        renamed = self.playlist_repository.rename(playlist_id, name)
        logger.info("Renamed playlist %s to '%s'", playlist_id, name)
        return renamed

    def delete_playlist(self, playlist: Playlist) -> None:
        """Delete a user playlist and its membership links; songs stay.

        Raises:
            ProtectedPlaylist: For the Library and Favorites
            NotFound: If the playlist is not stored
        """
        playlist_id = _require_id(playlist)
        if playlist_id in SYSTEM_PLAYLIST_IDS:
            raise ProtectedPlaylist(playlist_id, "delete")

        self.playlist_repository.delete(playlist_id)
        logger.info("Deleted playlist: %s", playlist_id)

    def add_song(self, playlist: Playlist, song: Song) -> bool:
        """Add a song to a playlist.

        Returns:
            True if the song was added, False if it already was a member

        Raises:
            ProtectedPlaylist: For the Library, which only ingestion fills
            NotFound: If the playlist or song is not stored
        """
        return self.add_songs(playlist, [song]) > 0

    def add_songs(self, playlist: Playlist, songs: Iterable[Song]) -> int:
        """Add several songs to a playlist in one transaction.

        Returns:
            Number of songs that were not members before

        Raises:
            ProtectedPlaylist: For the Library
            NotFound: If the playlist or any song is not stored
        """
        playlist_id = self._require_editable(playlist, "add songs")
        song_ids = [_require_song_id(song) for song in songs]

        added = self.playlist_repository.add_songs(playlist_id, song_ids)
        logger.debug(
            "Added %d of %d song(s) to playlist %s", added, len(song_ids), playlist_id
        )
        return added

    def remove_song(self, playlist: Playlist, song: Song) -> bool:
        """Remove a song from a playlist; the song itself is kept.

        Returns:
            True if the song was removed, False if it was not a member

        Raises:
            ProtectedPlaylist: For the Library
            NotFound: If the playlist is not stored
        """
        playlist_id = self._require_editable(playlist, "remove songs")
        song_id = _require_song_id(song)

        removed = self.playlist_repository.remove_song(playlist_id, song_id)
        if removed:
            logger.debug("Removed song %s from playlist %s", song_id, playlist_id)
        return removed

    def is_song_in_playlist(self, playlist: Playlist, song: Song) -> bool:
        """Check membership without side effects."""
        if playlist is None or song is None:
            return False
        return self.playlist_repository.contains_song(playlist.id, song.id)

    def find_all(self) -> List[Playlist]:
        """All playlists, system playlists first, with their songs loaded."""
        return self.playlist_repository.find_all()

    def find_by_id(self, playlist_id: int) -> Playlist:
        """Load one playlist with its songs.

        Raises:
            NotFound: If no playlist has that id
        """
        return self.playlist_repository.find_by_id(playlist_id)

    @staticmethod
    def _require_editable(playlist: Playlist, operation: str) -> int:
        playlist_id = _require_id(playlist)
        if playlist_id == LIBRARY_PLAYLIST_ID:
            raise ProtectedPlaylist(playlist_id, operation)
        return playlist_id
