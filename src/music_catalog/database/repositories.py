"""Repositories for catalog entities and playlists.

Every repository receives the ``DatabaseService`` it works against and opens
one session per call, so each write is its own transaction: an entity is
either fully stored or not stored at all.

Entities handed back are detached from their session. Back-references
(``song.album.artist``) are eagerly loaded; child collections are not, read
them through the ``find_by_*`` parent lookups instead.
"""

import logging
from typing import (
    Any,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from sqlalchemy import delete, exists, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..exceptions import DuplicateIdentity, NotFound
from .models import (
    LIBRARY_PLAYLIST_ID,
    Album,
    Artist,
    Base,
    Playlist,
    Song,
    playlist_songs,
)
from .service import DatabaseService

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=Base)


class _EntityRepository(Generic[EntityT]):
    """Storage operations shared by every entity type."""

    model: Type[EntityT]
    entity_name: str = "Entity"

    def __init__(self, db_service: DatabaseService) -> None:
        """Initialize repository.

        Args:
            db_service: Storage handle the repository operates on
        """
        self.db_service = db_service

    def _load_options(self) -> Sequence[Any]:
        return ()

    def _parent_reference(self, entity: EntityT) -> Optional[Tuple[str, Any]]:
        """Return (entity name, id) of the parent row the entity points at."""
        return None

    def _after_add(self, session: Session, entity: EntityT) -> None:
        """Hook run inside the save transaction after the row is flushed."""

    def exists_by_id(self, entity_id: Any) -> bool:
        """Check whether a row with the given identity is stored.

        Uses a single ``EXISTS`` query; nothing is loaded.
        """
        if entity_id is None:
            return False
        with self.db_service.get_session() as session:
            id_column = self.model.id  # type: ignore[attr-defined]
            stmt = select(exists().where(id_column == entity_id))
            return bool(session.scalar(stmt))

    def count(self) -> int:
        """Total number of stored rows."""
        with self.db_service.get_session() as session:
            stmt = select(func.count()).select_from(self.model)
            return session.scalar(stmt) or 0

    def save(self, entity: EntityT) -> EntityT:
        """Persist a new entity in its own transaction.

        Callers check ``exists_by_id`` first.

        Raises:
            DuplicateIdentity: If the identity is already stored
            NotFound: If the parent row the entity references is not stored
        """
        with self.db_service.get_session() as session:
            try:
                session.add(entity)
                session.flush()
                self._after_add(session, entity)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                self._raise_integrity_error(entity, e)

        logger.debug("Saved %s", entity)
        return entity

    def _raise_integrity_error(self, entity: EntityT, error: IntegrityError) -> None:
        entity_id = getattr(entity, "id", None)
        if entity_id is not None and self.exists_by_id(entity_id):
            raise DuplicateIdentity(self.entity_name, entity_id) from error
        parent = self._parent_reference(entity)
        if parent is not None:
            raise NotFound(*parent) from error
        raise error

    def find_by_id(self, entity_id: Any) -> EntityT:
        """Load one entity by identity.

        Raises:
            NotFound: If no row has that identity
        """
        with self.db_service.get_session() as session:
            entity = session.get(self.model, entity_id, options=self._load_options())
            if entity is None:
                raise NotFound(self.entity_name, entity_id)
            return entity

    def find_all(self) -> List[EntityT]:
        """Load every stored entity."""
        return self._find(select(self.model))

    def _find(self, stmt: Any) -> List[EntityT]:
        with self.db_service.get_session() as session:
            stmt = stmt.options(*self._load_options())
            return list(session.scalars(stmt).unique())


class ArtistRepository(_EntityRepository[Artist]):
    """Storage for artists."""

    model = Artist
    entity_name = "Artist"

    def _load_options(self) -> Sequence[Any]:
        return (selectinload(Artist.albums),)

    def find_all(self) -> List[Artist]:
        """Load every artist ordered by name."""
        return self._find(select(Artist).order_by(Artist.name))

    def delete(self, artist: Artist) -> None:
        """Delete an artist together with its albums and their songs.

        Playlist membership links of the removed songs go with them; the
        playlists themselves are kept.

        Raises:
            NotFound: If the artist is not stored
        """
        artist_id = artist.id if artist is not None else None
        with self.db_service.get_session() as session:
            stored = session.get(Artist, artist_id) if artist_id is not None else None
            if stored is None:
                raise NotFound(self.entity_name, artist_id)
            album_count = len(stored.albums)
            session.delete(stored)
            session.commit()
        logger.info("Deleted artist %s with %d album(s)", artist_id, album_count)


class AlbumRepository(_EntityRepository[Album]):
    """Storage for albums."""

    model = Album
    entity_name = "Album"

    def _parent_reference(self, entity: Album) -> Optional[Tuple[str, Any]]:
        return ("Artist", entity.artist_id)

    def find_all(self) -> List[Album]:
        """Load every album ordered by name."""
        return self._find(select(Album).order_by(Album.name))

    def find_by_artist(self, artist: Optional[Artist]) -> List[Album]:
        """Albums of an artist, oldest first; empty for a missing artist."""
        if artist is None or artist.id is None:
            return []
        stmt = (
            select(Album)
            .where(Album.artist_id == artist.id)
            .order_by(Album.year, Album.name)
        )
        return self._find(stmt)

    def find_by_genre(self, genre: Optional[str]) -> List[Album]:
        """Albums whose genre matches exactly, ignoring case."""
        if not genre:
            return []
        stmt = (
            select(Album)
            .where(func.lower(Album.genre) == genre.strip().lower())
            .order_by(Album.name)
        )
        return self._find(stmt)


class SongRepository(_EntityRepository[Song]):
    """Storage for songs.

    Saving a song also links it to the Library playlist in the same
    transaction.
    """

    model = Song
    entity_name = "Song"

    def _parent_reference(self, entity: Song) -> Optional[Tuple[str, Any]]:
        return ("Album", entity.album_id)

    def _after_add(self, session: Session, entity: Song) -> None:
        if session.get(Playlist, LIBRARY_PLAYLIST_ID) is None:
            logger.warning("Library playlist missing, song %s not linked", entity.id)
            return
        session.execute(
            sqlite_insert(playlist_songs)
            .values(playlist_id=LIBRARY_PLAYLIST_ID, song_id=entity.id)
            .on_conflict_do_nothing()
        )

    def find_all(self) -> List[Song]:
        """Load every song ordered by title."""
        return self._find(select(Song).order_by(Song.name))

    def find_by_album(self, album: Optional[Album]) -> List[Song]:
        """Songs of an album; empty for a missing album."""
        if album is None or album.id is None:
            return []
        stmt = select(Song).where(Song.album_id == album.id).order_by(Song.id)
        return self._find(stmt)

    def find_by_artist(self, artist: Optional[Artist]) -> List[Song]:
        """Songs on any album of an artist; empty for a missing artist."""
        if artist is None or artist.id is None:
            return []
        stmt = (
            select(Song)
            .join(Album, Song.album_id == Album.id)
            .where(Album.artist_id == artist.id)
            .order_by(Album.year, Song.id)
        )
        return self._find(stmt)


class PlaylistRepository(_EntityRepository[Playlist]):
    """Storage for playlists and their membership links.

    This layer applies no protection rules; ``PlaylistManager`` does.
    """

    model = Playlist
    entity_name = "Playlist"

    def _load_options(self) -> Sequence[Any]:
        return (selectinload(Playlist.songs),)

    def find_all(self) -> List[Playlist]:
        """Load every playlist with its songs, in creation order."""
        return self._find(select(Playlist).order_by(Playlist.id))

    def find_by_song(self, song: Optional[Song]) -> List[Playlist]:
        """Playlists that contain a song; empty for a missing song."""
        if song is None or song.id is None:
            return []
        stmt = (
            select(Playlist)
            .join(playlist_songs, playlist_songs.c.playlist_id == Playlist.id)
            .where(playlist_songs.c.song_id == song.id)
            .order_by(Playlist.id)
        )
        return self._find(stmt)

    def rename(self, playlist_id: int, name: str) -> Playlist:
        """Store a new name for a playlist.

        Raises:
            NotFound: If the playlist is not stored
        """
        with self.db_service.get_session() as session:
            playlist = self._get_for_update(session, playlist_id)
            playlist.name = name
            session.commit()
        return self.find_by_id(playlist_id)

    def delete(self, playlist_id: int) -> None:
        """Delete a playlist and its membership links, keeping the songs.

        Raises:
            NotFound: If the playlist is not stored
        """
        with self.db_service.get_session() as session:
            playlist = self._get_for_update(session, playlist_id)
            session.delete(playlist)
            session.commit()

    def add_songs(self, playlist_id: int, song_ids: Iterable[int]) -> int:
        """Link songs to a playlist in one transaction.

        Songs that are already members are left alone.

        Returns:
            Number of links inserted

        Raises:
            NotFound: If the playlist or any of the songs is not stored
        """
        wanted = list(dict.fromkeys(song_ids))
        with self.db_service.get_session() as session:
            self._get_for_update(session, playlist_id)
            if wanted:
                stmt = select(Song.id).where(Song.id.in_(wanted))
                stored = set(session.scalars(stmt))
                for song_id in wanted:
                    if song_id not in stored:
                        raise NotFound("Song", song_id)

            inserted = 0
            for song_id in wanted:
                result = session.execute(
                    sqlite_insert(playlist_songs)
                    .values(playlist_id=playlist_id, song_id=song_id)
                    .on_conflict_do_nothing()
                )
                inserted += result.rowcount or 0
            session.commit()
        return inserted

    def remove_song(self, playlist_id: int, song_id: int) -> bool:
        """Unlink a song from a playlist.

        Returns:
            True if a link was removed, False if the song was not a member

        Raises:
            NotFound: If the playlist is not stored
        """
        with self.db_service.get_session() as session:
            self._get_for_update(session, playlist_id)
            result = session.execute(
                delete(playlist_songs).where(
                    playlist_songs.c.playlist_id == playlist_id,
                    playlist_songs.c.song_id == song_id,
                )
            )
            session.commit()
            return bool(result.rowcount)

    def contains_song(self, playlist_id: Any, song_id: Any) -> bool:
        """Check for a membership link without loading anything."""
        if playlist_id is None or song_id is None:
            return False
        with self.db_service.get_session() as session:
            stmt = select(
                exists().where(
                    playlist_songs.c.playlist_id == playlist_id,
                    playlist_songs.c.song_id == song_id,
                )
            )
            return bool(session.scalar(stmt))

    def _get_for_update(self, session: Session, playlist_id: Any) -> Playlist:
        playlist = None
        if playlist_id is not None:
            playlist = session.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFound(self.entity_name, playlist_id)
        return playlist
