"""SQLAlchemy database models for the music catalog."""

from typing import Any, List, Optional, Set

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Table,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..exceptions import MissingRequiredField
from ..models.records import CatalogRecord

# Reserved playlist identities
LIBRARY_PLAYLIST_ID = 1
FAVORITES_PLAYLIST_ID = 2
SYSTEM_PLAYLIST_IDS = frozenset({LIBRARY_PLAYLIST_ID, FAVORITES_PLAYLIST_ID})

SYSTEM_PLAYLIST_NAMES = {
    LIBRARY_PLAYLIST_ID: "Library",
    FAVORITES_PLAYLIST_ID: "Favorites",
}


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class IdentityMixin:
    """Equality and hashing based solely on the ``id`` column.

    Two instances of the same entity class with equal non-null ids are the
    same entity, whatever their other fields hold. An instance without an id
    is only equal to itself.
    """

    id: Any

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, IdentityMixin):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return self.id is not None and self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash((type(self).__name__, self.id))


def _require(entity: str, record: CatalogRecord, *fields: str) -> None:
    missing = [name for name in fields if getattr(record, name) is None]
    if missing:
        raise MissingRequiredField(entity, missing)


playlist_songs = Table(
    "playlist_songs",
    Base.metadata,
    Column(
        "playlist_id",
        Integer,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "song_id",
        BigInteger,
        ForeignKey("songs.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("idx_playlist_songs_song", "song_id"),
)


class Artist(IdentityMixin, Base):
    """A recording artist, identified by its external catalog id."""

    __tablename__ = "artists"

    # External identity, never generated locally
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Owning side: albums live and die with their artist
    albums: Mapped[List["Album"]] = relationship(
        "Album",
        back_populates="artist",
        cascade="all, delete-orphan",
        order_by="Album.year",
    )

    @classmethod
    def from_record(cls, record: CatalogRecord) -> "Artist":
        """Build an artist view of a raw catalog record.

        Raises:
            MissingRequiredField: If the record has no artist id or name
        """
        _require("Artist", record, "artist_id", "artist_name")
        return cls(id=record.artist_id, name=record.artist_name, country=record.country)

    def __repr__(self) -> str:
        """String representation of Artist."""
        return f"<Artist(id={self.id}, name='{self.name}')>"


class Album(IdentityMixin, Base):
    """An album (iTunes collection) belonging to exactly one artist."""

    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    genre: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    track_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Artwork: the reference it came from and the downloaded bytes, if any
    artwork_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    cover: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    # Back-reference to the owning artist (lookup only)
    artist_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    artist: Mapped["Artist"] = relationship(
        "Artist", back_populates="albums", lazy="joined"
    )
    songs: Mapped[List["Song"]] = relationship(
        "Song",
        back_populates="album",
        cascade="all, delete-orphan",
        order_by="Song.id",
    )

    @classmethod
    def from_record(cls, record: CatalogRecord, artist: Artist) -> "Album":
        """Build an album view of a raw catalog record for a resolved artist.

        Only the artist id is copied onto the album, the artist object itself
        is not attached.

        Raises:
            MissingRequiredField: If the record has no album id or name, or
                the artist has no id
        """
        _require("Album", record, "album_id", "album_name")
        if artist is None or artist.id is None:
            raise MissingRequiredField("Album", ["artist_id"])
        return cls(
            id=record.album_id,
            name=record.album_name,
            genre=record.genre,
            year=record.release_year,
            track_count=record.track_count,
            artwork_url=record.artwork_url,
            artist_id=artist.id,
        )

    @property
    def has_cover(self) -> bool:
        """Whether cover artwork bytes are stored."""
        return bool(self.cover)

    def __repr__(self) -> str:
        """String representation of Album."""
        return (
            f"<Album(id={self.id}, name='{self.name}', artist_id={self.artist_id})>"
        )


class Song(IdentityMixin, Base):
    """A single track belonging to exactly one album."""

    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    length_millis: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    preview_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    album_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    album: Mapped["Album"] = relationship(
        "Album", back_populates="songs", lazy="joined"
    )

    @classmethod
    def from_record(cls, record: CatalogRecord, album: Album) -> "Song":
        """Build a song view of a raw catalog record for a resolved album.

        Raises:
            MissingRequiredField: If the record has no song id or title, or
                the album has no id
        """
        _require("Song", record, "song_id", "song_name")
        if album is None or album.id is None:
            raise MissingRequiredField("Song", ["album_id"])
        return cls(
            id=record.song_id,
            name=record.song_name,
            length_millis=record.length_millis,
            preview_url=record.preview_url,
            album_id=album.id,
        )

    @property
    def formatted_length(self) -> str:
        """Song length as ``m:ss``."""
        if self.length_millis is None:
            return "Unknown"
        total_seconds = self.length_millis // 1000
        minutes, seconds = divmod(total_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    def __repr__(self) -> str:
        """String representation of Song."""
        return f"<Song(id={self.id}, name='{self.name}', album_id={self.album_id})>"


class Playlist(IdentityMixin, Base):
    """A named, unordered set of songs with a locally generated id."""

    __tablename__ = "playlists"
    # Ids of deleted playlists are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)

    # Membership only; songs are never deleted through a playlist
    songs: Mapped[Set["Song"]] = relationship(
        "Song", secondary=playlist_songs, collection_class=set
    )

    @property
    def is_system(self) -> bool:
        """Whether this is the Library or Favorites playlist."""
        return self.id in SYSTEM_PLAYLIST_IDS

    def __repr__(self) -> str:
        """String representation of Playlist."""
        return f"<Playlist(id={self.id}, name='{self.name}')>"
