"""Ingestion of external catalog records into the Artist -> Album -> Song graph.

The reconciler turns raw records into stored entities without ever storing an
external identity twice. Each entity is saved in its own transaction and
always after its parent, so an interrupted run leaves a consistent (partial)
catalog behind.
"""

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Dict, Iterable, List, Optional, Protocol

from ...database.models import Album, Artist, Song
from ...database.repositories import AlbumRepository, ArtistRepository, SongRepository
from ...database.service import DatabaseService
from ...exceptions import IngestionError
from ...models.records import CatalogRecord

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Anything that can search the external catalog."""

    def search_catalog(
        self, term: str
    ) -> Iterable[CatalogRecord]: ...  # pragma: no cover - protocol definition


class CoverArtSource(Protocol):
    """Anything that can turn an artwork reference into image bytes."""

    def resolve(
        self, reference: Optional[str]
    ) -> Optional[bytes]: ...  # pragma: no cover - protocol definition


@dataclass
class IngestionResult:
    """Outcome of an ingestion run."""

    skipped: bool = False
    terms_processed: List[str] = dataclass_field(default_factory=list)
    failed_terms: Dict[str, str] = dataclass_field(default_factory=dict)
    records_processed: int = 0
    artists_saved: int = 0
    artists_skipped: int = 0
    albums_saved: int = 0
    albums_skipped: int = 0
    songs_saved: int = 0
    songs_skipped: int = 0
    covers_fetched: int = 0

    @property
    def has_errors(self) -> bool:
        """Whether any search term failed."""
        return bool(self.failed_terms)

    def get_summary(self) -> Dict[str, Any]:
        """Get counters as a dictionary for display."""
        return {
            "skipped": self.skipped,
            "terms_processed": len(self.terms_processed),
            "terms_failed": len(self.failed_terms),
            "records_processed": self.records_processed,
            "artists_saved": self.artists_saved,
            "artists_skipped": self.artists_skipped,
            "albums_saved": self.albums_saved,
            "albums_skipped": self.albums_skipped,
            "songs_saved": self.songs_saved,
            "songs_skipped": self.songs_skipped,
            "covers_fetched": self.covers_fetched,
        }


class CatalogReconciler:
    """Populates an empty catalog from the external catalog source."""

    def __init__(
        self,
        catalog_source: CatalogSource,
        artist_repository: ArtistRepository,
        album_repository: AlbumRepository,
        song_repository: SongRepository,
        cover_art_resolver: Optional[CoverArtSource] = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            catalog_source: Source of raw catalog records
            artist_repository: Artist storage
            album_repository: Album storage
            song_repository: Song storage
            cover_art_resolver: Optional artwork downloader for new albums
        """
        self.catalog_source = catalog_source
        self.artist_repository = artist_repository
        self.album_repository = album_repository
        self.song_repository = song_repository
        self.cover_art_resolver = cover_art_resolver

    @classmethod
    def for_database(
        cls,
        db_service: DatabaseService,
        catalog_source: CatalogSource,
        cover_art_resolver: Optional[CoverArtSource] = None,
    ) -> "CatalogReconciler":
        """Create a reconciler with repositories bound to one database."""
        return cls(
            catalog_source,
            ArtistRepository(db_service),
            AlbumRepository(db_service),
            SongRepository(db_service),
            cover_art_resolver,
        )

    def needs_ingestion(self) -> bool:
        """Whether the catalog is still empty (no song stored yet)."""
        return self.song_repository.count() == 0

    def run(
        self, search_terms: Iterable[str], continue_on_error: bool = False
    ) -> IngestionResult:
        """Ingest every search term, in order, into an empty catalog.

        Once any song is stored the whole run is a no-op; there is no
        per-term resumption.

        Args:
            search_terms: Terms to search the catalog for
            continue_on_error: Record failing terms and move on instead of
                raising

        Returns:
            Counters for the run

        Raises:
            IngestionError: If a term fails and continue_on_error is False
        """
        result = IngestionResult()
        if not self.needs_ingestion():
            logger.info("Catalog already populated, skipping ingestion")
            result.skipped = True
            return result

        for term in search_terms:
            try:
                self.ingest_term(term, result)
            except IngestionError as e:
                if not continue_on_error:
                    raise
                logger.error("%s", e)
                result.failed_terms[term] = str(e.cause or e)

        logger.info(
            "Ingestion finished: %d artist(s), %d album(s), %d song(s) saved "
            "from %d term(s)",
            result.artists_saved,
            result.albums_saved,
            result.songs_saved,
            len(result.terms_processed),
        )
        return result

    def ingest_term(
        self, term: str, result: Optional[IngestionResult] = None
    ) -> IngestionResult:
        """Fetch and reconcile every record for one search term.

        Records committed before a failure stay stored.

        Raises:
            IngestionError: Wrapping whatever the source, a record or the
                storage raised, with the term attached
        """
        if result is None:
            result = IngestionResult()

        logger.info("Ingesting search term '%s'", term)
        try:
            for record in self.catalog_source.search_catalog(term):
                self.reconcile_record(record, result)
        except IngestionError:
            raise
        except Exception as e:
            raise IngestionError(term, e) from e

        result.terms_processed.append(term)
        return result

    def reconcile_record(
        self, record: CatalogRecord, result: Optional[IngestionResult] = None
    ) -> Song:
        """Store the artist, album and song of one record, skipping known ones.

        The artist is resolved before the album is derived, and the album
        before the song, so a failure never leaves a child without a stored
        parent.

        Returns:
            The song view of the record

        Raises:
            MissingRequiredField: If the record cannot produce an entity
        """
        if result is None:
            result = IngestionResult()

        artist = Artist.from_record(record)
        if self._save_if_new(self.artist_repository, artist):
            result.artists_saved += 1
        else:
            result.artists_skipped += 1

        album = Album.from_record(record, artist)
        if self.album_repository.exists_by_id(album.id):
            result.albums_skipped += 1
        else:
            album.cover = self._resolve_cover(album.artwork_url)
            if album.cover is not None:
                result.covers_fetched += 1
            self.album_repository.save(album)
            result.albums_saved += 1

        song = Song.from_record(record, album)
        if self._save_if_new(self.song_repository, song):
            result.songs_saved += 1
        else:
            result.songs_skipped += 1

        result.records_processed += 1
        return song

    @staticmethod
    def _save_if_new(repository: Any, entity: Any) -> bool:
        if repository.exists_by_id(entity.id):
            logger.debug("Skipping known %s", entity)
            return False
        repository.save(entity)
        return True

    def _resolve_cover(self, reference: Optional[str]) -> Optional[bytes]:
        """Resolve album artwork; any failure means no cover."""
        if self.cover_art_resolver is None or not reference:
            return None
        try:
            return self.cover_art_resolver.resolve(reference)
        except Exception as e:
            logger.warning("Cover art lookup failed for %s: %s", reference, e)
            return None
