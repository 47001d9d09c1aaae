"""Tests for catalog ingestion."""

from unittest.mock import Mock

import pytest

from music_catalog.core.ingestion import CatalogReconciler, IngestionResult
from music_catalog.database import LIBRARY_PLAYLIST_ID
from music_catalog.exceptions import (
    CatalogUnavailable,
    IngestionError,
    MissingRequiredField,
)


class FakeCatalogSource:
    """Catalog source answering from a fixed term -> records mapping."""

    def __init__(self, results):
        self.results = results
        self.searched = []

    def search_catalog(self, term):
        self.searched.append(term)
        outcome = self.results.get(term, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def reconciler_factory(db_service):
    """Build reconcilers bound to the temporary database."""

    def factory(results, cover_art_resolver=None):
        source = FakeCatalogSource(results)
        return CatalogReconciler.for_database(db_service, source, cover_art_resolver)

    return factory


class TestIngestionResult:
    """Test ingestion result counters."""

    def test_summary(self):
        """Test summary dictionary."""
        result = IngestionResult(terms_processed=["a", "b"], songs_saved=3)
        result.failed_terms["c"] = "boom"

        summary = result.get_summary()
        assert summary["terms_processed"] == 2
        assert summary["terms_failed"] == 1
        assert summary["songs_saved"] == 3
        assert result.has_errors


class TestReconcileRecord:
    """Test storing a single record."""

    def test_end_to_end(
        self,
        reconciler_factory,
        record_factory,
        artist_repository,
        album_repository,
        song_repository,
        playlist_repository,
    ):
        """Test that one record yields one artist, album and song."""
        reconciler = reconciler_factory({"geese": [record_factory()]})

        result = reconciler.run(["geese"])

        assert result.artists_saved == 1
        assert result.albums_saved == 1
        assert result.songs_saved == 1
        assert artist_repository.find_by_id(7).name == "Geese"
        assert album_repository.find_by_id(42).artist_id == 7
        song = song_repository.find_by_id(100)
        assert song.album.id == 42
        assert song.album.artist.id == 7
        library = playlist_repository.find_by_id(LIBRARY_PLAYLIST_ID)
        assert {s.id for s in library.songs} == {100}

    def test_reconcile_is_idempotent(
        self, reconciler_factory, record_factory, db_service
    ):
        """Test that the same record twice stores nothing new."""
        reconciler = reconciler_factory({})
        record = record_factory()

        result = IngestionResult()
        reconciler.reconcile_record(record, result)
        reconciler.reconcile_record(record, result)

        stats = db_service.get_statistics()
        assert stats["artists"] == 1
        assert stats["albums"] == 1
        assert stats["songs"] == 1
        assert result.artists_skipped == 1
        assert result.albums_skipped == 1
        assert result.songs_skipped == 1

    def test_shared_artist_and_album(
        self, reconciler_factory, record_factory, db_service
    ):
        """Test several songs of one album."""
        reconciler = reconciler_factory(
            {
                "geese": [
                    record_factory(),
                    record_factory(song_id=101, song_name="Cowboy Nudes"),
                    record_factory(album_id=43, album_name="Projector", song_id=102),
                ]
            }
        )

        result = reconciler.run(["geese"])

        stats = db_service.get_statistics()
        assert stats["artists"] == 1
        assert stats["albums"] == 2
        assert stats["songs"] == 3
        assert result.records_processed == 3

    def test_incomplete_record(self, reconciler_factory, record_factory):
        """Test that a record without song id is rejected."""
        reconciler = reconciler_factory({})
        with pytest.raises(MissingRequiredField):
            reconciler.reconcile_record(record_factory(song_id=None))

    def test_incomplete_record_keeps_parents(
        self, reconciler_factory, record_factory, artist_repository, album_repository
    ):
        """Test that parents stored before the failure stay stored."""
        reconciler = reconciler_factory({})
        with pytest.raises(MissingRequiredField):
            reconciler.reconcile_record(record_factory(song_name=None))

        assert artist_repository.exists_by_id(7)
        assert album_repository.exists_by_id(42)


class TestCoverArt:
    """Test cover artwork resolution during ingestion."""

    def test_cover_stored(self, reconciler_factory, record_factory, album_repository):
        """Test that resolved artwork is stored on the album."""
        resolver = Mock()
        resolver.resolve.return_value = b"image-bytes"
        reconciler = reconciler_factory({"geese": [record_factory()]}, resolver)

        result = reconciler.run(["geese"])

        resolver.resolve.assert_called_once_with(
            "https://example.com/42/100x100bb.jpg"
        )
        assert result.covers_fetched == 1
        assert album_repository.find_by_id(42).cover == b"image-bytes"

    def test_cover_resolved_once_per_album(self, reconciler_factory, record_factory):
        """Test that known albums are not looked up again."""
        resolver = Mock()
        resolver.resolve.return_value = b"image-bytes"
        reconciler = reconciler_factory(
            {"geese": [record_factory(), record_factory(song_id=101)]}, resolver
        )

        reconciler.run(["geese"])

        assert resolver.resolve.call_count == 1

    def test_cover_failure_is_not_an_error(
        self, reconciler_factory, record_factory, album_repository
    ):
        """Test that a failing resolver leaves the album without cover."""
        resolver = Mock()
        resolver.resolve.side_effect = RuntimeError("artwork server down")
        reconciler = reconciler_factory({"geese": [record_factory()]}, resolver)

        result = reconciler.run(["geese"])

        assert result.albums_saved == 1
        assert result.covers_fetched == 0
        assert album_repository.find_by_id(42).cover is None

    def test_no_reference_no_lookup(self, reconciler_factory, record_factory):
        """Test records without artwork reference."""
        resolver = Mock()
        reconciler = reconciler_factory(
            {"geese": [record_factory(artwork_url=None)]}, resolver
        )

        reconciler.run(["geese"])

        resolver.resolve.assert_not_called()


class TestRun:
    """Test the ingestion run over several terms."""

    def test_skips_populated_catalog(
        self, reconciler_factory, record_factory, db_service
    ):
        """Test that a catalog holding songs is not ingested again."""
        reconciler_factory({"geese": [record_factory()]}).run(["geese"])
        before = db_service.get_statistics()

        reconciler = reconciler_factory({"refused": [record_factory(song_id=200)]})
        result = reconciler.run(["refused"])

        assert result.skipped
        assert reconciler.catalog_source.searched == []
        assert db_service.get_statistics() == before

    def test_terms_processed_in_order(self, reconciler_factory, record_factory):
        """Test term order."""
        reconciler = reconciler_factory(
            {
                "b": [record_factory(song_id=2)],
                "a": [record_factory(song_id=1)],
            }
        )

        result = reconciler.run(["b", "a"])

        assert reconciler.catalog_source.searched == ["b", "a"]
        assert result.terms_processed == ["b", "a"]

    def test_failing_term_aborts(self, reconciler_factory, record_factory, db_service):
        """Test that a term failure stops the run with the term attached."""
        reconciler = reconciler_factory(
            {
                "geese": [record_factory()],
                "refused": CatalogUnavailable("HTTP 503"),
                "thrice": [record_factory(song_id=300)],
            }
        )

        with pytest.raises(IngestionError) as exc_info:
            reconciler.run(["geese", "refused", "thrice"])

        assert exc_info.value.term == "refused"
        assert isinstance(exc_info.value.cause, CatalogUnavailable)
        assert reconciler.catalog_source.searched == ["geese", "refused"]
        assert db_service.get_statistics()["songs"] == 1

    def test_continue_on_error(self, reconciler_factory, record_factory):
        """Test collecting failures and moving on."""
        reconciler = reconciler_factory(
            {
                "refused": CatalogUnavailable("HTTP 503"),
                "thrice": [record_factory(song_id=300)],
            }
        )

        result = reconciler.run(["refused", "thrice"], continue_on_error=True)

        assert result.failed_terms == {"refused": "HTTP 503"}
        assert result.terms_processed == ["thrice"]
        assert result.songs_saved == 1

    def test_source_error_fails_term(self, reconciler_factory, record_factory):
        """Test that a non-catalog error from the source is tied to its term."""
        reconciler = reconciler_factory(
            {
                "bad": OSError("socket closed"),
                "good": [record_factory()],
            }
        )

        with pytest.raises(IngestionError) as exc_info:
            reconciler.run(["bad", "good"])

        assert exc_info.value.term == "bad"
        assert isinstance(exc_info.value.cause, OSError)

    def test_source_error_continue_on_error(self, reconciler_factory, record_factory):
        """Test that a non-catalog error does not stop the remaining terms."""
        reconciler = reconciler_factory(
            {
                "bad": OSError("socket closed"),
                "good": [record_factory()],
            }
        )

        result = reconciler.run(["bad", "good"], continue_on_error=True)

        assert result.failed_terms == {"bad": "socket closed"}
        assert result.terms_processed == ["good"]
        assert result.songs_saved == 1

    def test_bad_record_fails_term(self, reconciler_factory, record_factory):
        """Test that an incomplete record is reported against its term."""
        reconciler = reconciler_factory(
            {"geese": [record_factory(), record_factory(song_id=None)]}
        )

        with pytest.raises(IngestionError) as exc_info:
            reconciler.run(["geese"])

        assert exc_info.value.term == "geese"
        assert isinstance(exc_info.value.cause, MissingRequiredField)
        assert reconciler.song_repository.exists_by_id(100)
