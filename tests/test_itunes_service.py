"""Tests for the iTunes catalog client."""

from unittest.mock import Mock

import pytest
import requests

from music_catalog.exceptions import CatalogUnavailable
from music_catalog.services import ItunesCatalogClient

SONG_ITEM = {
    "wrapperType": "track",
    "kind": "song",
    "artistId": 7,
    "artistName": "Geese",
    "collectionId": 42,
    "collectionName": "3D Country",
    "trackId": 100,
    "trackName": "2122",
}


def make_response(payload=None, status_code=200):
    """Create a mock HTTP response."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error", response=response
        )
    return response


@pytest.fixture
def session():
    """Mock requests session."""
    return Mock()


@pytest.fixture
def client(session):
    """Client with no backoff delay."""
    return ItunesCatalogClient(
        search_url="https://itunes.test/search",
        limit=25,
        timeout=5.0,
        session=session,
        max_retries=2,
        base_delay=0,
    )


class TestSearchCatalog:
    """Test catalog searches."""

    def test_search(self, client, session):
        """Test request parameters and parsed records."""
        session.get.return_value = make_response({"results": [SONG_ITEM]})

        records = client.search_catalog("geese")

        session.get.assert_called_once_with(
            "https://itunes.test/search",
            params={"term": "geese", "media": "music", "entity": "song", "limit": 25},
            timeout=5.0,
        )
        assert len(records) == 1
        assert records[0].song_id == 100
        assert records[0].artist_name == "Geese"

    def test_non_song_results_dropped(self, client, session):
        """Test that collections and videos are skipped."""
        session.get.return_value = make_response(
            {
                "results": [
                    {"wrapperType": "collection", "collectionId": 42},
                    {**SONG_ITEM, "kind": "music-video"},
                    SONG_ITEM,
                ]
            }
        )

        assert [r.song_id for r in client.search_catalog("geese")] == [100]

    def test_empty_results(self, client, session):
        """Test a term without matches."""
        session.get.return_value = make_response({"resultCount": 0, "results": []})
        assert client.search_catalog("nothing") == []

    def test_missing_result_list(self, client, session):
        """Test an answer without results."""
        session.get.return_value = make_response({"errorMessage": "Invalid value"})
        with pytest.raises(CatalogUnavailable):
            client.search_catalog("geese")

    def test_invalid_json(self, client, session):
        """Test an answer that is not JSON."""
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(CatalogUnavailable):
            client.search_catalog("geese")
        assert session.get.call_count == 1

    def test_invalid_item(self, client, session):
        """Test an item with a malformed field."""
        session.get.return_value = make_response(
            {"results": [{**SONG_ITEM, "trackId": "not-a-number"}]}
        )
        with pytest.raises(CatalogUnavailable):
            client.search_catalog("geese")


class TestRetries:
    """Test retry behavior for transient failures."""

    def test_server_error_retried(self, client, session):
        """Test that a 5xx answer is retried."""
        session.get.side_effect = [
            make_response(status_code=503),
            make_response({"results": [SONG_ITEM]}),
        ]

        records = client.search_catalog("geese")

        assert len(records) == 1
        assert session.get.call_count == 2

    def test_client_error_not_retried(self, client, session):
        """Test that a 4xx answer fails immediately."""
        session.get.return_value = make_response(status_code=404)

        with pytest.raises(CatalogUnavailable):
            client.search_catalog("geese")
        assert session.get.call_count == 1

    def test_connection_errors_exhaust_retries(self, client, session):
        """Test giving up after the configured retries."""
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(CatalogUnavailable) as exc_info:
            client.search_catalog("geese")

        assert session.get.call_count == 3
        assert "after 2 retries" in str(exc_info.value)

    def test_timeout_retried(self, client, session):
        """Test that timeouts are retried."""
        session.get.side_effect = [
            requests.exceptions.Timeout("slow"),
            make_response({"results": []}),
        ]
        assert client.search_catalog("geese") == []


class TestClientConfig:
    """Test client construction."""

    def test_from_config(self):
        """Test building the client from configuration."""
        config = Mock()
        config.search_url = "https://itunes.test/search"
        config.search_limit = 10
        config.request_timeout = 2.5

        client = ItunesCatalogClient.from_config(config)

        assert client.search_url == "https://itunes.test/search"
        assert client.limit == 10
        assert client.timeout == 2.5
