"""Catalog source backed by the iTunes Search API."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests
from pydantic import ValidationError

from ..config import ITUNES_SEARCH_URL, Config
from ..exceptions import CatalogUnavailable
from ..models.records import CatalogRecord

logger = logging.getLogger(__name__)


class ItunesCatalogClient:
    """Searches the iTunes catalog for songs."""

    def __init__(
        self,
        search_url: str = ITUNES_SEARCH_URL,
        limit: int = 50,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        """Initialize the client.

        Args:
            search_url: Search endpoint URL
            limit: Maximum number of results per search term
            timeout: Request timeout in seconds
            session: requests session to reuse; a new one is created if None
            max_retries: Retries for server errors and dropped connections
            base_delay: Initial backoff delay in seconds (doubles each retry)
        """
        self.search_url = search_url
        self.limit = limit
        self.timeout = timeout
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.base_delay = base_delay

    @classmethod
    def from_config(cls, config: Config) -> "ItunesCatalogClient":
        """Create a client from application configuration."""
        return cls(
            search_url=config.search_url,
            limit=config.search_limit,
            timeout=config.request_timeout,
        )

    def search_catalog(self, term: str) -> List[CatalogRecord]:
        """Search the catalog for songs matching a term.

        Args:
            term: Free-text search term (usually an artist name)

        Returns:
            Song records in the order the API returned them

        Raises:
            CatalogUnavailable: If the API cannot be reached or its answer
                cannot be understood
        """
        params = {
            "term": term,
            "media": "music",
            "entity": "song",
            "limit": self.limit,
        }
        payload = self._retry_api_call(lambda: self._get(params))

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise CatalogUnavailable(
                f"Unexpected response from catalog for '{term}': no result list"
            )

        records = []
        for item in results:
            try:
                record = CatalogRecord.from_api(item)
            except ValidationError as e:
                raise CatalogUnavailable(
                    f"Unexpected result item from catalog for '{term}': {e}"
                ) from e
            if record.is_song:
                records.append(record)

        logger.info("Catalog search '%s' returned %d song(s)", term, len(records))
        return records

    def _get(self, params: Dict[str, Any]) -> Any:
        response = self.session.get(
            self.search_url, params=params, timeout=self.timeout
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise CatalogUnavailable(f"Catalog returned invalid JSON: {e}") from e

    def _retry_api_call(self, func: Callable[[], Any]) -> Any:
        """Retry API calls with exponential backoff for transient errors.

        Server errors (5xx), timeouts and dropped connections are retried;
        anything else fails immediately.

        Raises:
            CatalogUnavailable: If the call fails for good
        """
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                return func()
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status is None or not 500 <= status < 600:
                    raise CatalogUnavailable(f"Catalog request failed: {e}") from e
                last_error = e
            except (
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
            ) as e:
                last_error = e
            except requests.exceptions.RequestException as e:
                raise CatalogUnavailable(f"Catalog request failed: {e}") from e

            if attempt < self.max_retries:
                delay = self.base_delay * (2**attempt)
                logger.warning(
                    "Catalog request failed (%s), retrying in %.1fs... "
                    "(attempt %d/%d)",
                    last_error,
                    delay,
                    attempt + 1,
                    self.max_retries,
                )
                time.sleep(delay)

        raise CatalogUnavailable(
            f"Catalog request failed after {self.max_retries} retries: {last_error}"
        ) from last_error

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
