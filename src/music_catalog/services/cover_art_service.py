"""Downloads album cover artwork."""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class CoverArtResolver:
    """Fetches artwork bytes for an artwork reference (URL).

    A missing cover is a normal outcome, so every failure is logged and
    reported as no cover.
    """

    def __init__(
        self, timeout: float = 10.0, session: Optional[requests.Session] = None
    ) -> None:
        """Initialize the resolver.

        Args:
            timeout: Request timeout in seconds
            session: requests session to reuse; a new one is created if None
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, reference: Optional[str]) -> Optional[bytes]:
        """Download the image behind an artwork reference.

        Returns:
            Image bytes, or None if there is no reference or the download
            failed
        """
        if not reference:
            return None

        try:
            response = self.session.get(reference, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Could not fetch cover art from %s: %s", reference, e)
            return None

        content = response.content
        if not content:
            logger.debug("Empty cover art response from %s", reference)
            return None
        return content

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
