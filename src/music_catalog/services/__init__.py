"""Clients for services outside the catalog core."""

from .cover_art_service import CoverArtResolver
from .itunes_service import ItunesCatalogClient

__all__ = ["ItunesCatalogClient", "CoverArtResolver"]
