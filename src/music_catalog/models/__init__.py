"""Models for the music catalog application."""

from .records import CatalogRecord

__all__ = ["CatalogRecord"]
