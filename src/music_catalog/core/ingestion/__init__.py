"""Catalog ingestion."""

from .reconciler import (
    CatalogReconciler,
    CatalogSource,
    CoverArtSource,
    IngestionResult,
)

__all__ = [
    "CatalogReconciler",
    "CatalogSource",
    "CoverArtSource",
    "IngestionResult",
]
