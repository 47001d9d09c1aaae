"""Catalog business logic built on top of the database layer.

Import from the subpackages directly:
- music_catalog.core.ingestion for the catalog reconciler
- music_catalog.core.playlists for playlist management
"""
