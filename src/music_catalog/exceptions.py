"""Exceptions raised by the catalog and playlist core."""

from typing import Any, Iterable, Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""


class MissingRequiredField(CatalogError):
    """A raw catalog record lacks a field needed to build an entity."""

    def __init__(self, entity: str, fields: Iterable[str]) -> None:
        """Initialize with the entity being built and the missing fields."""
        self.entity = entity
        self.fields = tuple(fields)
        super().__init__(
            f"Cannot build {entity}: missing required field(s) "
            f"{', '.join(self.fields)}"
        )


class CatalogUnavailable(CatalogError):
    """The external catalog source cannot be reached or answered badly."""


class ProtectedPlaylist(CatalogError):
    """Attempted to mutate a reserved system playlist."""

    def __init__(self, playlist_id: int, operation: str) -> None:
        """Initialize with the protected playlist id and refused operation."""
        self.playlist_id = playlist_id
        self.operation = operation
        super().__init__(
            f"Playlist {playlist_id} is a system playlist, cannot {operation}"
        )


class InvalidName(CatalogError, ValueError):
    """Playlist name is empty or blank."""


class NotFound(CatalogError, LookupError):
    """No stored entity has the requested id."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        """Initialize with the entity type and the id that was looked up."""
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class DuplicateIdentity(CatalogError):
    """Save was called for an identity that is already stored."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        """Initialize with the entity type and the duplicate id."""
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} already exists: {entity_id}")


class IngestionError(CatalogError):
    """Processing of one search term failed."""

    def __init__(self, term: str, cause: Optional[BaseException] = None) -> None:
        """Initialize with the search term that failed and its cause."""
        self.term = term
        self.cause = cause
        message = f"Ingestion failed for search term '{term}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
