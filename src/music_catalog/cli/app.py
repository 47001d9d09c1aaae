"""Application context shared by the CLI commands."""

import functools
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, cast

import click
from rich.console import Console

from ..config import Config
from ..core.ingestion import CatalogReconciler
from ..core.playlists import PlaylistManager
from ..database import (
    AlbumRepository,
    ArtistRepository,
    DatabaseService,
    PlaylistRepository,
    SongRepository,
)
from ..exceptions import CatalogError
from ..services import CoverArtResolver, ItunesCatalogClient

console = Console()
logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CatalogApp:
    """Owns the configuration and the storage handle for one CLI run."""

    def __init__(self, config: Config, db_path: Optional[Path] = None) -> None:
        """Initialize the application context.

        Args:
            config: Application configuration
            db_path: Database path overriding the configured one
        """
        self.config = config
        if db_path is not None:
            self.config.database_path = Path(db_path)
        self._db_service: Optional[DatabaseService] = None

    @property
    def db_service(self) -> DatabaseService:
        """Storage handle, opened on first use."""
        if self._db_service is None:
            db_service = DatabaseService(db_path=self.config.database_path)
            if not db_service.is_initialized():
                logger.info("Initializing database schema...")
                db_service.init_db()
            self._db_service = db_service
        return self._db_service

    @property
    def artists(self) -> ArtistRepository:
        """Artist repository."""
        return ArtistRepository(self.db_service)

    @property
    def albums(self) -> AlbumRepository:
        """Album repository."""
        return AlbumRepository(self.db_service)

    @property
    def songs(self) -> SongRepository:
        """Song repository."""
        return SongRepository(self.db_service)

    @property
    def playlists(self) -> PlaylistManager:
        """Playlist manager."""
        return PlaylistManager(PlaylistRepository(self.db_service))

    def create_reconciler(self, fetch_covers: bool = True) -> CatalogReconciler:
        """Create a reconciler talking to the configured catalog source."""
        cover_art_resolver = None
        if fetch_covers and self.config.fetch_covers:
            cover_art_resolver = CoverArtResolver(timeout=self.config.request_timeout)
        return CatalogReconciler(
            ItunesCatalogClient.from_config(self.config),
            self.artists,
            self.albums,
            self.songs,
            cover_art_resolver,
        )

    def close(self) -> None:
        """Release the storage handle."""
        if self._db_service is not None:
            self._db_service.close()
            self._db_service = None


def handle_catalog_errors(action: str) -> Callable[[F], F]:
    """Report catalog errors of a command as a failed CLI invocation.

    Args:
        action: What the command does, used in the error message
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except CatalogError as e:
                logger.warning("%s failed: %s", action, e)
                console.print(f"\n[red]✗ {action} failed: {e}[/red]")
                raise click.ClickException(str(e)) from e

        return cast(F, wrapper)

    return decorator


pass_app = click.make_pass_decorator(CatalogApp)
