"""Database service owning the storage connection for the music catalog."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event, func, inspect, select
from sqlalchemy.orm import Session, sessionmaker

from .models import (
    SYSTEM_PLAYLIST_NAMES,
    Album,
    Artist,
    Base,
    Playlist,
    Song,
    playlist_songs,
)

logger = logging.getLogger(__name__)


class DatabaseService:
    """Storage handle shared by the repositories and the playlist manager.

    One instance is created at process start and passed explicitly to every
    repository; ``close()`` releases it at shutdown.
    """

    def __init__(self, db_path: Optional[Path] = None, echo: bool = False) -> None:
        """Initialize database service.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses default ~/.music-catalog/catalog.db
            echo: Log every SQL statement
        """
        if db_path is None:
            db_path = Path.home() / ".music-catalog" / "catalog.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Check if database exists before creating engine
        db_exists = self.db_path.exists()

        self.engine = create_engine(f"sqlite:///{self.db_path}", echo=echo)
        self._enable_sqlite_foreign_keys()

        # Returned entities stay readable after their session closes
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

        logger.info("Database initialized at: %s", self.db_path)

        if not db_exists:
            logger.info("New database detected, initializing schema...")
            self.init_db()

    def _enable_sqlite_foreign_keys(self) -> None:
        """Enable foreign key constraints on every SQLite connection.

        SQLite ships with foreign keys disabled; the Artist -> Album -> Song
        write ordering and the membership cascades rely on them.
        """

        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_conn: Any, _connection_record: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    def init_db(self) -> None:
        """Create the schema and the reserved system playlists.

        Safe to call repeatedly.
        """
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema created successfully")
        self._seed_system_playlists()

    def _seed_system_playlists(self) -> None:
        """Insert the Library and Favorites playlists if they are missing."""
        with self.get_session() as session:
            created = []
            for playlist_id, name in SYSTEM_PLAYLIST_NAMES.items():
                if session.get(Playlist, playlist_id) is None:
                    session.add(Playlist(id=playlist_id, name=name))
                    created.append(name)
            session.commit()
            if created:
                logger.info("Created system playlists: %s", ", ".join(created))

    def get_session(self) -> Session:
        """Get a new database session.

        Returns:
            SQLAlchemy Session object

        Note:
            Caller is responsible for closing the session
        """
        return self.SessionLocal()

    def is_initialized(self) -> bool:
        """Check that the engine works and the catalog tables exist."""
        try:
            inspector = inspect(self.engine)
            missing = [
                table
                for table in ("artists", "albums", "songs", "playlists")
                if not inspector.has_table(table)
            ]
            if missing:
                logger.debug("Required tables missing: %s", ", ".join(missing))
                return False

            with self.SessionLocal() as session:
                session.execute(select(1))

            return True
        except Exception as e:
            logger.debug("Database initialization check failed: %s", e)
            return False

    def get_statistics(self) -> Dict[str, Any]:
        """Get row counts for every record set.

        Returns:
            Dictionary with statistics
        """
        with self.get_session() as session:

            def count(table: Any) -> int:
                return session.scalar(select(func.count()).select_from(table)) or 0

            return {
                "artists": count(Artist),
                "albums": count(Album),
                "songs": count(Song),
                "playlists": count(Playlist),
                "playlist_songs": count(playlist_songs),
                "database_path": str(self.db_path),
            }

    def close(self) -> None:
        """Close database connection."""
        if hasattr(self, "engine"):
            self.engine.dispose()
            logger.info("Database connection closed")
