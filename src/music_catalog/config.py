"""Configuration management for the music catalog application."""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env file from config directory or project root
config_env = Path(__file__).parent.parent.parent / "config" / ".env"
if config_env.exists():
    load_dotenv(config_env)
else:
    # Fallback to project root .env
    load_dotenv()

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"

DEFAULT_SEARCH_TERMS = (
    "the war on drugs",
    "refused",
    "thrice",
    "16 horsepower",
    "viagra boys",
    "geese",
    "ghost",
    "run the jewels",
    "rammstein",
    "salvatore ganacci",
    "baroness",
)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_terms(value: str) -> List[str]:
    return [term.strip() for term in value.split(",") if term.strip()]


class Config:
    """Application configuration."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Database settings
        default_db_path = str(Path.home() / ".music-catalog" / "catalog.db")
        self.database_path = Path(
            os.getenv("MUSIC_CATALOG_DATABASE_PATH", default_db_path)
        )

        # Catalog source settings
        self.search_url = os.getenv("MUSIC_CATALOG_SEARCH_URL", ITUNES_SEARCH_URL)
        self.search_limit = int(os.getenv("MUSIC_CATALOG_SEARCH_LIMIT", "50"))
        self.request_timeout = float(
            os.getenv("MUSIC_CATALOG_REQUEST_TIMEOUT", "10")
        )

        terms = os.getenv("MUSIC_CATALOG_SEARCH_TERMS")
        self.search_terms = (
            _parse_terms(terms) if terms else list(DEFAULT_SEARCH_TERMS)
        )

        # Cover art
        self.fetch_covers = _parse_bool(
            os.getenv("MUSIC_CATALOG_FETCH_COVERS", "true")
        )

        # Ensure directories exist
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Ensure the database directory exists."""
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def get_config() -> Config:
    """Get application configuration."""
    return Config()
