"""Raw catalog record model as delivered by the external catalog source."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogRecord(BaseModel):
    """One song result from the external catalog.

    Field aliases follow the iTunes Search API payload, so a result item can
    be validated directly. Every field is optional here; entity construction
    decides which of them are required.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    wrapper_type: Optional[str] = Field(default=None, alias="wrapperType")
    kind: Optional[str] = None

    # Artist
    artist_id: Optional[int] = Field(default=None, alias="artistId")
    artist_name: Optional[str] = Field(default=None, alias="artistName")
    country: Optional[str] = None

    # Album (collection)
    album_id: Optional[int] = Field(default=None, alias="collectionId")
    album_name: Optional[str] = Field(default=None, alias="collectionName")
    genre: Optional[str] = Field(default=None, alias="primaryGenreName")
    release_date: Optional[str] = Field(default=None, alias="releaseDate")
    track_count: Optional[int] = Field(default=None, alias="trackCount")
    artwork_url: Optional[str] = Field(default=None, alias="artworkUrl100")

    # Song (track)
    song_id: Optional[int] = Field(default=None, alias="trackId")
    song_name: Optional[str] = Field(default=None, alias="trackName")
    length_millis: Optional[int] = Field(default=None, alias="trackTimeMillis")
    preview_url: Optional[str] = Field(default=None, alias="previewUrl")

    @field_validator(
        "artist_name", "album_name", "song_name", "genre", "country", mode="before"
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Strip surrounding whitespace and treat blank text as missing."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @property
    def release_year(self) -> Optional[int]:
        """Year part of the release date (``2020-03-06T08:00:00Z`` -> 2020)."""
        if not self.release_date:
            return None
        year = self.release_date[:4]
        return int(year) if year.isdigit() else None

    @property
    def is_song(self) -> bool:
        """Whether this record describes a song track."""
        return self.wrapper_type in (None, "track") and self.kind in (None, "song")

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "CatalogRecord":
        """Build a record from one raw API result item."""
        return cls.model_validate(item)
