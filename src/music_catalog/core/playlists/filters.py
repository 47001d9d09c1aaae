"""Filtering of song lists for display."""

from typing import Iterable, List, Optional

from ...database.models import Song


def song_matches(song: Song, text: str) -> bool:
    """Case-insensitive substring match on title, artist name or album name."""
    needle = text.lower()
    album = song.album
    artist = album.artist if album is not None else None
    candidates = (
        song.name,
        artist.name if artist is not None else None,
        album.name if album is not None else None,
    )
    return any(value and needle in value.lower() for value in candidates)


def filter_songs(songs: Iterable[Song], text: Optional[str]) -> List[Song]:
    """Keep the songs matching a filter text; a blank filter keeps everything.

    Songs are sorted by title so the result is stable for unordered
    playlist membership sets.
    """
    ordered = sorted(songs, key=lambda song: ((song.name or "").lower(), song.id))
    if not text or not text.strip():
        return ordered
    needle = text.strip()
    return [song for song in ordered if song_matches(song, needle)]
