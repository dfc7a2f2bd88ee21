"""Shared test fixtures and entity builders."""

from datetime import UTC, datetime

import pytest

from playdeck.domain.entities import ScanCandidate, Track
from playdeck.domain.library import album_id_for, artist_id_for


def make_track(
    track_id: str,
    album: str = "Album",
    artist: str = "Artist",
    title: str | None = None,
    duration_ms: int = 180_000,
) -> Track:
    """Track linked to the content-derived ids of its album and artist."""
    return Track(
        id=track_id,
        title=title or f"Title {track_id}",
        album_id=album_id_for(album, artist),
        artist_id=artist_id_for(artist),
        locator=f"/music/{track_id}.flac",
        duration_ms=duration_ms,
        artist_name=artist,
        album_title=album,
        date_added=0,
    )


def make_candidate(
    name: str,
    album: str = "Album",
    artist: str = "Artist",
    track_number: int = 0,
) -> ScanCandidate:
    return ScanCandidate(
        locator=f"/music/{artist}/{album}/{name}.flac",
        title=name,
        artist_name=artist,
        album_title=album,
        duration_ms=200_000,
        track_number=track_number,
        date_added=1_700_000_000_000,
        media_id=name,
    )


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
