"""Content-derived identities and scan batch construction.

Artist and album ids are deterministic digests of their names, so scanning
the same physical content twice converges on the same entities instead of
duplicating them. Track ids come from the media index's own identifier
when it supplies one, otherwise from the source locator.
"""

from collections.abc import Iterable
import hashlib

from toolz import unique

from playdeck.domain.entities import (
    Album,
    Artist,
    LibrarySnapshot,
    ScanBatch,
    ScanCandidate,
    Track,
    now_millis,
)

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

_DIGEST_LENGTH = 16


def _normalize(name: str) -> str:
    return " ".join(name.split()).casefold()


def _digest(*parts: str) -> str:
    payload = "\x1f".join(parts).encode("utf-8")
    return hashlib.sha1(payload, usedforsecurity=False).hexdigest()[:_DIGEST_LENGTH]


def artist_id_for(name: str) -> str:
    return f"artist_{_digest(_normalize(name) or _normalize(UNKNOWN_ARTIST))}"


def album_id_for(title: str, artist_name: str) -> str:
    """Album identity is the pair (title, artist), so same-titled albums by
    different artists stay separate."""
    return "album_" + _digest(
        _normalize(title) or _normalize(UNKNOWN_ALBUM),
        _normalize(artist_name) or _normalize(UNKNOWN_ARTIST),
    )


def track_id_for(candidate: ScanCandidate) -> str:
    if candidate.media_id:
        return f"track_{candidate.media_id}"
    return f"track_{_digest(candidate.locator)}"


def build_batch(candidates: Iterable[ScanCandidate]) -> ScanBatch:
    """Turn flat scan candidates into linked Track/Album/Artist records.

    Candidates resolving to the same track id are collapsed (first wins).
    Album and artist display names come from the first candidate seen.
    """
    tracks: list[Track] = []
    albums: dict[str, dict] = {}
    artists: dict[str, dict] = {}

    for candidate in unique(candidates, key=track_id_for):
        artist_name = candidate.artist_name.strip() or UNKNOWN_ARTIST
        album_title = candidate.album_title.strip() or UNKNOWN_ALBUM
        artist_id = artist_id_for(artist_name)
        album_id = album_id_for(album_title, artist_name)

        track = Track(
            id=track_id_for(candidate),
            title=candidate.title.strip() or candidate.locator.rsplit("/", 1)[-1],
            album_id=album_id,
            artist_id=artist_id,
            locator=candidate.locator,
            duration_ms=candidate.duration_ms,
            track_number=candidate.track_number,
            date_added=candidate.date_added if candidate.date_added is not None else now_millis(),
            artist_name=artist_name,
            album_title=album_title,
        )
        tracks.append(track)

        album_info = albums.setdefault(
            album_id,
            {"title": album_title, "artist_id": artist_id, "artist_name": artist_name, "track_ids": []},
        )
        album_info["track_ids"].append(track.id)

        artist_info = artists.setdefault(artist_id, {"name": artist_name, "album_ids": [], "track_ids": []})
        artist_info["track_ids"].append(track.id)
        if album_id not in artist_info["album_ids"]:
            artist_info["album_ids"].append(album_id)

    return ScanBatch(
        tracks=tracks,
        albums=[
            Album(
                id=album_id,
                title=info["title"],
                artist_id=info["artist_id"],
                artist_name=info["artist_name"],
                track_ids=info["track_ids"],
                cover_track_id=info["track_ids"][0],
            )
            for album_id, info in albums.items()
        ],
        artists=[
            Artist(
                id=artist_id,
                name=info["name"],
                album_ids=info["album_ids"],
                track_ids=info["track_ids"],
            )
            for artist_id, info in artists.items()
        ],
    )


def stale_track_ids(snapshot: LibrarySnapshot, scanned_ids: Iterable[str]) -> set[str]:
    """Tracks present in the graph that a complete scan no longer reports."""
    return set(snapshot.tracks) - set(scanned_ids)
