"""JSON mappers between domain documents and their stored form.

Stored documents are indented JSON so they stay readable and diffable.
Unknown fields are ignored on read, and missing optional fields fall back
to their defaults, so older and newer documents load side by side.
"""

from collections.abc import Mapping
from datetime import datetime
import json
from typing import Any

from attrs import define

from playdeck.domain.entities import (
    Album,
    Artist,
    LibraryDocument,
    LibrarySnapshot,
    Playlist,
    PlaylistsDocument,
    Track,
    ensure_utc,
    utc_now,
)
from playdeck.domain.exceptions import DocumentDecodeError

FORMAT_VERSION = 1


def _dump(data: dict[str, Any]) -> bytes:
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def _load(document: str, payload: bytes) -> dict[str, Any]:
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DocumentDecodeError(document, str(e)) from e
    if not isinstance(data, dict):
        raise DocumentDecodeError(document, f"expected an object, got {type(data).__name__}")
    return data


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))


def _records(document: str, data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    records = data.get(key, [])
    if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
        raise DocumentDecodeError(document, f"'{key}' must be a list of objects")
    return records


@define(frozen=True, slots=True)
class PlaylistDocumentMapper:
    """Bidirectional mapper for the playlist document."""

    DOCUMENT = "playlists"

    @staticmethod
    def playlist_to_dict(playlist: Playlist) -> dict[str, Any]:
        return {
            "id": playlist.id,
            "name": playlist.name,
            "created_at": _timestamp(playlist.created_at),
            "last_updated": _timestamp(playlist.last_updated),
            "cover_track_id": playlist.cover_track_id,
            "track_ids": list(playlist.track_ids),
        }

    @staticmethod
    def playlist_from_dict(record: Mapping[str, Any]) -> Playlist:
        created_at = _parse_timestamp(record.get("created_at")) or utc_now()
        return Playlist(
            id=record["id"],
            name=record["name"],
            created_at=created_at,
            last_updated=_parse_timestamp(record.get("last_updated")) or created_at,
            cover_track_id=record.get("cover_track_id"),
            track_ids=record.get("track_ids", []),
        )

    @classmethod
    def to_bytes(cls, document: PlaylistsDocument) -> bytes:
        return _dump(
            {
                "format_version": FORMAT_VERSION,
                "playlists": [cls.playlist_to_dict(p) for p in document.playlists],
            }
        )

    @classmethod
    def from_bytes(cls, payload: bytes) -> PlaylistsDocument:
        data = _load(cls.DOCUMENT, payload)
        try:
            playlists = [
                cls.playlist_from_dict(r) for r in _records(cls.DOCUMENT, data, "playlists")
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise DocumentDecodeError(cls.DOCUMENT, f"bad playlist record: {e!r}") from e
        return PlaylistsDocument(playlists=playlists)


@define(frozen=True, slots=True)
class LibraryDocumentMapper:
    """Bidirectional mapper for the library cache document."""

    DOCUMENT = "library"

    @staticmethod
    def track_to_dict(track: Track) -> dict[str, Any]:
        return {
            "id": track.id,
            "title": track.title,
            "album_id": track.album_id,
            "album_title": track.album_title,
            "artist_id": track.artist_id,
            "artist_name": track.artist_name,
            "locator": track.locator,
            "duration_ms": track.duration_ms,
            "track_number": track.track_number,
            "date_added": track.date_added,
        }

    @staticmethod
    def track_from_dict(record: Mapping[str, Any]) -> Track:
        return Track(
            id=record["id"],
            title=record["title"],
            album_id=record["album_id"],
            artist_id=record["artist_id"],
            locator=record["locator"],
            duration_ms=int(record.get("duration_ms", 0)),
            track_number=int(record.get("track_number", 0)),
            date_added=int(record.get("date_added", 0)),
            artist_name=record.get("artist_name", ""),
            album_title=record.get("album_title", ""),
        )

    @staticmethod
    def album_to_dict(album: Album) -> dict[str, Any]:
        return {
            "id": album.id,
            "title": album.title,
            "artist_id": album.artist_id,
            "artist_name": album.artist_name,
            "track_ids": list(album.track_ids),
            "cover_track_id": album.cover_track_id,
        }

    @staticmethod
    def album_from_dict(record: Mapping[str, Any]) -> Album:
        return Album(
            id=record["id"],
            title=record["title"],
            artist_id=record["artist_id"],
            artist_name=record.get("artist_name", ""),
            track_ids=record.get("track_ids", []),
            cover_track_id=record.get("cover_track_id"),
        )

    @staticmethod
    def artist_to_dict(artist: Artist) -> dict[str, Any]:
        return {
            "id": artist.id,
            "name": artist.name,
            "album_ids": list(artist.album_ids),
            "track_ids": list(artist.track_ids),
        }

    @staticmethod
    def artist_from_dict(record: Mapping[str, Any]) -> Artist:
        return Artist(
            id=record["id"],
            name=record["name"],
            album_ids=record.get("album_ids", []),
            track_ids=record.get("track_ids", []),
        )

    @classmethod
    def to_bytes(cls, document: LibraryDocument) -> bytes:
        snapshot = document.snapshot
        return _dump(
            {
                "format_version": FORMAT_VERSION,
                "last_scanned_at": _timestamp(document.last_scanned_at),
                "tracks": [cls.track_to_dict(t) for t in snapshot.tracks.values()],
                "albums": [cls.album_to_dict(a) for a in snapshot.albums.values()],
                "artists": [cls.artist_to_dict(a) for a in snapshot.artists.values()],
            }
        )

    @classmethod
    def from_bytes(cls, payload: bytes) -> LibraryDocument:
        data = _load(cls.DOCUMENT, payload)
        try:
            snapshot = LibrarySnapshot.from_lists(
                [cls.track_from_dict(r) for r in _records(cls.DOCUMENT, data, "tracks")],
                [cls.album_from_dict(r) for r in _records(cls.DOCUMENT, data, "albums")],
                [cls.artist_from_dict(r) for r in _records(cls.DOCUMENT, data, "artists")],
            )
            last_scanned_at = _parse_timestamp(data.get("last_scanned_at"))
        except (KeyError, TypeError, ValueError) as e:
            raise DocumentDecodeError(cls.DOCUMENT, f"bad library record: {e!r}") from e
        return LibraryDocument(snapshot=snapshot, last_scanned_at=last_scanned_at)
