"""Pure domain logic for playlist edits.

These functions contain only business logic with no external dependencies,
making them easy to unit test without mocking. Each returns a new Playlist.
Most return the very same instance when the edit is a no-op so callers can
skip the write; add_tracks always stamps the playlist.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from toolz import unique

from playdeck.domain.entities import Playlist


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def new_playlist(name: str, now: datetime, track_ids: Iterable[str] = ()) -> Playlist:
    """Create a playlist; the first of the deduplicated tracks becomes cover."""
    initial = tuple(unique(track_ids))
    return Playlist(
        name=name,
        created_at=now,
        last_updated=now,
        track_ids=initial,
        cover_track_id=initial[0] if initial else None,
    )


def add_tracks(playlist: Playlist, track_ids: Iterable[str], now: datetime) -> Playlist:
    """Append genuinely new ids, keeping the existing order intact.

    Always counts as an edit: last_updated moves even when every id was
    already present.
    """
    return playlist.with_track_ids(unique((*playlist.track_ids, *track_ids)), now)


def remove_tracks(playlist: Playlist, track_ids: Iterable[str], now: datetime) -> Playlist:
    doomed = set(track_ids)
    if not doomed or not doomed.intersection(playlist.track_ids):
        return playlist
    return playlist.with_track_ids(
        (tid for tid in playlist.track_ids if tid not in doomed), now
    )


def insert_track_at(
    playlist: Playlist, track_id: str, index: int, now: datetime
) -> Playlist:
    """Insert at a clamped index. Already-present tracks are left alone."""
    if playlist.contains(track_id):
        return playlist
    items = list(playlist.track_ids)
    items.insert(_clamp(index, 0, len(items)), track_id)
    return playlist.with_track_ids(items, now)


def move_track(playlist: Playlist, track_id: str, to_index: int, now: datetime) -> Playlist:
    """Relocate an existing entry.

    The destination is clamped against the list with the moved item taken
    out, so moving to the end is ``to_index == len(playlist) - 1``. A
    playlist without a cover adopts the moved track as its cover.
    """
    if not playlist.contains(track_id):
        return playlist
    source = playlist.track_ids.index(track_id)
    items = [tid for tid in playlist.track_ids if tid != track_id]
    target = _clamp(to_index, 0, len(items))
    if target == source:
        return playlist
    items.insert(target, track_id)
    moved = playlist.with_track_ids(items, now)
    if moved.cover_track_id is None:
        moved = moved.with_cover(track_id, now)
    return moved


def is_permutation(playlist: Playlist, new_order: Sequence[str]) -> bool:
    """True when new_order holds exactly the current members, each once."""
    return len(new_order) == len(playlist.track_ids) and set(new_order) == set(
        playlist.track_ids
    )


def replace_order(playlist: Playlist, new_order: Iterable[str], now: datetime) -> Playlist:
    """Replace the sequence wholesale, dropping duplicate ids."""
    return playlist.with_track_ids(unique(new_order), now)


def set_cover(playlist: Playlist, track_id: str | None, now: datetime) -> Playlist:
    return playlist.with_cover(track_id, now)


def original_positions(playlist: Playlist, track_ids: Iterable[str]) -> dict[str, int]:
    """Index of each given track in the playlist, for later re-insertion."""
    wanted = set(track_ids)
    return {tid: i for i, tid in enumerate(playlist.track_ids) if tid in wanted}
