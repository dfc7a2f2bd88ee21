"""Playlist-related domain entities.

Pure playlist representations.
"""

from datetime import datetime
import uuid

import attrs
from attrs import define, field, validators

from .shared import unique_ids, utc_now


def _new_playlist_id() -> str:
    return str(uuid.uuid4())


@define(frozen=True, slots=True)
class Playlist:
    """User playlist: an ordered, duplicate-free sequence of track ids.

    Playlists hold track ids only; tracks are resolved against the entity
    graph on read. The cover track is optional and is not required to be a
    member.
    """

    name: str = field(validator=validators.instance_of(str))
    id: str = field(factory=_new_playlist_id)
    created_at: datetime = field(factory=utc_now)
    last_updated: datetime = field(
        default=attrs.Factory(lambda self: self.created_at, takes_self=True)
    )
    cover_track_id: str | None = None
    track_ids: tuple[str, ...] = field(factory=tuple, converter=unique_ids)

    def __len__(self) -> int:
        return len(self.track_ids)

    def contains(self, track_id: str) -> bool:
        return track_id in self.track_ids

    def with_track_ids(self, track_ids, updated_at: datetime) -> "Playlist":
        """Create a new playlist with the given track order."""
        return attrs.evolve(self, track_ids=tuple(track_ids), last_updated=updated_at)

    def renamed(self, name: str, updated_at: datetime) -> "Playlist":
        return attrs.evolve(self, name=name, last_updated=updated_at)

    def with_cover(self, track_id: str | None, updated_at: datetime) -> "Playlist":
        return attrs.evolve(self, cover_track_id=track_id, last_updated=updated_at)


@define(frozen=True, slots=True)
class PlaylistsDocument:
    """The persisted unit: every playlist, in display order."""

    playlists: tuple[Playlist, ...] = field(factory=tuple, converter=tuple)

    def find(self, playlist_id: str) -> Playlist | None:
        return next((p for p in self.playlists if p.id == playlist_id), None)
