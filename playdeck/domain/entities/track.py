"""Library entities: tracks, albums and artists.

Entities reference each other by id only, never by object reference, so any
one of them can be replaced without touching the others.
"""

from attrs import define, field, validators

from .shared import now_millis, unique_ids


@define(frozen=True, slots=True)
class Track:
    """Immutable track record. Edits replace the whole record."""

    id: str = field(validator=validators.instance_of(str))
    title: str = field(validator=validators.instance_of(str))
    album_id: str
    artist_id: str
    locator: str
    duration_ms: int = 0
    track_number: int = 0
    date_added: int = field(factory=now_millis)

    # Denormalized names used for display and search
    artist_name: str = ""
    album_title: str = ""


@define(frozen=True, slots=True)
class Album:
    """Album with an insertion-ordered, duplicate-free member track list."""

    id: str = field(validator=validators.instance_of(str))
    title: str
    artist_id: str
    artist_name: str = ""
    track_ids: tuple[str, ...] = field(factory=tuple, converter=unique_ids)
    cover_track_id: str | None = None

    def has_track(self, track_id: str) -> bool:
        return track_id in self.track_ids


@define(frozen=True, slots=True)
class Artist:
    """Artist with member album ids and member track ids."""

    id: str = field(validator=validators.instance_of(str))
    name: str
    album_ids: tuple[str, ...] = field(factory=tuple, converter=unique_ids)
    track_ids: tuple[str, ...] = field(factory=tuple, converter=unique_ids)


@define(frozen=True, slots=True)
class ScanCandidate:
    """Raw track record produced by the external media index.

    Carries denormalized artist and album names; the merge engine turns a
    batch of candidates into linked Track/Album/Artist records.
    """

    locator: str
    title: str
    artist_name: str = "Unknown Artist"
    album_title: str = "Unknown Album"
    duration_ms: int = 0
    track_number: int = 0
    date_added: int | None = None
    # Stable identifier assigned by the media index, when it has one
    media_id: str | None = None


@define(frozen=True, slots=True)
class ScanBatch:
    """Linked entities built from one scan, ready to merge into the graph."""

    tracks: tuple[Track, ...] = field(factory=tuple, converter=tuple)
    albums: tuple[Album, ...] = field(factory=tuple, converter=tuple)
    artists: tuple[Artist, ...] = field(factory=tuple, converter=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.tracks
