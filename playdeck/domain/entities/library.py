"""Immutable snapshot of the entity graph.

A snapshot owns three id-keyed collections. Every mutation of the graph
builds a new snapshot; holders of an older snapshot never see later writes.
"""

from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from attrs import define, field

from .track import Album, Artist, Track


def _freeze(mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@define(frozen=True, slots=True)
class LibrarySnapshot:
    """Tracks, albums and artists keyed by id, in insertion order.

    The mappings are read-only views over private copies, so a held
    snapshot cannot be changed through them or through the dicts it was
    built from.
    """

    tracks: Mapping[str, Track] = field(factory=dict, converter=_freeze)
    albums: Mapping[str, Album] = field(factory=dict, converter=_freeze)
    artists: Mapping[str, Artist] = field(factory=dict, converter=_freeze)

    @classmethod
    def from_lists(cls, tracks, albums, artists) -> "LibrarySnapshot":
        return cls(
            tracks={t.id: t for t in tracks},
            albums={a.id: a for a in albums},
            artists={a.id: a for a in artists},
        )

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def track_list(self) -> list[Track]:
        return list(self.tracks.values())

    @property
    def album_list(self) -> list[Album]:
        return list(self.albums.values())

    @property
    def artist_list(self) -> list[Artist]:
        return list(self.artists.values())


@define(frozen=True, slots=True)
class SearchResults:
    """Three filtered lists returned by a library search."""

    tracks: list[Track] = field(factory=list)
    albums: list[Album] = field(factory=list)
    artists: list[Artist] = field(factory=list)

    @property
    def total(self) -> int:
        return len(self.tracks) + len(self.albums) + len(self.artists)


@define(frozen=True, slots=True)
class LibraryDocument:
    """Persisted form of the library cache."""

    snapshot: LibrarySnapshot = field(factory=LibrarySnapshot)
    last_scanned_at: datetime | None = None
