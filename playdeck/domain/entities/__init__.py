"""Core domain entities representing music library concepts."""

from .library import LibraryDocument, LibrarySnapshot, SearchResults
from .playlist import Playlist, PlaylistsDocument
from .queue import EMPTY_CURSOR, QueueState
from .shared import ensure_utc, now_millis, utc_now
from .track import Album, Artist, ScanBatch, ScanCandidate, Track

__all__ = [
    # Library entities
    "Album",
    "Artist",
    "ScanBatch",
    "ScanCandidate",
    "Track",
    "LibraryDocument",
    "LibrarySnapshot",
    "SearchResults",
    # Playlist entities
    "Playlist",
    "PlaylistsDocument",
    # Queue entities
    "EMPTY_CURSOR",
    "QueueState",
    # Shared utilities
    "ensure_utc",
    "now_millis",
    "utc_now",
]
