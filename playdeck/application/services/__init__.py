"""Stateful application components."""

from .entity_graph import EntityGraph
from .library_cache import LibraryCache
from .merge_engine import LibraryMergeEngine, MergeReport
from .playback_queue import PlaybackQueue
from .playlist_store import PlaylistStore

__all__ = [
    "EntityGraph",
    "LibraryCache",
    "LibraryMergeEngine",
    "MergeReport",
    "PlaybackQueue",
    "PlaylistStore",
]
