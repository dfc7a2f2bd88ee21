"""Entity graph operations and scan identity rules."""

from . import graph_operations
from .identity import (
    album_id_for,
    artist_id_for,
    build_batch,
    stale_track_ids,
    track_id_for,
)

__all__ = [
    "album_id_for",
    "artist_id_for",
    "build_batch",
    "graph_operations",
    "stale_track_ids",
    "track_id_for",
]
