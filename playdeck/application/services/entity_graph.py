"""EntityGraph: the single owner of the in-memory library.

All mutations go through the pure functions in
``playdeck.domain.library.graph_operations`` and are published as a fresh
LibrarySnapshot. Readers hold snapshots; a snapshot never changes after it
has been handed out.
"""

from collections.abc import Callable, Iterable, Mapping

from playdeck.application.utilities import ObservableValue
from playdeck.config import get_logger
from playdeck.domain.entities import (
    Album,
    Artist,
    LibrarySnapshot,
    ScanBatch,
    SearchResults,
    Track,
)
from playdeck.domain.library import graph_operations as ops

logger = get_logger(__name__)


class EntityGraph:
    """Tracks, albums and artists with hand-maintained referential integrity.

    Every operation is total: ids that are not present are ignored rather
    than reported. Mutations are serialized; reads never block.
    """

    def __init__(self, initial: LibrarySnapshot | None = None) -> None:
        self._cell: ObservableValue[LibrarySnapshot] = ObservableValue(
            initial or ops.empty()
        )

    # -------------------------------------------------------------------------
    # Snapshot access
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> LibrarySnapshot:
        return self._cell.value

    @property
    def version(self) -> int:
        return self._cell.version

    def subscribe(self, callback: Callable[[LibrarySnapshot], None]) -> Callable[[], None]:
        return self._cell.subscribe(callback)

    @property
    def is_empty(self) -> bool:
        return self.snapshot.is_empty

    def track(self, track_id: str) -> Track | None:
        return self.snapshot.tracks.get(track_id)

    def album(self, album_id: str) -> Album | None:
        return self.snapshot.albums.get(album_id)

    def artist(self, artist_id: str) -> Artist | None:
        return self.snapshot.artists.get(artist_id)

    def tracks_by_ids(self, track_ids: Iterable[str]) -> list[Track]:
        """Resolve ids in the given order, skipping unknown ones."""
        tracks = self.snapshot.tracks
        return [tracks[tid] for tid in track_ids if tid in tracks]

    def search(self, query: str) -> SearchResults:
        return ops.search(self.snapshot, query)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def merge(
        self,
        new_tracks: Iterable[Track],
        new_albums: Iterable[Album] = (),
        new_artists: Iterable[Artist] = (),
    ) -> LibrarySnapshot:
        new_tracks = list(new_tracks)
        if not new_tracks:
            logger.debug("No new tracks to merge")
            return self.snapshot
        before = len(self.snapshot.tracks)
        result = self._cell.update(
            lambda s: ops.merge(s, new_tracks, new_albums, new_artists)
        )
        logger.debug(
            f"Merged {len(new_tracks)} scanned tracks, {len(result.tracks) - before} new; "
            f"library now {len(result.tracks)} tracks, {len(result.albums)} albums, "
            f"{len(result.artists)} artists"
        )
        return result

    def merge_batch(self, batch: ScanBatch) -> LibrarySnapshot:
        return self.merge(batch.tracks, batch.albums, batch.artists)

    def replace_all(
        self, tracks: Iterable[Track], albums: Iterable[Album], artists: Iterable[Artist]
    ) -> LibrarySnapshot:
        snapshot = ops.replace_all(tracks, albums, artists)
        self._cell.set(snapshot)
        logger.debug(f"Library replaced: {len(snapshot.tracks)} tracks")
        return snapshot

    def replace_snapshot(self, snapshot: LibrarySnapshot) -> None:
        self._cell.set(snapshot)

    def clear(self) -> None:
        self._cell.set(ops.empty())
        logger.debug("Library cleared")

    def delete_tracks(self, track_ids: Iterable[str], prune: bool = False) -> LibrarySnapshot:
        """Remove tracks; with ``prune``, also the albums and artists they emptied."""
        ids = set(track_ids)
        delete = ops.delete_tracks_pruning if prune else ops.delete_tracks
        result = self._cell.update(lambda s: delete(s, ids))
        logger.debug(f"Deleted up to {len(ids)} tracks")
        return result

    def delete_album(self, album_id: str) -> LibrarySnapshot:
        result = self._cell.update(lambda s: ops.delete_album(s, album_id))
        logger.debug(f"Deleted album {album_id}")
        return result

    def delete_artist(self, artist_id: str) -> LibrarySnapshot:
        result = self._cell.update(lambda s: ops.delete_artist(s, artist_id))
        logger.debug(f"Deleted artist {artist_id}")
        return result

    def restore_tracks(self, tracks: Iterable[Track]) -> LibrarySnapshot:
        tracks = list(tracks)
        result = self._cell.update(lambda s: ops.restore_tracks(s, tracks))
        logger.debug(f"Restored up to {len(tracks)} tracks")
        return result

    def restore_covers(self, covers: Mapping[str, str | None]) -> LibrarySnapshot:
        return self._cell.update(lambda s: ops.restore_covers(s, covers))

    def prune_empty(self) -> LibrarySnapshot:
        before = self.snapshot
        result = self._cell.update(ops.prune_empty)
        if result is not before:
            logger.debug(
                f"Pruned {len(before.albums) - len(result.albums)} albums and "
                f"{len(before.artists) - len(result.artists)} artists"
            )
        return result
