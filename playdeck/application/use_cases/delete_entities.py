"""Cascade deletion of tracks, albums and artists.

One entry point per entity kind. Each collects the affected tracks before
anything changes, removes the media files, removes the entities from the
graph (a single-track delete also prunes the album and artist it emptied),
then strips the tracks from every playlist and from the loaded
queue. The steps are not transactional; a crash between them can leave a
playlist referencing a track the graph no longer has, which readers skip.
"""

from collections.abc import Callable, Iterable

from attrs import define, field

from playdeck.application.services import EntityGraph, PlaybackQueue, PlaylistStore
from playdeck.config import get_logger
from playdeck.domain.entities import Album, Artist, LibrarySnapshot, Track
from playdeck.domain.repositories import MediaFileDeleterProtocol

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class DeletionOutcome:
    """What a cascade delete removed, enough to undo the metadata side.

    ``playlist_positions`` maps playlist id to the original index of each
    track removed from it.
    ``covers`` holds the cover track each surviving album had before the
    delete.
    """

    tracks: tuple[Track, ...] = ()
    albums: tuple[Album, ...] = ()
    artists: tuple[Artist, ...] = ()
    playlist_positions: dict[str, dict[str, int]] = field(factory=dict)
    covers: dict[str, str | None] = field(factory=dict)
    failed_files: tuple[str, ...] = ()
    blocked: bool = False

    @property
    def track_ids(self) -> set[str]:
        return {t.id for t in self.tracks}

    @property
    def is_empty(self) -> bool:
        return not (self.tracks or self.albums or self.artists)


@define(slots=True)
class CascadeDeletionCoordinator:
    """Single entry point for user-initiated deletes.

    Refuses any delete whose affected tracks include the queue's current
    track; nothing is touched in that case and the outcome is marked
    ``blocked``. Media file deletion failures are logged and never stop
    the metadata removal.
    """

    graph: EntityGraph
    playlists: PlaylistStore
    queue: PlaybackQueue
    deleter: MediaFileDeleterProtocol

    async def delete_track(self, track_id: str, delete_files: bool = True) -> DeletionOutcome:
        snapshot = self.graph.snapshot
        track = snapshot.tracks.get(track_id)
        if track is None:
            logger.debug(f"Track {track_id} not in library, nothing to delete")
            return DeletionOutcome()
        return await self._cascade(
            [track],
            lambda: self.graph.delete_tracks({track_id}, prune=True),
            snapshot,
            delete_files,
        )

    async def delete_album(self, album_id: str, delete_files: bool = True) -> DeletionOutcome:
        snapshot = self.graph.snapshot
        album = snapshot.albums.get(album_id)
        if album is None:
            logger.debug(f"Album {album_id} not in library, nothing to delete")
            return DeletionOutcome()
        tracks = [
            t for t in snapshot.tracks.values() if t.album_id == album_id or t.id in album.track_ids
        ]
        return await self._cascade(
            tracks, lambda: self.graph.delete_album(album_id), snapshot, delete_files
        )

    async def delete_artist(self, artist_id: str, delete_files: bool = True) -> DeletionOutcome:
        snapshot = self.graph.snapshot
        artist = snapshot.artists.get(artist_id)
        if artist is None:
            logger.debug(f"Artist {artist_id} not in library, nothing to delete")
            return DeletionOutcome()
        tracks = [
            t for t in snapshot.tracks.values() if t.artist_id == artist_id or t.id in artist.track_ids
        ]
        return await self._cascade(
            tracks, lambda: self.graph.delete_artist(artist_id), snapshot, delete_files
        )

    async def _cascade(
        self,
        tracks: list[Track],
        mutate: Callable[[], LibrarySnapshot],
        before: LibrarySnapshot,
        delete_files: bool,
    ) -> DeletionOutcome:
        affected = {t.id for t in tracks}
        current = self.queue.current_track
        if current is not None and current.id in affected:
            logger.warning(f"Refusing delete: currently playing track {current.id} is affected")
            return DeletionOutcome(blocked=True)

        failed = await self._delete_files(tracks) if delete_files else ()

        after = mutate()
        removed_albums = tuple(a for aid, a in before.albums.items() if aid not in after.albums)
        removed_artists = tuple(a for aid, a in before.artists.items() if aid not in after.artists)
        covers = {
            aid: album.cover_track_id
            for aid, album in before.albums.items()
            if aid in after.albums and affected.intersection(album.track_ids)
        }

        positions = self.playlists.strip_tracks(affected)
        self.queue.remove_tracks(affected)

        logger.info(
            f"Deleted {len(tracks)} tracks, {len(removed_albums)} albums, "
            f"{len(removed_artists)} artists; touched {len(positions)} playlists"
        )
        return DeletionOutcome(
            tracks=tuple(tracks),
            albums=removed_albums,
            artists=removed_artists,
            playlist_positions=positions,
            covers=covers,
            failed_files=failed,
        )

    async def _delete_files(self, tracks: Iterable[Track]) -> tuple[str, ...]:
        failed = []
        for track in tracks:
            try:
                ok = await self.deleter.delete(track.locator)
            except Exception as e:
                logger.error(f"Error deleting media file {track.locator}: {e}")
                ok = False
            if not ok:
                logger.warning(f"Could not delete media file {track.locator}, removing metadata anyway")
                failed.append(track.locator)
        return tuple(failed)

    def undo(self, outcome: DeletionOutcome) -> None:
        """Restore the entities and playlist entries a delete removed.

        Media files are not brought back.
        """
        if outcome.blocked or outcome.is_empty:
            return
        if outcome.albums or outcome.artists:
            self.graph.merge(outcome.tracks, outcome.albums, outcome.artists)
        self.graph.restore_tracks(outcome.tracks)
        self.graph.restore_covers(outcome.covers)
        self.playlists.reinsert(outcome.playlist_positions)
        logger.info(f"Restored {len(outcome.tracks)} deleted tracks")
