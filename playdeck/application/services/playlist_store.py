"""PlaylistStore: ordered, persisted collection of user playlists.

Reads always come from the in-memory document. Every effective mutation
publishes a new PlaylistsDocument and hands a write of the whole document
to the background writer; the store never waits for disk. When the stored
document could not be read at startup, edits stay in memory so the file is
never overwritten with an incomplete document.
"""

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime

from playdeck.application.utilities import BackgroundWriter, ObservableValue
from playdeck.config import get_logger
from playdeck.domain.entities import Playlist, PlaylistsDocument, Track, utc_now
from playdeck.domain.exceptions import DocumentDecodeError
from playdeck.domain.playlists import operations as ops
from playdeck.domain.repositories import PlaylistDocumentRepositoryProtocol

logger = get_logger(__name__)

PlaylistEdit = Callable[[Playlist, datetime], Playlist]


class PlaylistStore:
    """Single writer for the playlist document.

    Args:
        repository: Loads and saves the playlist document
        writer: Background writer used for fire-and-forget saves
        strict_reorder: Reject update_track_order calls that are not a
            permutation of the current members
        allow_foreign_cover: Accept cover tracks that are not members
        clock: Source of timestamps
    """

    def __init__(
        self,
        repository: PlaylistDocumentRepositoryProtocol,
        writer: BackgroundWriter,
        *,
        strict_reorder: bool = True,
        allow_foreign_cover: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._writer = writer
        self._strict_reorder = strict_reorder
        self._allow_foreign_cover = allow_foreign_cover
        self._clock = clock
        # Set when the stored document could not be read; edits then stay in memory
        self._load_failed = False
        self._cell: ObservableValue[PlaylistsDocument] = ObservableValue(
            PlaylistsDocument()
        )
        self._load()

    def _load(self) -> None:
        try:
            document = self._repository.load()
        except DocumentDecodeError as e:
            logger.warning(f"Playlist document unreadable, starting empty: {e}")
            document = None
        except OSError as e:
            # Unreachable storage: keep the file, it may be readable next launch
            logger.error(f"Failed to read playlist document, edits will not be saved: {e}")
            self._load_failed = True
            return

        if document is None:
            logger.info("No usable playlist document, writing an empty one")
            self._persist()
            return

        self._cell.set(document)
        logger.debug(f"Loaded {len(document.playlists)} playlists")

    def _persist(self) -> None:
        if self._load_failed:
            logger.warning("Playlist document was never read, skipping save")
            return
        document = self._cell.value
        self._writer.submit("save playlists", lambda: self._repository.save(document))

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def document(self) -> PlaylistsDocument:
        return self._cell.value

    @property
    def playlists(self) -> tuple[Playlist, ...]:
        return self._cell.value.playlists

    @property
    def version(self) -> int:
        return self._cell.version

    def subscribe(self, callback: Callable[[PlaylistsDocument], None]) -> Callable[[], None]:
        return self._cell.subscribe(callback)

    def playlist(self, playlist_id: str) -> Playlist | None:
        return self._cell.value.find(playlist_id)

    def track_ids(self, playlist_id: str) -> list[str]:
        playlist = self.playlist(playlist_id)
        return list(playlist.track_ids) if playlist else []

    def resolve_tracks(self, playlist_id: str, resolve: Callable[[Iterable[str]], list[Track]]) -> list[Track]:
        """Resolve member ids to tracks, e.g. with ``EntityGraph.tracks_by_ids``."""
        return resolve(self.track_ids(playlist_id))

    # -------------------------------------------------------------------------
    # Creation and removal
    # -------------------------------------------------------------------------

    def _append(self, playlist: Playlist) -> Playlist:
        self._cell.update(
            lambda doc: PlaylistsDocument(playlists=(*doc.playlists, playlist))
        )
        self._persist()
        logger.debug(f"Created playlist '{playlist.name}' ({playlist.id})")
        return playlist

    def create(self, name: str) -> None:
        self.create_returning(name)

    def create_returning(self, name: str) -> Playlist:
        return self._append(ops.new_playlist(name, self._clock()))

    def create_and_add(self, name: str, track_ids: Iterable[str]) -> Playlist:
        return self._append(ops.new_playlist(name, self._clock(), track_ids))

    def delete(self, playlist_id: str) -> None:
        def drop(doc: PlaylistsDocument) -> PlaylistsDocument:
            kept = tuple(p for p in doc.playlists if p.id != playlist_id)
            return doc if len(kept) == len(doc.playlists) else PlaylistsDocument(kept)

        before = self._cell.value
        if self._cell.update(drop) is not before:
            self._persist()
            logger.debug(f"Deleted playlist {playlist_id}")

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def _edit(self, playlist_id: str, edit: PlaylistEdit, label: str) -> bool:
        """Apply edit to one playlist; persist only if something changed."""
        now = self._clock()
        changed = False

        def apply(doc: PlaylistsDocument) -> PlaylistsDocument:
            nonlocal changed
            updated = []
            for playlist in doc.playlists:
                if playlist.id == playlist_id:
                    edited = edit(playlist, now)
                    changed = edited is not playlist
                    updated.append(edited)
                else:
                    updated.append(playlist)
            return PlaylistsDocument(updated) if changed else doc

        self._cell.update(apply)
        if changed:
            self._persist()
            logger.debug(f"{label} on playlist {playlist_id}")
        else:
            logger.debug(f"{label} on playlist {playlist_id} was a no-op")
        return changed

    def rename(self, playlist_id: str, new_name: str) -> None:
        self._edit(playlist_id, lambda p, now: p.renamed(new_name, now), "rename")

    def add_tracks(self, playlist_id: str, track_ids: Iterable[str]) -> None:
        track_ids = list(track_ids)
        self._edit(playlist_id, lambda p, now: ops.add_tracks(p, track_ids, now), "add tracks")

    def remove_track(self, playlist_id: str, track_id: str) -> None:
        self.remove_tracks(playlist_id, [track_id])

    def remove_tracks(self, playlist_id: str, track_ids: Iterable[str]) -> None:
        track_ids = list(track_ids)
        if not track_ids:
            return
        self._edit(
            playlist_id, lambda p, now: ops.remove_tracks(p, track_ids, now), "remove tracks"
        )

    def insert_track_at(self, playlist_id: str, track_id: str, index: int) -> None:
        self._edit(
            playlist_id,
            lambda p, now: ops.insert_track_at(p, track_id, index, now),
            "insert track",
        )

    def move_track(self, playlist_id: str, track_id: str, to_index: int) -> None:
        self._edit(
            playlist_id, lambda p, now: ops.move_track(p, track_id, to_index, now), "move track"
        )

    def update_track_order(self, playlist_id: str, new_order: Sequence[str]) -> None:
        new_order = list(new_order)

        def reorder(playlist: Playlist, now: datetime) -> Playlist:
            if self._strict_reorder and not ops.is_permutation(playlist, new_order):
                logger.warning(
                    f"Rejected reorder of playlist {playlist.id}: "
                    "new order is not a permutation of its tracks"
                )
                return playlist
            return ops.replace_order(playlist, new_order, now)

        self._edit(playlist_id, reorder, "reorder")

    def set_cover(self, playlist_id: str, track_id: str | None) -> None:
        def cover(playlist: Playlist, now: datetime) -> Playlist:
            if track_id is not None and not self._allow_foreign_cover and not playlist.contains(track_id):
                logger.warning(
                    f"Rejected cover {track_id} for playlist {playlist.id}: not a member"
                )
                return playlist
            return ops.set_cover(playlist, track_id, now)

        self._edit(playlist_id, cover, "set cover")

    # -------------------------------------------------------------------------
    # Cross-playlist edits used by cascade deletion and undo
    # -------------------------------------------------------------------------

    def strip_tracks(self, track_ids: Iterable[str]) -> dict[str, dict[str, int]]:
        """Remove the given ids from every playlist in a single write.

        Returns, per affected playlist, the original index of each removed
        track so the removal can be undone.
        """
        doomed = set(track_ids)
        if not doomed:
            return {}
        now = self._clock()
        positions: dict[str, dict[str, int]] = {}

        def apply(doc: PlaylistsDocument) -> PlaylistsDocument:
            positions.clear()
            updated = []
            for playlist in doc.playlists:
                found = ops.original_positions(playlist, doomed)
                if found:
                    positions[playlist.id] = found
                    playlist = ops.remove_tracks(playlist, doomed, now)
                updated.append(playlist)
            return PlaylistsDocument(updated) if positions else doc

        self._cell.update(apply)
        if positions:
            self._persist()
            logger.debug(f"Stripped {len(doomed)} tracks from {len(positions)} playlists")
        return positions

    def reinsert(self, positions: dict[str, dict[str, int]]) -> None:
        """Put tracks back at their recorded indices (undo of strip_tracks)."""
        for playlist_id, by_track in positions.items():

            def restore(playlist: Playlist, now: datetime, by_track=by_track) -> Playlist:
                for track_id, index in sorted(by_track.items(), key=lambda item: item[1]):
                    playlist = ops.insert_track_at(playlist, track_id, index, now)
                return playlist

            self._edit(playlist_id, restore, "reinsert tracks")
