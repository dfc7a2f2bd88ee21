"""Composition root: builds every component once and wires them explicitly.

Consumers receive the handles they need from ``Components`` instead of
looking them up in a global registry.
"""

from datetime import timedelta
from pathlib import Path

from attrs import define

from playdeck.application.services import (
    EntityGraph,
    LibraryCache,
    LibraryMergeEngine,
    PlaybackQueue,
    PlaylistStore,
)
from playdeck.application.use_cases import CascadeDeletionCoordinator, ScanLibraryUseCase
from playdeck.application.utilities import BackgroundWriter
from playdeck.config import Settings, get_logger
from playdeck.domain.repositories import (
    DocumentStoreProtocol,
    MediaFileDeleterProtocol,
    MediaIndexProtocol,
)
from playdeck.infrastructure.media import LocalFileDeleter, ManifestMediaIndex
from playdeck.infrastructure.persistence import (
    FileDocumentStore,
    JsonLibraryRepository,
    JsonPlaylistRepository,
)

logger = get_logger(__name__)


@define(slots=True)
class Components:
    """Every long-lived component of a running application."""

    writer: BackgroundWriter
    graph: EntityGraph
    library_cache: LibraryCache
    merge_engine: LibraryMergeEngine
    playlists: PlaylistStore
    queue: PlaybackQueue
    deletion: CascadeDeletionCoordinator
    scanner: ScanLibraryUseCase

    def shutdown(self, timeout: float | None = 10.0) -> None:
        """Wait for pending writes, then stop the writer."""
        self.writer.close(timeout)


def build_components(
    config: Settings,
    *,
    store: DocumentStoreProtocol | None = None,
    media_index: MediaIndexProtocol | None = None,
    deleter: MediaFileDeleterProtocol | None = None,
    manifest: Path | None = None,
    load_cache: bool = True,
) -> Components:
    """Construct and wire the application components.

    Args:
        config: Application settings
        store: Document store, defaults to files under the data directory
        media_index: Media index, defaults to a manifest-backed index
        deleter: Media file deleter, defaults to the local filesystem
        manifest: Manifest path for the default media index
        load_cache: Populate the graph from the library cache on start
    """
    store = store or FileDocumentStore(
        config.storage.data_dir,
        retry_count=config.storage.write_retry_count,
        retry_max_delay=config.storage.write_retry_max_delay,
    )
    writer = BackgroundWriter()

    graph = EntityGraph()
    library_cache = LibraryCache(
        JsonLibraryRepository(store, config.storage.library_document), writer
    )
    if load_cache:
        library_cache.load(graph)

    playlists = PlaylistStore(
        JsonPlaylistRepository(store, config.storage.playlists_document),
        writer,
        strict_reorder=config.playlists.strict_reorder,
        allow_foreign_cover=config.playlists.allow_foreign_cover,
    )
    queue = PlaybackQueue()
    merge_engine = LibraryMergeEngine(graph, batch_size=config.scan.merge_batch_size)

    if media_index is None:
        media_index = ManifestMediaIndex(manifest or Path(config.storage.data_dir) / "manifest.json")

    scanner = ScanLibraryUseCase(
        media_index=media_index,
        graph=graph,
        merge_engine=merge_engine,
        cache=library_cache,
        min_rescan_interval=timedelta(minutes=config.scan.min_rescan_interval_minutes),
        prune_missing=config.scan.prune_missing,
    )
    deletion = CascadeDeletionCoordinator(
        graph=graph,
        playlists=playlists,
        queue=queue,
        deleter=deleter or LocalFileDeleter(),
    )

    logger.debug(
        f"Components ready: {len(graph.snapshot.tracks)} cached tracks, "
        f"{len(playlists.playlists)} playlists"
    )
    return Components(
        writer=writer,
        graph=graph,
        library_cache=library_cache,
        merge_engine=merge_engine,
        playlists=playlists,
        queue=queue,
        deletion=deletion,
        scanner=scanner,
    )
