"""LibraryCache: optional durable copy of the entity graph.

Lets the library come back instantly on startup while a rescan runs in the
background. The cache is advisory; the media index stays the source of
truth.
"""

from datetime import datetime

from playdeck.application.services.entity_graph import EntityGraph
from playdeck.application.utilities import BackgroundWriter
from playdeck.config import get_logger
from playdeck.domain.entities import LibraryDocument
from playdeck.domain.exceptions import DocumentDecodeError
from playdeck.domain.repositories import LibraryDocumentRepositoryProtocol

logger = get_logger(__name__)


class LibraryCache:
    def __init__(
        self, repository: LibraryDocumentRepositoryProtocol, writer: BackgroundWriter
    ) -> None:
        self._repository = repository
        self._writer = writer
        self._last_scanned_at: datetime | None = None

    @property
    def last_scanned_at(self) -> datetime | None:
        return self._last_scanned_at

    def load(self, graph: EntityGraph) -> bool:
        """Replace the graph contents with the cached snapshot.

        Returns False, leaving the graph untouched, when there is no usable
        cache.
        """
        try:
            document = self._repository.load()
        except (DocumentDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable library cache: {e}")
            return False
        if document is None:
            logger.debug("No cached music library found")
            return False

        graph.replace_snapshot(document.snapshot)
        self._last_scanned_at = document.last_scanned_at
        logger.debug(
            f"Music library loaded from cache: {len(document.snapshot.tracks)} tracks, "
            f"{len(document.snapshot.albums)} albums, {len(document.snapshot.artists)} artists"
        )
        return True

    def save(self, graph: EntityGraph, scanned_at: datetime | None = None) -> None:
        """Queue a write of the current graph snapshot."""
        if scanned_at is not None:
            self._last_scanned_at = scanned_at
        document = LibraryDocument(
            snapshot=graph.snapshot, last_scanned_at=self._last_scanned_at
        )
        self._writer.submit("save library cache", lambda: self._repository.save(document))
