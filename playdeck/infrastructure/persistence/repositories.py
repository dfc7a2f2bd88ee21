"""Document repositories backed by a DocumentStoreProtocol."""

from playdeck.config import get_logger
from playdeck.domain.entities import LibraryDocument, PlaylistsDocument
from playdeck.domain.repositories import DocumentStoreProtocol
from playdeck.infrastructure.persistence.mapper import (
    LibraryDocumentMapper,
    PlaylistDocumentMapper,
)

logger = get_logger(__name__)


class JsonPlaylistRepository:
    """Stores the whole playlist document under one key."""

    def __init__(self, store: DocumentStoreProtocol, key: str = "playlists.json") -> None:
        self.store = store
        self.key = key

    def load(self) -> PlaylistsDocument | None:
        payload = self.store.read_document(self.key)
        if payload is None:
            return None
        return PlaylistDocumentMapper.from_bytes(payload)

    def save(self, document: PlaylistsDocument) -> None:
        self.store.write_document(self.key, PlaylistDocumentMapper.to_bytes(document))
        logger.debug(f"Saved {len(document.playlists)} playlists to {self.key}")


class JsonLibraryRepository:
    """Stores the library cache document under one key."""

    def __init__(self, store: DocumentStoreProtocol, key: str = "library_cache.json") -> None:
        self.store = store
        self.key = key

    def load(self) -> LibraryDocument | None:
        payload = self.store.read_document(self.key)
        if payload is None:
            return None
        return LibraryDocumentMapper.from_bytes(payload)

    def save(self, document: LibraryDocument) -> None:
        self.store.write_document(self.key, LibraryDocumentMapper.to_bytes(document))
        logger.debug(f"Saved library cache with {len(document.snapshot.tracks)} tracks")
