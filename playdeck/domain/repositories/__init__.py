"""Domain collaborator interfaces."""

from .interfaces import (
    DocumentStoreProtocol,
    LibraryDocumentRepositoryProtocol,
    MediaFileDeleterProtocol,
    MediaIndexProtocol,
    PlaylistDocumentRepositoryProtocol,
)

__all__ = [
    "DocumentStoreProtocol",
    "LibraryDocumentRepositoryProtocol",
    "MediaFileDeleterProtocol",
    "MediaIndexProtocol",
    "PlaylistDocumentRepositoryProtocol",
]
