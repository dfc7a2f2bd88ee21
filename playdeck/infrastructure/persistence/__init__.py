"""Document persistence: stores, JSON mappers and repositories."""

from .document_store import FileDocumentStore, InMemoryDocumentStore
from .mapper import LibraryDocumentMapper, PlaylistDocumentMapper
from .repositories import JsonLibraryRepository, JsonPlaylistRepository

__all__ = [
    "FileDocumentStore",
    "InMemoryDocumentStore",
    "JsonLibraryRepository",
    "JsonPlaylistRepository",
    "LibraryDocumentMapper",
    "PlaylistDocumentMapper",
]
