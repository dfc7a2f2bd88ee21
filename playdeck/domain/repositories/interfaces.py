"""Collaborator interfaces following Clean Architecture principles.

These interfaces define the contracts for persistence, media indexing and
media file removal without depending on infrastructure implementations.
"""

from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from playdeck.domain.entities import (
        LibraryDocument,
        PlaylistsDocument,
        ScanCandidate,
    )


class DocumentStoreProtocol(Protocol):
    """Durable key/document storage used for the playlist and library documents."""

    def read_document(self, key: str) -> bytes | None:
        """Return the stored bytes, or None when the document does not exist."""
        ...

    def write_document(self, key: str, payload: bytes) -> None:
        """Replace the stored document. May raise OSError."""
        ...


class MediaIndexProtocol(Protocol):
    """External index that knows which audio files exist on the device."""

    def scan(self) -> Awaitable[Sequence["ScanCandidate"]]:
        """Return raw candidate records for every indexed audio file.

        Candidates carry denormalized artist and album names.
        """
        ...


class MediaFileDeleterProtocol(Protocol):
    """Removes the underlying media file for a track."""

    def delete(self, locator: str) -> Awaitable[bool]:
        """Delete the file at locator. Returns False on failure, never raises."""
        ...


class PlaylistDocumentRepositoryProtocol(Protocol):
    """Loads and saves the single document holding every playlist."""

    def load(self) -> "PlaylistsDocument | None":
        """Return the stored document, None if missing.

        Raises DocumentDecodeError when the stored bytes are unreadable.
        """
        ...

    def save(self, document: "PlaylistsDocument") -> None:
        ...


class LibraryDocumentRepositoryProtocol(Protocol):
    """Loads and saves the full-library cache document."""

    def load(self) -> "LibraryDocument | None":
        """Return the stored document, None if missing.

        Raises DocumentDecodeError when the stored bytes are unreadable.
        """
        ...

    def save(self, document: "LibraryDocument") -> None:
        ...
