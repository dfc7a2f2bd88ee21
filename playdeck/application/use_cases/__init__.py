"""Use cases orchestrating the library, playlist and queue components."""

from .delete_entities import CascadeDeletionCoordinator, DeletionOutcome
from .scan_library import ScanLibraryUseCase, ScanResult

__all__ = [
    "CascadeDeletionCoordinator",
    "DeletionOutcome",
    "ScanLibraryUseCase",
    "ScanResult",
]
