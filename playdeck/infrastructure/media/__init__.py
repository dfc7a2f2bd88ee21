"""Media index and media file adapters."""

from .file_deleter import LocalFileDeleter, path_from_locator
from .manifest_index import ManifestMediaIndex, candidate_from_record

__all__ = [
    "LocalFileDeleter",
    "ManifestMediaIndex",
    "candidate_from_record",
    "path_from_locator",
]
