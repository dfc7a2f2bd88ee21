"""Deletes media files on the local filesystem."""

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

from playdeck.config import get_logger

logger = get_logger(__name__)


def path_from_locator(locator: str) -> Path:
    """Accept plain paths and file:// URIs."""
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(locator)


class LocalFileDeleter:
    async def delete(self, locator: str) -> bool:
        return await asyncio.to_thread(self._delete, locator)

    @staticmethod
    def _delete(locator: str) -> bool:
        path = path_from_locator(locator)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Media file already gone: {path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete media file {path}: {e}")
            return False
        logger.info(f"Deleted media file {path}")
        return True
