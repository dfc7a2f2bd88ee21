"""Key/document storage backends.

``FileDocumentStore`` keeps one file per key under the data directory and
replaces it atomically, so a crash mid-write never leaves a truncated
document. Writes are retried with exponential backoff on OSError; a write
that still fails is raised to the caller, which owns reporting it.
"""

from pathlib import Path
import os
import tempfile
import threading

import backoff

from playdeck.config import get_logger, settings

logger = get_logger(__name__)


def _on_backoff(details) -> None:
    logger.warning(
        f"Backing off {details['target'].__name__} (attempt {details['tries']}), "
        f"retrying in {details['wait']:.2f}s"
    )


def _on_giveup(details) -> None:
    logger.error(
        f"Giving up on {details['target'].__name__} after {details['tries']} attempts"
    )


class FileDocumentStore:
    """Documents stored as files named after their key."""

    def __init__(
        self,
        data_dir: Path | str,
        retry_count: int | None = None,
        retry_max_delay: float | None = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.retry_count = (
            settings.storage.write_retry_count if retry_count is None else retry_count
        )
        self.retry_max_delay = (
            settings.storage.write_retry_max_delay
            if retry_max_delay is None
            else retry_max_delay
        )

    def path_for(self, key: str) -> Path:
        return self.data_dir / key

    def read_document(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def write_document(self, key: str, payload: bytes) -> None:
        @backoff.on_exception(
            backoff.expo,
            OSError,
            max_tries=self.retry_count + 1,
            max_value=self.retry_max_delay,
            jitter=backoff.full_jitter,
            on_backoff=_on_backoff,
            on_giveup=_on_giveup,
        )
        def write_atomically() -> None:
            self._replace(self.path_for(key), payload)

        write_atomically()
        logger.debug(f"Wrote {len(payload)} bytes to {key}")

    @staticmethod
    def _replace(path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class InMemoryDocumentStore:
    """Process-local store, used for tests and ephemeral sessions."""

    def __init__(self, documents: dict[str, bytes] | None = None) -> None:
        self._documents = dict(documents or {})
        self._lock = threading.Lock()

    def read_document(self, key: str) -> bytes | None:
        with self._lock:
            return self._documents.get(key)

    def write_document(self, key: str, payload: bytes) -> None:
        with self._lock:
            self._documents[key] = payload

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._documents)
