"""Fire-and-forget background execution for persistence writes."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock

from playdeck.config import get_logger

logger = get_logger(__name__)


class BackgroundWriter:
    """Runs write jobs on a single worker thread, in submission order.

    Callers never wait on a job. A failing job is logged and swallowed; a
    later job for the same document simply overwrites the earlier one
    (last write wins). ``flush`` exists for shutdown and tests.
    """

    def __init__(self, name: str = "playdeck-writer") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._pending: set[Future] = set()
        self._lock = Lock()
        self._closed = False

    def submit(self, label: str, job: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                logger.warning(f"Writer closed, dropping job '{label}'")
                return
            future = self._executor.submit(self._run, label, job)
            self._pending.add(future)
        future.add_done_callback(self._discard)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for every job submitted so far. Returns False on timeout."""
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self, timeout: float | None = None) -> None:
        self.flush(timeout)
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=True)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _run(label: str, job: Callable[[], None]) -> None:
        try:
            job()
            logger.debug(f"Background job '{label}' finished")
        except Exception as e:
            logger.exception(f"Background job '{label}' failed: {e!s}")
