"""Shared utilities and helper functions for domain entities.

Pure utility functions.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
import time

from toolz import unique


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware with UTC."""
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt


def utc_now() -> datetime:
    return datetime.now(UTC)


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def unique_ids(values: Iterable[str]) -> tuple[str, ...]:
    """Id sequence keeping the first occurrence of each id."""
    return tuple(unique(values))
