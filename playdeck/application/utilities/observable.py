"""Observable value cell for publishing immutable snapshots.

Each component keeps its state in one cell. Writers swap in a brand-new
immutable value; readers either poll ``value``/``version`` or register a
callback. Snapshots already handed out are never affected by later writes.
"""

from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

from playdeck.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Value holder with atomic swap-and-notify.

    Mutations are serialized by an internal lock. Subscribers are notified
    outside the lock, in registration order, with the value that was just
    published. A failing subscriber is logged and skipped.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._version = 0
        self._lock = Lock()
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Incremented on every published change; useful for polling."""
        return self._version

    def set(self, new_value: T) -> bool:
        """Publish new_value. Returns False if it is the current value."""
        with self._lock:
            if new_value is self._value:
                return False
            self._value = new_value
            self._version += 1
            subscribers = list(self._subscribers)
        self._notify(subscribers, new_value)
        return True

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomically apply fn to the current value and publish the result.

        If fn returns the same object the update is a no-op and nobody is
        notified.
        """
        with self._lock:
            current = self._value
            new_value = fn(current)
            changed = new_value is not current
            if changed:
                self._value = new_value
                self._version += 1
            subscribers = list(self._subscribers)
        if changed:
            self._notify(subscribers, new_value)
        return new_value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, subscribers: list[Callable[[T], None]], value: T) -> None:
        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                logger.exception("Snapshot subscriber failed")
