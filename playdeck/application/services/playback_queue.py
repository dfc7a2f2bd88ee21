"""PlaybackQueue: the transient, linear play order.

The queue freezes resolved Track snapshots at load time and is never
persisted; it is rebuilt from the entity graph on every load.
"""

from collections.abc import Callable, Iterable, Sequence
import random

from playdeck.application.utilities import ObservableValue
from playdeck.config import get_logger
from playdeck.domain.entities import QueueState, Track
from playdeck.domain.queue import operations as ops

logger = get_logger(__name__)


class PlaybackQueue:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._cell: ObservableValue[QueueState] = ObservableValue(QueueState())

    @property
    def state(self) -> QueueState:
        return self._cell.value

    @property
    def version(self) -> int:
        return self._cell.version

    def subscribe(self, callback: Callable[[QueueState], None]) -> Callable[[], None]:
        return self._cell.subscribe(callback)

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self.state.tracks

    @property
    def current_index(self) -> int:
        return self.state.cursor

    @property
    def current_track(self) -> Track | None:
        return self.state.current_track

    @property
    def last_position(self) -> int:
        return self.state.last_position_ms

    def load(self, tracks: Sequence[Track], start_at: int = 0) -> None:
        self._cell.set(ops.load(tracks, start_at))
        logger.debug(f"Queue loaded with {len(tracks)} tracks at {self.current_index}")

    def play(self, track_id: str) -> None:
        self._cell.update(lambda s: ops.play(s, track_id))

    def next(self) -> Track | None:
        return self._cell.update(lambda s: ops.step(s, 1)).current_track

    def previous(self) -> Track | None:
        return self._cell.update(lambda s: ops.step(s, -1)).current_track

    def shuffle(self) -> None:
        self._cell.update(lambda s: ops.shuffle(s, self._rng))

    def add_next(self, tracks: Iterable[Track]) -> None:
        tracks = list(tracks)
        self._cell.update(lambda s: ops.add_next(s, tracks))

    def remove_tracks(self, track_ids: Iterable[str]) -> None:
        track_ids = set(track_ids)
        self._cell.update(lambda s: ops.remove_tracks(s, track_ids))

    def update_position(self, position_ms: int) -> None:
        self._cell.update(lambda s: ops.update_position(s, position_ms))

    def clear(self) -> None:
        self._cell.set(ops.clear())
        logger.debug("Queue cleared")
