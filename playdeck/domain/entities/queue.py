"""Playback queue state."""

from attrs import define, field

from .track import Track

EMPTY_CURSOR = -1


@define(frozen=True, slots=True)
class QueueState:
    """Frozen queue contents plus the cursor of the audible track.

    Tracks are resolved snapshots taken at load time, not ids. The cursor
    is -1 exactly when the queue is empty.
    """

    tracks: tuple[Track, ...] = field(factory=tuple, converter=tuple)
    cursor: int = EMPTY_CURSOR
    last_position_ms: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def current_track(self) -> Track | None:
        if 0 <= self.cursor < len(self.tracks):
            return self.tracks[self.cursor]
        return None

    def index_of(self, track_id: str) -> int:
        """First index holding the given track id, or -1."""
        return next(
            (i for i, track in enumerate(self.tracks) if track.id == track_id),
            EMPTY_CURSOR,
        )
