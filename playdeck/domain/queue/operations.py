"""Pure transitions of the playback queue state.

The one subtle rule: reshaping the queue (shuffle, splice, removal of other
entries) never changes which entry is audible. Cursor re-seeks track the
current entry by position through the permutation, not by id, so a track
queued twice keeps its exact slot.
"""

from collections.abc import Iterable, Sequence
import random

import attrs

from playdeck.domain.entities import EMPTY_CURSOR, QueueState, Track


def load(tracks: Sequence[Track], start_at: int = 0) -> QueueState:
    """Replace the queue wholesale. The cursor is clamped into range."""
    tracks = tuple(tracks)
    if not tracks:
        return QueueState()
    return QueueState(tracks=tracks, cursor=max(0, min(start_at, len(tracks) - 1)))


def clear() -> QueueState:
    return QueueState()


def play(state: QueueState, track_id: str) -> QueueState:
    """Seek to the first entry with the given id; unknown ids are ignored."""
    index = state.index_of(track_id)
    if index == EMPTY_CURSOR or index == state.cursor:
        return state
    return attrs.evolve(state, cursor=index, last_position_ms=0)


def step(state: QueueState, delta: int) -> QueueState:
    """Move the cursor by delta, clamped to the queue bounds (no wraparound)."""
    if state.is_empty:
        return state
    index = max(0, min(state.cursor + delta, len(state.tracks) - 1))
    if index == state.cursor:
        return state
    return attrs.evolve(state, cursor=index, last_position_ms=0)


def shuffle(state: QueueState, rng: random.Random) -> QueueState:
    if len(state.tracks) < 2:
        return state
    order = list(range(len(state.tracks)))
    rng.shuffle(order)
    cursor = order.index(state.cursor) if state.cursor != EMPTY_CURSOR else EMPTY_CURSOR
    return attrs.evolve(
        state, tracks=tuple(state.tracks[i] for i in order), cursor=cursor
    )


def add_next(state: QueueState, tracks: Iterable[Track]) -> QueueState:
    """Splice tracks right after the current entry.

    The current entry keeps its index since everything lands behind it. On
    an empty queue the first spliced track becomes current.
    """
    incoming = tuple(tracks)
    if not incoming:
        return state
    insert_at = min(state.cursor + 1, len(state.tracks))
    spliced = state.tracks[:insert_at] + incoming + state.tracks[insert_at:]
    cursor = state.cursor if state.cursor != EMPTY_CURSOR else 0
    return attrs.evolve(state, tracks=spliced, cursor=cursor)


def remove_tracks(state: QueueState, track_ids: Iterable[str]) -> QueueState:
    """Drop every entry whose id is given.

    If the current entry survives the cursor follows it; otherwise the
    cursor lands on the next surviving entry, or the last one.
    """
    doomed = set(track_ids)
    if not doomed or not any(t.id in doomed for t in state.tracks):
        return state
    kept = [(i, t) for i, t in enumerate(state.tracks) if t.id not in doomed]
    if not kept:
        return QueueState()
    cursor = next(
        (pos for pos, (i, _) in enumerate(kept) if i >= state.cursor),
        len(kept) - 1,
    )
    current = state.current_track
    position = state.last_position_ms if current is not None and current.id not in doomed else 0
    return QueueState(
        tracks=tuple(t for _, t in kept), cursor=cursor, last_position_ms=position
    )


def update_position(state: QueueState, position_ms: int) -> QueueState:
    if state.is_empty:
        return state
    return attrs.evolve(state, last_position_ms=max(0, position_ms))
