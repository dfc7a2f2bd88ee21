"""LibraryMergeEngine: reconciles scan candidates into the entity graph."""

import asyncio
from collections.abc import Iterable

from attrs import define, field
from toolz import partition_all

from playdeck.application.services.entity_graph import EntityGraph
from playdeck.config import get_logger
from playdeck.domain.entities import ScanCandidate
from playdeck.domain.library import build_batch

logger = get_logger(__name__)


@define(frozen=True)
class MergeReport:
    """Counts for one reconciliation plus every scanned track id."""

    scanned: int = 0
    added_tracks: int = 0
    added_albums: int = 0
    added_artists: int = 0
    track_ids: frozenset[str] = field(factory=frozenset)

    def __add__(self, other: "MergeReport") -> "MergeReport":
        return MergeReport(
            scanned=self.scanned + other.scanned,
            added_tracks=self.added_tracks + other.added_tracks,
            added_albums=self.added_albums + other.added_albums,
            added_artists=self.added_artists + other.added_artists,
            track_ids=self.track_ids | other.track_ids,
        )


class LibraryMergeEngine:
    """Builds linked entities from candidates and merges them.

    Identities are content-derived, so merging the same candidates twice
    leaves the graph unchanged, and albums with the same title and artist
    unify across separate merges.
    """

    def __init__(self, graph: EntityGraph, batch_size: int = 200) -> None:
        self._graph = graph
        self._batch_size = max(1, batch_size)

    def merge(self, candidates: Iterable[ScanCandidate]) -> MergeReport:
        """Merge one batch of candidates in a single graph mutation."""
        candidates = list(candidates)
        batch = build_batch(candidates)
        before = self._graph.snapshot
        after = self._graph.merge_batch(batch)
        return MergeReport(
            scanned=len(candidates),
            added_tracks=len(after.tracks) - len(before.tracks),
            added_albums=len(after.albums) - len(before.albums),
            added_artists=len(after.artists) - len(before.artists),
            track_ids=frozenset(t.id for t in batch.tracks),
        )

    async def merge_incrementally(self, candidates: Iterable[ScanCandidate]) -> MergeReport:
        """Merge candidates in chunks, yielding to the event loop between them.

        Cancelling the surrounding task stops after the current chunk; what
        was merged so far is a valid, smaller merge.
        """
        report = MergeReport()
        for chunk in partition_all(self._batch_size, candidates):
            report = report + self.merge(chunk)
            await asyncio.sleep(0)
        logger.info(
            f"Merged {report.scanned} candidates: {report.added_tracks} new tracks, "
            f"{report.added_albums} new albums, {report.added_artists} new artists"
        )
        return report
