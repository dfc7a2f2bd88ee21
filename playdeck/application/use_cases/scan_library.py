"""ScanLibrary use case: reconcile the media index into the entity graph.

A full scan reads every candidate from the media index, merges them in
chunks through the LibraryMergeEngine and, once the scan has completed,
drops tracks the index no longer reports. Single-file change events from
the index are applied with ``track_added`` and ``track_removed``.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Literal

from attrs import define, field

from playdeck.application.services import EntityGraph, LibraryCache, LibraryMergeEngine
from playdeck.application.services.merge_engine import MergeReport
from playdeck.config import get_logger
from playdeck.domain.entities import ScanCandidate, utc_now
from playdeck.domain.library import stale_track_ids
from playdeck.domain.repositories import MediaIndexProtocol

logger = get_logger(__name__)

ScanStatus = Literal["completed", "skipped"]


@define(frozen=True, slots=True)
class ScanResult:
    """Outcome of one ScanLibrary.execute call."""

    status: ScanStatus
    report: MergeReport = field(factory=MergeReport)
    removed_tracks: int = 0
    scanned_at: datetime | None = None


@define(slots=True)
class ScanLibraryUseCase:
    """Rescans the media index and keeps the entity graph in step with it.

    The merge step is idempotent, so a scan cancelled part way through
    leaves a smaller but valid merge behind. Stale-track removal only
    happens after a scan runs to completion.
    """

    media_index: MediaIndexProtocol
    graph: EntityGraph
    merge_engine: LibraryMergeEngine
    cache: LibraryCache | None = None
    min_rescan_interval: timedelta = timedelta(minutes=15)
    prune_missing: bool = True
    clock: Callable[[], datetime] = utc_now
    _last_scanned_at: datetime | None = field(default=None, init=False)

    @property
    def last_scanned_at(self) -> datetime | None:
        if self._last_scanned_at is None and self.cache:
            return self.cache.last_scanned_at
        return self._last_scanned_at

    def _recently_scanned(self, now: datetime) -> bool:
        last = self.last_scanned_at
        return last is not None and now - last < self.min_rescan_interval

    async def execute(self, force: bool = False) -> ScanResult:
        """Run a full scan.

        Args:
            force: Scan even if the last scan is within the rescan interval

        Returns:
            ScanResult with merge counts and the number of stale tracks removed
        """
        now = self.clock()
        if not force and self._recently_scanned(now):
            logger.info(f"Skipping rescan, last scan at {self.last_scanned_at}")
            return ScanResult(status="skipped", scanned_at=self.last_scanned_at)

        logger.info("Starting library scan")
        candidates = await self.media_index.scan()
        try:
            report = await self.merge_engine.merge_incrementally(candidates)
        except asyncio.CancelledError:
            logger.warning("Library scan interrupted, keeping partial merge")
            raise

        removed = 0
        if self.prune_missing:
            stale = stale_track_ids(self.graph.snapshot, report.track_ids)
            if stale:
                self.graph.delete_tracks(stale)
                removed = len(stale)
            self.graph.prune_empty()

        self._last_scanned_at = now
        if self.cache:
            self.cache.save(self.graph, scanned_at=now)

        logger.info(
            f"Library scan completed: {report.scanned} scanned, "
            f"{report.added_tracks} added, {removed} removed"
        )
        return ScanResult(
            status="completed", report=report, removed_tracks=removed, scanned_at=now
        )

    def track_added(self, candidate: ScanCandidate) -> MergeReport:
        """Merge a single file reported by the media index."""
        report = self.merge_engine.merge([candidate])
        if report.added_tracks and self.cache:
            self.cache.save(self.graph)
        return report

    def track_removed(self, track_id: str) -> bool:
        """Drop a track whose file vanished, pruning emptied albums and artists."""
        if self.graph.track(track_id) is None:
            logger.debug(f"Ignoring removal of unknown track {track_id}")
            return False
        self.graph.delete_tracks({track_id}, prune=True)
        if self.cache:
            self.cache.save(self.graph)
        return True
