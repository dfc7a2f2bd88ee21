"""Media index backed by a JSON manifest of audio files.

The manifest is either a list of track records or an object with a
``tracks`` list. Each record needs a ``locator``; the other fields are
optional:

    {"locator": "/music/a.flac", "title": "A", "artist": "X",
     "album": "Y", "duration_ms": 1000, "track_number": 1,
     "date_added": 1700000000000, "media_id": "42"}
"""

import asyncio
from collections.abc import Mapping
import json
from pathlib import Path
from typing import Any

from playdeck.config import get_logger, resilient_operation
from playdeck.domain.entities import ScanCandidate
from playdeck.domain.exceptions import DocumentDecodeError

logger = get_logger(__name__)


def candidate_from_record(record: Mapping[str, Any]) -> ScanCandidate:
    locator = str(record["locator"])
    media_id = record.get("media_id")
    date_added = record.get("date_added")
    return ScanCandidate(
        locator=locator,
        title=str(record.get("title") or ""),
        artist_name=str(record.get("artist") or record.get("artist_name") or ""),
        album_title=str(record.get("album") or record.get("album_title") or ""),
        duration_ms=int(record.get("duration_ms") or 0),
        track_number=int(record.get("track_number") or 0),
        date_added=int(date_added) if date_added is not None else None,
        media_id=str(media_id) if media_id is not None else None,
    )


class ManifestMediaIndex:
    """Reads scan candidates from a manifest file on every scan."""

    def __init__(self, manifest_path: Path | str) -> None:
        self.manifest_path = Path(manifest_path)

    @resilient_operation("media_index_scan")
    async def scan(self) -> list[ScanCandidate]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[ScanCandidate]:
        document = str(self.manifest_path)
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DocumentDecodeError(document, str(e)) from e

        records = data.get("tracks", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise DocumentDecodeError(document, "expected a list of track records")

        candidates = []
        for position, record in enumerate(records):
            if not isinstance(record, Mapping) or not record.get("locator"):
                logger.warning(f"Skipping manifest entry {position}: no locator")
                continue
            try:
                candidates.append(candidate_from_record(record))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping manifest entry {position}: {e}")
        logger.debug(f"Read {len(candidates)} candidates from {self.manifest_path}")
        return candidates
