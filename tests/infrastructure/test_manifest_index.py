"""Tests for the manifest-backed media index."""

import json

import pytest

from playdeck.domain.exceptions import DocumentDecodeError
from playdeck.infrastructure.media import ManifestMediaIndex, candidate_from_record


@pytest.fixture
def write_manifest(tmp_path):
    def write(data):
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return write


class TestCandidateFromRecord:
    """Record to ScanCandidate conversion."""

    def test_accepts_both_key_spellings(self):
        """Test short and long names for artist and album."""
        short = candidate_from_record({"locator": "/a.flac", "artist": "X", "album": "Y"})
        long = candidate_from_record(
            {"locator": "/a.flac", "artist_name": "X", "album_title": "Y"}
        )

        assert short == long
        assert short.artist_name == "X"
        assert short.album_title == "Y"

    def test_numeric_fields_are_coerced(self):
        """Test that ids and numbers from JSON land with the right types."""
        candidate = candidate_from_record(
            {"locator": "/a.flac", "media_id": 42, "duration_ms": "1000", "date_added": 5}
        )

        assert candidate.media_id == "42"
        assert candidate.duration_ms == 1000
        assert candidate.date_added == 5
        assert candidate.track_number == 0


class TestManifestMediaIndex:
    """Scanning a manifest file."""

    async def test_scan_reads_list_manifest(self, write_manifest):
        """Test a bare list of records."""
        path = write_manifest(
            [
                {"locator": "/music/a.flac", "title": "A", "artist": "Nina", "album": "First"},
                {"locator": "/music/b.flac", "title": "B", "artist": "Nina", "album": "First"},
            ]
        )

        candidates = await ManifestMediaIndex(path).scan()

        assert [c.title for c in candidates] == ["A", "B"]

    async def test_scan_reads_object_manifest_and_skips_bad_entries(self, write_manifest):
        """Test the tracks-object form and tolerance of broken records."""
        path = write_manifest(
            {
                "tracks": [
                    {"locator": "/music/a.flac", "title": "A"},
                    {"title": "no locator"},
                    "not a record",
                    {"locator": "/music/c.flac", "duration_ms": "long"},
                ]
            }
        )

        candidates = await ManifestMediaIndex(path).scan()

        assert [c.locator for c in candidates] == ["/music/a.flac"]

    async def test_invalid_json_raises_decode_error(self, tmp_path):
        """Test that an unreadable manifest is reported."""
        path = tmp_path / "manifest.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(DocumentDecodeError):
            await ManifestMediaIndex(path).scan()

    async def test_missing_manifest_raises(self, tmp_path):
        """Test that a missing file propagates as an OSError."""
        with pytest.raises(FileNotFoundError):
            await ManifestMediaIndex(tmp_path / "absent.json").scan()
