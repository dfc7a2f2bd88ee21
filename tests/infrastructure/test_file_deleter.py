"""Tests for the local media file deleter."""

from pathlib import Path

from playdeck.infrastructure.media import LocalFileDeleter, path_from_locator


class TestPathFromLocator:
    def test_plain_path(self):
        assert path_from_locator("/music/a.flac") == Path("/music/a.flac")

    def test_file_uri(self):
        assert path_from_locator("file:///music/My%20Song.flac") == Path("/music/My Song.flac")


class TestLocalFileDeleter:
    """Deleting media files."""

    async def test_deletes_existing_file(self, tmp_path):
        """Test the happy path."""
        media = tmp_path / "a.flac"
        media.write_bytes(b"audio")

        assert await LocalFileDeleter().delete(str(media)) is True
        assert not media.exists()

    async def test_missing_file_returns_false(self, tmp_path):
        """Test that an absent file is reported, not raised."""
        assert await LocalFileDeleter().delete(str(tmp_path / "gone.flac")) is False

    async def test_os_error_returns_false(self, tmp_path):
        """Test that a directory in place of a file is reported, not raised."""
        folder = tmp_path / "album"
        folder.mkdir()

        assert await LocalFileDeleter().delete(folder.as_uri()) is False
        assert folder.exists()
