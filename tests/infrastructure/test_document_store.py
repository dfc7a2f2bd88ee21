"""Tests for the document stores."""

from loguru import logger
import pytest

from playdeck.application.utilities import BackgroundWriter
from playdeck.infrastructure.persistence import FileDocumentStore, InMemoryDocumentStore


@pytest.fixture
def store(tmp_path):
    return FileDocumentStore(tmp_path / "data", retry_count=2, retry_max_delay=0)


class TestFileDocumentStore:
    """File-per-key storage with atomic replace."""

    def test_missing_document_reads_as_none(self, store):
        """Test that an absent key is not an error."""
        assert store.read_document("playlists.json") is None

    def test_write_creates_directory_and_file(self, store):
        """Test the first write of a document."""
        store.write_document("playlists.json", b'{"playlists": []}')

        assert store.path_for("playlists.json").read_bytes() == b'{"playlists": []}'
        assert store.read_document("playlists.json") == b'{"playlists": []}'

    def test_write_replaces_without_leftovers(self, store):
        """Test that temp files never survive a successful write."""
        store.write_document("doc.json", b"one")
        store.write_document("doc.json", b"two")

        assert store.read_document("doc.json") == b"two"
        assert [p.name for p in store.data_dir.iterdir()] == ["doc.json"]

    def test_transient_error_is_retried(self, store, monkeypatch):
        """Test that one OSError is retried and the write lands."""
        real_replace = FileDocumentStore._replace
        calls = []

        def flaky(path, payload):
            calls.append(path)
            if len(calls) == 1:
                raise OSError("device busy")
            real_replace(path, payload)

        monkeypatch.setattr(store, "_replace", flaky)

        store.write_document("doc.json", b"payload")

        assert len(calls) == 2
        assert store.read_document("doc.json") == b"payload"

    def test_persistent_error_gives_up(self, store, monkeypatch):
        """Test that the error surfaces after the retry budget is spent."""
        calls = []

        def broken(path, payload):
            calls.append(path)
            raise OSError("read-only filesystem")

        monkeypatch.setattr(store, "_replace", broken)

        with pytest.raises(OSError, match="read-only"):
            store.write_document("doc.json", b"payload")
        assert len(calls) == 3
        assert store.read_document("doc.json") is None

    def test_failed_background_write_logs_one_traceback(self, store, monkeypatch):
        """Test that a save failing on the writer thread is reported once."""

        def broken(path, payload):
            raise OSError("read-only filesystem")

        monkeypatch.setattr(store, "_replace", broken)
        records = []
        sink_id = logger.add(lambda message: records.append(message.record), level="ERROR")
        writer = BackgroundWriter()
        try:
            writer.submit("save doc", lambda: store.write_document("doc.json", b"payload"))
            writer.flush(timeout=5)
        finally:
            writer.close(timeout=5)
            logger.remove(sink_id)

        tracebacks = [r for r in records if r["exception"] is not None]
        assert len(tracebacks) == 1
        assert "save doc" in tracebacks[0]["message"]


class TestInMemoryDocumentStore:
    """Process-local storage."""

    def test_read_write(self):
        """Test basic storage and key listing."""
        store = InMemoryDocumentStore({"b": b"2"})

        store.write_document("a", b"1")

        assert store.read_document("a") == b"1"
        assert store.read_document("missing") is None
        assert store.keys() == ["a", "b"]
