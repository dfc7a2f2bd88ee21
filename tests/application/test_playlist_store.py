"""Tests for PlaylistStore: in-memory edits with write-through persistence."""

from datetime import UTC, datetime

import pytest

from playdeck.application.services import PlaylistStore
from playdeck.domain.entities import Playlist, PlaylistsDocument
from playdeck.domain.exceptions import DocumentDecodeError
from tests.application.conftest import FakeDocumentRepository


def _saved_ids(repo, writer, playlist_id):
    writer.flush(timeout=5)
    return list(repo.saved[-1].find(playlist_id).track_ids)


class TestInitialLoad:
    """Construction reads the document once and self-heals."""

    def test_existing_document_is_loaded(self, writer):
        """Test that a stored document becomes the initial state."""
        stored = PlaylistsDocument([Playlist(name="Kept", id="p1", track_ids=["t1"])])
        repo = FakeDocumentRepository(loaded=stored)

        store = PlaylistStore(repo, writer)
        writer.flush(timeout=5)

        assert store.document is stored
        assert repo.saved == []

    def test_missing_document_writes_empty_one(self, writer):
        """Test that a first launch persists an empty document."""
        repo = FakeDocumentRepository(loaded=None)

        store = PlaylistStore(repo, writer)
        writer.flush(timeout=5)

        assert store.playlists == ()
        assert repo.saved == [PlaylistsDocument()]

    def test_corrupt_document_is_replaced(self, writer):
        """Test that an undecodable document falls back to empty and is rewritten."""
        repo = FakeDocumentRepository(load_error=DocumentDecodeError("playlists", "bad"))

        store = PlaylistStore(repo, writer)
        writer.flush(timeout=5)

        assert store.playlists == ()
        assert repo.saved == [PlaylistsDocument()]

    def test_unreadable_storage_is_not_overwritten(self, writer):
        """Test that an I/O error leaves the stored file alone."""
        repo = FakeDocumentRepository(load_error=PermissionError("denied"))

        store = PlaylistStore(repo, writer)
        writer.flush(timeout=5)

        assert store.playlists == ()
        assert repo.saved == []

    def test_edits_after_unreadable_storage_are_not_saved(self, writer):
        """Test that the first edit does not clobber playlists that could not be read."""
        repo = FakeDocumentRepository(load_error=PermissionError("denied"))
        store = PlaylistStore(repo, writer)

        store.create("New")
        playlist = store.create_and_add("Road", ["t1"])
        store.add_tracks(playlist.id, ["t2"])
        writer.flush(timeout=5)

        assert [p.name for p in store.playlists] == ["New", "Road"]
        assert store.track_ids(playlist.id) == ["t1", "t2"]
        assert repo.saved == []


class TestCreateAndDelete:
    """Creating and removing playlists."""

    def test_create_and_add(self, playlist_store, playlist_repo, writer, fixed_now):
        """Test the road trip scenario through the store."""
        playlist = playlist_store.create_and_add("Road Trip", ["t1", "t2", "t1"])

        assert playlist_store.track_ids(playlist.id) == ["t1", "t2"]
        assert playlist_store.playlist(playlist.id).cover_track_id == "t1"
        assert playlist.created_at == fixed_now
        assert _saved_ids(playlist_repo, writer, playlist.id) == ["t1", "t2"]

    def test_create_and_create_returning(self, playlist_store):
        """Test both creation entry points."""
        playlist_store.create("One")
        two = playlist_store.create_returning("Two")

        assert [p.name for p in playlist_store.playlists] == ["One", "Two"]
        assert two.track_ids == ()

    def test_delete(self, playlist_store, playlist_repo, writer):
        """Test deletion and persistence of the removal."""
        playlist = playlist_store.create_returning("Gone")

        playlist_store.delete(playlist.id)
        writer.flush(timeout=5)

        assert playlist_store.playlist(playlist.id) is None
        assert playlist_repo.saved[-1].playlists == ()

    def test_delete_unknown_does_not_write(self, playlist_store, playlist_repo, writer):
        """Test that deleting an unknown id is silent."""
        playlist_store.delete("missing")
        writer.flush(timeout=5)

        assert playlist_repo.saved == []


class TestEdits:
    """Per-playlist edits."""

    @pytest.fixture
    def playlist(self, playlist_store):
        return playlist_store.create_and_add("Mix", ["t1", "t2", "t3"])

    def test_rename(self, playlist_store, playlist):
        """Test renaming in place."""
        playlist_store.rename(playlist.id, "Renamed")

        assert playlist_store.playlist(playlist.id).name == "Renamed"

    def test_add_tracks_twice_dedups(self, playlist_store, playlist):
        """Test that repeated adds keep ids unique."""
        playlist_store.add_tracks(playlist.id, ["t4", "t1"])
        playlist_store.add_tracks(playlist.id, ["t4", "t1"])

        assert playlist_store.track_ids(playlist.id) == ["t1", "t2", "t3", "t4"]

    def test_remove_empty_list_does_not_write(self, playlist_store, playlist, playlist_repo, writer):
        """Test the short-circuit for an empty removal."""
        writer.flush(timeout=5)
        playlist_repo.saved.clear()

        playlist_store.remove_tracks(playlist.id, [])
        writer.flush(timeout=5)

        assert playlist_repo.saved == []

    def test_remove_track(self, playlist_store, playlist):
        """Test single-track removal."""
        playlist_store.remove_track(playlist.id, "t2")

        assert playlist_store.track_ids(playlist.id) == ["t1", "t3"]

    def test_insert_and_move(self, playlist_store, playlist):
        """Test positional edits."""
        playlist_store.insert_track_at(playlist.id, "t9", 1)
        playlist_store.move_track(playlist.id, "t1", 3)

        assert playlist_store.track_ids(playlist.id) == ["t9", "t2", "t3", "t1"]

    def test_strict_reorder_rejects_non_permutation(self, playlist_store, playlist):
        """Test that a reorder losing tracks is refused."""
        version = playlist_store.version

        playlist_store.update_track_order(playlist.id, ["t1", "t2"])

        assert playlist_store.track_ids(playlist.id) == ["t1", "t2", "t3"]
        assert playlist_store.version == version

    def test_reorder_accepts_permutation(self, playlist_store, playlist):
        """Test a valid drag-reorder commit."""
        playlist_store.update_track_order(playlist.id, ["t3", "t1", "t2"])

        assert playlist_store.track_ids(playlist.id) == ["t3", "t1", "t2"]

    def test_lenient_reorder_accepts_any_list(self, playlist_repo, writer):
        """Test that strict_reorder=False takes the list, deduplicated."""
        store = PlaylistStore(playlist_repo, writer, strict_reorder=False)
        playlist = store.create_and_add("Mix", ["t1", "t2", "t3"])

        store.update_track_order(playlist.id, ["t2", "t9", "t2"])

        assert store.track_ids(playlist.id) == ["t2", "t9"]

    def test_foreign_cover_allowed_by_default(self, playlist_store, playlist):
        """Test that covers need not be members."""
        playlist_store.set_cover(playlist.id, "elsewhere")

        assert playlist_store.playlist(playlist.id).cover_track_id == "elsewhere"

    def test_foreign_cover_rejected_when_disabled(self, playlist_repo, writer):
        """Test the member-only cover policy."""
        store = PlaylistStore(playlist_repo, writer, allow_foreign_cover=False)
        playlist = store.create_and_add("Mix", ["t1", "t2"])

        store.set_cover(playlist.id, "elsewhere")
        assert store.playlist(playlist.id).cover_track_id == "t1"

        store.set_cover(playlist.id, None)
        assert store.playlist(playlist.id).cover_track_id is None

    def test_edits_update_last_updated(self, playlist_repo, writer):
        """Test that effective edits move the lastUpdated timestamp."""
        times = iter(
            [datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 2, tzinfo=UTC)]
        )
        store = PlaylistStore(playlist_repo, writer, clock=lambda: next(times))
        playlist = store.create_returning("Mix")

        store.add_tracks(playlist.id, ["t1"])

        assert store.playlist(playlist.id).last_updated == datetime(2024, 1, 2, tzinfo=UTC)

    def test_unknown_playlist_edits_are_silent(self, playlist_store):
        """Test that edits to unknown ids do nothing."""
        version = playlist_store.version

        playlist_store.add_tracks("missing", ["t1"])
        playlist_store.rename("missing", "x")

        assert playlist_store.version == version
        assert playlist_store.track_ids("missing") == []


class TestCrossPlaylistEdits:
    """Strip and reinsert used by cascade deletion."""

    def test_strip_records_positions_and_reinsert_restores(self, playlist_store):
        """Test that undo puts tracks back at their original indices."""
        one = playlist_store.create_and_add("One", ["t1", "t2", "t3", "t4"])
        two = playlist_store.create_and_add("Two", ["t4", "t5"])
        three = playlist_store.create_and_add("Three", ["t5"])

        positions = playlist_store.strip_tracks({"t2", "t4"})

        assert positions == {one.id: {"t2": 1, "t4": 3}, two.id: {"t4": 0}}
        assert playlist_store.track_ids(one.id) == ["t1", "t3"]
        assert playlist_store.track_ids(three.id) == ["t5"]

        playlist_store.reinsert(positions)

        assert playlist_store.track_ids(one.id) == ["t1", "t2", "t3", "t4"]
        assert playlist_store.track_ids(two.id) == ["t4", "t5"]

    def test_strip_without_matches_does_not_write(self, playlist_store, playlist_repo, writer):
        """Test that nothing to strip means no write."""
        playlist_store.create_returning("Empty")
        writer.flush(timeout=5)
        playlist_repo.saved.clear()

        assert playlist_store.strip_tracks({"t1"}) == {}
        writer.flush(timeout=5)
        assert playlist_repo.saved == []

    def test_resolve_tracks(self, playlist_store, graph):
        """Test resolution against the entity graph, skipping unknown ids."""
        playlist = playlist_store.create_and_add("Mix", ["track_b1", "gone", "track_a1"])

        tracks = playlist_store.resolve_tracks(playlist.id, graph.tracks_by_ids)

        assert [t.id for t in tracks] == ["track_b1", "track_a1"]
