"""Domain tests for playlist edit operations.

Each operation returns a new Playlist, or the same instance for a no-op.
"""

from datetime import UTC, datetime, timedelta

import pytest

from playdeck.domain.entities import Playlist
from playdeck.domain.playlists import operations as ops

CREATED = datetime(2024, 1, 1, tzinfo=UTC)
LATER = CREATED + timedelta(hours=1)


@pytest.fixture
def playlist():
    return Playlist(
        name="Mix",
        created_at=CREATED,
        track_ids=["t1", "t2", "t3", "t4"],
        cover_track_id="t1",
    )


class TestNewPlaylist:
    """Playlist creation."""

    def test_create_and_add_deduplicates_and_sets_cover(self):
        """Test the road trip scenario: duplicates dropped, first is cover."""
        playlist = ops.new_playlist("Road Trip", CREATED, ["t1", "t2", "t1"])

        assert playlist.track_ids == ("t1", "t2")
        assert playlist.cover_track_id == "t1"
        assert playlist.created_at == playlist.last_updated == CREATED

    def test_empty_playlist_has_no_cover(self):
        """Test creation without tracks."""
        playlist = ops.new_playlist("Empty", CREATED)

        assert playlist.track_ids == ()
        assert playlist.cover_track_id is None

    def test_ids_are_unique(self):
        """Test that every playlist gets a fresh random id."""
        assert ops.new_playlist("A", CREATED).id != ops.new_playlist("A", CREATED).id


class TestAddTracks:
    """Appending tracks."""

    def test_appends_only_new_ids(self, playlist):
        """Test that existing order is kept and new ids go at the end."""
        updated = ops.add_tracks(playlist, ["t3", "t5", "t5", "t6"], LATER)

        assert updated.track_ids == ("t1", "t2", "t3", "t4", "t5", "t6")
        assert updated.last_updated == LATER

    def test_adding_twice_keeps_each_id_once(self, playlist):
        """Test that repeated adds never duplicate an id."""
        once = ops.add_tracks(playlist, ["t7", "t8"], LATER)
        twice = ops.add_tracks(once, ["t7", "t8"], LATER)

        assert twice.track_ids.count("t7") == 1
        assert twice.track_ids.count("t8") == 1

    def test_adding_only_known_ids_still_stamps(self, playlist):
        """Test that last_updated moves even when no id is new."""
        updated = ops.add_tracks(playlist, ["t1", "t2"], LATER)

        assert updated.track_ids == playlist.track_ids
        assert updated.last_updated == LATER
        assert playlist.last_updated != LATER


class TestRemoveTracks:
    """Removing tracks."""

    def test_removes_matching_ids(self, playlist):
        """Test that matching ids leave and order is kept."""
        updated = ops.remove_tracks(playlist, ["t2", "t4"], LATER)

        assert updated.track_ids == ("t1", "t3")

    def test_empty_or_unmatched_is_noop(self, playlist):
        """Test that nothing to remove returns the same instance."""
        assert ops.remove_tracks(playlist, [], LATER) is playlist
        assert ops.remove_tracks(playlist, ["zz"], LATER) is playlist


class TestInsertTrackAt:
    """Inserting at a position."""

    @pytest.mark.parametrize(
        ("index", "expected"),
        [
            (0, ("new", "t1", "t2", "t3", "t4")),
            (2, ("t1", "t2", "new", "t3", "t4")),
            (99, ("t1", "t2", "t3", "t4", "new")),
            (-5, ("new", "t1", "t2", "t3", "t4")),
        ],
    )
    def test_index_is_clamped(self, playlist, index, expected):
        """Test insertion at clamped positions."""
        assert ops.insert_track_at(playlist, "new", index, LATER).track_ids == expected

    def test_present_track_is_not_duplicated(self, playlist):
        """Test that inserting a member is a no-op."""
        assert ops.insert_track_at(playlist, "t2", 0, LATER) is playlist


class TestMoveTrack:
    """Relocating an existing entry."""

    def test_move_forward(self, playlist):
        """Test moving an entry towards the end."""
        assert ops.move_track(playlist, "t1", 2, LATER).track_ids == ("t2", "t3", "t1", "t4")

    def test_move_to_end_uses_post_removal_length(self, playlist):
        """Test that the last slot is the length without the moved item."""
        assert ops.move_track(playlist, "t2", 3, LATER).track_ids == ("t1", "t3", "t4", "t2")
        assert ops.move_track(playlist, "t2", 50, LATER).track_ids == ("t1", "t3", "t4", "t2")

    def test_move_preserves_set(self, playlist):
        """Test that moves only change order, never membership."""
        for track_id, index in [("t4", 0), ("t1", 3), ("t3", 1), ("t2", -1)]:
            moved = ops.move_track(playlist, track_id, index, LATER)
            assert sorted(moved.track_ids) == sorted(playlist.track_ids)

    def test_same_position_and_absent_track_are_noops(self, playlist):
        """Test the two no-op cases."""
        assert ops.move_track(playlist, "t2", 1, LATER) is playlist
        assert ops.move_track(playlist, "zz", 0, LATER) is playlist

    def test_move_sets_cover_when_missing(self, playlist):
        """Test that a coverless playlist adopts the moved track."""
        coverless = ops.set_cover(playlist, None, CREATED)

        moved = ops.move_track(coverless, "t3", 0, LATER)

        assert moved.cover_track_id == "t3"

    def test_move_keeps_existing_cover(self, playlist):
        """Test that an existing cover is untouched."""
        assert ops.move_track(playlist, "t3", 0, LATER).cover_track_id == "t1"


class TestReorder:
    """Wholesale order replacement."""

    def test_permutation_check(self, playlist):
        """Test permutation detection."""
        assert ops.is_permutation(playlist, ["t4", "t3", "t2", "t1"])
        assert not ops.is_permutation(playlist, ["t1", "t2", "t3"])
        assert not ops.is_permutation(playlist, ["t1", "t1", "t2", "t3"])
        assert not ops.is_permutation(playlist, ["t1", "t2", "t3", "t9"])

    def test_replace_order_drops_duplicates(self, playlist):
        """Test that the new order is deduplicated."""
        updated = ops.replace_order(playlist, ["t2", "t2", "t1"], LATER)

        assert updated.track_ids == ("t2", "t1")


class TestCoverAndPositions:
    """Cover assignment and undo bookkeeping."""

    def test_cover_may_be_any_track(self, playlist):
        """Test that set_cover does not require membership."""
        assert ops.set_cover(playlist, "elsewhere", LATER).cover_track_id == "elsewhere"

    def test_original_positions(self, playlist):
        """Test recording indices of tracks about to be removed."""
        assert ops.original_positions(playlist, ["t4", "t2", "zz"]) == {"t2": 1, "t4": 3}
