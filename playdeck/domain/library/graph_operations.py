"""Pure operations over the library entity graph.

Every function takes a LibrarySnapshot and returns a LibrarySnapshot. When
an operation has nothing to do it returns the input snapshot itself, so
callers can detect a no-op with an identity check.

Referential invariants maintained by every operation:
- an album or artist never lists a track id that is absent from the track
  collection;
- an album's cover track is one of its member tracks, or None.

Absent ids are ignored, never reported.
"""

from collections.abc import Iterable, Mapping

import attrs
from toolz import unique

from playdeck.domain.entities import (
    Album,
    Artist,
    LibrarySnapshot,
    SearchResults,
    Track,
)


def _distinct(*sequences: Iterable[str]) -> tuple[str, ...]:
    return tuple(unique(item for seq in sequences for item in seq))


def _strip_tracks_from_album(album: Album, removed: set[str]) -> Album:
    if not removed.intersection(album.track_ids):
        return album
    remaining = tuple(tid for tid in album.track_ids if tid not in removed)
    cover = album.cover_track_id
    if cover in removed:
        cover = remaining[0] if remaining else None
    return attrs.evolve(album, track_ids=remaining, cover_track_id=cover)


def _strip_from_artist(
    artist: Artist, removed_tracks: set[str], removed_albums: set[str] = frozenset()
) -> Artist:
    if not removed_tracks.intersection(artist.track_ids) and not removed_albums.intersection(
        artist.album_ids
    ):
        return artist
    return attrs.evolve(
        artist,
        track_ids=tuple(t for t in artist.track_ids if t not in removed_tracks),
        album_ids=tuple(a for a in artist.album_ids if a not in removed_albums),
    )


def _without(
    snapshot: LibrarySnapshot,
    track_ids: set[str],
    album_ids: set[str] = frozenset(),
    artist_ids: set[str] = frozenset(),
) -> LibrarySnapshot:
    """Remove entities and strip every reference to them."""
    tracks = {tid: t for tid, t in snapshot.tracks.items() if tid not in track_ids}
    albums = {
        aid: _strip_tracks_from_album(album, track_ids)
        for aid, album in snapshot.albums.items()
        if aid not in album_ids
    }
    artists = {
        aid: _strip_from_artist(artist, track_ids, album_ids)
        for aid, artist in snapshot.artists.items()
        if aid not in artist_ids
    }
    return LibrarySnapshot(tracks=tracks, albums=albums, artists=artists)


# === Bulk replacement ===


def replace_all(tracks, albums, artists) -> LibrarySnapshot:
    """Authoritative snapshot replacement."""
    return LibrarySnapshot.from_lists(tracks, albums, artists)


def empty() -> LibrarySnapshot:
    return LibrarySnapshot()


# === Merge ===


def merge(
    snapshot: LibrarySnapshot,
    new_tracks: Iterable[Track],
    new_albums: Iterable[Album],
    new_artists: Iterable[Artist],
) -> LibrarySnapshot:
    """Merge scanned entities into the graph without duplicating anything.

    Only tracks, albums and artists whose id is new are added. Existing
    albums and artists gain any newly discovered membership; an album's
    cover is only assigned when it had none. Existing tracks are never
    replaced, so membership is always derived from the track records that
    end up in the graph.
    """
    new_tracks = list(new_tracks)
    if not new_tracks:
        return snapshot
    new_albums = list(new_albums)
    new_artists = list(new_artists)

    tracks = dict(snapshot.tracks)
    for track in new_tracks:
        tracks.setdefault(track.id, track)

    # Batch track ids whose resulting record belongs to a given album/artist
    batch_ids = list(unique(t.id for t in new_tracks))
    by_album: dict[str, list[str]] = {}
    by_artist: dict[str, list[str]] = {}
    for tid in batch_ids:
        track = tracks[tid]
        by_album.setdefault(track.album_id, []).append(tid)
        by_artist.setdefault(track.artist_id, []).append(tid)

    albums: dict[str, Album] = {}
    for aid, album in snapshot.albums.items():
        added = by_album.get(aid, [])
        if not added:
            albums[aid] = album
            continue
        albums[aid] = attrs.evolve(
            album,
            track_ids=_distinct(album.track_ids, added),
            cover_track_id=album.cover_track_id or added[0],
        )
    for album in new_albums:
        if album.id in albums:
            continue
        members = _distinct(
            (tid for tid in album.track_ids if tid in tracks and tracks[tid].album_id == album.id),
            by_album.get(album.id, []),
        )
        cover = album.cover_track_id if album.cover_track_id in members else None
        albums[album.id] = attrs.evolve(
            album,
            track_ids=members,
            cover_track_id=cover or (members[0] if members else None),
        )

    album_ids_by_artist: dict[str, list[str]] = {}
    for album in new_albums:
        if album.id in albums and albums[album.id].artist_id == album.artist_id:
            album_ids_by_artist.setdefault(album.artist_id, []).append(album.id)

    artists: dict[str, Artist] = {}
    for aid, artist in snapshot.artists.items():
        added_tracks = by_artist.get(aid, [])
        added_albums = album_ids_by_artist.get(aid, [])
        if not added_tracks and not added_albums:
            artists[aid] = artist
            continue
        artists[aid] = attrs.evolve(
            artist,
            track_ids=_distinct(artist.track_ids, added_tracks),
            album_ids=_distinct(artist.album_ids, added_albums),
        )
    for artist in new_artists:
        if artist.id in artists:
            continue
        artists[artist.id] = attrs.evolve(
            artist,
            track_ids=_distinct(
                (tid for tid in artist.track_ids if tid in tracks and tracks[tid].artist_id == artist.id),
                by_artist.get(artist.id, []),
            ),
            album_ids=_distinct(
                (alid for alid in artist.album_ids if alid in albums),
                album_ids_by_artist.get(artist.id, []),
            ),
        )

    return LibrarySnapshot(tracks=tracks, albums=albums, artists=artists)


# === Deletion ===


def delete_tracks(snapshot: LibrarySnapshot, track_ids: Iterable[str]) -> LibrarySnapshot:
    """Remove tracks and every album/artist reference to them.

    An album whose cover was removed falls back to its first remaining
    member, or None. Albums and artists left empty are kept; pruning is a
    separate step.
    """
    removed = set(track_ids) & snapshot.tracks.keys()
    if not removed:
        return snapshot
    return _without(snapshot, removed)


def delete_album(snapshot: LibrarySnapshot, album_id: str) -> LibrarySnapshot:
    """Remove an album with all of its tracks.

    The owning artist is pruned too when, after the deletion, it has no
    albums left and no tracks of its own outside the deleted album.
    """
    album = snapshot.albums.get(album_id)
    if album is None:
        return snapshot

    removed_tracks = {
        tid
        for tid, track in snapshot.tracks.items()
        if tid in album.track_ids or track.album_id == album.id
    }
    result = _without(snapshot, removed_tracks, album_ids={album.id})

    owner = result.artists.get(album.artist_id)
    if owner is not None:
        has_albums = any(alid in result.albums for alid in owner.album_ids)
        has_tracks = any(t.artist_id == owner.id for t in result.tracks.values())
        if not has_albums and not has_tracks:
            result = _without(result, set(), artist_ids={owner.id})
    return result


def delete_artist(snapshot: LibrarySnapshot, artist_id: str) -> LibrarySnapshot:
    """Remove an artist with all of its albums and tracks. Unconditional."""
    artist = snapshot.artists.get(artist_id)
    if artist is None:
        return snapshot

    removed_albums = {
        aid for aid, album in snapshot.albums.items() if album.artist_id == artist.id
    }
    removed_tracks = {
        tid
        for tid, track in snapshot.tracks.items()
        if track.artist_id == artist.id or tid in artist.track_ids
    }
    return _without(
        snapshot, removed_tracks, album_ids=removed_albums, artist_ids={artist.id}
    )


def prune_empty(snapshot: LibrarySnapshot) -> LibrarySnapshot:
    """Drop albums and artists that no longer have any member tracks."""
    empty_albums = {aid for aid, album in snapshot.albums.items() if not album.track_ids}
    empty_artists = {aid for aid, artist in snapshot.artists.items() if not artist.track_ids}
    if not empty_albums and not empty_artists:
        return snapshot
    return _without(snapshot, set(), album_ids=empty_albums, artist_ids=empty_artists)


def prune_emptied(
    snapshot: LibrarySnapshot, album_ids: Iterable[str], artist_ids: Iterable[str]
) -> LibrarySnapshot:
    """Drop the named albums and artists if they were left without members.

    An artist goes only when it has no tracks and none of its albums
    survive. Albums and artists outside the given ids are never touched.
    """
    empty_albums = {
        aid
        for aid in album_ids
        if aid in snapshot.albums and not snapshot.albums[aid].track_ids
    }
    empty_artists = {
        aid
        for aid in artist_ids
        if aid in snapshot.artists
        and not snapshot.artists[aid].track_ids
        and all(
            alid in empty_albums or alid not in snapshot.albums
            for alid in snapshot.artists[aid].album_ids
        )
    }
    if not empty_albums and not empty_artists:
        return snapshot
    return _without(snapshot, set(), album_ids=empty_albums, artist_ids=empty_artists)


def delete_tracks_pruning(snapshot: LibrarySnapshot, track_ids: Iterable[str]) -> LibrarySnapshot:
    """Remove tracks, then the albums and artists they were the last members of."""
    removed = set(track_ids) & snapshot.tracks.keys()
    if not removed:
        return snapshot
    albums = {
        aid for aid, album in snapshot.albums.items() if removed.intersection(album.track_ids)
    }
    albums.update(snapshot.tracks[tid].album_id for tid in removed)
    artists = {
        aid for aid, artist in snapshot.artists.items() if removed.intersection(artist.track_ids)
    }
    artists.update(snapshot.tracks[tid].artist_id for tid in removed)
    return prune_emptied(_without(snapshot, removed), albums, artists)


# === Undo ===


def restore_tracks(snapshot: LibrarySnapshot, tracks: Iterable[Track]) -> LibrarySnapshot:
    """Re-insert previously deleted tracks, re-linking them by id.

    Tracks whose id already exists are skipped, which makes the operation
    idempotent. Tracks whose album or artist no longer exists are restored
    unlinked.
    """
    to_add = [t for t in unique(tracks, key=lambda t: t.id) if t.id not in snapshot.tracks]
    if not to_add:
        return snapshot

    result_tracks = dict(snapshot.tracks)
    result_tracks.update((t.id, t) for t in to_add)

    albums = dict(snapshot.albums)
    for album_id, album in snapshot.albums.items():
        added = [t.id for t in to_add if t.album_id == album_id]
        if added:
            albums[album_id] = attrs.evolve(
                album,
                track_ids=_distinct(album.track_ids, added),
                cover_track_id=album.cover_track_id or added[0],
            )

    artists = dict(snapshot.artists)
    for artist_id, artist in snapshot.artists.items():
        added = [t for t in to_add if t.artist_id == artist_id]
        if added:
            artists[artist_id] = attrs.evolve(
                artist,
                track_ids=_distinct(artist.track_ids, (t.id for t in added)),
                album_ids=_distinct(
                    artist.album_ids, (t.album_id for t in added if t.album_id in albums)
                ),
            )

    return LibrarySnapshot(tracks=result_tracks, albums=albums, artists=artists)


def restore_covers(snapshot: LibrarySnapshot, covers: Mapping[str, str | None]) -> LibrarySnapshot:
    """Put back album covers recorded before a delete.

    A recorded cover is applied only when the album still exists and the
    cover is one of its members again.
    """
    changed = {}
    for album_id, cover in covers.items():
        album = snapshot.albums.get(album_id)
        if album is None or cover is None or album.cover_track_id == cover:
            continue
        if cover in album.track_ids:
            changed[album_id] = attrs.evolve(album, cover_track_id=cover)
    if not changed:
        return snapshot
    return LibrarySnapshot(
        tracks=snapshot.tracks,
        albums={**snapshot.albums, **changed},
        artists=snapshot.artists,
    )


# === Queries ===


def search(snapshot: LibrarySnapshot, query: str) -> SearchResults:
    """Case-insensitive substring search. A blank query matches nothing."""
    needle = query.strip().casefold()
    if not needle:
        return SearchResults()
    return SearchResults(
        tracks=[
            t
            for t in snapshot.tracks.values()
            if needle in t.title.casefold() or needle in t.artist_name.casefold()
        ],
        albums=[
            a
            for a in snapshot.albums.values()
            if needle in a.title.casefold() or needle in a.artist_name.casefold()
        ],
        artists=[a for a in snapshot.artists.values() if needle in a.name.casefold()],
    )


def dangling_references(snapshot: LibrarySnapshot) -> list[str]:
    """Describe every album/artist reference to a track that does not exist."""
    problems = []
    for album in snapshot.albums.values():
        problems.extend(
            f"album {album.id} -> track {tid}"
            for tid in album.track_ids
            if tid not in snapshot.tracks
        )
        if album.cover_track_id is not None and album.cover_track_id not in album.track_ids:
            problems.append(f"album {album.id} -> cover {album.cover_track_id}")
    for artist in snapshot.artists.values():
        problems.extend(
            f"artist {artist.id} -> track {tid}"
            for tid in artist.track_ids
            if tid not in snapshot.tracks
        )
    return problems
