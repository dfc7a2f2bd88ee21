"""Playlist commands: create, edit and inspect user playlists."""

from typing import Annotated

import typer

from playdeck.application.services import PlaylistStore
from playdeck.domain.entities import Playlist
from playdeck.infrastructure.cli.session import get_components
from playdeck.infrastructure.cli.ui import (
    command_error_handler,
    console,
    display_playlists,
    display_tracks,
)

app = typer.Typer(help="Create and edit playlists")

PlaylistRef = Annotated[str, typer.Argument(help="Playlist ID or exact name")]


def _resolve(store: PlaylistStore, ref: str) -> Playlist:
    """Find a playlist by id, falling back to a unique name match."""
    playlist = store.playlist(ref)
    if playlist is not None:
        return playlist
    matches = [p for p in store.playlists if p.name == ref]
    if len(matches) == 1:
        return matches[0]
    if matches:
        console.print(f"[red]Several playlists are named '{ref}', use the ID instead[/red]")
    else:
        console.print(f"[red]No playlist '{ref}'[/red]")
    raise typer.Exit(code=1)


@app.command("list")
@command_error_handler
def list_playlists(ctx: typer.Context) -> None:
    """List every playlist."""
    store = get_components(ctx).playlists
    if not store.playlists:
        console.print("[yellow]No playlists yet[/yellow]")
        return
    display_playlists(store.playlists)


@app.command()
@command_error_handler
def create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Playlist name")],
    track_ids: Annotated[
        list[str] | None, typer.Argument(help="Track IDs to add")
    ] = None,
) -> None:
    """Create a playlist, optionally with initial tracks."""
    store = get_components(ctx).playlists
    playlist = store.create_and_add(name, track_ids or [])
    console.print(f"[green]✓ Created '{playlist.name}' ({playlist.id})[/green]")


@app.command()
@command_error_handler
def rename(
    ctx: typer.Context,
    playlist: PlaylistRef,
    new_name: Annotated[str, typer.Argument(help="New name")],
) -> None:
    """Rename a playlist."""
    store = get_components(ctx).playlists
    target = _resolve(store, playlist)
    store.rename(target.id, new_name)
    console.print(f"[green]✓ Renamed '{target.name}' to '{new_name}'[/green]")


@app.command()
@command_error_handler
def delete(ctx: typer.Context, playlist: PlaylistRef) -> None:
    """Delete a playlist. Its tracks stay in the library."""
    store = get_components(ctx).playlists
    target = _resolve(store, playlist)
    store.delete(target.id)
    console.print(f"[green]✓ Deleted '{target.name}'[/green]")


@app.command()
@command_error_handler
def add(
    ctx: typer.Context,
    playlist: PlaylistRef,
    track_ids: Annotated[list[str], typer.Argument(help="Track IDs to add")],
) -> None:
    """Append tracks to a playlist, skipping ones already in it."""
    store = get_components(ctx).playlists
    target = _resolve(store, playlist)
    store.add_tracks(target.id, track_ids)
    added = len(store.track_ids(target.id)) - len(target)
    console.print(f"[green]✓ Added {added} tracks to '{target.name}'[/green]")


@app.command()
@command_error_handler
def remove(
    ctx: typer.Context,
    playlist: PlaylistRef,
    track_ids: Annotated[list[str], typer.Argument(help="Track IDs to remove")],
) -> None:
    """Remove tracks from a playlist."""
    store = get_components(ctx).playlists
    target = _resolve(store, playlist)
    store.remove_tracks(target.id, track_ids)
    removed = len(target) - len(store.track_ids(target.id))
    console.print(f"[green]✓ Removed {removed} tracks from '{target.name}'[/green]")


@app.command()
@command_error_handler
def move(
    ctx: typer.Context,
    playlist: PlaylistRef,
    track_id: Annotated[str, typer.Argument(help="Track ID to move")],
    position: Annotated[int, typer.Argument(help="New zero-based position")],
) -> None:
    """Move a track to a new position in a playlist."""
    store = get_components(ctx).playlists
    target = _resolve(store, playlist)
    if not target.contains(track_id):
        console.print(f"[yellow]Track {track_id} is not in '{target.name}'[/yellow]")
        return
    store.move_track(target.id, track_id, position)
    index = store.track_ids(target.id).index(track_id)
    console.print(f"[green]✓ Moved {track_id} to position {index}[/green]")


@app.command()
@command_error_handler
def show(ctx: typer.Context, playlist: PlaylistRef) -> None:
    """Show the tracks of a playlist in order."""
    components = get_components(ctx)
    target = _resolve(components.playlists, playlist)
    tracks = components.playlists.resolve_tracks(target.id, components.graph.tracks_by_ids)
    missing = len(target) - len(tracks)
    display_tracks(tracks, title=target.name)
    if missing:
        console.print(f"[dim]{missing} tracks are no longer in the library[/dim]")
