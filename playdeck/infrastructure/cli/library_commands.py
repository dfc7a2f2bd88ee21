"""Library commands: scanning, browsing and cascade deletion."""

import asyncio
from pathlib import Path
from typing import Annotated

import attrs
import typer

from playdeck.infrastructure.cli.session import get_components
from playdeck.infrastructure.cli.ui import (
    command_error_handler,
    console,
    display_deletion,
    display_library_stats,
    display_scan_result,
    display_search_results,
)
from playdeck.infrastructure.media import ManifestMediaIndex

app = typer.Typer(help="Scan, browse and prune the music library")

KeepFiles = Annotated[
    bool,
    typer.Option("--keep-files", help="Remove from the library only, leave files on disk"),
]


@app.command()
@command_error_handler
def scan(
    ctx: typer.Context,
    manifest: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="JSON manifest of audio files"),
    ],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Rescan even if scanned recently")
    ] = False,
) -> None:
    """Merge the tracks listed in a manifest into the library."""
    components = get_components(ctx)
    scanner = attrs.evolve(components.scanner, media_index=ManifestMediaIndex(manifest))
    with console.status("[bold green]Scanning library..."):
        result = asyncio.run(scanner.execute(force=force))
    display_scan_result(result)


@app.command()
@command_error_handler
def stats(ctx: typer.Context) -> None:
    """Show library totals."""
    display_library_stats(get_components(ctx).graph.snapshot)


@app.command()
@command_error_handler
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text to match in titles and names")],
) -> None:
    """Search tracks, albums and artists."""
    display_search_results(query, get_components(ctx).graph.search(query))


@app.command("delete-track")
@command_error_handler
def delete_track(
    ctx: typer.Context,
    track_id: Annotated[str, typer.Argument(help="Track ID")],
    keep_files: KeepFiles = False,
) -> None:
    """Delete a track everywhere it appears."""
    deletion = get_components(ctx).deletion
    display_deletion(asyncio.run(deletion.delete_track(track_id, delete_files=not keep_files)))


@app.command("delete-album")
@command_error_handler
def delete_album(
    ctx: typer.Context,
    album_id: Annotated[str, typer.Argument(help="Album ID")],
    keep_files: KeepFiles = False,
) -> None:
    """Delete an album with all of its tracks."""
    deletion = get_components(ctx).deletion
    display_deletion(asyncio.run(deletion.delete_album(album_id, delete_files=not keep_files)))


@app.command("delete-artist")
@command_error_handler
def delete_artist(
    ctx: typer.Context,
    artist_id: Annotated[str, typer.Argument(help="Artist ID")],
    keep_files: KeepFiles = False,
) -> None:
    """Delete an artist with all of their albums and tracks."""
    deletion = get_components(ctx).deletion
    display_deletion(asyncio.run(deletion.delete_artist(artist_id, delete_files=not keep_files)))
