"""UI helpers for CLI interaction.

Keeps Rich presentation separate from the commands that gather the data.
"""

from collections.abc import Callable, Iterable
import functools
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table
import typer

from playdeck.application.use_cases import DeletionOutcome, ScanResult
from playdeck.config import get_logger
from playdeck.domain.entities import LibrarySnapshot, Playlist, SearchResults, Track

console = Console()
logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Unexpected exceptions are logged with their traceback, shown to the
    user as a one-line error and turned into exit code 1.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def _duration(ms: int) -> str:
    seconds = ms // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


def display_tracks(tracks: Iterable[Track], title: str = "Tracks") -> None:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="green")
    table.add_column("Artist", style="cyan")
    table.add_column("Album", style="magenta")
    table.add_column("Length", justify="right")
    table.add_column("ID", style="dim")

    for i, track in enumerate(tracks, 1):
        table.add_row(
            str(i),
            track.title,
            track.artist_name,
            track.album_title,
            _duration(track.duration_ms),
            track.id,
        )
    console.print(table)


def display_playlists(playlists: Iterable[Playlist]) -> None:
    table = Table(title="Playlists")
    table.add_column("Name", style="green")
    table.add_column("Tracks", justify="right")
    table.add_column("Updated", style="dim")
    table.add_column("ID", style="dim")

    for playlist in playlists:
        table.add_row(
            playlist.name,
            str(len(playlist)),
            playlist.last_updated.strftime("%Y-%m-%d %H:%M"),
            playlist.id,
        )
    console.print(table)


def display_library_stats(snapshot: LibrarySnapshot) -> None:
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column(style="cyan")
    summary.add_column(style="green bold")
    summary.add_row("Tracks", str(len(snapshot.tracks)))
    summary.add_row("Albums", str(len(snapshot.albums)))
    summary.add_row("Artists", str(len(snapshot.artists)))
    total_ms = sum(t.duration_ms for t in snapshot.tracks.values())
    summary.add_row("Total Length", f"{total_ms / 3_600_000:.1f}h")
    console.print(summary)


def display_search_results(query: str, results: SearchResults) -> None:
    if not results.total:
        console.print(f"[yellow]No matches for '{query}'[/yellow]")
        return
    if results.tracks:
        display_tracks(results.tracks, title=f"Tracks matching '{query}'")
    for label, names in (
        ("Albums", [f"{a.title} by {a.artist_name}  [dim]{a.id}[/dim]" for a in results.albums]),
        ("Artists", [f"{a.name}  [dim]{a.id}[/dim]" for a in results.artists]),
    ):
        if names:
            console.print(f"\n[bold blue]{label}[/bold blue]")
            for name in names:
                console.print(f"  • {name}")


def display_scan_result(result: ScanResult) -> None:
    if result.status == "skipped":
        console.print(
            f"[yellow]Library scanned recently ({result.scanned_at:%H:%M}), "
            "use --force to rescan[/yellow]"
        )
        return
    report = result.report
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column(style="cyan")
    summary.add_column(style="green bold")
    summary.add_row("Scanned", str(report.scanned))
    summary.add_row("New Tracks", str(report.added_tracks))
    summary.add_row("New Albums", str(report.added_albums))
    summary.add_row("New Artists", str(report.added_artists))
    summary.add_row("Removed", str(result.removed_tracks))
    console.print("\n[bold blue]Library Scan[/bold blue]")
    console.print(summary)


def display_deletion(outcome: DeletionOutcome) -> None:
    if outcome.blocked:
        console.print("[bold red]✗ Cannot delete the track that is currently playing[/bold red]")
        return
    if outcome.is_empty:
        console.print("[yellow]Nothing to delete[/yellow]")
        return
    console.print(
        f"[green]✓ Deleted {len(outcome.tracks)} tracks, {len(outcome.albums)} albums, "
        f"{len(outcome.artists)} artists; updated {len(outcome.playlist_positions)} playlists[/green]"
    )
    for locator in outcome.failed_files:
        console.print(f"[yellow]  Could not remove file {locator}[/yellow]")
