"""Playdeck CLI - main application entry point and app structure."""

from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from rich.console import Console
import typer

from playdeck.config import get_logger, setup_loguru_logger
from playdeck.infrastructure.cli import library_commands, playlist_commands

try:
    VERSION = version("playdeck")
except PackageNotFoundError:
    VERSION = "0.0.0"

console = Console()
logger = get_logger(__name__)

app = typer.Typer(
    help=f"🎵 Playdeck v{VERSION} - Your local music library and playlists",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(
    library_commands.app,
    name="library",
    help="Scan, browse and prune the music library",
    rich_help_panel="🎵 Library",
)
app.add_typer(
    playlist_commands.app,
    name="playlist",
    help="Create and edit playlists",
    rich_help_panel="📋 Playlists",
)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(
        f"[bold bright_blue]🎵 Playdeck[/bold bright_blue] [dim]v{VERSION}[/dim]"
    )


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize Playdeck CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
