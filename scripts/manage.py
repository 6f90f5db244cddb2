"""Operator commands for running and inspecting the music library."""

import asyncio
import sys
from datetime import datetime
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.database.db import AsyncSessionLocal, close_db, init_db
from src.database.filters import SongFilter
from src.database.repository import SongRepository
from src.lyrics.client import LyricsClient
from src.services.errors import SongServiceError
from src.services.song_service import SongService
from src.utils.config import settings
from src.utils.logging import setup_logging

app = typer.Typer(help="Manage the music library")
console = Console()


def _build_service(session) -> SongService:
    lyrics_client = LyricsClient(
        base_url=settings.lyrics_api_base_url,
        access_token=settings.lyrics_api_access_token,
        timeout=settings.lyrics_api_timeout,
    )
    return SongService(SongRepository(session), lyrics_client)


def _run(coro):
    """Run a coroutine and release pooled connections before the loop closes."""

    async def runner():
        try:
            return await coro
        finally:
            await close_db()

    return asyncio.run(runner())


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    setup_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Start the API server."""
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create database tables."""
    console.print("[yellow]Initializing database...[/yellow]")
    try:
        _run(init_db())
    except Exception as e:
        console.print(f"[red]✗ Database initialization failed: {str(e)}[/red]")
        sys.exit(1)
    console.print("[green]✓ Database initialized[/green]")


@app.command()
def add(
    group: str = typer.Argument(..., help="Group or artist name"),
    song: str = typer.Argument(..., help="Song title"),
) -> None:
    """Look a song up with the lyrics provider and store it."""

    async def run() -> int:
        await init_db()
        async with AsyncSessionLocal() as session:
            return await _build_service(session).add_song(group, song)

    try:
        new_id = _run(run())
    except SongServiceError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)
    console.print(f"[green]✓ Added '{song}' by {group} as id {new_id}[/green]")


@app.command("list")
def list_songs(
    group: str = typer.Option("", "--group", "-g", help="Filter by group"),
    artist: str = typer.Option("", "--artist", "-a", help="Filter by artist"),
    album: str = typer.Option("", "--album", help="Filter by album"),
    song: str = typer.Option("", "--song", "-s", help="Filter by song title"),
    release: Optional[str] = typer.Option(None, "--release", help="Release date YYYY-MM-DD"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    page_size: int = typer.Option(10, "--page-size", help="Songs per page"),
) -> None:
    """Print a page of songs as a table."""
    release_date = None
    if release:
        try:
            release_date = datetime.strptime(release, "%Y-%m-%d").date()
        except ValueError:
            console.print(f"[red]Error:[/red] Invalid release date: {release}")
            sys.exit(1)

    song_filter = SongFilter(
        group=group, artist=artist, album=album, song=song, release_date=release_date
    )

    async def run():
        async with AsyncSessionLocal() as session:
            return await _build_service(session).get_songs(
                song_filter, page, min(page_size, settings.max_page_size)
            )

    try:
        result = _run(run())
    except SongServiceError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)

    table = Table(title="Songs")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Group")
    table.add_column("Song")
    table.add_column("Artist")
    table.add_column("Album")
    table.add_column("Released")
    for record in result.songs:
        released = record.details.release_date
        table.add_row(
            str(record.id),
            record.group,
            record.song,
            record.details.artist,
            record.details.album,
            released.isoformat() if released else "",
        )
    console.print(table)

    pagination = result.pagination
    console.print(
        f"[dim]Page {pagination.page}/{pagination.total_pages} "
        f"({pagination.total_count} song(s) total)[/dim]"
    )


@app.command()
def lyrics(
    song_id: int = typer.Argument(..., help="Song ID"),
    verse: int = typer.Option(1, "--verse", help="Verse number"),
    limit: int = typer.Option(4, "--limit", help="Lines per verse"),
) -> None:
    """Print one verse page of a song's lyrics."""

    async def run() -> list[str]:
        async with AsyncSessionLocal() as session:
            return await _build_service(session).get_song_text(song_id, verse, limit)

    try:
        lines = _run(run())
    except SongServiceError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)

    if not lines:
        console.print("[yellow]No lines on this verse page[/yellow]")
        return
    console.print(Panel("\n".join(lines), title=f"Song {song_id} - verse {verse}", border_style="cyan"))


if __name__ == "__main__":
    app()
