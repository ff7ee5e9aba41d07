from __future__ import annotations

import asyncio
import json
from pathlib import Path

import colorama
import typer

from lyricistant.app import EditorSession
from lyricistant.cache.sqlite import RhymeCache
from lyricistant.config import load_config
from lyricistant.document.controller import DocumentController
from lyricistant.document.model import has_reserved_extension
from lyricistant.document.recent import RecentFiles
from lyricistant.editor.surface import Position
from lyricistant.errors import DocumentIOError, LookupFailure
from lyricistant.logging_setup import setup_logging
from lyricistant.render.ansi import PLAIN, Theme, format_document, format_panel
from lyricistant.rhymes.service import RhymeService


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _theme(color: bool) -> Theme:
    return Theme() if color else PLAIN


def _open(path: Path) -> DocumentController:
    cfg = load_config()
    controller = DocumentController(recent_files=RecentFiles(cfg.recent_files_path, limit=cfg.max_recent_files))
    try:
        controller.open(path)
    except DocumentIOError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return controller


def _save(controller: DocumentController) -> None:
    try:
        controller.save(controller.document.body)
    except DocumentIOError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main_options(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    setup_logging(debug)


@app.command()
def show(
    path: Path,
    color: bool = typer.Option(True, "--color/--no-color", help="Colorize output"),
):
    """Show a lyrics file's associated file and body."""
    controller = _open(path)
    typer.echo(format_document(controller.document, _theme(color)))


@app.command()
def associate(path: Path, locator: str):
    """Associate a file (e.g. the song's audio) with a .lyrics document."""
    controller = _open(path)
    controller.associate(locator)
    if not has_reserved_extension(path):
        typer.echo("Warning: associations are only stored in .lyrics files", err=True)
    _save(controller)
    typer.echo(f"Associated {locator} with {path}")


@app.command()
def detach(path: Path):
    """Remove the associated file from a document."""
    controller = _open(path)
    if controller.document.reference is None:
        typer.echo(f"{path} has no associated file")
        return
    controller.remove_association()
    _save(controller)
    typer.echo(f"Removed association from {path}")


@app.command()
def rhymes(
    word: str,
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum results to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Look up rhymes for a single word."""
    service = RhymeService(load_config())
    try:
        results = service.fetch(word)[:limit]
    except LookupFailure as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps([r.word for r in results], indent=2, ensure_ascii=False))
        return
    if not results:
        typer.echo("No rhymes found")
        return
    for i, r in enumerate(results, 1):
        typer.echo(f"{i}. {r.word}")


@app.command()
def suggest(
    path: Path,
    line: int = typer.Option(..., "--line", "-l", help="Line number (1-based)"),
    column: int = typer.Option(..., "--column", "-c", help="Cursor column (1-based)"),
    end_column: int | None = typer.Option(None, "--end-column", help="Select up to this column instead"),
    color: bool = typer.Option(True, "--color/--no-color", help="Colorize output"),
):
    """Suggest rhymes for the word at a cursor position, as the editor would."""
    cfg = load_config()

    async def _run() -> str:
        session = EditorSession(cfg)
        session.open(path)
        session.start()
        try:
            start = Position(line - 1, column - 1)
            end = Position(line - 1, end_column - 1) if end_column is not None else None
            panel = await session.suggest_at(start, end)
            return format_panel(panel, _theme(color))
        finally:
            session.close()

    try:
        typer.echo(asyncio.run(_run()))
    except DocumentIOError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def recent():
    """List recently opened files."""
    cfg = load_config()
    files = RecentFiles(cfg.recent_files_path, limit=cfg.max_recent_files).load()
    if not files:
        typer.echo("No recent files")
        return
    for f in files:
        typer.echo(f)


@app.command()
def cache(
    clear: bool = typer.Option(False, "--clear", help="Clear rhyme cache"),
):
    """Manage rhyme cache."""
    cfg = load_config()
    cache_db = RhymeCache(cfg.cache_db_path)

    if clear:
        cache_db.clear()
        typer.echo(f"Cache cleared: {cfg.cache_db_path}")
    else:
        typer.echo("Use --clear to clear the cache")


def main() -> None:
    colorama.just_fix_windows_console()
    app()


if __name__ == "__main__":
    main()
