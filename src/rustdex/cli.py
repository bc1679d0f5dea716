"""Command line interface for rustdex."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from rustdex.api import DocsetContext
from rustdex.config import AppConfig
from rustdex.docs.resolver import Docs
from rustdex.errors import RustdexError, UnknownEntryType
from rustdex.models import EntryKind, Location

console = Console()
app = typer.Typer(help="rustdex - symbol index and lookup for rustdoc docsets")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _parse_kinds(values: Optional[List[str]]) -> List[EntryKind]:
    try:
        return [EntryKind.parse(value) for value in values or []]
    except UnknownEntryType as exc:
        raise typer.BadParameter(str(exc)) from exc


def _open_context(source: Optional[Path], db: Optional[Path], *, must_exist: bool = True) -> DocsetContext:
    config = AppConfig(source_root=source, db_path=db)
    context = DocsetContext(config, base_dir=Path.cwd())
    if must_exist and not context.db_path.exists():
        raise typer.BadParameter(f"Database not found: {context.db_path}")
    return context


def _fail(exc: RustdexError) -> typer.Exit:
    console.print(f"[red]{exc}[/red]")
    return typer.Exit(code=1)


@app.command()
def index(
    source: Path = typer.Argument(..., help="Documentation directory to index.", resolve_path=True),
    db: Path = typer.Option(None, "--db", help="SQLite database path (default: SOURCE/index.sqlite)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the symbol index of a documentation directory."""
    _setup_logging(verbose)
    context = _open_context(source, db, must_exist=False)

    console.print(f"Indexing into [bold]{context.db_path}[/bold]...")
    try:
        stats = context.index()
    except RustdexError as exc:
        raise _fail(exc) from exc
    finally:
        context.close()

    console.print(
        f"Indexed: {stats.stored}, files: {stats.files}, "
        f"redirects: {stats.redirects}, unclassified: {stats.unclassified}"
    )


@app.command()
def search(
    query: str = typer.Argument("", help="Query text, spaces match any gap"),
    source: Path = typer.Option(None, "--source", "-s", help="Documentation directory"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    kind: Optional[List[str]] = typer.Option(None, "--kind", "-k", help="Restrict to item kinds"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of results"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search the symbol index."""
    _setup_logging(verbose)
    kinds = _parse_kinds(kind)
    context = _open_context(source, db)

    try:
        results = context.search(query, kinds=kinds, limit=limit)
    finally:
        context.close()

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Location")

    for result in results:
        table.add_row(str(result.kind), result.name, str(result.location))

    console.print(table)


@app.command()
def item(
    location: str = typer.Argument(..., help="Indexed location, e.g. foo/enum.Bar.html#variant.Baz"),
    source: Path = typer.Option(..., "--source", "-s", help="Documentation directory"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Print the documentation extracted for an indexed item."""
    parsed = Location.parse(location)
    context = _open_context(source, db)
    try:
        found = context.resolve_item(parsed.file_path, parsed.fragment)
    except RustdexError as exc:
        raise _fail(exc) from exc
    finally:
        context.close()

    console.print(f"[bold]{found.path}[/bold] ({found.kind})")
    if found.source_location is not None:
        console.print(f"Source: {found.source_location}")
    if found.type_info:
        console.rule("Definition")
        console.print(found.type_info, markup=False, highlight=False)
    if found.documentation:
        console.rule("Documentation")
        console.print(found.documentation, markup=False, highlight=False)


@app.command()
def source(
    path: str = typer.Argument("", help="Source page, e.g. src/foo/lib.rs.html; empty lists pages"),
    root: Path = typer.Option(..., "--source", "-s", help="Documentation directory"),
) -> None:
    """Print a rendered source file, or list the available ones."""
    try:
        docs = Docs(root)
        if not path:
            for page in docs.list_sources():
                console.print(page, markup=False, highlight=False)
            return
        console.print(docs.source(path), markup=False, highlight=False)
    except RustdexError as exc:
        raise _fail(exc) from exc


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from rustdex.web.app import app as web_app

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
