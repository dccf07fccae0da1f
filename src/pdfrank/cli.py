"""Command line interface for pdfrank."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from pdfrank.config import AppConfig
from pdfrank.errors import CorruptIndexError
from pdfrank.index.corpus import CorpusIndex
from pdfrank.index.indexer import Indexer
from pdfrank.index.search import Searcher
from pdfrank.index.storage import IndexStore, is_stale
from pdfrank.utils.files import iter_pdf_paths


console = Console()
app = typer.Typer(help="pdfrank - TF-IDF search for local PDFs")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _resolve_store(index_path: Path | None) -> IndexStore:
    config = AppConfig(index_path=index_path if index_path is not None else AppConfig().index_path)
    return IndexStore(config.resolve_index_path(Path.cwd()))


def _load_or_exit(store: IndexStore) -> CorpusIndex:
    try:
        return store.load()
    except CorruptIndexError as exc:
        console.print(f"[red]Index is corrupt: {exc}[/red]")
        console.print("Rebuild it with [bold]pdfrank index --rebuild[/bold].")
        raise typer.Exit(code=1) from exc


def _open_for_update(store: IndexStore, config: AppConfig, rebuild: bool) -> CorpusIndex:
    if rebuild or not store.exists():
        return CorpusIndex()
    try:
        corpus = store.load()
    except CorruptIndexError as exc:
        console.print(f"[yellow]Existing index is corrupt ({exc}), rebuilding.[/yellow]")
        return CorpusIndex()
    if is_stale(corpus, config.max_age):
        console.print(
            f"[yellow]Index is older than {config.max_age_days} days, rebuilding.[/yellow]"
        )
        return CorpusIndex()
    return corpus


@app.command()
def index(
    inputs: List[Path] = typer.Argument(
        ..., help="Paths with PDFs to index.", resolve_path=True
    ),
    index_path: Path = typer.Option(None, "--index", help="Index file path"),
    workers: int = typer.Option(AppConfig().workers, help="Parallel extraction workers"),
    max_age_days: int = typer.Option(
        AppConfig().max_age_days, help="Rebuild the index when it is older than this"
    ),
    rebuild: bool = typer.Option(False, "--rebuild", help="Discard the existing index"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index one or more paths containing PDF files."""
    _setup_logging(verbose)
    config = AppConfig(
        index_path=index_path if index_path is not None else AppConfig().index_path,
        workers=workers,
        max_age_days=max_age_days,
    )
    store = IndexStore(config.resolve_index_path(Path.cwd()))

    pdf_paths = list(iter_pdf_paths(inputs))
    if not pdf_paths:
        console.print("[yellow]No PDFs found.[/yellow]")
        return

    console.print(f"Indexing into [bold]{store.path}[/bold]...")
    corpus = _open_for_update(store, config, rebuild)
    indexer = Indexer(corpus, workers=config.workers)
    stats = indexer.index(pdf_paths)
    store.save(corpus)

    console.print(
        f"Inserted: {stats.inserted}, updated: {stats.updated}, "
        f"skipped: {stats.skipped}, failed: {stats.failed}"
    )
    for path, reason in stats.failures:
        console.print(f"[red]Failed:[/red] {path}: {reason}")


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    index_path: Path = typer.Option(None, "--index", help="Index file path"),
    top_k: int = typer.Option(10, help="Number of results to display"),
    max_age_days: int = typer.Option(AppConfig().max_age_days, help="Warn when older than this"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank indexed documents against a query."""
    _setup_logging(verbose)
    store = _resolve_store(index_path)
    if not store.exists():
        raise typer.BadParameter(f"Index not found: {store.path}")

    corpus = _load_or_exit(store)
    config = AppConfig(index_path=store.path, max_age_days=max_age_days)
    if is_stale(corpus, config.max_age):
        console.print("[yellow]Index is stale, consider re-running pdfrank index.[/yellow]")

    results = Searcher(corpus).search(query, top_k=top_k)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Score")
    table.add_column("Document")

    for rank, result in enumerate(results, start=1):
        table.add_row(str(rank), f"{result.score:.4f}", result.id)

    console.print(table)


@app.command()
def prune(
    index_path: Path = typer.Option(None, "--index", help="Index file path"),
) -> None:
    """Remove documents that no longer exist on disk."""
    store = _resolve_store(index_path)
    if not store.exists():
        console.print("[yellow]Index not found, nothing to prune.[/yellow]")
        return

    corpus = _load_or_exit(store)
    removed = Indexer(corpus).prune()
    if removed:
        store.save(corpus)
    console.print(f"Removed {removed} missing documents.")


@app.command()
def info(
    index_path: Path = typer.Option(None, "--index", help="Index file path"),
) -> None:
    """Show a summary of the stored index."""
    store = _resolve_store(index_path)
    if not store.exists():
        raise typer.BadParameter(f"Index not found: {store.path}")

    corpus = _load_or_exit(store)
    created = datetime.fromtimestamp(corpus.created_at).isoformat(timespec="seconds")
    console.print(f"Index: [bold]{store.path}[/bold]")
    console.print(f"Documents: {corpus.document_count}")
    console.print(f"Distinct terms: {len(corpus.document_frequency)}")
    console.print(f"Created: {created}")
