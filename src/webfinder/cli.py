"""Command line interface for WebFinder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from webfinder.config import AppConfig
from webfinder.embedding.encoder import build_embedder
from webfinder.errors import WebFinderError
from webfinder.index.indexer import Indexer
from webfinder.index.search import Searcher
from webfinder.index.storage import CollectionStore


console = Console()
app = typer.Typer(help="WebFinder - crawl, embed and search web content")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_config(data_dir: Optional[Path], **overrides) -> AppConfig:
    return AppConfig.from_env(data_dir=data_dir, **overrides)


def _fail(exc: Exception) -> None:
    console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


@app.command()
def add(
    collection: str = typer.Argument(..., help="Collection to add documents to"),
    sources: List[str] = typer.Argument(..., help="URLs or file paths to ingest"),
    crawl: bool = typer.Option(False, "--crawl", help="Crawl the site starting at the URL"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="Page budget when crawling"),
    chunk_chars: Optional[int] = typer.Option(None, "--chunk-chars", help="Chunk size in characters"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP and navigation timeout in seconds"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Collection storage directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Fetch, chunk and embed sources into a collection."""
    _setup_logging(verbose)
    config = _load_config(
        data_dir, max_pages=max_pages, chunk_chars=chunk_chars, request_timeout=timeout
    )

    embedder = None
    try:
        embedder = build_embedder(config.embedding_config())
        store = CollectionStore(config.data_dir)
        indexer = Indexer(
            embedder,
            store,
            chunk_chars=config.chunk_chars,
            max_pages=config.max_pages,
            timeout=config.request_timeout,
        )
        console.print(f"Adding to collection [bold]{collection}[/bold]...")
        count = indexer.add_docs(collection, sources, crawl=crawl)
    except WebFinderError as exc:
        _fail(exc)
        return
    finally:
        if embedder is not None:
            embedder.close()

    if count == 0:
        console.print("[yellow]No content found to store.[/yellow]")
        return
    console.print(f"Stored {count} chunks in [bold]{collection}[/bold].")


@app.command()
def search(
    collection: str = typer.Argument(..., help="Collection to search"),
    query: str = typer.Argument(..., help="Query text"),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="Number of results to display"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Collection storage directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Execute a semantic search against a collection."""
    _setup_logging(verbose)
    config = _load_config(data_dir, top_k=top_k)

    embedder = None
    try:
        store = CollectionStore(config.data_dir)
        embedder = build_embedder(config.embedding_config())
        results = Searcher(embedder, store).search(collection, query, top_k=config.top_k)
    except WebFinderError as exc:
        _fail(exc)
        return
    finally:
        if embedder is not None:
            embedder.close()

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Source")
    table.add_column("Snippet")

    for result in results:
        snippet = result.text.replace("\n", " ")
        table.add_row(f"{result.score:.4f}", result.source, snippet[:180])

    console.print(table)


@app.command()
def collections(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Collection storage directory"),
) -> None:
    """List stored collections."""
    config = _load_config(data_dir)
    names = CollectionStore(config.data_dir).list_collections()
    if not names:
        console.print("[yellow]No collections found.[/yellow]")
        return
    for name in names:
        console.print(name)
