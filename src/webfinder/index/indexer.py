"""Document ingestion pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence

from webfinder.crawl.frontier import DEFAULT_MAX_PAGES
from webfinder.crawl.rendered import crawl_rendered
from webfinder.crawl.static import DEFAULT_TIMEOUT, crawl_static
from webfinder.embedding.encoder import EmbeddingClient
from webfinder.errors import EmbeddingError
from webfinder.index.storage import CollectionStore
from webfinder.ingestion.fetcher import fetch_sources
from webfinder.ingestion.html_extractor import extract_text
from webfinder.models import DocEntry, FetchedPage
from webfinder.utils.files import side_file_name, validate_collection_name
from webfinder.utils.text import DEFAULT_CHUNK_CHARS, chunk_text

LOGGER = logging.getLogger(__name__)

Crawler = Callable[..., List[FetchedPage]]
SourceFetcher = Callable[..., List[FetchedPage]]


@dataclass(slots=True)
class PendingChunk:
    text: str
    source: str


class Indexer:
    """Coordinates fetching, extraction, chunking, embedding and persistence."""

    def __init__(
        self,
        embedder: EmbeddingClient,
        store: CollectionStore,
        *,
        chunk_chars: int = DEFAULT_CHUNK_CHARS,
        max_pages: int = DEFAULT_MAX_PAGES,
        timeout: float = DEFAULT_TIMEOUT,
        rendered_crawler: Crawler = crawl_rendered,
        static_crawler: Crawler = crawl_static,
        fetcher: SourceFetcher = fetch_sources,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.chunk_chars = chunk_chars
        self.max_pages = max_pages
        self.timeout = timeout
        self.rendered_crawler = rendered_crawler
        self.static_crawler = static_crawler
        self.fetcher = fetcher

    def crawl(self, start_url: str, max_pages: int) -> List[FetchedPage]:
        """Crawl with a browser first, falling back to plain HTTP if it fails."""
        try:
            return self.rendered_crawler(start_url, max_pages, navigation_timeout=self.timeout)
        except Exception as exc:
            LOGGER.warning("Rendered crawl failed, falling back to basic crawler: %s", exc)
            return self.static_crawler(start_url, max_pages, timeout=self.timeout)

    def fetch(self, sources: Sequence[str], *, crawl: bool, max_pages: int) -> List[FetchedPage]:
        if crawl and len(sources) == 1:
            return self.crawl(sources[0], max_pages)
        if crawl:
            LOGGER.warning(
                "Crawling needs exactly one start URL; fetching %d sources directly", len(sources)
            )
        return self.fetcher(sources, timeout=self.timeout)

    @staticmethod
    def page_text(page: FetchedPage) -> str:
        if page.is_clean and page.content.strip():
            LOGGER.debug("Using %d characters of clean text for %s", len(page.content), page.url)
            return page.content.strip()
        text = extract_text(page.content)
        LOGGER.debug("Extracted %d characters of text from %s", len(text), page.url)
        return text

    def _save_side_file(self, collection: str, source: str, text: str) -> None:
        try:
            path = self.store.collection_dir(collection) / side_file_name(source)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not save extracted text for %s: %s", source, exc)

    def _build_chunks(self, collection: str, pages: Sequence[FetchedPage]) -> List[PendingChunk]:
        chunks: List[PendingChunk] = []
        for page in pages:
            LOGGER.info("Processing content from: %s", page.url)
            text = self.page_text(page)
            self._save_side_file(collection, page.url, text)
            if not text:
                LOGGER.warning("No text extracted from %s", page.url)
                continue
            chunks.extend(
                PendingChunk(text=piece, source=page.url)
                for piece in chunk_text(text, self.chunk_chars)
            )
        return chunks

    def add_docs(
        self,
        collection: str,
        sources: str | Sequence[str],
        *,
        crawl: bool = False,
        max_pages: int | None = None,
    ) -> int:
        """Ingest sources into ``collection`` and return the number of chunks stored.

        Entries are appended only after every chunk has been embedded, so an
        embedding failure leaves the collection untouched.
        """
        validate_collection_name(collection)
        urls = [sources] if isinstance(sources, str) else list(sources)
        if max_pages is None:
            max_pages = self.max_pages
        pages = self.fetch(urls, crawl=crawl, max_pages=max_pages)

        chunks = self._build_chunks(collection, pages)
        if not chunks:
            return 0

        embeddings = self.embedder.embed_many([chunk.text for chunk in chunks])
        if len(embeddings) != len(chunks):
            raise EmbeddingError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )

        entries = [
            DocEntry.create(source=chunk.source, text=chunk.text, embedding=vector)
            for chunk, vector in zip(chunks, embeddings)
        ]
        return self.store.append(collection, entries)
