"""Direct (non-crawling) fetching of sources.

A source is either an ``http(s)`` URL or a local file path. Each source that
can be read yields exactly one page; sources that fail are logged and skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

import httpx

from webfinder.crawl.static import DEFAULT_TIMEOUT, create_http_client
from webfinder.ingestion.pdf_loader import extract_pdf_text
from webfinder.models import FetchedPage

LOGGER = logging.getLogger(__name__)

HTML_SUFFIXES = {".html", ".htm", ".xhtml"}


def is_url(source: str) -> bool:
    return urlsplit(source).scheme.lower() in ("http", "https")


def fetch_url(client: httpx.Client, url: str) -> Optional[FetchedPage]:
    response = client.get(url)
    response.raise_for_status()
    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in ("text/html", "application/xhtml+xml") or not content_type:
        return FetchedPage(url=url, content=response.text, is_clean=False)
    if content_type == "application/pdf":
        return FetchedPage(url=url, content=extract_pdf_text(response.content), is_clean=True)
    if content_type.startswith("text/"):
        return FetchedPage(url=url, content=response.text, is_clean=True)
    LOGGER.warning("Skipping %s: unsupported content type %s", url, content_type)
    return None


def read_file(path: Path) -> FetchedPage:
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return FetchedPage(url=str(path), content=extract_pdf_text(path), is_clean=True)
    text = path.read_text(encoding="utf-8", errors="replace")
    return FetchedPage(url=str(path), content=text, is_clean=suffix not in HTML_SUFFIXES)


def fetch_sources(
    sources: Iterable[str],
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[FetchedPage]:
    """Fetch each source once, in order, without following links."""
    sources = list(sources)
    owned = client is None and any(is_url(source) for source in sources)
    if owned:
        client = create_http_client(timeout)
    pages: List[FetchedPage] = []
    try:
        for source in sources:
            try:
                if is_url(source):
                    page = fetch_url(client, source)
                else:
                    page = read_file(Path(source).expanduser())
            except Exception as exc:
                LOGGER.warning("Failed to fetch %s: %s", source, exc)
                continue
            if page is not None:
                pages.append(page)
    finally:
        if owned:
            client.close()
    return pages
