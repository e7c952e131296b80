"""Same-origin crawler built on plain HTTP requests."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from webfinder.crawl.frontier import DEFAULT_MAX_PAGES, PageResult, crawl_site
from webfinder.models import FetchedPage

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "webfinder/0.1"


def create_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    return httpx.Client(
        follow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
    )


def is_html_response(response: httpx.Response) -> bool:
    return "text/html" in response.headers.get("content-type", "").lower()


def extract_links(html: str) -> List[str]:
    """Return the raw ``href`` of every anchor in document order."""
    soup = BeautifulSoup(html, "html.parser")
    return [anchor.get("href") for anchor in soup.find_all("a", href=True)]


class StaticPageFetcher:
    """Fetch one page over HTTP and report its raw HTML and links."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def __call__(self, url: str) -> Optional[PageResult]:
        response = self.client.get(url)
        if not response.is_success:
            LOGGER.debug("Skipping %s: HTTP %s", url, response.status_code)
            return None
        if not is_html_response(response):
            LOGGER.debug("Skipping %s: not HTML", url)
            return None
        html = response.text
        return PageResult(
            page=FetchedPage(url=url, content=html, is_clean=False),
            links=extract_links(html),
            base_url=str(response.url),
        )


def crawl_static(
    start_url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[FetchedPage]:
    """Crawl ``start_url`` breadth-first, returning raw HTML pages on its origin."""
    if client is not None:
        return crawl_site(start_url, StaticPageFetcher(client), max_pages)
    with create_http_client(timeout) as owned:
        return crawl_site(start_url, StaticPageFetcher(owned), max_pages)
