"""Breadth-first crawl frontier shared by the static and rendered crawlers."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Iterable, List, Optional, Set
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

from webfinder.models import FetchedPage

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 30

IGNORED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(slots=True)
class PageResult:
    """A fetched page with the raw link targets found on it.

    ``base_url`` is the address links resolve against when it differs from the
    requested URL, e.g. after a redirect.
    """

    page: FetchedPage
    links: List[str] = field(default_factory=list)
    base_url: str | None = None


PageFetcher = Callable[[str], Optional[PageResult]]


def url_origin(url: str) -> tuple[str, str, int | None]:
    """Return ``(scheme, host, port)`` with the scheme's default port filled in."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is None:
        port = DEFAULT_PORTS.get(scheme)
    return scheme, (parts.hostname or "").lower(), port


def normalize_url(url: str) -> str:
    """Canonical form of ``url`` used for the visited set.

    The fragment is dropped, scheme and host are lowercased and an empty path
    becomes ``/``, so ``HTTPS://A.example`` and ``https://a.example/#top`` are one URL.
    """
    parts = urlsplit(urldefrag(url)[0])
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, "")
    )


def resolve_link(href: str | None, base_url: str) -> str | None:
    """Resolve an anchor target to an absolute URL, or None if it is not navigable."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith(IGNORED_SCHEMES):
        return None
    try:
        absolute = normalize_url(urljoin(base_url, href))
    except ValueError:
        return None
    if urlsplit(absolute).scheme.lower() not in DEFAULT_PORTS:
        return None
    return absolute


class CrawlFrontier:
    """FIFO queue of pending URLs plus the set of URLs already visited."""

    def __init__(self, start_url: str) -> None:
        self.start_url = normalize_url(start_url)
        self.origin = url_origin(self.start_url)
        self.visited: Set[str] = set()
        self._queue: Deque[str] = deque([self.start_url])
        self._queued: Set[str] = {self.start_url}

    def __len__(self) -> int:
        return len(self._queue)

    def next_url(self) -> str | None:
        """Dequeue the next unvisited URL and mark it visited."""
        while self._queue:
            url = self._queue.popleft()
            if url in self.visited:
                continue
            self.visited.add(url)
            return url
        return None

    def same_origin(self, url: str) -> bool:
        return url_origin(url) == self.origin

    def add_links(self, hrefs: Iterable[str | None], base_url: str) -> int:
        """Enqueue same-origin links not seen before; return how many were added."""
        added = 0
        for href in hrefs:
            url = resolve_link(href, base_url)
            if url is None or not self.same_origin(url):
                continue
            if url in self.visited or url in self._queued:
                continue
            self._queue.append(url)
            self._queued.add(url)
            added += 1
        return added


def crawl_site(
    start_url: str,
    fetch_page: PageFetcher,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> List[FetchedPage]:
    """Visit pages breadth-first from ``start_url`` using ``fetch_page``.

    Pages are fetched one at a time, so the result is in strict breadth-first
    discovery order. ``fetch_page`` returns None for responses that should not
    produce a page (errors, non-HTML); any exception it raises is logged and
    only that URL is skipped. At most ``max_pages`` pages are returned.
    """
    results: List[FetchedPage] = []
    if max_pages <= 0:
        return results

    frontier = CrawlFrontier(start_url)
    while len(results) < max_pages:
        url = frontier.next_url()
        if url is None:
            break
        LOGGER.info("Crawling: %s (%d/%d)", url, len(results) + 1, max_pages)
        try:
            result = fetch_page(url)
        except Exception as exc:
            LOGGER.warning("Failed to fetch %s: %s", url, exc)
            continue
        if result is None:
            continue
        results.append(result.page)
        frontier.add_links(result.links, result.base_url or result.page.url)

    return results
