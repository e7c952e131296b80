"""Same-origin crawler that renders pages in headless Chromium.

Used for sites that build their content with JavaScript. The browser is owned
by a single crawl and closed when it ends, whether the crawl finished or failed.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from playwright.sync_api import Browser, Page, Playwright, sync_playwright

from webfinder.crawl.frontier import DEFAULT_MAX_PAGES, PageResult, crawl_site
from webfinder.ingestion.html_extractor import extract_text
from webfinder.models import FetchedPage
from webfinder.utils.text import normalize_text

LOGGER = logging.getLogger(__name__)

NAVIGATION_TIMEOUT = 30.0
SETTLE_DELAY = 1.0
VIEWPORT = {"width": 1280, "height": 800}
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

_COLLECT_HREFS = "elements => elements.map(el => el.getAttribute('href'))"


class RenderedPageFetcher:
    """Render pages with Playwright and return their visible text and links.

    Use as a context manager: entering launches the browser (and raises if it
    cannot be launched), exiting always closes it.
    """

    def __init__(
        self,
        *,
        navigation_timeout: float = NAVIGATION_TIMEOUT,
        settle_delay: float = SETTLE_DELAY,
        headless: bool = True,
    ) -> None:
        self.navigation_timeout = navigation_timeout
        self.settle_delay = settle_delay
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    def __enter__(self) -> "RenderedPageFetcher":
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=LAUNCH_ARGS
            )
            self._page = self._browser.new_page(viewport=VIEWPORT)
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the page, browser and Playwright driver, in that order."""
        browser, playwright = self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None
        try:
            if browser is not None:
                browser.close()
        finally:
            if playwright is not None:
                playwright.stop()

    def __call__(self, url: str) -> Optional[PageResult]:
        if self._page is None:
            raise RuntimeError("RenderedPageFetcher used outside of its context")
        page = self._page
        response = page.goto(
            url, wait_until="networkidle", timeout=self.navigation_timeout * 1000
        )
        if response is not None and not response.ok:
            LOGGER.debug("Skipping %s: HTTP %s", url, response.status)
            return None
        if self.settle_delay > 0:
            page.wait_for_timeout(self.settle_delay * 1000)

        text = extract_text(page.content())
        if not text:
            text = page.inner_text("body")
        LOGGER.debug("Raw extracted length for %s: %d characters", url, len(text))
        text = normalize_text(text)

        links = page.eval_on_selector_all("a[href]", _COLLECT_HREFS)
        return PageResult(
            page=FetchedPage(url=url, content=text, is_clean=True),
            links=list(links),
            base_url=page.url,
        )


def crawl_rendered(
    start_url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    *,
    navigation_timeout: float = NAVIGATION_TIMEOUT,
    settle_delay: float = SETTLE_DELAY,
) -> List[FetchedPage]:
    """Crawl ``start_url`` breadth-first through a headless browser.

    Per-page failures, including navigation timeouts, skip only that page.
    Failing to start the browser raises, so callers can fall back to the
    static crawler.
    """
    with RenderedPageFetcher(
        navigation_timeout=navigation_timeout, settle_delay=settle_delay
    ) as fetcher:
        return crawl_site(start_url, fetcher, max_pages)
