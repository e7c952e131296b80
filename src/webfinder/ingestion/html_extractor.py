"""HTML to plain text extraction.

Strips page chrome (scripts, navigation, headers, footers, adverts) and keeps
the readable blocks of the main content region, falling back to the whole body
when a page has no recognisable landmark.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, List

from bs4 import BeautifulSoup, Tag

from webfinder.utils.text import collapse_whitespace

LOGGER = logging.getLogger(__name__)

NOISE_TAGS = [
    "script",
    "style",
    "noscript",
    "svg",
    "meta",
    "link",
    "iframe",
    "nav",
    "footer",
    "header",
]

LANDMARK_SELECTOR = (
    'main, article, .content, .article, .post, [role="main"], '
    "#content, #main, .documentation, .docs-content"
)

TEXT_TAGS = [
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "p",
    "li",
    "td",
    "th",
    "pre",
    "code",
    "blockquote",
]

_BOILERPLATE_SUBSTRINGS = ("nav", "menu", "footer", "header", "banner")
_AD_TOKEN_RE = re.compile(r"^(ads?|advert\w*|ad[-_].*|.*[-_]ads?)$")


def _attribute_tokens(element: Tag) -> Iterator[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for token in classes:
        yield token.lower()
    element_id = element.get("id")
    if isinstance(element_id, str) and element_id:
        yield element_id.lower()


def is_boilerplate(element: Tag) -> bool:
    """True if the element's class or id marks it as page chrome."""
    for token in _attribute_tokens(element):
        if any(marker in token for marker in _BOILERPLATE_SUBSTRINGS):
            return True
        if _AD_TOKEN_RE.match(token):
            return True
    return False


def _strip_noise(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()
    # Materialise first: decomposing while iterating skips siblings.
    flagged = [el for el in soup.find_all(True) if is_boilerplate(el)]
    for element in flagged:
        if not element.decomposed:
            element.decompose()


def _has_selected_ancestor(element: Tag, selected_ids: set[int]) -> bool:
    return any(id(parent) in selected_ids for parent in element.parents)


def _outermost(elements: Iterable[Tag]) -> List[Tag]:
    selected: List[Tag] = []
    selected_ids: set[int] = set()
    for element in elements:
        if _has_selected_ancestor(element, selected_ids):
            continue
        selected.append(element)
        selected_ids.add(id(element))
    return selected


def _content_roots(soup: BeautifulSoup) -> List[Tag]:
    landmarks = _outermost(soup.select(LANDMARK_SELECTOR))
    if landmarks:
        return landmarks
    return [soup.body or soup]


def _text_blocks(root: Tag) -> Iterator[str]:
    collected: set[int] = set()
    for element in root.find_all(TEXT_TAGS):
        if _has_selected_ancestor(element, collected):
            continue
        collected.add(id(element))
        text = collapse_whitespace(element.get_text(" "))
        if text:
            yield text


def extract_text(html: str) -> str:
    """Return the readable text of an HTML document.

    Blocks (headings, paragraphs, list items, table cells, code and quotes) are
    emitted in document order, each on its own paragraph separated by a blank
    line, with inner whitespace collapsed.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    _strip_noise(soup)
    blocks: List[str] = []
    for root in _content_roots(soup):
        blocks.extend(_text_blocks(root))
    text = "\n\n".join(blocks).strip()
    LOGGER.debug("Extracted %d characters from %d blocks", len(text), len(blocks))
    return text
