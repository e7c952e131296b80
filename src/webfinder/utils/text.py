"""Text helpers including fixed-size chunking."""

from __future__ import annotations

import re
from typing import List

DEFAULT_CHUNK_CHARS = 4000

_WHITESPACE_RE = re.compile(r"\s+")


def chunk_text(text: str, max_chars: int = DEFAULT_CHUNK_CHARS) -> List[str]:
    """Split text into consecutive, non-overlapping slices of at most ``max_chars``.

    Text that already fits is returned unchanged as a single chunk, so joining
    the chunks always reproduces the input exactly. Boundaries are plain
    character offsets; callers wanting sentence boundaries must pre-segment.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if len(text) <= max_chars:
        return [text]
    return [text[start : start + max_chars] for start in range(0, len(text), max_chars)]


def collapse_whitespace(text: str) -> str:
    """Collapse any run of whitespace to a single space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str) -> str:
    """Collapse whitespace inside paragraphs while keeping blank-line breaks."""
    paragraphs = (collapse_whitespace(part) for part in re.split(r"\n\s*\n", text))
    return "\n\n".join(part for part in paragraphs if part)
