"""PDF text extraction.

Uses PyMuPDF (fitz) to read PDF sources, whether local files or documents
downloaded over HTTP.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from webfinder.utils.text import normalize_text

LOGGER = logging.getLogger(__name__)


def _open(source: Path | bytes) -> "fitz.Document":
    if isinstance(source, (bytes, bytearray)):
        return fitz.open(stream=bytes(source), filetype="pdf")
    return fitz.open(source)


def iter_text_parts(source: Path | bytes) -> Iterator[str]:
    """Yield the normalized text of each non-empty page."""
    doc = _open(source)
    try:
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:  # pragma: no cover - defensive path
                LOGGER.warning("Failed to read page %s: %s", index, exc)
                continue
            normalized = normalize_text(text)
            if normalized:
                yield normalized
    finally:
        doc.close()


def extract_pdf_text(source: Path | bytes) -> str:
    """Return the text of a whole PDF, pages separated by blank lines."""
    return "\n\n".join(iter_text_parts(source))
