"""Utility helpers for the on-disk layout."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import quote

from webfinder.errors import CollectionNameError

RECORD_SUFFIX = ".jsonl"
SIDE_FILE_SUFFIX = ".txt"

_COLLECTION_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def validate_collection_name(name: str) -> str:
    """Return ``name`` if it is safe to use as a file name, else raise."""
    if not _COLLECTION_NAME_RE.fullmatch(name or "") or ".." in name:
        raise CollectionNameError(f"Invalid collection name: {name!r}")
    return name


def side_file_name(source: str) -> str:
    """File name used to save the extracted text of ``source``."""
    return quote(source, safe="") + SIDE_FILE_SUFFIX


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
