"""Append-only JSONL collection store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Sequence

from webfinder.errors import CorruptRecordError, EmbeddingDimensionError
from webfinder.models import DocEntry
from webfinder.utils.files import RECORD_SUFFIX, ensure_dir, validate_collection_name

LOGGER = logging.getLogger(__name__)


class CollectionStore:
    """Persistence layer for named collections of embedded chunks.

    Each collection is a flat ``<name>.jsonl`` log with one JSON record per
    line. Logs are only ever appended to; there is no update or delete.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def collection_path(self, collection: str) -> Path:
        return self.root / f"{validate_collection_name(collection)}{RECORD_SUFFIX}"

    def collection_dir(self, collection: str) -> Path:
        """Directory holding the extracted-text side files of a collection."""
        return ensure_dir(self.root / validate_collection_name(collection))

    def exists(self, collection: str) -> bool:
        return self.collection_path(collection).exists()

    def list_collections(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(path.stem for path in self.root.glob(f"*{RECORD_SUFFIX}") if path.is_file())

    def _stored_dimension(self, path: Path) -> int | None:
        if not path.exists():
            return None
        with path.open("rb") as handle:
            for line_number, line in enumerate(handle, start=1):
                if line.strip():
                    return self._parse_line(path, line_number, line).dimension
        return None

    def _check_dimensions(self, path: Path, entries: Sequence[DocEntry]) -> None:
        dimensions = {entry.dimension for entry in entries}
        if len(dimensions) > 1:
            raise EmbeddingDimensionError(
                f"Entries have mixed embedding dimensions: {sorted(dimensions)}"
            )
        (dimension,) = dimensions
        if dimension == 0:
            raise EmbeddingDimensionError("Entries must have a non-empty embedding")
        stored = self._stored_dimension(path)
        if stored is not None and stored != dimension:
            raise EmbeddingDimensionError(
                f"Collection {path.stem!r} stores {stored}-dimensional embeddings, "
                f"got {dimension}"
            )

    def append(self, collection: str, entries: Sequence[DocEntry]) -> int:
        """Append entries to a collection, creating it if needed.

        All lines are flushed to disk before returning. Returns the number of
        entries written.
        """
        path = self.collection_path(collection)
        if not entries:
            return 0
        self._check_dimensions(path, entries)
        ensure_dir(path.parent)
        with path.open("a", encoding="utf-8") as handle:
            for entry in entries:
                handle.write(json.dumps(entry.to_record(), ensure_ascii=True) + "\n")
            handle.flush()
            os.fsync(handle.fileno())
        LOGGER.debug("Appended %d entries to %s", len(entries), path)
        return len(entries)

    @staticmethod
    def _parse_line(path: Path, line_number: int, line: bytes) -> DocEntry:
        try:
            return DocEntry.from_record(json.loads(line.decode("utf-8")))
        except (ValueError, KeyError, TypeError) as exc:
            raise CorruptRecordError(path, line_number, str(exc)) from exc

    def load_all(self, collection: str) -> List[DocEntry]:
        """Load every entry of a collection in append order.

        A missing collection loads as empty. A malformed line raises
        :class:`CorruptRecordError`; nothing is returned for that call.
        """
        path = self.collection_path(collection)
        if not path.exists():
            return []
        content = path.read_bytes()
        entries: List[DocEntry] = []
        for line_number, line in enumerate(content.split(b"\n"), start=1):
            if not line.strip():
                continue
            entries.append(self._parse_line(path, line_number, line))
        return entries
