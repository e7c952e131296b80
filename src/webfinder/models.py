"""Core WebFinder data models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


@dataclass(slots=True)
class DocEntry:
    """One retrievable chunk of text paired with its embedding."""

    id: str
    source: str
    text: str
    embedding: List[float]

    @classmethod
    def create(cls, source: str, text: str, embedding: Sequence[float]) -> "DocEntry":
        return cls(
            id=str(uuid.uuid4()),
            source=source,
            text=text,
            embedding=[float(value) for value in embedding],
        )

    @property
    def dimension(self) -> int:
        return len(self.embedding)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "text": self.text,
            "embedding": self.embedding,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DocEntry":
        """Build an entry from a decoded record, raising on missing fields."""
        embedding = record["embedding"]
        if not isinstance(embedding, list):
            raise TypeError("embedding must be a list of numbers")
        return cls(
            id=str(record["id"]),
            source=str(record["source"]),
            text=str(record["text"]),
            embedding=[float(value) for value in embedding],
        )


@dataclass(slots=True)
class FetchedPage:
    """Page content fetched from a source.

    ``is_clean`` marks content that is already plain text, such as output of the
    rendered crawler, and does not need HTML extraction.
    """

    url: str
    content: str
    is_clean: bool = False
