"""Exceptions raised by WebFinder."""

from __future__ import annotations

from pathlib import Path


class WebFinderError(Exception):
    """Base class for all WebFinder errors."""


class ConfigurationError(WebFinderError):
    """Missing or invalid configuration, raised before any I/O."""


class EmbeddingError(WebFinderError):
    """The embedding provider failed or returned an unusable response."""


class StoreError(WebFinderError):
    """Base class for collection store problems."""


class CorruptRecordError(StoreError):
    """A record line in a collection log could not be parsed."""

    def __init__(self, path: Path, line_number: int, reason: str) -> None:
        super().__init__(f"Malformed record in {path} at line {line_number}: {reason}")
        self.path = path
        self.line_number = line_number


class EmbeddingDimensionError(StoreError, ValueError):
    """Embeddings of different lengths were mixed in one collection."""


class CollectionNameError(StoreError, ValueError):
    """Collection name is not safe to use as a file name."""
