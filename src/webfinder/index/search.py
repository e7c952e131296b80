"""Semantic search interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from webfinder.embedding.encoder import EmbeddingClient
from webfinder.errors import EmbeddingDimensionError
from webfinder.index.storage import CollectionStore
from webfinder.models import DocEntry

LOGGER = logging.getLogger(__name__)

DEFAULT_TOP_K = 8


@dataclass(slots=True)
class SearchResult:
    entry: DocEntry
    score: float

    @property
    def source(self) -> str:
        return self.entry.source

    @property
    def text(self) -> str:
        return self.entry.text


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Cosine of the angle between two vectors; 0.0 when either has zero magnitude."""
    va = np.asarray(a, dtype="float64")
    vb = np.asarray(b, dtype="float64")
    if va.shape != vb.shape:
        raise EmbeddingDimensionError(f"Cannot compare vectors of shape {va.shape} and {vb.shape}")
    norm = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / norm, -1.0, 1.0))


def cosine_scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of ``query`` against every row of ``matrix``."""
    query = np.asarray(query, dtype="float64")
    matrix = np.asarray(matrix, dtype="float64")
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    scores = np.zeros(len(matrix), dtype="float64")
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / norms[nonzero]
    return np.clip(scores, -1.0, 1.0)


def rank_entries(
    query_embedding: Sequence[float] | np.ndarray,
    entries: Sequence[DocEntry],
    *,
    top_k: int = DEFAULT_TOP_K,
) -> List[SearchResult]:
    """Rank entries by descending cosine similarity to the query.

    Ties keep the entries' original (load) order.
    """
    if not entries or top_k <= 0:
        return []
    query = np.asarray(query_embedding, dtype="float64")
    dimensions = {entry.dimension for entry in entries}
    if dimensions != {query.shape[0]}:
        raise EmbeddingDimensionError(
            f"Query has dimension {query.shape[0]}, collection has {sorted(dimensions)}"
        )
    matrix = np.asarray([entry.embedding for entry in entries], dtype="float64")
    scores = cosine_scores(query, matrix)
    order = np.argsort(-scores, kind="stable")[:top_k]
    return [SearchResult(entry=entries[idx], score=float(scores[idx])) for idx in order]


class Searcher:
    """High-level API to query a collection."""

    def __init__(self, embedder: EmbeddingClient, store: CollectionStore) -> None:
        self.embedder = embedder
        self.store = store

    def search(self, collection: str, query: str, *, top_k: int = DEFAULT_TOP_K) -> List[SearchResult]:
        entries = self.store.load_all(collection)
        if not entries:
            LOGGER.info("Collection %s is empty or missing", collection)
            return []
        embedding = self.embedder.embed_one(query)
        return rank_entries(embedding, entries, top_k=top_k)
