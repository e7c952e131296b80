"""Offline embedding backend built on sentence-transformers."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer

from webfinder.embedding.encoder import EmbeddingConfig

logger = logging.getLogger(__name__)


class LocalEmbeddingModel:
    """Thin wrapper around `SentenceTransformer` for query and document embeddings.

    Needs no API key; the model is downloaded on first use and cached by
    sentence-transformers.
    """

    def __init__(self, config: EmbeddingConfig) -> None:
        self.config = config
        self._model = SentenceTransformer(config.model_name, device=config.device)
        self.dimension = int(self._model.get_sentence_embedding_dimension())
        logger.info(
            "Loaded local embedding model %s (dimension %d)", config.model_name, self.dimension
        )

    def embed_many(self, texts: Sequence[str] | Iterable[str]) -> np.ndarray:
        """Return float32 embeddings for input texts."""
        sentences = list(texts)
        embeddings = self._model.encode(
            sentences,
            batch_size=self.config.batch_size,
            show_progress_bar=False,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )
        return embeddings.astype("float32", copy=False)

    def embed_one(self, text: str) -> np.ndarray:
        """Convenience wrapper for single-query embedding."""
        return self.embed_many([text])[0]

    def close(self) -> None:
        """Nothing to release; the model stays in the sentence-transformers cache."""
