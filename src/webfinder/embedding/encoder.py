"""Embedding client management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Literal, Protocol, Sequence

import httpx
import numpy as np

from webfinder.errors import ConfigurationError, EmbeddingError

DEFAULT_MODEL = "text-embedding-004"
DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/"
DEFAULT_LOCAL_MODEL = "sentence-transformers/all-mpnet-base-v2"
# Gemini rejects batchEmbedContents requests with more than 100 items.
MAX_BATCH_SIZE = 100

logger = logging.getLogger(__name__)


class EmbeddingClient(Protocol):
    """Maps text to fixed-length float vectors."""

    def embed_many(self, texts: Sequence[str] | Iterable[str]) -> np.ndarray:
        """Return one row per input text, in input order."""
        ...

    def embed_one(self, text: str) -> np.ndarray:
        ...

    def close(self) -> None:
        ...


@dataclass(slots=True)
class EmbeddingConfig:
    api_key: str | None = None
    base_url: str = DEFAULT_API_URL
    model_name: str = DEFAULT_MODEL
    batch_size: int = MAX_BATCH_SIZE
    timeout: float = 60.0
    backend: Literal["gemini", "local"] = "gemini"
    device: str | None = None


class GeminiEmbeddingClient:
    """Embedding client for the Google Generative Language REST API.

    The API key is required up front; a missing key raises
    :class:`ConfigurationError` before any request is made.
    """

    def __init__(self, config: EmbeddingConfig, *, client: httpx.Client | None = None) -> None:
        if not config.api_key:
            raise ConfigurationError("GEMINI_API_KEY is required for embeddings")
        if not config.base_url:
            raise ConfigurationError("An embedding API base URL is required")
        self.config = config
        self._client = client or httpx.Client(timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    @property
    def model_path(self) -> str:
        name = self.config.model_name
        return name if name.startswith("models/") else f"models/{name}"

    def _endpoint(self, method: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{self.model_path}:{method}"

    def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post(
                self._endpoint(method),
                json=payload,
                headers={"x-goog-api-key": self.config.api_key or ""},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise EmbeddingError(
                f"Embedding request failed with HTTP {exc.response.status_code}: "
                f"{exc.response.text[:200]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

    def _content(self, text: str) -> dict[str, Any]:
        return {"parts": [{"text": text}]}

    def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        payload = {
            "requests": [
                {"model": self.model_path, "content": self._content(text)} for text in texts
            ]
        }
        data = self._post("batchEmbedContents", payload)
        try:
            vectors = [item["values"] for item in data["embeddings"]]
        except (KeyError, TypeError) as exc:
            raise EmbeddingError("Malformed batch embedding response") from exc
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    def embed_many(self, texts: Sequence[str] | Iterable[str]) -> np.ndarray:
        """Return float32 embeddings for input texts, one row per text."""
        sentences = list(texts)
        if not sentences:
            return np.empty((0, 0), dtype="float32")
        batch_size = max(1, min(self.config.batch_size, MAX_BATCH_SIZE))
        vectors: List[List[float]] = []
        for start in range(0, len(sentences), batch_size):
            batch = sentences[start : start + batch_size]
            logger.debug("Embedding batch of %d texts", len(batch))
            vectors.extend(self._embed_batch(batch))
        try:
            return np.asarray(vectors, dtype="float32")
        except ValueError as exc:
            raise EmbeddingError("Embedding provider returned vectors of mixed length") from exc

    def embed_one(self, text: str) -> np.ndarray:
        data = self._post(
            "embedContent", {"model": self.model_path, "content": self._content(text)}
        )
        try:
            values = data["embedding"]["values"]
        except (KeyError, TypeError) as exc:
            raise EmbeddingError("Malformed embedding response") from exc
        return np.asarray(values, dtype="float32")


def build_embedder(config: EmbeddingConfig) -> EmbeddingClient:
    """Instantiate the embedding backend named in ``config``."""
    if config.backend == "gemini":
        return GeminiEmbeddingClient(config)
    if config.backend == "local":
        from webfinder.embedding.local import LocalEmbeddingModel

        return LocalEmbeddingModel(config)
    raise ConfigurationError(f"Unknown embedding backend: {config.backend!r}")
