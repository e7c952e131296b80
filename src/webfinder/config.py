"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from webfinder.embedding.encoder import (
    DEFAULT_API_URL,
    DEFAULT_LOCAL_MODEL,
    DEFAULT_MODEL,
    EmbeddingConfig,
)
from webfinder.utils.text import DEFAULT_CHUNK_CHARS


def _get_default_data_dir() -> Path:
    """Collections live under the user's config directory."""
    return Path.home() / ".config" / "webfinder" / "vector-db"


@dataclass(slots=True)
class AppConfig:
    data_dir: Path | None = None
    embedding_backend: str = "gemini"
    model_name: str | None = None
    api_key: str | None = None
    api_url: str = DEFAULT_API_URL
    chunk_chars: int = DEFAULT_CHUNK_CHARS
    max_pages: int = 30
    top_k: int = 8
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        self.data_dir = Path(self.data_dir).expanduser()
        if self.model_name is None:
            self.model_name = (
                DEFAULT_LOCAL_MODEL if self.embedding_backend == "local" else DEFAULT_MODEL
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: Any) -> "AppConfig":
        """Build a config from environment variables, then apply non-None overrides."""
        env = os.environ if env is None else env
        values: dict[str, Any] = {
            "api_key": env.get("GEMINI_API_KEY") or None,
            "api_url": env.get("GEMINI_API_URL") or DEFAULT_API_URL,
        }
        if env.get("WEBFINDER_DATA_DIR"):
            values["data_dir"] = Path(env["WEBFINDER_DATA_DIR"])
        if env.get("WEBFINDER_EMBEDDING_BACKEND"):
            values["embedding_backend"] = env["WEBFINDER_EMBEDDING_BACKEND"]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def embedding_config(self) -> EmbeddingConfig:
        return EmbeddingConfig(
            api_key=self.api_key,
            base_url=self.api_url,
            model_name=self.model_name or DEFAULT_MODEL,
            backend=self.embedding_backend,  # type: ignore[arg-type]
        )

