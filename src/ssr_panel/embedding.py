"""Embedding clients."""

from __future__ import annotations

import abc
from typing import Optional

import numpy as np
from openai import AsyncOpenAI

from .config import AppSettings, get_settings
from .errors import BackendError


class EmbeddingClient(abc.ABC):
    """Convert text into a fixed-length vector."""

    @abc.abstractmethod
    async def embed(self, text: str) -> np.ndarray:
        """Embed a single text and return a 1D vector."""

    @property
    @abc.abstractmethod
    def model_name(self) -> str:
        """Return the embedding model in use."""

    async def aclose(self) -> None:
        """Release any network resources held by the client."""


class OpenAIEmbeddingClient(EmbeddingClient):
    """Embedding client backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        model_override: Optional[str] = None,
    ) -> None:
        settings = settings or get_settings()
        if not settings.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured")

        base_url = str(settings.openai_base_url) if settings.openai_base_url else None
        self._client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=base_url)
        self._model = model_override or settings.openai_embedding_model

    @property
    def model_name(self) -> str:
        return self._model

    async def embed(self, text: str) -> np.ndarray:
        try:
            response = await self._client.embeddings.create(
                model=self._model,
                input=[text],
            )
        except Exception as err:  # noqa: BLE001
            raise BackendError(f"Embedding request failed: {err}", provider="openai") from err

        if not response.data:
            raise BackendError("Embedding response contained no vectors", provider="openai")
        return np.array(response.data[0].embedding, dtype=np.float32)

    async def aclose(self) -> None:
        await self._client.close()


__all__ = ["EmbeddingClient", "OpenAIEmbeddingClient"]
