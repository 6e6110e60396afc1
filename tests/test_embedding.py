"""Tests for the OpenAI embedding client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import numpy as np
import pytest

from ssr_panel.config import AppSettings
from ssr_panel.embedding import OpenAIEmbeddingClient
from ssr_panel.errors import BackendError


@pytest.mark.asyncio
@patch("ssr_panel.embedding.AsyncOpenAI")
async def test_embed_returns_float_vector(mock_openai):
    client = mock_openai.return_value
    client.embeddings.create = AsyncMock(
        return_value=SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2, 0.3])])
    )
    client.close = AsyncMock()

    embedder = OpenAIEmbeddingClient(AppSettings(_env_file=None, openai_api_key="key"))
    vector = await embedder.embed("It fits my budget.")

    assert vector.dtype == np.float32
    assert vector.shape == (3,)
    assert embedder.model_name == "text-embedding-3-small"
    kwargs = client.embeddings.create.await_args.kwargs
    assert kwargs == {"model": "text-embedding-3-small", "input": ["It fits my budget."]}

    await embedder.aclose()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
@patch("ssr_panel.embedding.AsyncOpenAI")
async def test_embed_failures_become_backend_errors(mock_openai):
    mock_openai.return_value.embeddings.create = AsyncMock(
        side_effect=TimeoutError("timed out")
    )
    embedder = OpenAIEmbeddingClient(AppSettings(_env_file=None, openai_api_key="key"))

    with pytest.raises(BackendError):
        await embedder.embed("text")


@pytest.mark.asyncio
@patch("ssr_panel.embedding.AsyncOpenAI")
async def test_embed_empty_payload_is_an_error(mock_openai):
    mock_openai.return_value.embeddings.create = AsyncMock(
        return_value=SimpleNamespace(data=[])
    )
    embedder = OpenAIEmbeddingClient(AppSettings(_env_file=None, openai_api_key="key"))

    with pytest.raises(BackendError, match="no vectors"):
        await embedder.embed("text")


def test_embedding_client_requires_key():
    with pytest.raises(RuntimeError):
        OpenAIEmbeddingClient(AppSettings(_env_file=None, openai_api_key=None))
