"""Semantic similarity rating implementation."""

from __future__ import annotations

import asyncio
from typing import Optional

import numpy as np

from .anchors import AnchorCatalog, AnchorSet
from .cache import add_to_cache, get_from_cache
from .embedding import EmbeddingClient
from .models import RatingResult, SurveyQuestion

DEFAULT_TEMPERATURE = 0.5


def cosine_similarity(vec: np.ndarray, mat: np.ndarray) -> np.ndarray:
    """Cosine similarity between ``vec`` and every row of ``mat``."""

    vec_norm = np.linalg.norm(vec)
    if vec_norm == 0:
        return np.zeros(mat.shape[0])
    mat_norms = np.linalg.norm(mat, axis=1)
    denom = np.clip(vec_norm * mat_norms, a_min=1e-8, a_max=None)
    return (mat @ vec) / denom


def softmax(similarities: np.ndarray, temperature: float = DEFAULT_TEMPERATURE) -> np.ndarray:
    """Temperature-scaled softmax; lower temperatures give peakier pmfs."""

    if temperature <= 0:
        raise ValueError("temperature must be positive")
    scaled = np.asarray(similarities, dtype=float) / temperature
    scaled -= scaled.max()
    weights = np.exp(scaled)
    return weights / weights.sum()


def sample_index(pmf: np.ndarray, rng: np.random.Generator) -> int:
    """Draw an index by walking the cumulative pmf with a uniform value in [0, 1)."""

    draw = rng.random()
    cumulative = np.cumsum(pmf)
    idx = int(np.searchsorted(cumulative, draw, side="right"))
    # Rounding can leave the final cumulative value just below the draw.
    return min(idx, len(pmf) - 1)


class SimilarityMapper:
    """Map free-text answers to ratings using anchor similarity.

    The answer and every anchor of the resolved scale are embedded, compared
    by cosine similarity, and turned into a pmf with a temperature softmax.
    The rating is sampled from that pmf; confidence is its peak probability.
    """

    def __init__(
        self,
        catalog: AnchorCatalog,
        embedder: EmbeddingClient,
        rng: Optional[np.random.Generator] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        cache_anchor_embeddings: bool = False,
    ) -> None:
        if temperature <= 0:
            raise ValueError("temperature must be positive")
        self.catalog = catalog
        self._embedder = embedder
        self._rng = rng if rng is not None else np.random.default_rng()
        self.temperature = temperature
        self._cache_anchors = cache_anchor_embeddings

    async def _embed_anchor(self, text: str) -> np.ndarray:
        if not self._cache_anchors:
            return await self._embedder.embed(text)

        namespace = f"anchor:{self._embedder.model_name}"
        cached = get_from_cache(text, namespace=namespace)
        if cached is not None:
            return cached
        vector = await self._embedder.embed(text)
        add_to_cache(text, vector, namespace=namespace)
        return vector

    async def _similarities(self, text: str, anchor_set: AnchorSet) -> np.ndarray:
        text_vec, *anchor_vecs = await asyncio.gather(
            self._embedder.embed(text),
            *(self._embed_anchor(anchor) for anchor in anchor_set.texts()),
        )
        return cosine_similarity(np.asarray(text_vec), np.vstack(anchor_vecs))

    async def map_to_rating(
        self,
        text: str,
        question: SurveyQuestion,
        rng: Optional[np.random.Generator] = None,
    ) -> RatingResult:
        """Sample a rating for ``text``.

        ``rng`` overrides the mapper's own generator for this draw.
        """

        anchor_set = self.catalog.select(question)
        sims = await self._similarities(text, anchor_set)
        pmf = softmax(sims, self.temperature)
        idx = sample_index(pmf, rng if rng is not None else self._rng)
        # Likert ratings start at 1, NPS at 0; the anchor keys carry the offset.
        rating = anchor_set.ratings()[idx]
        return RatingResult(rating=rating, distribution=pmf, confidence=float(pmf.max()))


__all__ = [
    "DEFAULT_TEMPERATURE",
    "SimilarityMapper",
    "cosine_similarity",
    "sample_index",
    "softmax",
]
