"""Tests for the semantic similarity rating pipeline."""

from __future__ import annotations

import numpy as np
import pytest

from ssr_panel.models import SurveyQuestion
from ssr_panel.ssr import SimilarityMapper, cosine_similarity, sample_index, softmax

from tests.helpers import StubEmbedder


class FixedDraw:
    """Generator stand-in that always draws the same uniform value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def test_cosine_similarity_self_and_negation():
    vec = np.array([0.3, -1.2, 2.5, 0.7])
    sims = cosine_similarity(vec, np.vstack([vec, -vec]))
    assert sims[0] == pytest.approx(1.0)
    assert sims[1] == pytest.approx(-1.0)


def test_cosine_similarity_zero_vector():
    sims = cosine_similarity(np.zeros(3), np.eye(3))
    assert sims.tolist() == [0.0, 0.0, 0.0]


def test_softmax_lower_temperature_is_more_peaked():
    sims = np.array([0.9, 0.5, 0.1, 0.1, 0.1])
    sharp = softmax(sims, temperature=0.5)
    flat = softmax(sims, temperature=1.0)
    assert sharp.sum() == pytest.approx(1.0, abs=1e-6)
    assert flat.sum() == pytest.approx(1.0, abs=1e-6)
    assert sharp.max() > flat.max()
    assert int(sharp.argmax()) == 0


def test_softmax_equal_similarities_is_uniform():
    pmf = softmax(np.full(7, 0.42))
    assert np.allclose(pmf, 1 / 7)


def test_softmax_rejects_non_positive_temperature():
    with pytest.raises(ValueError):
        softmax(np.array([0.1, 0.2]), temperature=0.0)


def test_sample_index_walks_cumulative_probability():
    uniform = np.full(5, 0.2)
    assert sample_index(uniform, FixedDraw(0.0)) == 0
    assert sample_index(uniform, FixedDraw(0.5)) == 2
    assert sample_index(uniform, FixedDraw(0.99)) == 4

    certain = np.array([0.0, 0.0, 1.0, 0.0, 0.0])
    assert sample_index(certain, FixedDraw(0.0)) == 2
    assert sample_index(certain, FixedDraw(0.999)) == 2


def test_sample_index_clamps_round_off():
    pmf = np.array([0.3, 0.3, 0.3999999])
    assert sample_index(pmf, FixedDraw(0.99999999)) == 2


def test_sample_index_uniform_draws_cover_all_positions():
    rng = np.random.default_rng(0)
    seen = {sample_index(np.full(5, 0.2), rng) for _ in range(500)}
    assert seen == {0, 1, 2, 3, 4}


def _question(qtype: str, scale_min=None, scale_max=None) -> SurveyQuestion:
    return SurveyQuestion(
        id="q", type=qtype, text="Rate it.", scale_min=scale_min, scale_max=scale_max
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("qtype", "scale_min", "scale_max", "size", "valid"),
    [
        ("likert", 1, 5, 5, range(1, 6)),
        ("likert", 1, 7, 7, range(1, 8)),
        ("ranking", None, None, 5, range(1, 6)),
        ("nps", 0, 10, 11, range(0, 11)),
    ],
)
async def test_map_to_rating_shapes(catalog, qtype, scale_min, scale_max, size, valid):
    mapper = SimilarityMapper(catalog, StubEmbedder(), rng=np.random.default_rng(3))
    question = _question(qtype, scale_min, scale_max)

    for text in ["Love it.", "Not for me at all.", "It's fine I guess.", ""]:
        result = await mapper.map_to_rating(text, question)
        assert len(result.distribution) == size
        assert result.distribution.sum() == pytest.approx(1.0, abs=1e-6)
        assert result.rating in valid
        assert result.confidence == pytest.approx(float(result.distribution.max()))
        assert 0.0 < result.confidence <= 1.0


@pytest.mark.asyncio
async def test_nps_ratings_are_zero_indexed(catalog):
    # A near-zero temperature makes the closest anchor certain.
    mapper = SimilarityMapper(
        catalog, StubEmbedder(), rng=np.random.default_rng(1), temperature=0.01
    )
    nps = _question("nps", 0, 10)
    lowest = catalog.nps.anchors[0]
    result = await mapper.map_to_rating(lowest, nps)
    assert result.rating == 0
    assert result.confidence == pytest.approx(1.0)

    highest = catalog.nps.anchors[10]
    assert (await mapper.map_to_rating(highest, nps)).rating == 10


@pytest.mark.asyncio
async def test_likert_ratings_are_one_indexed(catalog):
    mapper = SimilarityMapper(
        catalog, StubEmbedder(), rng=np.random.default_rng(1), temperature=0.01
    )
    likert = _question("likert", 1, 5)
    assert (await mapper.map_to_rating(catalog.likert_5.anchors[1], likert)).rating == 1
    assert (await mapper.map_to_rating(catalog.likert_5.anchors[5], likert)).rating == 5

    likert7 = _question("likert", 1, 7)
    assert (await mapper.map_to_rating(catalog.likert_7.anchors[7], likert7)).rating == 7


@pytest.mark.asyncio
async def test_anchor_embeddings_recomputed_by_default(catalog):
    embedder = StubEmbedder()
    mapper = SimilarityMapper(catalog, embedder, rng=np.random.default_rng(0))
    question = _question("likert", 1, 5)

    await mapper.map_to_rating("first", question)
    await mapper.map_to_rating("second", question)

    assert len(embedder.calls) == 12
    assert embedder.calls.count(catalog.likert_5.anchors[3]) == 2


@pytest.mark.asyncio
async def test_anchor_embedding_cache(catalog):
    embedder = StubEmbedder()
    mapper = SimilarityMapper(
        catalog, embedder, rng=np.random.default_rng(0), cache_anchor_embeddings=True
    )
    question = _question("likert", 1, 5)

    first = await mapper.map_to_rating("same text", question)
    second = await mapper.map_to_rating("same text", question)

    assert len(embedder.calls) == 7
    assert np.allclose(first.distribution, second.distribution)


@pytest.mark.asyncio
async def test_seeded_mappers_are_reproducible(catalog):
    question = _question("likert", 1, 5)
    texts = [f"answer {idx}" for idx in range(20)]

    async def ratings(seed: int):
        mapper = SimilarityMapper(catalog, StubEmbedder(), rng=np.random.default_rng(seed))
        return [(await mapper.map_to_rating(text, question)).rating for text in texts]

    assert await ratings(11) == await ratings(11)


def test_mapper_rejects_non_positive_temperature(catalog):
    with pytest.raises(ValueError):
        SimilarityMapper(catalog, StubEmbedder(), temperature=-1.0)


@pytest.mark.asyncio
async def test_map_to_rating_uses_supplied_generator(catalog):
    mapper = SimilarityMapper(catalog, StubEmbedder(), rng=np.random.default_rng(0))
    question = _question("likert", 1, 5)

    assert (await mapper.map_to_rating("fine", question, FixedDraw(0.0))).rating == 1
    assert (await mapper.map_to_rating("fine", question, FixedDraw(0.999999))).rating == 5
