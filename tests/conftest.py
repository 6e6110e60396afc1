"""Shared fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from ssr_panel import cache
from ssr_panel.anchors import load_anchor_catalog
from ssr_panel.engine import SSREngine
from ssr_panel.models import SurveyQuestion
from tests.helpers import StubEmbedder, StubGenerator


@pytest.fixture(autouse=True)
def _clear_embedding_cache():
    cache.clear_cache()
    yield
    cache.clear_cache()


@pytest.fixture
def catalog():
    return load_anchor_catalog()


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def embedder() -> StubEmbedder:
    return StubEmbedder()


@pytest.fixture
def engine(generator: StubGenerator, embedder: StubEmbedder, catalog) -> SSREngine:
    return SSREngine(
        generator=generator,
        embedder=embedder,
        catalog=catalog,
        rng=np.random.default_rng(7),
    )


@pytest.fixture
def likert_question() -> SurveyQuestion:
    return SurveyQuestion(
        id="q_likert",
        type="likert",
        text="This product would fit into my daily life.",
        scale_min=1,
        scale_max=5,
    )


@pytest.fixture
def open_question() -> SurveyQuestion:
    return SurveyQuestion(
        id="q_open",
        type="open_ended",
        text="What would you change about this product?",
    )
