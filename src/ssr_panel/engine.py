"""Explicit engine value wiring backends into the simulation pipeline."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .anchors import AnchorCatalog, load_anchor_catalog
from .config import AppSettings, get_settings
from .embedding import EmbeddingClient, OpenAIEmbeddingClient
from .generation import ResponseGenerator
from .llm.base import TextGenerator
from .llm.factory import get_provider
from .models import (
    PanelSimulationOutcome,
    Persona,
    ProductContext,
    SimulationResult,
    SSRResponse,
    SurveyQuestion,
)
from .panel import CancelCheck, PanelSimulator, ProgressCallback
from .responder import QuestionResponder
from .ssr import DEFAULT_TEMPERATURE, SimilarityMapper


class SSREngine:
    """Holds backend clients and exposes the simulation operations.

    Construct one per process and pass it to call sites. The engine keeps no
    per-panel state; ``aclose`` releases the backend connections.
    """

    def __init__(
        self,
        generator: TextGenerator,
        embedder: EmbeddingClient,
        catalog: Optional[AnchorCatalog] = None,
        rng: Optional[np.random.Generator] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = 500,
        choice_max_tokens: int = 200,
        cache_anchor_embeddings: bool = False,
        default_concurrency_limit: int = 5,
    ) -> None:
        self.generator = generator
        self.embedder = embedder
        self.default_concurrency_limit = default_concurrency_limit
        rng = rng if rng is not None else np.random.default_rng()
        self.responder = QuestionResponder(
            ResponseGenerator(
                generator,
                max_tokens=max_tokens,
                choice_max_tokens=choice_max_tokens,
            ),
            SimilarityMapper(
                catalog or load_anchor_catalog(),
                embedder,
                rng=rng,
                temperature=temperature,
                cache_anchor_embeddings=cache_anchor_embeddings,
            ),
        )
        self.panel = PanelSimulator(self.responder, rng=rng)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[AppSettings] = None,
        seed: Optional[int] = None,
    ) -> "SSREngine":
        settings = settings or get_settings()
        if seed is None:
            seed = settings.random_seed
        # The embedder is built first so a missing OpenAI key fails before any
        # generation client is opened.
        embedder = OpenAIEmbeddingClient(settings)
        generator = get_provider(settings.generation_provider, settings=settings)
        return cls(
            generator=generator,
            embedder=embedder,
            catalog=load_anchor_catalog(settings.anchor_bank_path),
            rng=np.random.default_rng(seed),
            temperature=settings.softmax_temperature,
            max_tokens=settings.max_tokens,
            choice_max_tokens=settings.choice_max_tokens,
            cache_anchor_embeddings=settings.cache_anchor_embeddings,
            default_concurrency_limit=settings.default_concurrency_limit,
        )

    @property
    def model_name(self) -> str:
        return self.generator.default_model

    async def generate_response(
        self,
        persona: Persona,
        question: SurveyQuestion,
        product_context: Optional[ProductContext] = None,
    ) -> SSRResponse:
        return await self.responder.respond(persona, question, product_context)

    async def simulate_persona(
        self,
        persona: Persona,
        questions: Sequence[SurveyQuestion],
        product_context: Optional[ProductContext] = None,
    ) -> SimulationResult:
        return await self.responder.simulate_persona(persona, questions, product_context)

    async def simulate_panel(
        self,
        personas: Sequence[Persona],
        questions: Sequence[SurveyQuestion],
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
        concurrency_limit: Optional[int] = None,
        product_context: Optional[ProductContext] = None,
    ) -> PanelSimulationOutcome:
        if concurrency_limit is None:
            concurrency_limit = self.default_concurrency_limit
        return await self.panel.simulate_panel(
            personas,
            questions,
            progress_callback=progress_callback,
            cancel_check=cancel_check,
            concurrency_limit=concurrency_limit,
            product_context=product_context,
        )

    async def aclose(self) -> None:
        await self.generator.aclose()
        await self.embedder.aclose()

    async def __aenter__(self) -> "SSREngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["SSREngine"]
