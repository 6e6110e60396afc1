"""Deterministic stub backends and persona factories for tests."""

from __future__ import annotations

import asyncio
import hashlib
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from ssr_panel.embedding import EmbeddingClient
from ssr_panel.errors import BackendError
from ssr_panel.llm.base import TextGenerator
from ssr_panel.models import (
    Demographics,
    Persona,
    PersonaContext,
    Psychographics,
)

Reply = Union[str, Callable[[str, str], str]]


class StubGenerator(TextGenerator):
    """Deterministic text backend that records calls and in-flight concurrency."""

    def __init__(
        self,
        reply: Reply = "I think it is pretty good overall, it fits my routine.",
        delay: Union[float, Callable[[str], float]] = 0.0,
        fail_when: Optional[Callable[[str, str], bool]] = None,
    ) -> None:
        self.reply = reply
        self.delay = delay
        self.fail_when = fail_when
        self.calls: List[Tuple[str, str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def provider_name(self) -> str:
        return "stub"

    @property
    def default_model(self) -> str:
        return "stub-model"

    async def generate(self, system_prompt: str, prompt: str, max_tokens: int) -> str:
        self.calls.append((system_prompt, prompt, max_tokens))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delay(system_prompt) if callable(self.delay) else self.delay
            await asyncio.sleep(delay)
            if self.fail_when is not None and self.fail_when(system_prompt, prompt):
                raise BackendError("stub backend unavailable", provider="stub")
            if callable(self.reply):
                return self.reply(system_prompt, prompt)
            return self.reply
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


def hash_vector(text: str, dim: int = 64) -> np.ndarray:
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "little")
    return np.random.default_rng(seed).normal(size=dim)


class StubEmbedder(EmbeddingClient):
    """Embeds text as a pseudo-random vector seeded by the text's hash."""

    def __init__(self, dim: int = 64) -> None:
        self.dim = dim
        self.calls: List[str] = []
        self.closed = False

    @property
    def model_name(self) -> str:
        return "stub-embedding"

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        await asyncio.sleep(0)
        return hash_vector(text, self.dim)

    async def aclose(self) -> None:
        self.closed = True


def make_persona(
    persona_id: str = "p1",
    personality: str = "Practical and grounded",
    location: Optional[str] = None,
    **context: object,
) -> Persona:
    return Persona(
        id=persona_id,
        demographics=Demographics(
            age=34,
            gender="female",
            location=location or f"Springfield ({persona_id})",
            income="$50,000-$75,000",
            education="Bachelor's degree",
            occupation="Nurse",
        ),
        psychographics=Psychographics(
            values=["family", "honesty"],
            lifestyle="Busy suburban parent",
            interests=["gardening", "podcasts"],
            personality=personality,
        ),
        context=PersonaContext(**context),
    )
