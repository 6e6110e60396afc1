"""Persona-conditioned text generation."""

from __future__ import annotations

from typing import Optional

from .llm.base import TextGenerator
from .models import Persona, ProductContext, SurveyQuestion
from .persona_prompt import build_persona_prompt, get_response_style


class ResponseGenerator:
    """Ask the generative backend to answer a question in a persona's voice.

    Each call rebuilds the full persona prompt, so answers never depend on
    earlier questions. Backend failures propagate as ``BackendError``.
    """

    def __init__(
        self,
        provider: TextGenerator,
        max_tokens: int = 500,
        choice_max_tokens: int = 200,
    ) -> None:
        self._provider = provider
        self._max_tokens = max_tokens
        self._choice_max_tokens = choice_max_tokens

    @property
    def model_name(self) -> str:
        return self._provider.default_model

    async def generate_text(
        self,
        persona: Persona,
        question: SurveyQuestion,
        product_context: Optional[ProductContext] = None,
    ) -> str:
        style = get_response_style(persona.psychographics.personality)
        prompt = (
            f'Survey question: "{question.text}"\n\n'
            f"Respond in the first person in {style.length}, giving your reasons. "
            f"Be {style.tone}. Answer as you would in real life - "
            "no need to explain who you are."
        )
        return await self._provider.generate(
            build_persona_prompt(persona, product_context),
            prompt,
            self._max_tokens,
        )

    async def generate_choice(
        self,
        persona: Persona,
        question: SurveyQuestion,
        product_context: Optional[ProductContext] = None,
    ) -> str:
        options = "\n".join(
            f"{idx}. {option}" for idx, option in enumerate(question.options or [], start=1)
        )
        prompt = (
            f'"{question.text}"\n\n'
            f"Options:\n{options}\n\n"
            "Pick the option that fits you best and briefly explain why. "
            'Start your response with "I choose N:" where N is the option number.'
        )
        return await self._provider.generate(
            build_persona_prompt(persona, product_context),
            prompt,
            self._choice_max_tokens,
        )


__all__ = ["ResponseGenerator"]
