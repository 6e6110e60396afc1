"""Perplexity implementation of TextGenerator."""

from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from ..config import AppSettings, get_settings
from ..errors import BackendError
from .base import TextGenerator

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


class PerplexityProvider(TextGenerator):
    """Perplexity provider (using its OpenAI-compatible API)."""

    def __init__(
        self,
        model_override: Optional[str] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        settings = settings or get_settings()
        api_key = settings.perplexity_api_key
        if not api_key:
            raise RuntimeError("PERPLEXITY_API_KEY is not configured")

        self._client = AsyncOpenAI(api_key=api_key, base_url=PERPLEXITY_BASE_URL)
        self._model = model_override or settings.perplexity_model

    @property
    def provider_name(self) -> str:
        return "perplexity"

    @property
    def default_model(self) -> str:
        return self._model

    async def generate(self, system_prompt: str, prompt: str, max_tokens: int) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as err:  # noqa: BLE001
            raise BackendError(
                f"Perplexity generation failed: {err}", provider=self.provider_name
            ) from err

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self._client.close()
