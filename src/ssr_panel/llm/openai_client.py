"""OpenAI implementation of TextGenerator."""

from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from ..config import AppSettings, get_settings
from ..errors import BackendError
from .base import TextGenerator


class OpenAIProvider(TextGenerator):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        model_override: Optional[str] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        settings = settings or get_settings()
        api_key = settings.openai_api_key
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured")

        base_url = str(settings.openai_base_url) if settings.openai_base_url else None
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model_override or settings.openai_model

    @property
    def provider_name(self) -> str:
        return "openai"

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
                f"OpenAI generation failed: {err}", provider=self.provider_name
            ) from err

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self._client.close()
