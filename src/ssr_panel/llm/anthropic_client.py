"""Anthropic implementation of TextGenerator."""

from __future__ import annotations

from typing import Optional

from anthropic import AsyncAnthropic

from ..config import AppSettings, get_settings
from ..errors import BackendError
from .base import TextGenerator


class AnthropicProvider(TextGenerator):
    """Anthropic Messages API provider."""

    def __init__(
        self,
        model_override: Optional[str] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        settings = settings or get_settings()
        api_key = settings.anthropic_api_key
        if not api_key:
            raise RuntimeError("ANTHROPIC_API_KEY is not configured")

        self._client = AsyncAnthropic(api_key=api_key)
        self._model = model_override or settings.anthropic_model

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return self._model

    async def generate(self, system_prompt: str, prompt: str, max_tokens: int) -> str:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as err:  # noqa: BLE001
            raise BackendError(
                f"Anthropic generation failed: {err}", provider=self.provider_name
            ) from err

        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        return ""

    async def aclose(self) -> None:
        await self._client.close()
