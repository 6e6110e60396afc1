"""Gemini implementation of TextGenerator."""

from __future__ import annotations

from typing import Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig, HarmBlockThreshold, HarmCategory

from ..config import AppSettings, get_settings
from ..errors import BackendError
from .base import TextGenerator

_SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
}


class GeminiProvider(TextGenerator):
    """Gemini provider implementation."""

    def __init__(
        self,
        model_override: Optional[str] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        settings = settings or get_settings()
        api_key = settings.google_api_key
        if not api_key:
            raise RuntimeError("GOOGLE_API_KEY is not configured")

        genai.configure(api_key=api_key)
        self._model_name = model_override or settings.gemini_model

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._model_name

    async def generate(self, system_prompt: str, prompt: str, max_tokens: int) -> str:
        # The system instruction is bound at model construction time.
        model = genai.GenerativeModel(self._model_name, system_instruction=system_prompt)
        try:
            response = await model.generate_content_async(
                contents=prompt,
                generation_config=GenerationConfig(max_output_tokens=max_tokens),
                safety_settings=_SAFETY_SETTINGS,
            )
        except Exception as err:  # noqa: BLE001
            raise BackendError(
                f"Gemini generation failed: {err}", provider=self.provider_name
            ) from err

        try:
            return response.text or ""
        except ValueError:
            # Raised by the SDK when the candidate carries no text parts.
            return ""
