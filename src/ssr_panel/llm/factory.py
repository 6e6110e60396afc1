"""Factory for creating text generation providers."""

from __future__ import annotations

from typing import Optional

from ..config import AppSettings
from .anthropic_client import AnthropicProvider
from .base import TextGenerator
from .gemini_client import GeminiProvider
from .openai_client import OpenAIProvider
from .perplexity_client import PerplexityProvider


def get_provider(
    name: str,
    model_override: Optional[str] = None,
    settings: Optional[AppSettings] = None,
) -> TextGenerator:
    """Get a text generation provider by name."""
    name = name.lower()
    if name == "anthropic" or name == "claude":
        return AnthropicProvider(model_override, settings=settings)
    elif name == "openai":
        return OpenAIProvider(model_override, settings=settings)
    elif name == "gemini" or name == "google":
        return GeminiProvider(model_override, settings=settings)
    elif name == "perplexity":
        return PerplexityProvider(model_override, settings=settings)
    else:
        raise ValueError(f"Unknown provider: {name}")
