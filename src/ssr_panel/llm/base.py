"""Base interface for generative text providers."""

from __future__ import annotations

import abc


class TextGenerator(abc.ABC):
    """Abstract base class for text generation backends."""

    @abc.abstractmethod
    async def generate(self, system_prompt: str, prompt: str, max_tokens: int) -> str:
        """Generate free text for a single user turn.

        Returns an empty string when the backend produced no text content and
        raises ``BackendError`` for any transport, auth or rate-limit failure.
        """

    @property
    @abc.abstractmethod
    def provider_name(self) -> str:
        """Return the name of the provider."""

    @property
    @abc.abstractmethod
    def default_model(self) -> str:
        """Return the model used for generation."""

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
