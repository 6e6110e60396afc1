"""Application configuration and settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """Load settings from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        populate_by_name=True,
    )

    generation_provider: str = Field(default="anthropic", alias="GENERATION_PROVIDER")

    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(
        default="claude-3-haiku-20240307", alias="ANTHROPIC_MODEL"
    )

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[HttpUrl] = Field(default=None, alias="OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_embedding_model: str = Field(default="text-embedding-3-small")

    google_api_key: Optional[str] = Field(default=None, alias="GOOGLE_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")

    perplexity_api_key: Optional[str] = Field(default=None, alias="PERPLEXITY_API_KEY")
    perplexity_model: str = Field(default="sonar", alias="PERPLEXITY_MODEL")

    max_tokens: int = Field(default=500, ge=1)
    choice_max_tokens: int = Field(default=200, ge=1)
    softmax_temperature: float = Field(default=0.5, gt=0.0)
    default_concurrency_limit: int = Field(default=5, ge=1, le=64)
    cache_anchor_embeddings: bool = Field(default=False)
    random_seed: Optional[int] = Field(default=None)

    anchor_bank_path: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def generation_model(self) -> str:
        """Return the model name used by the configured generation provider."""

        lookup = {
            "anthropic": self.anthropic_model,
            "claude": self.anthropic_model,
            "openai": self.openai_model,
            "gemini": self.gemini_model,
            "google": self.gemini_model,
            "perplexity": self.perplexity_model,
        }
        return lookup.get(self.generation_provider.lower(), self.anthropic_model)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return cached settings instance."""

    return AppSettings()  # type: ignore[arg-type]


__all__ = ["AppSettings", "get_settings"]
