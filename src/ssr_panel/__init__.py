"""SSR-based simulated survey panel engine."""

__all__ = [
    "config",
    "errors",
    "models",
    "cache",
    "anchors",
    "persona_prompt",
    "embedding",
    "llm",
    "generation",
    "ssr",
    "responder",
    "panel",
    "engine",
    "api",
    "cli",
]
