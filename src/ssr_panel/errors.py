"""Error types raised by the simulation engine."""

from __future__ import annotations

from typing import Optional


class SSREngineError(RuntimeError):
    """Base class for engine failures."""


class BackendError(SSREngineError):
    """A generation or embedding backend call failed.

    Transport, authentication and rate-limit failures are all reported the
    same way; the engine treats every one of them as fatal for the panel.
    """

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class ParseError(SSREngineError, ValueError):
    """A multiple-choice answer did not contain a usable option number."""


__all__ = ["BackendError", "ParseError", "SSREngineError"]
