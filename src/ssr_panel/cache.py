"""In-process cache for anchor embeddings."""

from __future__ import annotations

import hashlib
from typing import Dict, Optional

import numpy as np

_CACHE: Dict[str, np.ndarray] = {}


def get_from_cache(text: str, namespace: str = "") -> Optional[np.ndarray]:
    """Get an embedding from the cache."""
    return _CACHE.get(_get_key(text, namespace))


def add_to_cache(text: str, vector: np.ndarray, namespace: str = "") -> None:
    """Add an embedding to the cache."""
    _CACHE[_get_key(text, namespace)] = vector


def clear_cache() -> None:
    _CACHE.clear()


def _get_key(text: str, namespace: str) -> str:
    """Get the cache key for a text within a namespace."""
    return hashlib.sha256(f"{namespace}\x00{text}".encode()).hexdigest()


__all__ = ["add_to_cache", "clear_cache", "get_from_cache"]
