"""Tests for cache namespacing behavior."""

from __future__ import annotations

import numpy as np

from ssr_panel import cache


def test_cache_isolated_by_namespace() -> None:
    text = "I completely agree with this statement."
    cache.add_to_cache(text, np.ones(3), namespace="anchor:text-embedding-3-small")
    cache.add_to_cache(text, np.zeros(3), namespace="anchor:text-embedding-3-large")

    small = cache.get_from_cache(text, namespace="anchor:text-embedding-3-small")
    large = cache.get_from_cache(text, namespace="anchor:text-embedding-3-large")

    assert small is not None and small.tolist() == [1.0, 1.0, 1.0]
    assert large is not None and large.tolist() == [0.0, 0.0, 0.0]
    assert cache.get_from_cache(text, namespace="anchor:stub") is None


def test_clear_cache() -> None:
    cache.add_to_cache("anchor", np.ones(2))
    cache.clear_cache()
    assert cache.get_from_cache("anchor") is None
