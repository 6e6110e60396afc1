"""Generative text backends."""

from .base import TextGenerator
from .factory import get_provider

__all__ = ["TextGenerator", "get_provider"]
