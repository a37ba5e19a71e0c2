"""Utility helpers shared across the wiki adventure package."""

from .random import create_rng, deterministic_hash, resolve_seed
from .text import TERMINAL_PUNCTUATION, add_missing_punctuation, tokenize_words, unique_in_order

__all__ = [
    "TERMINAL_PUNCTUATION",
    "add_missing_punctuation",
    "create_rng",
    "deterministic_hash",
    "resolve_seed",
    "tokenize_words",
    "unique_in_order",
]
