"""Text processing helpers used throughout the wiki adventure package."""

from __future__ import annotations

import re
from typing import List

_WORD_RE = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")

TERMINAL_PUNCTUATION = (".", "!", "?", ":", ";", ",")


def tokenize_words(value: str) -> List[str]:
    """Split ``value`` into lowercased words, keeping inner apostrophes."""
    if not value:
        return []
    return [match.group(0) for match in _WORD_RE.finditer(value.lower())]


def unique_in_order(tokens: List[str]) -> List[str]:
    """Drop repeated tokens, keeping the first occurrence of each."""
    return list(dict.fromkeys(tokens))


def add_missing_punctuation(sentence: str) -> str:
    """Append a period unless ``sentence`` already ends in terminal punctuation."""
    if sentence.endswith(TERMINAL_PUNCTUATION):
        return sentence
    return f"{sentence}."
