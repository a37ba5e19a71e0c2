"""Rank the words of a message by rarity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import FrequencyLookupError
from .frequency import FrequencyClient, FrequencyRecord
from .logging import get_logger
from .utils import tokenize_words, unique_in_order

LOGGER = get_logger(__name__)

DEFAULT_COMMONNESS_THRESHOLD = 1000.0


@dataclass(frozen=True)
class RankedWord:
    word: str
    frequency: FrequencyRecord


class RelevanceRanker:
    """Orders the distinctive words of a message, rarest first."""

    def __init__(self, frequencies: FrequencyClient, commonness_threshold: float = DEFAULT_COMMONNESS_THRESHOLD):
        self.frequencies = frequencies
        self.commonness_threshold = commonness_threshold

    def rank_candidates(self, message: str) -> List[RankedWord]:
        candidates: List[RankedWord] = []
        for word in unique_in_order(tokenize_words(message)):
            try:
                record = self.frequencies.get_freq(word)
            except FrequencyLookupError as exc:
                LOGGER.warning("Giving up on frequency of %r: %s", word, exc)
                continue
            if record is None:
                continue
            if record.per_million >= self.commonness_threshold:
                continue
            candidates.append(RankedWord(word=word, frequency=record))
        candidates.sort(key=lambda candidate: candidate.frequency.per_million)
        return candidates

    def rank(self, message: str) -> List[str]:
        """Return the informative words of ``message``; empty means use random articles."""
        return [candidate.word for candidate in self.rank_candidates(message)]


__all__ = ["DEFAULT_COMMONNESS_THRESHOLD", "RankedWord", "RelevanceRanker"]
