"""Fetch article bodies and split them into sentences."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from nltk.tokenize.punkt import PunktSentenceTokenizer

from .logging import get_logger
from .mediawiki import MediaWikiAPI

LOGGER = get_logger(__name__)

Segmenter = Callable[[str], List[str]]

_PUNKT = PunktSentenceTokenizer()


def segment_sentences(text: str) -> List[str]:
    """Split ``text`` into sentences, treating every newline as a boundary."""
    sentences: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        sentences.extend(sentence.strip() for sentence in _PUNKT.tokenize(line) if sentence.strip())
    return sentences


class ExcerptFetcher:
    def __init__(self, api: MediaWikiAPI, segmenter: Optional[Segmenter] = None):
        self.api = api
        self.segmenter = segmenter or segment_sentences

    def fetch_excerpts(self, titles: Sequence[str]) -> List[List[str]]:
        """Return one sentence list per page resolved from ``titles``.

        The result follows the API's page order, so it does not line up with
        ``titles`` once redirects or duplicates are involved. Pages without text
        produce an empty list.
        """
        if not titles:
            return []
        pages = self.api.extracts(list(titles))
        excerpts = []
        for page in pages:
            if page.missing:
                LOGGER.debug("Page %r is missing", page.title)
                excerpts.append([])
                continue
            excerpts.append(self.segmenter(page.extract))
        return excerpts


__all__ = ["ExcerptFetcher", "Segmenter", "segment_sentences"]
