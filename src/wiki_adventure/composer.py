"""Assemble replies from sentences sampled out of wiki articles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .config import ComposerConfig
from .errors import ContentExhaustedError, WikiAPIError
from .excerpts import ExcerptFetcher
from .logging import get_logger
from .ranking import RelevanceRanker
from .titles import TitleResolver
from .utils import add_missing_punctuation

LOGGER = get_logger(__name__)


@dataclass
class ComposedResponse:
    """Everything that went into one reply."""

    target: int
    titles: List[str] = field(default_factory=list)
    relevant_titles: List[str] = field(default_factory=list)
    sentences: List[str] = field(default_factory=list)
    fill_rounds: int = 0

    @property
    def text(self) -> str:
        return " ".join(self.sentences)


class ResponseComposer:
    """Ranks words, resolves titles, tops up with random articles and samples sentences."""

    def __init__(
        self,
        ranker: RelevanceRanker,
        resolver: TitleResolver,
        fetcher: ExcerptFetcher,
        config: Optional[ComposerConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.ranker = ranker
        self.resolver = resolver
        self.fetcher = fetcher
        self.config = config or ComposerConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def compose(self, message: str) -> ComposedResponse:
        target = self.draw_target()
        response = ComposedResponse(target=target)

        response.relevant_titles = self.resolve_relevant_titles(message, target)
        response.titles = list(response.relevant_titles)

        excerpts = self._fill(response, target)
        response.sentences = [self._sample(excerpt) for excerpt in excerpts[:target]]
        return response

    def draw_target(self) -> int:
        """Draw the sentence count uniformly from the configured inclusive range."""
        return int(
            self.rng.integers(self.config.min_sentences, self.config.max_sentences, endpoint=True)
        )

    def resolve_relevant_titles(self, message: str, target: int) -> List[str]:
        titles: List[str] = []
        for word in self.ranker.rank(message):
            if len(titles) >= target:
                break
            title = self.resolver.search_title(word)
            if title is not None:
                titles.append(title)
        LOGGER.debug("Resolved %d relevant titles for a target of %d", len(titles), target)
        return titles

    def _fill(self, response: ComposedResponse, target: int) -> List[List[str]]:
        """Fetch excerpts until ``target`` non-empty ones are collected.

        Every round tops the pending titles up with random ones to cover the
        shortfall, so the first round also fills in for unresolved words.
        """
        max_rounds = self.config.fill_round_factor * target
        excerpts: List[List[str]] = []
        pending = list(response.titles)

        while len(excerpts) < target:
            if response.fill_rounds >= max_rounds:
                raise ContentExhaustedError(target, len(excerpts), response.fill_rounds)
            shortfall = target - len(excerpts)
            if len(pending) < shortfall:
                extra = self._draw_random(shortfall - len(pending))
                pending.extend(extra)
                response.titles.extend(extra)
            response.fill_rounds += 1
            if not pending:
                continue

            try:
                fetched = self.fetcher.fetch_excerpts(pending)
            except WikiAPIError as exc:
                LOGGER.warning("Excerpt fetch failed: %s", exc)
                fetched = []
            found = [excerpt for excerpt in fetched if excerpt]
            excerpts.extend(found)
            LOGGER.debug(
                "Fill round %d: %d of %d titles yielded text",
                response.fill_rounds,
                len(found),
                len(pending),
            )
            pending = []
        return excerpts

    def _draw_random(self, count: int) -> List[str]:
        try:
            return self.resolver.random_titles(count)
        except WikiAPIError as exc:
            LOGGER.warning("Random title draw failed: %s", exc)
            return []

    def _sample(self, excerpt: List[str]) -> str:
        sentence = excerpt[int(self.rng.integers(len(excerpt)))]
        return add_missing_punctuation(sentence)


__all__ = ["ComposedResponse", "ResponseComposer"]
