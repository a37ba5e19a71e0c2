"""The MediaWiki adventure bot: one object owning a whole conversation session."""

from __future__ import annotations

import time
from typing import Callable, Optional

import numpy as np

from .composer import ComposedResponse, ResponseComposer
from .config import AdventureConfig
from .excerpts import ExcerptFetcher, Segmenter
from .frequency import FrequencyClient, FrequencyTransport, SessionState, WordsAPITransport
from .logging import get_logger
from .mediawiki import MediaWikiAPI
from .ranking import RelevanceRanker
from .titles import TitleResolver
from .utils import create_rng

LOGGER = get_logger(__name__)


class MediaWikiAdventureBot:
    """Facade that wires the frequency client, ranker, resolver, fetcher and composer.

    The bot owns the :class:`SessionState` (word frequency cache and session
    credential), so separate bots never share state and one bot remembers the
    vocabulary of its whole conversation.
    """

    def __init__(
        self,
        config: Optional[AdventureConfig] = None,
        *,
        api: Optional[MediaWikiAPI] = None,
        transport: Optional[FrequencyTransport] = None,
        segmenter: Optional[Segmenter] = None,
        rng: Optional[np.random.Generator] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or AdventureConfig()
        self.state = SessionState()
        self.api = api or MediaWikiAPI(self.config.wiki)
        self.frequencies = FrequencyClient(
            transport or WordsAPITransport(self.config.frequency),
            state=self.state,
            config=self.config.frequency,
            sleep=sleep,
        )
        self.ranker = RelevanceRanker(
            self.frequencies, commonness_threshold=self.config.composer.commonness_threshold
        )
        self.resolver = TitleResolver(self.api, namespaces=self.config.wiki.namespaces)
        self.fetcher = ExcerptFetcher(self.api, segmenter=segmenter)
        self.composer = ResponseComposer(
            self.ranker,
            self.resolver,
            self.fetcher,
            config=self.config.composer,
            rng=rng if rng is not None else create_rng(self.config.seed),
        )

    def compose(self, message: str) -> ComposedResponse:
        response = self.composer.compose(message)
        LOGGER.info(
            "Composed %d sentences from %d titles (%d relevant, %d fill rounds)",
            len(response.sentences),
            len(response.titles),
            len(response.relevant_titles),
            response.fill_rounds,
        )
        return response

    def respond(self, message: str) -> str:
        """Get a possibly-relevant response to ``message``.

        Relevance depends on how rare the words of the message are; an empty
        message gets a response built from random articles.
        """
        return self.compose(message).text


__all__ = ["MediaWikiAdventureBot"]
