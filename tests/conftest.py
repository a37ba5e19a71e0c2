from __future__ import annotations

import sys
from collections.abc import Iterator
from itertools import count
from pathlib import Path
from typing import Optional

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from wiki_adventure.config import AdventureConfig
from wiki_adventure.errors import CredentialBootstrapError, WikiAPIError
from wiki_adventure.frequency import FrequencyRecord, SessionCredential
from wiki_adventure.mediawiki import PageExtract, SearchResult

DEFAULT_TEXT = "First sentence here. Second sentence here"


def record(per_million: float) -> FrequencyRecord:
    return FrequencyRecord(zipf=3.0, per_million=per_million, diversity=0.5)


class FakeTransport:
    """In-memory frequency service with scripted failures."""

    def __init__(self, records: Optional[dict[str, FrequencyRecord]] = None):
        self.records = dict(records or {})
        self.failures: dict[str, list[Exception]] = {}
        self.lookups: list[tuple[str, SessionCredential]] = []
        self.bootstraps = 0
        self.bootstrap_error: Optional[CredentialBootstrapError] = None

    def bootstrap(self) -> SessionCredential:
        self.bootstraps += 1
        if self.bootstrap_error is not None:
            raise self.bootstrap_error
        return SessionCredential(when=f"when-{self.bootstraps}", encrypted=f"enc-{self.bootstraps}")

    def lookup(self, word: str, credential: SessionCredential) -> Optional[FrequencyRecord]:
        self.lookups.append((word, credential))
        pending = self.failures.get(word)
        if pending:
            raise pending.pop(0)
        return self.records.get(word)


class FakeWikiAPI:
    """In-memory stand-in for :class:`wiki_adventure.mediawiki.MediaWikiAPI`."""

    def __init__(self) -> None:
        self.search_results: dict[str, list[str]] = {}
        self.failing_searches: set[str] = set()
        self.texts: dict[str, str] = {}
        self.empty_titles: set[str] = set()
        self.searches: list[str] = []
        self.random_requests: list[int] = []
        self.extract_requests: list[list[str]] = []
        self.random_error: Optional[WikiAPIError] = None
        self._random_ids = count(1)

    def opensearch(self, search: str, namespace: str, limit: int = 1) -> SearchResult:
        self.searches.append(search)
        if search in self.failing_searches:
            raise WikiAPIError(f"search for {search} failed")
        return SearchResult(query=search, titles=self.search_results.get(search, [])[:limit])

    def random_titles(self, namespace: str, limit: int) -> list[str]:
        self.random_requests.append(limit)
        if self.random_error is not None:
            raise self.random_error
        return [f"Random {next(self._random_ids)}" for _ in range(limit)]

    def extracts(self, titles: list[str]) -> list[PageExtract]:
        self.extract_requests.append(list(titles))
        pages = []
        for page_id, title in enumerate(dict.fromkeys(titles), start=1):
            text = "" if title in self.empty_titles else self.texts.get(title, DEFAULT_TEXT)
            pages.append(PageExtract(page_id=page_id, title=title, extract=text))
        return pages


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def config() -> AdventureConfig:
    return AdventureConfig()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def wiki() -> FakeWikiAPI:
    return FakeWikiAPI()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def rng() -> Iterator[np.random.Generator]:
    yield np.random.default_rng(1234)
