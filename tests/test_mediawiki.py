from __future__ import annotations

import pytest
import requests

from wiki_adventure.config import WikiConfig
from wiki_adventure.errors import WikiAPIError
from wiki_adventure.excerpts import ExcerptFetcher
from wiki_adventure.mediawiki import MediaWikiAPI, PageExtract
from wiki_adventure.titles import TitleResolver


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, *payloads, error: Exception | None = None):
        self.headers: dict[str, str] = {}
        self.payloads = list(payloads)
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, params=None, timeout=None) -> FakeResponse:
        self.calls.append((url, dict(params or {})))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payloads.pop(0))


def test_request_adds_action_and_format() -> None:
    session = FakeSession(["cat", ["Cat"], [""], ["https://en.wikipedia.org/wiki/Cat"]])
    api = MediaWikiAPI(WikiConfig(user_agent="tests/1.0"), session=session)

    result = api.opensearch("cat", namespace="0|108")

    assert result.titles == ["Cat"]
    url, params = session.calls[0]
    assert url == "https://en.wikipedia.org/w/api.php"
    assert params == {
        "action": "opensearch",
        "format": "json",
        "search": "cat",
        "namespace": "0|108",
        "limit": 1,
    }
    assert session.headers["User-Agent"] == "tests/1.0"


def test_transport_errors_become_wiki_api_errors() -> None:
    api = MediaWikiAPI(session=FakeSession(error=requests.ConnectionError("offline")))
    with pytest.raises(WikiAPIError):
        api.random_titles("0", 3)


def test_random_titles_are_parsed() -> None:
    payload = {"query": {"random": [{"id": 1, "ns": 0, "title": "Foo"}, {"id": 2, "ns": 108, "title": "Book:Bar"}]}}
    session = FakeSession(payload)
    resolver = TitleResolver(MediaWikiAPI(session=session))

    assert resolver.random_titles(2) == ["Foo", "Book:Bar"]
    assert session.calls[0][1]["rnlimit"] == 2
    assert session.calls[0][1]["rnnamespace"] == "0|108"


def test_random_titles_skip_request_for_zero() -> None:
    session = FakeSession()
    assert TitleResolver(MediaWikiAPI(session=session)).random_titles(0) == []
    assert session.calls == []


def test_mediawiki_error_payload_raises() -> None:
    api = MediaWikiAPI(session=FakeSession({"error": {"code": "badvalue", "info": "nope"}}))
    with pytest.raises(WikiAPIError, match="badvalue"):
        api.random_titles("0", 1)


def test_search_failures_are_swallowed() -> None:
    resolver = TitleResolver(MediaWikiAPI(session=FakeSession(error=requests.Timeout("slow"))))
    assert resolver.search_title("cat") is None


def test_search_without_matches_returns_none() -> None:
    resolver = TitleResolver(MediaWikiAPI(session=FakeSession(["zzqx", [], [], []])))
    assert resolver.search_title("zzqx") is None


def test_extracts_follow_page_order_and_flag_missing_pages() -> None:
    first = {
        "continue": {"excontinue": 1, "continue": "||"},
        "query": {
            "redirects": [{"from": "Kitty", "to": "Cat"}],
            "pages": {
                "6678": {"pageid": 6678, "ns": 0, "title": "Cat", "extract": "Cats purr.\nThey nap"},
                "-1": {"ns": 0, "title": "Nothing", "missing": ""},
                "42": {"pageid": 42, "ns": 0, "title": "Stub"},
            },
        },
    }
    second = {
        "batchcomplete": "",
        "query": {
            "pages": {
                "42": {"pageid": 42, "ns": 0, "title": "Stub", "extract": "Stubs are short."},
                "6678": {"pageid": 6678, "ns": 0, "title": "Cat"},
                "-1": {"ns": 0, "title": "Nothing", "missing": ""},
            },
        },
    }
    session = FakeSession(first, second)
    fetcher = ExcerptFetcher(MediaWikiAPI(session=session))

    excerpts = fetcher.fetch_excerpts(["Kitty", "Nothing", "Stub"])

    assert excerpts == [["Cats purr.", "They nap"], [], ["Stubs are short."]]
    assert len(session.calls) == 2
    params = session.calls[0][1]
    assert params["titles"] == "Kitty|Nothing|Stub"
    assert params["redirects"] == 1
    assert params["explaintext"] == 1
    assert params["exlimit"] == 1
    assert "excontinue" not in params
    continued = session.calls[1][1]
    assert continued["excontinue"] == 1
    assert continued["titles"] == "Kitty|Nothing|Stub"


def test_extract_continuation_is_bounded_by_title_count() -> None:
    looping = {
        "continue": {"excontinue": 1, "continue": "||"},
        "query": {"pages": {"7": {"pageid": 7, "ns": 0, "title": "Loop"}}},
    }
    session = FakeSession(looping, looping)

    pages = MediaWikiAPI(session=session).extracts(["Loop", "Loop again"])

    assert len(session.calls) == 2
    assert [page.title for page in pages] == ["Loop"]


def test_non_mapping_error_payload_raises_wiki_api_error() -> None:
    api = MediaWikiAPI(session=FakeSession({"error": "internal_api_error"}))
    with pytest.raises(WikiAPIError, match="internal_api_error"):
        api.random_titles("0", 1)


def test_fetch_excerpts_without_titles_skips_request() -> None:
    session = FakeSession()
    assert ExcerptFetcher(MediaWikiAPI(session=session)).fetch_excerpts([]) == []
    assert session.calls == []


def test_page_extract_tolerates_absent_extract() -> None:
    page = PageExtract.from_payload("7", {"title": "Foo"})
    assert page.extract == ""
    assert page.missing is False
