"""Thin wrapper around a MediaWiki ``api.php`` endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import requests

from .config import WikiConfig
from .errors import WikiAPIError
from .logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Result of an ``opensearch`` request."""

    query: str
    titles: list[str]

    @classmethod
    def from_payload(cls, payload: Any) -> SearchResult:
        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            msg = f"Unexpected opensearch payload: {payload!r}"
            raise WikiAPIError(msg)
        return cls(query=str(payload[0]), titles=[str(title) for title in payload[1]])


@dataclass(frozen=True)
class PageExtract:
    """Plain-text extract of a single page in a ``prop=extracts`` response."""

    page_id: int
    title: str
    extract: str
    missing: bool = False

    @classmethod
    def from_payload(cls, page_id: str, payload: Any) -> PageExtract:
        if not isinstance(payload, dict):
            msg = f"Unexpected page payload for {page_id}: {payload!r}"
            raise WikiAPIError(msg)
        extract = payload.get("extract")
        return cls(
            page_id=int(page_id),
            title=str(payload.get("title", "")),
            extract=extract if isinstance(extract, str) else "",
            missing="missing" in payload or "invalid" in payload,
        )


def _query_section(payload: Any, key: str) -> Any:
    if not isinstance(payload, dict):
        msg = f"Unexpected query payload: {payload!r}"
        raise WikiAPIError(msg)
    if "error" in payload:
        error = payload["error"]
        if isinstance(error, dict):
            msg = f"MediaWiki error {error.get('code')}: {error.get('info')}"
        else:
            msg = f"MediaWiki error: {error!r}"
        raise WikiAPIError(msg)
    query = payload.get("query")
    if not isinstance(query, dict) or key not in query:
        msg = f"Query payload has no {key!r} section"
        raise WikiAPIError(msg)
    return query[key]


class MediaWikiAPI:
    """Interacts with a given MediaWiki's API."""

    def __init__(self, config: Optional[WikiConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or WikiConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def request(self, action: str, params: dict[str, Any]) -> Any:
        """Perform ``action`` with ``params`` and return the decoded JSON body."""
        query = dict(params)
        query["action"] = action
        query["format"] = "json"

        try:
            response = self.session.get(
                self.config.api_endpoint, params=query, timeout=self.config.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            msg = f"MediaWiki {action} request failed: {exc}"
            raise WikiAPIError(msg) from exc
        except ValueError as exc:
            msg = f"MediaWiki {action} response was not JSON"
            raise WikiAPIError(msg) from exc

    def opensearch(self, search: str, namespace: str, limit: int = 1) -> SearchResult:
        payload = self.request(
            "opensearch", {"search": search, "namespace": namespace, "limit": limit}
        )
        return SearchResult.from_payload(payload)

    def random_titles(self, namespace: str, limit: int) -> list[str]:
        payload = self.request(
            "query", {"list": "random", "rnnamespace": namespace, "rnlimit": limit}
        )
        entries = _query_section(payload, "random")
        if not isinstance(entries, list):
            msg = f"Unexpected random payload: {entries!r}"
            raise WikiAPIError(msg)
        return [str(entry["title"]) for entry in entries if isinstance(entry, dict) and "title" in entry]

    def extracts(self, titles: list[str]) -> list[PageExtract]:
        """Fetch plain-text extracts for ``titles``, following redirects.

        TextExtracts serves a single whole-article extract per response, so the
        query is continued through ``excontinue`` until every page has its text.
        Pages keep the order of the first response.
        """
        base_params: dict[str, Any] = {
            "prop": "extracts",
            "titles": "|".join(titles),
            "redirects": 1,
            "exlimit": 1,
            "explaintext": 1,
            "exsectionformat": "plain",
        }
        params = base_params
        pages: dict[str, PageExtract] = {}
        for _ in range(len(titles)):
            payload = self.request("query", params)
            batch = _query_section(payload, "pages")
            if not isinstance(batch, dict):
                msg = f"Unexpected pages payload: {batch!r}"
                raise WikiAPIError(msg)
            for page_id, page in batch.items():
                extract = PageExtract.from_payload(page_id, page)
                if page_id not in pages or extract.extract:
                    pages[page_id] = extract
            continuation = payload.get("continue")
            if not isinstance(continuation, dict) or "excontinue" not in continuation:
                break
            params = {**base_params, **continuation}
        return list(pages.values())


__all__ = ["MediaWikiAPI", "PageExtract", "SearchResult"]
