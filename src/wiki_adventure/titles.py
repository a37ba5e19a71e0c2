"""Turn words into article titles, or draw titles at random."""

from __future__ import annotations

from typing import List, Optional

from .errors import WikiAPIError
from .logging import get_logger
from .mediawiki import MediaWikiAPI

LOGGER = get_logger(__name__)

DEFAULT_NAMESPACES = "0|108"


class TitleResolver:
    def __init__(self, api: MediaWikiAPI, namespaces: str = DEFAULT_NAMESPACES):
        self.api = api
        self.namespaces = namespaces

    def search_title(self, word: str) -> Optional[str]:
        """Return the best matching title for ``word``, or ``None``."""
        try:
            result = self.api.opensearch(word, namespace=self.namespaces, limit=1)
        except WikiAPIError as exc:
            LOGGER.warning("Search for %r failed: %s", word, exc)
            return None
        if not result.titles:
            LOGGER.debug("No article matches %r", word)
            return None
        return result.titles[0]

    def random_titles(self, count: int) -> List[str]:
        if count <= 0:
            return []
        return self.api.random_titles(namespace=self.namespaces, limit=count)


__all__ = ["DEFAULT_NAMESPACES", "TitleResolver"]
