"""Word frequency lookups with a session cache and a retry policy.

Frequencies come from the WordsAPI front end, which requires two short-lived
parameters (``when`` and ``encrypted``) scraped from its landing page. The
:class:`FrequencyClient` hides all of that behind :meth:`FrequencyClient.get_freq`:

* results, including the absence of data, are cached per lowercased word;
* the session credential is bootstrapped lazily and refreshed on ``401``;
* transient failures are retried with exponential backoff via ``tenacity``.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Union
from urllib.parse import quote

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import FrequencyConfig
from .errors import CredentialBootstrapError, FrequencyLookupError, UnauthorizedError
from .logging import get_logger

LOGGER = get_logger(__name__)

_CREDENTIAL_RE = re.compile(r'var when = "([^"]+)",\s+encrypted = "([^"]+)";')


@dataclass(frozen=True)
class FrequencyRecord:
    """Corpus-relative rarity of a word."""

    zipf: float
    per_million: float
    diversity: float

    @classmethod
    def from_payload(cls, payload: Any) -> FrequencyRecord:
        if not isinstance(payload, dict):
            msg = f"Unexpected frequency payload: {payload!r}"
            raise ValueError(msg)
        try:
            return cls(
                zipf=float(payload["zipf"]),
                per_million=float(payload["perMillion"]),
                diversity=float(payload["diversity"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Malformed frequency payload: {payload!r}"
            raise ValueError(msg) from exc


@dataclass(frozen=True)
class SessionCredential:
    """Opaque, time-limited parameters required by the frequency service."""

    when: str
    encrypted: str


class _KnownAbsent:
    def __repr__(self) -> str:
        return "KNOWN_ABSENT"


KNOWN_ABSENT = _KnownAbsent()

CacheEntry = Union[FrequencyRecord, _KnownAbsent]


class SessionState:
    """Word frequency cache and session credential shared by one engine."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[str, CacheEntry] = {}
        self._credential: Optional[SessionCredential] = None

    def lookup(self, word: str) -> Optional[CacheEntry]:
        """Return the cached entry for ``word``, or ``None`` if it was never looked up."""
        with self._lock:
            return self._cache.get(word)

    def store(self, word: str, record: Optional[FrequencyRecord]) -> None:
        with self._lock:
            self._cache[word] = KNOWN_ABSENT if record is None else record

    @property
    def credential(self) -> Optional[SessionCredential]:
        with self._lock:
            return self._credential

    def set_credential(self, credential: SessionCredential) -> None:
        with self._lock:
            self._credential = credential

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, word: object) -> bool:
        with self._lock:
            return word in self._cache


class FrequencyTransport(Protocol):
    def bootstrap(self) -> SessionCredential:
        ...

    def lookup(self, word: str, credential: SessionCredential) -> Optional[FrequencyRecord]:
        ...


class WordsAPITransport:
    """Raw HTTP access to the WordsAPI frequency endpoint."""

    def __init__(self, config: Optional[FrequencyConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or FrequencyConfig()
        self.session = session or requests.Session()
        self.session.headers.update(
            {"User-Agent": self.config.user_agent, "X-Requested-With": "XMLHttpRequest"}
        )

    def bootstrap(self) -> SessionCredential:
        """Scrape fresh session parameters from the landing page."""
        try:
            response = self.session.get(self.config.bootstrap_url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Could not fetch session parameters from {self.config.bootstrap_url}: {exc}"
            raise CredentialBootstrapError(msg) from exc

        match = _CREDENTIAL_RE.search(response.text)
        if match is None:
            msg = f"No session parameters found on {self.config.bootstrap_url}"
            raise CredentialBootstrapError(msg)
        return SessionCredential(when=match.group(1), encrypted=match.group(2))

    def lookup(self, word: str, credential: SessionCredential) -> Optional[FrequencyRecord]:
        """Return the record for ``word``, or ``None`` when the service has no data."""
        url = f"{self.config.base_url}{quote(word, safe='')}/frequency"
        try:
            response = self.session.get(
                url,
                params={"when": credential.when, "encrypted": credential.encrypted},
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Frequency request for {word!r} failed: {exc}"
            raise FrequencyLookupError(msg) from exc

        if response.status_code == 404:
            return None
        if response.status_code == 401:
            msg = f"Session credential rejected while looking up {word!r}"
            raise UnauthorizedError(msg)
        try:
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            msg = f"Frequency request for {word!r} failed: {exc}"
            raise FrequencyLookupError(msg) from exc
        except ValueError as exc:
            msg = f"Frequency response for {word!r} was not JSON"
            raise FrequencyLookupError(msg) from exc

        frequency = payload.get("frequency") if isinstance(payload, dict) else None
        if frequency is None:
            return None
        try:
            return FrequencyRecord.from_payload(frequency)
        except ValueError as exc:
            LOGGER.warning("Treating %r as having no frequency data: %s", word, exc)
            return None


class FrequencyClient:
    """Resolves words to frequency records through the session cache."""

    def __init__(
        self,
        transport: FrequencyTransport,
        state: Optional[SessionState] = None,
        config: Optional[FrequencyConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.state = state if state is not None else SessionState()
        self.config = config or FrequencyConfig()
        self._sleep = sleep

    def get_freq(self, word: str) -> Optional[FrequencyRecord]:
        """Return the frequency record for ``word``, or ``None`` when none exists.

        Raises :class:`CredentialBootstrapError` when no credential can be obtained
        and the last :class:`FrequencyLookupError` once retries are exhausted.
        """
        key = word.lower()
        cached = self.state.lookup(key)
        if cached is not None:
            LOGGER.debug("Frequency cache hit for %r", key)
            return None if cached is KNOWN_ABSENT else cached

        if self.state.credential is None:
            self.refresh_credential()

        record = self._retrying()(self._attempt, key)
        self.state.store(key, record)
        return record

    def refresh_credential(self) -> SessionCredential:
        credential = self.transport.bootstrap()
        self.state.set_credential(credential)
        LOGGER.info("Refreshed frequency session credential")
        return credential

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.config.retries + 1),
            wait=wait_exponential(
                multiplier=self.config.min_timeout,
                exp_base=self.config.factor,
                max=self.config.max_timeout,
            ),
            retry=retry_if_exception_type(FrequencyLookupError),
            sleep=self._sleep,
            before_sleep=before_sleep_log(LOGGER, logging.DEBUG),
            reraise=True,
        )

    def _attempt(self, word: str) -> Optional[FrequencyRecord]:
        credential = self.state.credential
        if credential is None:
            credential = self.refresh_credential()
        try:
            return self.transport.lookup(word, credential)
        except UnauthorizedError:
            LOGGER.info("Frequency credential rejected for %r; refreshing", word)
            self.refresh_credential()
            raise


__all__ = [
    "FrequencyClient",
    "FrequencyRecord",
    "FrequencyTransport",
    "KNOWN_ABSENT",
    "SessionCredential",
    "SessionState",
    "WordsAPITransport",
]
