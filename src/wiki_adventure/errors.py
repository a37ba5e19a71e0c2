"""Exception hierarchy for the wiki adventure engine."""

from __future__ import annotations


class WikiAdventureError(RuntimeError):
    """Base class for every error raised by the engine."""


class WikiAPIError(WikiAdventureError):
    """Raised when the MediaWiki API fails or returns an unexpected payload."""


class FrequencyLookupError(WikiAdventureError):
    """Raised for retryable failures of the word frequency service."""


class UnauthorizedError(FrequencyLookupError):
    """Raised when the frequency service rejects the session credential."""


class CredentialBootstrapError(WikiAdventureError):
    """Raised when session parameters cannot be obtained from the bootstrap page."""


class ConfigError(WikiAdventureError, ValueError):
    """Raised when a configuration file or override cannot be applied."""


class ContentExhaustedError(WikiAdventureError):
    """Raised when the wiki keeps returning articles without usable text."""

    def __init__(self, target: int, collected: int, rounds: int) -> None:
        super().__init__(
            f"Collected {collected} of {target} excerpts after {rounds} fill rounds"
        )
        self.target = target
        self.collected = collected
        self.rounds = rounds


__all__ = [
    "ConfigError",
    "ContentExhaustedError",
    "CredentialBootstrapError",
    "FrequencyLookupError",
    "UnauthorizedError",
    "WikiAPIError",
    "WikiAdventureError",
]
