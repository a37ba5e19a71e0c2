"""Wiki adventure: conversational responses stitched together from wiki articles."""

from .bot import MediaWikiAdventureBot
from .composer import ComposedResponse, ResponseComposer
from .config import AdventureConfig, load_config
from .errors import (
    ConfigError,
    ContentExhaustedError,
    CredentialBootstrapError,
    FrequencyLookupError,
    WikiAdventureError,
    WikiAPIError,
)
from .frequency import FrequencyClient, FrequencyRecord, SessionState

__all__ = [
    "AdventureConfig",
    "ComposedResponse",
    "ConfigError",
    "ContentExhaustedError",
    "CredentialBootstrapError",
    "FrequencyClient",
    "FrequencyLookupError",
    "FrequencyRecord",
    "MediaWikiAdventureBot",
    "ResponseComposer",
    "SessionState",
    "WikiAPIError",
    "WikiAdventureError",
    "load_config",
]

__version__ = "0.1.0"
