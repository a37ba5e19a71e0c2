"""Configuration helpers for the wiki adventure engine."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, TypeVar

import yaml

from .errors import ConfigError

USER_AGENT = "WikipediaBasedAdventure/1.0 (https://github.com/wiki-adventure)"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:59.0) Gecko/20100101 Firefox/59.0"
)


@dataclass
class WikiConfig:
    """Configuration for the MediaWiki content API."""

    api_endpoint: str = "https://en.wikipedia.org/w/api.php"
    namespaces: str = "0|108"
    user_agent: str = USER_AGENT
    timeout: float = 10.0


@dataclass
class FrequencyConfig:
    """Configuration for the word frequency service and its retry policy."""

    base_url: str = "https://www.wordsapi.com/mashape/words/"
    bootstrap_url: str = "https://www.wordsapi.com"
    user_agent: str = BROWSER_USER_AGENT
    retries: int = 4
    factor: float = 1.5
    min_timeout: float = 0.5
    max_timeout: float = 2.5
    timeout: float = 10.0


@dataclass
class ComposerConfig:
    """Configuration for response composition."""

    min_sentences: int = 2
    max_sentences: int = 6
    commonness_threshold: float = 1000.0
    fill_round_factor: int = 3


@dataclass
class AdventureConfig:
    """Top-level configuration for the adventure bot."""

    wiki: WikiConfig = field(default_factory=WikiConfig)
    frequency: FrequencyConfig = field(default_factory=FrequencyConfig)
    composer: ComposerConfig = field(default_factory=ComposerConfig)
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdventureConfig:
        unknown = sorted(set(data) - {"wiki", "frequency", "composer", "seed"})
        if unknown:
            msg = f"Unknown configuration sections: {', '.join(unknown)}"
            raise ConfigError(msg)
        seed = data.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            msg = f"seed must be an integer, got {seed!r}"
            raise ConfigError(msg)
        config = cls(
            wiki=_section(WikiConfig, data, "wiki"),
            frequency=_section(FrequencyConfig, data, "frequency"),
            composer=_section(ComposerConfig, data, "composer"),
            seed=seed,
        )
        config.validate()
        return config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Raise :class:`ConfigError` when the configuration cannot drive the composer."""

        composer = self.composer
        if composer.min_sentences < 1:
            msg = "composer.min_sentences must be at least 1"
            raise ConfigError(msg)
        if composer.max_sentences < composer.min_sentences:
            msg = "composer.max_sentences must not be smaller than composer.min_sentences"
            raise ConfigError(msg)
        if composer.fill_round_factor < 1:
            msg = "composer.fill_round_factor must be at least 1"
            raise ConfigError(msg)
        if self.frequency.retries < 0:
            msg = "frequency.retries must not be negative"
            raise ConfigError(msg)
        if self.frequency.min_timeout > self.frequency.max_timeout:
            msg = "frequency.min_timeout must not exceed frequency.max_timeout"
            raise ConfigError(msg)


SectionT = TypeVar("SectionT")


def _section(section_cls: type[SectionT], data: Mapping[str, Any], name: str) -> SectionT:
    """Build one config section; a missing or empty section means defaults."""
    values = data.get(name)
    if values is None:
        return section_cls()
    if not isinstance(values, Mapping):
        msg = f"Section {name!r} must be a mapping, got {type(values).__name__}"
        raise ConfigError(msg)
    known = {item.name for item in fields(section_cls)}  # type: ignore[arg-type]
    unknown = sorted(set(values) - known)
    if unknown:
        msg = f"Unknown keys in section {name!r}: {', '.join(unknown)}"
        raise ConfigError(msg)
    return section_cls(**values)


def _read_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON file whose root must be a mapping (or empty)."""
    try:
        text = path.read_text(encoding="utf8")
    except OSError as exc:
        msg = f"Cannot read configuration {path}: {exc}"
        raise ConfigError(msg) from exc
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            loaded = yaml.safe_load(text)
        else:
            loaded = json.loads(text) if text.strip() else None
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Cannot parse configuration {path}: {exc}"
        raise ConfigError(msg) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        msg = f"Expected a mapping at the root of {path}"
        raise ConfigError(msg)
    return dict(loaded)


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` section by section."""
    merged = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            merged[key] = {**existing, **value}
        else:
            merged[key] = value
    return merged


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[Mapping[str, Any]]] = None,
) -> AdventureConfig:
    """Load configuration from ``path`` (if any) and apply ``overrides`` in order."""

    data: dict[str, Any] = {} if path is None else _read_mapping(Path(path))
    for override in overrides or []:
        data = _merge(data, override)
    return AdventureConfig.from_dict(data)
