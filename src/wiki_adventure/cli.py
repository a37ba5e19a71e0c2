"""Command line interface for the wiki adventure bot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer

from .bot import MediaWikiAdventureBot
from .config import AdventureConfig, load_config
from .errors import ConfigError, WikiAdventureError
from .logging import configure_logging

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to a YAML or JSON configuration file.",
)
ENDPOINT_OPTION = typer.Option(
    None,
    "--endpoint",
    help="MediaWiki api.php endpoint to draw articles from.",
)
SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Seed for reproducible sentence and article choices.",
)
VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log frequency lookups, retries and fill rounds.",
)

app = typer.Typer(
    help="Talk to a bot that answers with sentences borrowed from wiki articles."
)


def _load(config_path: Optional[Path], endpoint: Optional[str], seed: Optional[int]) -> AdventureConfig:
    overrides: list[dict[str, Any]] = []
    if endpoint is not None:
        overrides.append({"wiki": {"api_endpoint": endpoint}})
    if seed is not None:
        overrides.append({"seed": seed})
    try:
        return load_config(config_path, overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _build_bot(config: AdventureConfig) -> MediaWikiAdventureBot:
    return MediaWikiAdventureBot(config)


def _setup(verbose: bool) -> logging.Logger:
    return configure_logging(level=logging.DEBUG if verbose else logging.WARNING, logger_name=__name__)


def _say(text: str) -> None:
    typer.secho(text, fg=typer.colors.BRIGHT_YELLOW)


def _complain(exc: WikiAdventureError) -> None:
    typer.secho(f"Could not come up with a response: {exc}", fg=typer.colors.RED, err=True)


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to respond to."),
    config_path: Optional[Path] = CONFIG_OPTION,
    endpoint: Optional[str] = ENDPOINT_OPTION,
    seed: Optional[int] = SEED_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print a single response to MESSAGE."""

    _setup(verbose)
    bot = _build_bot(_load(config_path, endpoint, seed))
    try:
        _say(bot.respond(message))
    except WikiAdventureError as exc:
        _complain(exc)
        raise typer.Exit(code=1) from exc


@app.command()
def chat(
    config_path: Optional[Path] = CONFIG_OPTION,
    endpoint: Optional[str] = ENDPOINT_OPTION,
    seed: Optional[int] = SEED_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Start an interactive conversation; end it with Ctrl-D."""

    logger = _setup(verbose)
    bot = _build_bot(_load(config_path, endpoint, seed))

    # A starter message gets the conversation going.
    message = ""
    while True:
        try:
            _say(bot.respond(message))
        except WikiAdventureError as exc:
            _complain(exc)
        try:
            message = typer.prompt("", prompt_suffix="> ", default="", show_default=False)
        except typer.Abort:
            logger.debug("Conversation ended")
            break
        typer.echo("")


if __name__ == "__main__":
    app()
