"""Command line entry-point for linking entity mentions in content text."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, TextIO

import click

from .catalog import CatalogError, build_providers, fallback_catalog, load_catalog_file
from .core.cache import DEFAULT_CACHE_DURATION
from .core.models import ContentCatalog
from .disambiguation import find_conflicts, link_by_kind, link_mentions
from .utils.config import ConfigManager
from .utils.logging import setup_logging

logger = logging.getLogger("lore_linker.cli")

KIND_CHOICES = ["character", "lore", "episode", "all"]


def _load_catalog(catalog_path: Optional[str], config: ConfigManager) -> ContentCatalog:
    """Load the catalog named on the command line or in config, else built-in data."""
    path = catalog_path or config.get("catalog.path")
    if path:
        try:
            return load_catalog_file(path)
        except CatalogError as e:
            raise click.ClickException(str(e)) from e

    if not config.get("catalog.use_fallback", True):
        raise click.ClickException("No catalog supplied and fallback content is disabled")

    logger.info("No catalog supplied, using built-in content")
    return fallback_catalog()


def _read_text(input: TextIO) -> str:
    text = input.read()
    if not text.strip():
        raise click.ClickException("No text supplied")
    return text


def _setup(config_path: Optional[str], verbose: bool) -> ConfigManager:
    config = ConfigManager(Path(config_path) if config_path else None)
    setup_logging(level=config.get("logging.level"), verbose=verbose)
    return config


@click.group()
def main() -> None:
    """Link character, lore and episode mentions in Wavelength content."""


@main.command()
@click.option("--input", "-i", type=click.File("r"), default="-", help="Text file path (defaults to stdin)")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Output destination (defaults to stdout)")
@click.option("--catalog", "-c", "catalog_path", type=click.Path(dir_okay=False), help="JSON content export")
@click.option("--kind", "-k", type=click.Choice(KIND_CHOICES), default="all", show_default=True,
              help="Link only one kind of content, or all of them")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def link(
    input: TextIO,
    output: TextIO,
    catalog_path: Optional[str],
    kind: str,
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """Wrap entity mentions in the input text with anchor tags."""

    config = _setup(config_path, verbose)
    text = _read_text(input)
    catalog = _load_catalog(catalog_path, config)

    if kind != "all":
        # Built-in content only backs the providers when no catalog was supplied
        supplied = bool(catalog_path or config.get("catalog.path"))
        use_fallback = not supplied and config.get("catalog.use_fallback", True)
        providers = build_providers(
            lambda: catalog,
            duration=config.get("cache.duration_seconds", DEFAULT_CACHE_DURATION),
            fallback=fallback_catalog() if use_fallback else None,
        )
        result = providers[kind].linkify(text)
    elif config.get("linking.mode") == "sequential":
        result = link_by_kind(text, catalog, config.get("linking.order"))
    else:
        result = link_mentions(text, catalog.all())

    logger.info(f"Linked text against {len(catalog)} entities (kind={kind})")
    output.write(result)
    if not result.endswith("\n"):
        output.write("\n")


@main.command()
@click.option("--input", "-i", type=click.File("r"), default="-", help="Text file path (defaults to stdin)")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Output destination (defaults to stdout)")
@click.option("--catalog", "-c", "catalog_path", type=click.Path(dir_okay=False), help="JSON content export")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def conflicts(
    input: TextIO,
    output: TextIO,
    catalog_path: Optional[str],
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """Report phrases in the input that refer to more than one page."""

    config = _setup(config_path, verbose)
    text = _read_text(input)
    catalog = _load_catalog(catalog_path, config)

    found = find_conflicts(text, catalog.all())
    json.dump({"conflicts": [conflict.to_dict() for conflict in found]}, output, indent=2)
    output.write("\n")


if __name__ == "__main__":  # pragma: no cover
    main()
