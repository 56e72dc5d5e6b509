"""
Build linkable entities from raw content data.

Content is read from JSON exports of the site database:

    {
        "characters": [{"id": "lucky", "name": "Lucky", ...}, ...],
        "lore": {"goblin-king": {"id": "goblin-king", "title": "Goblin King", ...}, ...},
        "videos": {"season1": {"episodes": {"episode1": {"title": "...", ...}}}}
    }
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import ValidationError

from ..core.models import ContentCatalog, Entity, LinkKind
from .records import CharacterRecord, EpisodeRecord, LoreRecord

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when content data cannot be read or fails validation."""


def create_episode_id(title: str) -> str:
    """Create a URL-friendly id from an episode title."""

    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _iter_items(data: Union[Mapping[str, Any], Iterable[Any], None]) -> Iterable[Any]:
    if data is None:
        return []
    if isinstance(data, Mapping):
        return data.values()
    return data


def load_characters(items: Union[Mapping[str, Any], Iterable[Mapping[str, Any]], None]) -> List[Entity]:
    """Convert character entries into character entities."""

    entities: List[Entity] = []
    for item in _iter_items(items):
        try:
            record = CharacterRecord.model_validate(item)
        except ValidationError as e:
            raise CatalogError(f"Invalid character entry {item!r}: {e}") from e

        entities.append(
            Entity(
                name=record.name,
                url=record.url or f"/character/{record.id}",
                kind=LinkKind.CHARACTER.value,
                keywords=tuple(record.keywords),
                entity_id=record.id,
                entity_type=record.role,
                image=record.image,
            )
        )

    logger.debug(f"Loaded {len(entities)} characters")
    return entities


def load_lore(data: Union[Mapping[str, Any], Iterable[Mapping[str, Any]], None]) -> List[Entity]:
    """
    Convert lore entries into lore entities.

    Accepts either the export mapping keyed by lore id or a plain list.
    Entries lacking an id or title are skipped.
    """
    entities: List[Entity] = []
    for item in _iter_items(data):
        if not isinstance(item, Mapping) or not item.get("id") or not item.get("title"):
            logger.debug(f"Skipping incomplete lore entry: {item!r}")
            continue
        try:
            record = LoreRecord.model_validate(item)
        except ValidationError as e:
            raise CatalogError(f"Invalid lore entry {item.get('id')!r}: {e}") from e

        entities.append(
            Entity(
                name=record.title,
                url=f"/lore/{record.id}",
                kind=LinkKind.LORE.value,
                keywords=tuple(record.keywords),
                entity_id=record.id,
                entity_type=record.type,
                description=record.description,
                image=record.image,
            )
        )

    logger.info(f"Loaded {len(entities)} lore items")
    return entities


def load_episodes(videos: Union[Mapping[str, Any], None]) -> List[Entity]:
    """Flatten the season/episode tree into episode entities."""

    entities: List[Entity] = []
    for season_id, season_data in (videos or {}).items():
        if not isinstance(season_data, Mapping) or not season_data.get("episodes"):
            continue
        season_number = season_id.replace("season", "")

        for episode_id, episode_data in season_data["episodes"].items():
            if not isinstance(episode_data, Mapping) or not episode_data.get("title"):
                continue
            try:
                record = EpisodeRecord.model_validate(episode_data)
            except ValidationError as e:
                raise CatalogError(f"Invalid episode {season_id}/{episode_id}: {e}") from e

            episode_number = episode_id.replace("episode", "")
            entities.append(
                Entity(
                    name=record.title,
                    url=f"/season/{season_number}/episode/{episode_number}",
                    kind=LinkKind.EPISODE.value,
                    keywords=tuple(record.keywords),
                    entity_id=create_episode_id(record.title),
                    description=record.description,
                    image=record.image,
                    season=season_number,
                    episode_number=episode_number,
                )
            )

    logger.info(f"Loaded {len(entities)} episodes")
    return entities


def build_catalog(data: Mapping[str, Any]) -> ContentCatalog:
    """Build a ContentCatalog from an export document."""

    if not isinstance(data, Mapping):
        raise CatalogError(f"Catalog document must be a JSON object, got {type(data).__name__}")

    return ContentCatalog(
        characters=load_characters(data.get("characters")),
        lore=load_lore(data.get("lore")),
        episodes=load_episodes(data.get("videos")),
    )


def load_catalog_file(path: Union[str, Path]) -> ContentCatalog:
    """Read and build a catalog from a JSON export file."""

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Failed to read catalog from {path}: {e}") from e

    catalog = build_catalog(data)
    logger.info(f"Loaded catalog from {path} ({len(catalog)} entities)")
    return catalog


# --- Built-in content ---------------------------------------------------------

_FALLBACK_CHARACTER_DATA: List[Dict[str, Any]] = [
    {"id": "andrew", "name": "Prince Andrew"},
    {"id": "jewel", "name": "Jewel"},
    {"id": "alex", "name": "Alexandria"},
    {"id": "eloquence", "name": "Eloquence"},
    {"id": "daphne", "name": "Daphne"},
    {"id": "lucky", "name": "Lucky"},
    {"id": "yeti", "name": "Yeti"},
    {"id": "maurice", "name": "Maurice"},
]

_FALLBACK_LORE_DATA: List[Dict[str, Any]] = [
    {
        "id": "the-shire",
        "title": "The Shire",
        "type": "place",
        "description": "A peaceful realm where music flourishes and the natural world sings in harmony.",
    },
    {
        "id": "ice-castle",
        "title": "Ice Castle",
        "type": "place",
        "description": "A majestic fortress of eternal ice located in the far northern reaches.",
    },
    {
        "id": "wavelength-band",
        "title": "Wavelength",
        "type": "concept",
        "description": "More than just a musical group, Wavelength represents the perfect harmony "
                       "between family bonds and artistic expression.",
    },
    {
        "id": "music-magic",
        "title": "Music Magic",
        "type": "concept",
        "description": "The fundamental force that flows through the Wavelength universe.",
    },
    {
        "id": "goblin-king",
        "title": "Goblin King",
        "type": "villain",
        "keywords": ["king", "goblin ruler", "psychopath", "villain"],
        "description": "A psychopath that leads a Misery of Goblins to invade the Shire.",
    },
]

_FALLBACK_VIDEO_DATA: Dict[str, Any] = {
    "season1": {
        "episodes": {
            "episode1": {"title": "My Lucky Charm"},
            "episode5": {"title": "Prepare for Battle"},
            "episode6": {"title": "The Battle of the Shire"},
        }
    },
    "season3": {
        "episodes": {
            "episode4": {"title": "Frozen Peace"},
        }
    },
}


def fallback_catalog() -> ContentCatalog:
    """Catalog used when no content export is available."""

    return build_catalog({
        "characters": _FALLBACK_CHARACTER_DATA,
        "lore": _FALLBACK_LORE_DATA,
        "videos": _FALLBACK_VIDEO_DATA,
    })
