"""
Content catalogs: raw records, loaders and cached providers
"""

from .loader import (
    CatalogError,
    build_catalog,
    create_episode_id,
    fallback_catalog,
    load_catalog_file,
    load_characters,
    load_episodes,
    load_lore,
)
from .provider import CatalogProvider, build_providers
from .records import CharacterRecord, EpisodeRecord, LoreRecord

__all__ = [
    "CatalogError",
    "CatalogProvider",
    "CharacterRecord",
    "EpisodeRecord",
    "LoreRecord",
    "build_catalog",
    "build_providers",
    "create_episode_id",
    "fallback_catalog",
    "load_catalog_file",
    "load_characters",
    "load_episodes",
    "load_lore",
]
