"""Wavelength Lore mention linker package."""

__version__ = "0.1.0"

from .core import CacheManager, ContentCatalog, Entity, LinkKind, linkify
from .catalog import CatalogError, CatalogProvider, fallback_catalog, load_catalog_file
from .disambiguation import Conflict, find_conflicts, link_by_kind, link_mentions

__all__ = [
    "CacheManager",
    "CatalogError",
    "CatalogProvider",
    "Conflict",
    "ContentCatalog",
    "Entity",
    "LinkKind",
    "fallback_catalog",
    "find_conflicts",
    "link_by_kind",
    "link_mentions",
    "linkify",
    "load_catalog_file",
]
