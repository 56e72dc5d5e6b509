"""Core mention-linking components."""

from .cache import CacheManager, DEFAULT_CACHE_DURATION, get_sync, get_with_cache, initialize_cache
from .linker import (
    build_term_index,
    check_entities,
    create_link,
    extract_search_terms,
    find_existing_links,
    find_term_matches,
    linkify,
)
from .models import ContentCatalog, Entity, LinkKind, LinkSpan, Match, TermEntry

__all__ = [
    "CacheManager",
    "DEFAULT_CACHE_DURATION",
    "get_sync",
    "get_with_cache",
    "initialize_cache",
    "build_term_index",
    "check_entities",
    "create_link",
    "extract_search_terms",
    "find_existing_links",
    "find_term_matches",
    "linkify",
    "ContentCatalog",
    "Entity",
    "LinkKind",
    "LinkSpan",
    "Match",
    "TermEntry",
]
