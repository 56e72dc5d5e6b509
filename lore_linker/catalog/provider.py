"""Cached access to one kind of linkable content."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..core.cache import DEFAULT_CACHE_DURATION, CacheManager, get_with_cache
from ..core.linker import create_link, linkify
from ..core.models import ContentCatalog, Entity, LinkKind

logger = logging.getLogger(__name__)


class CatalogProvider:
    """
    Serves the entities of a single kind, refreshing them through ``fetch``
    when the cache expires and falling back to built-in data on failure.
    """

    def __init__(
        self,
        kind: object,
        fetch: Callable[[], Sequence[Entity]],
        fallback: Optional[Sequence[Entity]] = None,
        cache: Optional[CacheManager] = None,
    ):
        self.kind = LinkKind.resolve(kind)
        self.fetch = fetch
        self.fallback = list(fallback or [])
        self.cache = cache or CacheManager(self.kind.value.capitalize())

    def all(self) -> List[Entity]:
        return list(get_with_cache(self.cache, self.fetch, self.fallback))

    def get_by_id(self, entity_id: str) -> Optional[Entity]:
        for entity in self.all():
            if entity.entity_id == entity_id:
                return entity
        return None

    def get_by_type(self, entity_type: str) -> List[Entity]:
        return [entity for entity in self.all() if entity.entity_type == entity_type]

    def get_by_season(self, season: object) -> List[Entity]:
        """Episodes of one season, given as ``3``, ``"3"`` or ``"season3"``."""
        wanted = str(season).replace("season", "")
        return [entity for entity in self.all() if entity.season == wanted]

    def generate_link(self, entity_id: str, custom_text: Optional[str] = None) -> str:
        """Anchor for the entity, or plain text when the id is unknown."""
        entity = self.get_by_id(entity_id)
        if entity is None:
            logger.debug(f"No {self.kind.value} with id '{entity_id}', leaving text unlinked")
            return custom_text or entity_id
        return create_link(entity, custom_text or entity.name, self.kind)

    def linkify(self, text: str) -> str:
        return linkify(text, self.all(), self.kind)

    def refresh(self) -> None:
        self.cache.clear()


def build_providers(
    load: Callable[[], ContentCatalog],
    duration: float = DEFAULT_CACHE_DURATION,
    fallback: Optional[ContentCatalog] = None,
) -> Dict[str, CatalogProvider]:
    """One provider per link kind, all drawing on the same catalog loader."""

    providers: Dict[str, CatalogProvider] = {}
    for kind in LinkKind:
        providers[kind.value] = CatalogProvider(
            kind,
            fetch=lambda kind=kind: load().for_kind(kind),
            fallback=fallback.for_kind(kind) if fallback else None,
            cache=CacheManager(kind.value.capitalize(), duration=duration),
        )
    return providers
