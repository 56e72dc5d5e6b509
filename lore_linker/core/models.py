"""Core data models for mention linking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LinkKind(str, Enum):
    CHARACTER = "character"
    LORE = "lore"
    EPISODE = "episode"

    @classmethod
    def resolve(cls, kind: object) -> "LinkKind":
        """
        Map a kind tag to a LinkKind, defaulting to LORE for unknown tags.

        Tags are matched exactly, so "Character" is an unknown tag.
        """
        if isinstance(kind, LinkKind):
            return kind
        try:
            return cls(str(kind))
        except ValueError:
            return cls.LORE

    @property
    def css_class(self) -> str:
        return f"{self.value}-link"

    def title_for(self, name: str) -> str:
        return _TITLE_TEMPLATES[self].format(name=name)


_TITLE_TEMPLATES = {
    LinkKind.CHARACTER: "View {name}'s character page",
    LinkKind.LORE: "Learn about {name}",
    LinkKind.EPISODE: "Watch {name}",
}


@dataclass(slots=True)
class Entity:
    """A named, linkable thing with aliases and a destination URL."""

    name: str
    url: str
    kind: str = LinkKind.LORE.value
    keywords: Tuple[str, ...] = ()
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    season: Optional[str] = None
    episode_number: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Entity name must be a non-empty string")
        self.keywords = tuple(self.keywords or ())

    def search_terms(self) -> List[str]:
        return [self.name, *self.keywords]

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.entity_id,
            "name": self.name,
            "url": self.url,
            "kind": self.kind,
            "keywords": list(self.keywords),
            "type": self.entity_type,
            "image": self.image,
            "season": self.season,
            "episode": self.episode_number,
        }


@dataclass(slots=True, frozen=True)
class LinkSpan:
    """Half-open range already covered by an anchor tag."""

    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.end and end > self.start


@dataclass(slots=True, frozen=True)
class Match:
    """Candidate occurrence of a term in the current text buffer."""

    text: str
    start: int
    end: int


@dataclass(slots=True)
class TermEntry:
    """One registration of a lower-cased term in the term index."""

    entity: Entity
    match_text: str


@dataclass(slots=True)
class ContentCatalog:
    """Entities grouped by kind, as loaded from content data."""

    characters: List[Entity] = field(default_factory=list)
    lore: List[Entity] = field(default_factory=list)
    episodes: List[Entity] = field(default_factory=list)

    def all(self) -> List[Entity]:
        return [*self.characters, *self.lore, *self.episodes]

    def for_kind(self, kind: object) -> List[Entity]:
        resolved = LinkKind.resolve(kind)
        if resolved is LinkKind.CHARACTER:
            return list(self.characters)
        if resolved is LinkKind.EPISODE:
            return list(self.episodes)
        return list(self.lore)

    def __len__(self) -> int:
        return len(self.characters) + len(self.lore) + len(self.episodes)
