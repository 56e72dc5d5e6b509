"""
Linking across several kinds of content at once.

``linkify`` always links a shared term to the first entity that registered
it. The functions here look at a mixed catalog instead: a term that resolves
to more than one page becomes a disambiguation element listing every
candidate, so the reader chooses where to go.
"""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .core.linker import (
    check_entities,
    create_link,
    find_existing_links,
    find_term_matches,
    linkify,
    term_pattern,
)
from .core.models import ContentCatalog, Entity, LinkKind, LinkSpan

logger = logging.getLogger(__name__)

DEFAULT_KIND_ORDER: Tuple[str, ...] = (
    LinkKind.EPISODE.value,
    LinkKind.LORE.value,
    LinkKind.CHARACTER.value,
)


@dataclass(slots=True)
class Conflict:
    """A phrase that refers to more than one page."""

    phrase: str
    candidates: List[Entity] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "phrase": self.phrase,
            "candidates": [describe_candidate(entity) for entity in self.candidates],
        }


def describe_candidate(entity: Entity) -> Dict[str, Optional[str]]:
    """Serialisable summary of one candidate shown to the reader."""

    kind = LinkKind.resolve(entity.kind)
    if kind is LinkKind.CHARACTER:
        description = "Character"
        subtitle = entity.entity_type or "Character"
    elif kind is LinkKind.EPISODE:
        description = "Episode"
        if entity.season and entity.episode_number:
            subtitle = f"Season {entity.season}, Episode {entity.episode_number}"
        else:
            subtitle = "Episode"
    else:
        description = entity.entity_type or "Lore"
        subtitle = description

    return {
        "type": kind.value,
        "url": entity.url,
        "name": entity.name,
        "description": description,
        "image": entity.image,
        "subtitle": subtitle,
    }


def _unique_by_url(entities: Sequence[Entity]) -> List[Entity]:
    seen = set()
    unique: List[Entity] = []
    for entity in entities:
        if entity.url in seen:
            continue
        seen.add(entity.url)
        unique.append(entity)
    return unique


def _candidate_index(entities: Sequence[Entity]) -> Dict[str, Tuple[str, List[Entity]]]:
    """Map lower-cased terms to (first registered spelling, distinct-url entities)."""

    index: Dict[str, Tuple[str, List[Entity]]] = {}
    for entity in entities:
        for term in entity.search_terms():
            if not term or not term.strip():
                continue
            key = term.lower()
            if key not in index:
                index[key] = (term, [])
            index[key][1].append(entity)

    return {key: (spelling, _unique_by_url(found)) for key, (spelling, found) in index.items()}


def detect_conflicts_for_term(term: str, entities: Sequence[Entity]) -> List[Entity]:
    """All entities (distinct by url) whose name or keywords equal ``term``."""

    wanted = term.lower()
    found = [
        entity
        for entity in entities
        if any(t and t.lower() == wanted for t in entity.search_terms())
    ]
    return _unique_by_url(found)


def find_conflicts(text: str, entities: Sequence[Entity]) -> List[Conflict]:
    """Ambiguous phrases that occur in ``text`` outside existing links, longest phrase first."""

    existing_links = find_existing_links(text)
    conflicts: List[Conflict] = []
    for term, (spelling, candidates) in _candidate_index(entities).items():
        if len(candidates) < 2:
            continue
        if find_term_matches(text, term, existing_links):
            conflicts.append(Conflict(spelling, candidates))

    conflicts.sort(key=lambda conflict: len(conflict.phrase), reverse=True)
    return conflicts


def render_disambiguation(phrase: str, candidates: Sequence[Entity]) -> str:
    """Inline element that lets the reader pick between candidate pages."""

    payload = json.dumps([describe_candidate(entity) for entity in candidates])
    return (
        f'<span class="disambiguation-link" data-phrase="{html.escape(phrase)}" '
        f'data-conflicts="{html.escape(payload)}">{phrase}</span>'
    )


def link_mentions(text: str, entities: Sequence[Entity]) -> str:
    """
    Link mentions from a mixed catalog in a single pass.

    Occurrences are collected longest term first and never overlap each other
    or an existing link. A mention with one destination becomes an anchor
    styled by its entity's kind; a mention with several becomes a
    disambiguation element.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, got {type(text).__name__}")
    check_entities(entities)
    if not text or not entities:
        return text

    index = _candidate_index(entities)
    taken = list(find_existing_links(text))
    replacements: List[Tuple[int, int, str]] = []

    for term in sorted(index, key=len, reverse=True):
        _, candidates = index[term]
        for found in term_pattern(term).finditer(text):
            start, end = found.start(), found.end()
            if any(span.overlaps(start, end) for span in taken):
                continue

            matched = found.group(0)
            if len(candidates) > 1:
                logger.debug(f"'{matched}' is ambiguous between {len(candidates)} pages")
                replacement = render_disambiguation(matched, candidates)
            else:
                entity = candidates[0]
                replacement = create_link(entity, matched, entity.kind)

            replacements.append((start, end, replacement))
            taken.append(LinkSpan(start, end))

    result = text
    for start, end, replacement in sorted(replacements, key=lambda r: r[0], reverse=True):
        result = result[:start] + replacement + result[end:]
    return result


def link_by_kind(
    text: str,
    catalog: ContentCatalog,
    order: Sequence[str] = DEFAULT_KIND_ORDER,
) -> str:
    """Run one ``linkify`` pass per kind; earlier kinds win shared mentions."""

    for kind in order:
        text = linkify(text, catalog.for_kind(kind), kind)
    return text
