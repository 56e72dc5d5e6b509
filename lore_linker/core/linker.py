"""
Mention linking: wrap entity mentions in prose with anchor tags.

Terms are processed longest first so that multi-word aliases ("Misery of
Goblins") are linked as a whole before their shorter parts ("Misery",
"Goblins") are considered. Existing anchors are re-scanned before every term,
which keeps anything already linked opaque to later terms.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence

from .models import Entity, LinkKind, LinkSpan, Match, TermEntry

logger = logging.getLogger(__name__)

# Bounded anchor pattern; an unterminated <a ...> never registers as a span.
# Disambiguation elements from smart linking are opaque in the same way.
EXISTING_LINK_RE = re.compile(
    r'<a\s[^>]*>.*?</a>|<span\s+class="disambiguation-link"[^>]*>.*?</span>',
    re.IGNORECASE | re.DOTALL,
)


def extract_search_terms(entity: Entity) -> List[str]:
    """Return the entity's name followed by its keywords."""

    return entity.search_terms()


def build_term_index(entities: Sequence[Entity]) -> Dict[str, List[TermEntry]]:
    """
    Index lower-cased terms to the entities that registered them.

    Registration order is preserved, so the first entry of each list is the
    entity that wins when a term is shared.
    """
    index: Dict[str, List[TermEntry]] = {}

    for entity in entities:
        for term in extract_search_terms(entity):
            if not term or not term.strip():
                continue
            index.setdefault(term.lower(), []).append(TermEntry(entity, term))

    return index


def check_entities(entities: object) -> None:
    """Raise TypeError unless ``entities`` is a list or tuple of Entity objects."""

    if not isinstance(entities, (list, tuple)):
        raise TypeError(f"entities must be a list, got {type(entities).__name__}")
    for entity in entities:
        if not isinstance(entity, Entity):
            raise TypeError(f"entities must contain Entity objects, got {type(entity).__name__}")


def find_existing_links(text: str) -> List[LinkSpan]:
    """Locate anchors and disambiguation elements (opening through closing tag) in the text."""

    return [LinkSpan(m.start(), m.end()) for m in EXISTING_LINK_RE.finditer(text)]


def term_pattern(term: str) -> re.Pattern:
    """Whole-word, case-insensitive pattern matching the term literally."""

    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


def find_term_matches(text: str, term: str, existing_links: Sequence[LinkSpan]) -> List[Match]:
    """Find whole-word occurrences of ``term`` that are not inside an existing link."""

    matches: List[Match] = []
    for found in term_pattern(term).finditer(text):
        start, end = found.start(), found.end()
        if any(link.overlaps(start, end) for link in existing_links):
            continue
        matches.append(Match(found.group(0), start, end))
    return matches


def create_link(entity: Entity, match_text: str, kind: object) -> str:
    """Render the anchor for a single mention, keeping the matched casing."""

    link_kind = LinkKind.resolve(kind)
    return (
        f'<a href="{entity.url}" class="{link_kind.css_class}" '
        f'title="{link_kind.title_for(entity.name)}">{match_text}</a>'
    )


def linkify(text: str, entities: Sequence[Entity], kind: object) -> str:
    """
    Wrap mentions of ``entities`` in ``text`` with anchors styled for ``kind``.

    Args:
        text: Prose to annotate, possibly containing anchors from earlier passes
        entities: Catalog for this pass, in registration order
        kind: Link kind applied to every anchor produced by this call

    Returns:
        The annotated text; the input unchanged when nothing matches.

    Raises:
        TypeError: If ``text`` is not a string or ``entities`` is not a list
            or tuple of Entity objects.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, got {type(text).__name__}")
    check_entities(entities)

    if not text or not entities:
        return text

    term_index = build_term_index(entities)
    # Stable sort: equal-length terms keep registration order
    ordered_terms = sorted(term_index, key=len, reverse=True)

    processed = text
    for term in ordered_terms:
        winner = term_index[term][0]
        existing_links = find_existing_links(processed)
        matches = find_term_matches(processed, term, existing_links)
        if not matches:
            continue

        logger.debug(f"Linking {len(matches)} mention(s) of '{term}' to {winner.entity.url}")

        # Right to left keeps earlier offsets valid
        for match in reversed(matches):
            link_html = create_link(winner.entity, match.text, kind)
            processed = processed[:match.start] + link_html + processed[match.end:]

    return processed
