"""Tests for the mention linker."""

import pytest

from lore_linker.core.linker import (
    build_term_index,
    create_link,
    find_existing_links,
    find_term_matches,
    linkify,
)
from lore_linker.core.models import Entity, LinkKind, LinkSpan


def lore(name, url=None, **kwargs):
    return Entity(name=name, url=url or f"/lore/{name.lower().replace(' ', '-')}", kind="lore", **kwargs)


class TestLinkifyProperties:
    """Behaviour every linking pass must preserve."""

    def test_second_pass_leaves_linked_text_unchanged(self):
        entities = [lore("Goblin King", keywords=("king",)), lore("The Shire")]
        text = "The Goblin King invaded The Shire. Long live the king!"

        once = linkify(text, entities, "lore")
        twice = linkify(once, entities, "lore")

        assert once != text
        assert twice == once

    def test_longest_match_wins(self):
        entities = [lore("Goblin"), lore("Misery"), lore("Misery of Goblins")]

        result = linkify("a Misery of Goblins stalks", entities, "lore")

        assert result == (
            'a <a href="/lore/misery-of-goblins" class="lore-link" '
            'title="Learn about Misery of Goblins">Misery of Goblins</a> stalks'
        )
        assert result.count("<a ") == 1

    def test_term_does_not_match_inside_longer_word(self):
        entities = [lore("Go")]

        assert linkify("The Goblin marched on", entities, "lore") == "The Goblin marched on"

    def test_empty_catalog_is_a_no_op(self):
        assert linkify("hello world", [], "lore") == "hello world"

    def test_empty_text_is_a_no_op(self):
        assert linkify("", [lore("Lucky")], "lore") == ""

    def test_source_casing_is_preserved(self):
        entities = [Entity(name="goblin", url="/lore/goblin")]

        result = linkify("The Goblin Lord", entities, "lore")

        assert result == (
            'The <a href="/lore/goblin" class="lore-link" title="Learn about goblin">Goblin</a> Lord'
        )

    def test_relinking_with_another_kind_skips_linked_spans(self):
        characters = [Entity(name="Lucky", url="/character/lucky", kind="character")]
        lore_items = [lore("Lucky", url="/lore/lucky-charm")]

        first = linkify("Lucky found the charm", characters, "character")
        second = linkify(first, lore_items, "lore")

        assert second == first
        assert "/lore/lucky-charm" not in second

    @pytest.mark.parametrize("name,text,linked", [
        ("C++", "C++ and C are languages", "C++"),
        ("a.b", "axb is not a.b", "a.b"),
        ("(Lucky)", "Lucky (Lucky) Lucky", "(Lucky)"),
    ])
    def test_regex_special_terms_match_literally(self, name, text, linked):
        result = linkify(text, [lore(name, url="/lore/special")], "lore")

        assert result.count("<a ") == 1
        assert f">{linked}</a>" in result


class TestLinkifyDetails:
    """Link rendering, ordering and input validation."""

    def test_every_occurrence_is_linked(self):
        entities = [Entity(name="Lucky", url="/character/lucky", kind="character")]

        result = linkify("Lucky met lucky", entities, "character")

        link = '<a href="/character/lucky" class="character-link" title="View Lucky\'s character page">'
        assert result == f"{link}Lucky</a> met {link}lucky</a>"

    def test_keywords_link_to_their_entity(self):
        entities = [lore("Goblin King", keywords=("goblin ruler",))]

        result = linkify("Beware the goblin ruler", entities, "lore")

        assert 'href="/lore/goblin-king"' in result
        assert 'title="Learn about Goblin King">goblin ruler</a>' in result

    def test_first_registered_entity_wins_shared_term(self):
        entities = [
            lore("Shadow Vale", keywords=("shadow",)),
            lore("Shadow Beast", keywords=("shadow",)),
        ]

        result = linkify("A shadow fell", entities, "lore")

        assert 'href="/lore/shadow-vale"' in result
        assert "/lore/shadow-beast" not in result

    def test_existing_anchor_attributes_are_not_relinked(self):
        entities = [Entity(name="Lucky", url="/character/lucky", kind="character")]
        text = '<a href="/x" title="Lucky">a friend</a> and Lucky'

        result = linkify(text, entities, "character")

        assert result.startswith('<a href="/x" title="Lucky">a friend</a> and ')
        assert result.count("/character/lucky") == 1

    def test_unicode_word_boundaries(self):
        entities = [Entity(name="Zoë", url="/character/zoe", kind="character")]

        result = linkify("Zoë's song, not Zoëy's", entities, "character")

        assert result.count("<a ") == 1
        assert result.startswith('<a href="/character/zoe"')

    def test_episode_kind_styling(self):
        entities = [Entity(name="Frozen Peace", url="/season/3/episode/4", kind="episode")]

        result = linkify("Watch Frozen Peace tonight", entities, "episode")

        assert 'class="episode-link" title="Watch Frozen Peace"' in result

    def test_unknown_kind_falls_back_to_lore_styling(self):
        result = linkify("Visit The Shire", [lore("The Shire")], "location")

        assert 'class="lore-link" title="Learn about The Shire"' in result

    def test_kind_tags_are_case_sensitive(self):
        entities = [Entity(name="Lucky", url="/character/lucky", kind="character")]

        result = linkify("Lucky laughed", entities, "Character")

        assert 'class="lore-link" title="Learn about Lucky"' in result
        assert "character-link" not in result

    def test_anchor_spanning_lines_is_left_alone(self):
        text = '<a href="/x">Back to\nThe Shire</a> and The Shire'

        result = linkify(text, [lore("The Shire")], "lore")

        assert result.startswith('<a href="/x">Back to\nThe Shire</a> and ')
        assert result.count('href="/lore/the-shire"') == 1
        assert result.endswith(">The Shire</a>")

    def test_rejects_non_string_text(self):
        with pytest.raises(TypeError):
            linkify(None, [lore("Lucky")], "lore")

    def test_rejects_non_list_entities(self):
        with pytest.raises(TypeError):
            linkify("Lucky", {"name": "Lucky"}, "lore")

    def test_rejects_non_entity_items(self):
        with pytest.raises(TypeError):
            linkify("Lucky", [{"name": "Lucky", "url": "/character/lucky"}], "lore")


class TestHelpers:
    """Term index, existing-link scan and match filtering."""

    def test_blank_terms_are_not_indexed(self):
        entities = [lore("Jewel", keywords=("", "   ", "Gem"))]

        index = build_term_index(entities)

        assert list(index) == ["jewel", "gem"]
        assert index["gem"][0].match_text == "Gem"

    def test_shared_terms_keep_registration_order(self):
        first, second = lore("King"), lore("Goblin King", keywords=("King",))

        index = build_term_index([first, second])

        assert [entry.entity for entry in index["king"]] == [first, second]

    def test_find_existing_links_is_case_insensitive(self):
        text = 'x <a href="/a">A</a> y <A HREF="/b">B</A>'

        spans = find_existing_links(text)

        assert len(spans) == 2
        assert spans[0].start == 2
        assert text[spans[1].start:spans[1].end] == '<A HREF="/b">B</A>'

    def test_unterminated_anchor_is_not_a_span(self):
        assert find_existing_links('<a href="/lucky">Lucky') == []

    def test_find_term_matches_skips_linked_occurrences(self):
        text = '<a href="/x">Lucky</a> and Lucky'

        matches = find_term_matches(text, "lucky", find_existing_links(text))

        assert len(matches) == 1
        assert matches[0].text == "Lucky"
        assert matches[0].start == text.rindex("Lucky")

    def test_create_link_uses_kind_title(self):
        entity = Entity(name="Lucky", url="/character/lucky", kind="character")

        html = create_link(entity, "LUCKY", LinkKind.CHARACTER)

        assert html == (
            '<a href="/character/lucky" class="character-link" '
            'title="View Lucky\'s character page">LUCKY</a>'
        )

    def test_entity_requires_a_name(self):
        with pytest.raises(ValueError):
            Entity(name="  ", url="/lore/nothing")

    def test_anchor_spanning_lines_is_one_span(self):
        text = 'x <a href="/x">The\nShire</a> y'

        spans = find_existing_links(text)

        assert len(spans) == 1
        assert text[spans[0].start:spans[0].end] == '<a href="/x">The\nShire</a>'

    def test_disambiguation_element_is_a_span(self):
        text = 'to the <span class="disambiguation-link" data-phrase="Ice Fortress">Ice Fortress</span>'

        spans = find_existing_links(text)

        assert len(spans) == 1
        assert spans[0].start == text.index("<span")
        assert spans[0].end == len(text)

    def test_occurrence_straddling_a_link_is_rejected(self):
        text = "Ice Castle walls"

        assert find_term_matches(text, "Ice Castle", [LinkSpan(0, 3)]) == []
        assert find_term_matches(text, "Ice Castle", [LinkSpan(7, 12)]) == []
        assert len(find_term_matches(text, "Ice Castle", [LinkSpan(11, 16)])) == 1

    def test_to_dict_carries_episode_details(self):
        entity = Entity(
            name="Frozen Peace",
            url="/season/3/episode/4",
            kind="episode",
            image="frozen.png",
            season="3",
            episode_number="4",
        )

        data = entity.to_dict()

        assert data["image"] == "frozen.png"
        assert data["season"] == "3"
        assert data["episode"] == "4"
