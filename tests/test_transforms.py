"""Tests for frontmatter transforms and embed parsing."""

import json

import pytest

from garden_publisher.transforms.frontmatter import (
    compose,
    garden_frontmatter,
    home_entry,
    identity,
    permalink_override,
    prune_and_add,
    replace_frontmatter,
    serialize_frontmatter,
)
from garden_publisher.transforms.embeds import (
    ASSET,
    TRANSCLUSION,
    data_uri_image,
    find_markers,
    reference_name,
    substitute_markers,
    transclusion_block,
)


def _header(text: str) -> dict:
    """Parse the JSON header written by replace_frontmatter."""
    assert text.startswith("---\n")
    return json.loads(text.split("\n")[1])


class TestFrontmatterTransforms:
    """Tests for frontmatter transform factories."""

    def test_identity_returns_copy(self):
        fm = {"tags": ["a"]}
        result = identity()(fm)
        assert result == fm
        result["tags"].append("b")
        assert fm == {"tags": ["a"]}

    def test_prune_remove_keys(self):
        transform = prune_and_add(remove_keys=["b"])
        assert transform({"a": 1, "b": 2, "c": 3}) == {"a": 1, "c": 3}

    def test_prune_keep_keys_and_add(self):
        transform = prune_and_add(keep_keys=["a"], add_fields={"x": 1})
        assert transform({"a": 1, "b": 2}) == {"a": 1, "x": 1}

    def test_permalink_gets_trailing_slash(self):
        result = permalink_override()({"dg-permalink": "my/page"})
        assert result["permalink"] == "my/page/"

    def test_permalink_slash_not_duplicated(self):
        result = permalink_override()({"dg-permalink": "my/page/"})
        assert result["permalink"] == "my/page/"

    def test_permalink_absent(self):
        assert "permalink" not in permalink_override()({"title": "x"})

    def test_permalink_override_replaces_existing(self):
        result = permalink_override()({"permalink": "old/", "dg-permalink": "new"})
        assert result["permalink"] == "new/"

    def test_home_without_tags(self):
        result = home_entry()({"dg-home": True})
        assert result["tags"] == "gardenEntry"

    def test_home_with_string_tag(self):
        result = home_entry()({"dg-home": True, "tags": "x"})
        assert result["tags"] == ["x", "gardenEntry"]

    def test_home_with_tag_list(self):
        result = home_entry()({"dg-home": True, "tags": ["a", "b"]})
        assert result["tags"] == ["a", "b", "gardenEntry"]

    def test_home_with_empty_tag_list(self):
        result = home_entry()({"dg-home": True, "tags": []})
        assert result["tags"] == ["gardenEntry"]

    def test_home_with_null_tags(self):
        result = home_entry()({"dg-home": True, "tags": None})
        assert result["tags"] == "gardenEntry"

    def test_not_home_leaves_tags(self):
        result = home_entry()({"dg-home": False, "tags": ["a"]})
        assert result["tags"] == ["a"]

    def test_home_does_not_mutate_source(self):
        tags = ["a", "b"]
        fm = {"dg-home": True, "tags": tags}
        home_entry()(fm)
        assert tags == ["a", "b"]
        assert fm["tags"] is tags

    def test_compose_order(self):
        transform = compose(
            prune_and_add(add_fields={"dg-permalink": "p"}),
            permalink_override(),
        )
        assert transform({})["permalink"] == "p/"

    def test_garden_frontmatter_strips_derived_keys(self):
        fm = {
            "dg-publish": True,
            "position": {"start": {"line": 0}, "end": {"line": 3}},
            "end": 3,
        }
        result = garden_frontmatter()(fm)
        assert "position" not in result
        assert "end" not in result
        assert result == {"dg-publish": True}
        assert "position" in fm

    def test_garden_frontmatter_full(self):
        fm = {"dg-publish": True, "dg-home": True, "dg-permalink": "/", "tags": "t"}
        result = garden_frontmatter()(fm)
        assert result["permalink"] == "/"
        assert result["tags"] == ["t", "gardenEntry"]


class TestReplaceFrontmatter:
    """Tests for rewriting the header block in raw text."""

    def test_replaces_block(self):
        text = "---\ntitle: Old\n---\n# Body\n"
        result = replace_frontmatter(text, {"title": "New"})
        assert result == '---\n{"title":"New"}\n---\n# Body\n'

    def test_no_block_passes_through(self):
        text = "# Just a body\n---\nnot: header\n---\n"
        assert replace_frontmatter(text, {"title": "x"}) == text

    def test_only_first_block_replaced(self):
        text = "---\na: 1\n---\nbody\n---\nb: 2\n---\n"
        result = replace_frontmatter(text, {"a": 2})
        assert result == '---\n{"a":2}\n---\nbody\n---\nb: 2\n---\n'

    def test_multiline_block(self):
        text = "---\ntags:\n  - a\n  - b\n---\nbody"
        result = replace_frontmatter(text, {"tags": ["a", "b"]})
        assert _header(result) == {"tags": ["a", "b"]}
        assert result.endswith("\n---\nbody")

    def test_serialize_keeps_unicode_and_order(self):
        assert serialize_frontmatter({"b": "é", "a": 1}) == '{"b":"é","a":1}'

    def test_serialize_dates_as_strings(self):
        import datetime
        result = serialize_frontmatter({"date": datetime.date(2024, 1, 15)})
        assert result == '{"date":"2024-01-15"}'


class TestEmbedParsing:
    """Tests for embed marker parsing and substitution."""

    def test_find_markers_in_order(self):
        text = "![[a]] text ![[pic.png]] ![[b#Heading]]"
        markers = find_markers(text)
        assert [m.reference for m in markers] == ["a", "pic.png", "b#Heading"]
        assert [m.kind for m in markers] == [TRANSCLUSION, ASSET, TRANSCLUSION]

    @pytest.mark.parametrize("reference", ["a.png", "a.jpg", "a.jpeg", "a.gif", "A.PNG"])
    def test_image_extensions_are_assets(self, reference):
        (marker,) = find_markers(f"![[{reference}]]")
        assert marker.kind == ASSET

    def test_other_extensions_are_transclusions(self):
        (marker,) = find_markers("![[doc.pdf]]")
        assert marker.kind == TRANSCLUSION

    def test_reference_stops_at_first_bracket(self):
        assert reference_name("![[a]b]]") == "a"

    def test_adjacent_markers_stay_apart(self):
        markers = find_markers("![[a]]![[b]]")
        assert [m.text for m in markers] == ["![[a]]", "![[b]]"]

    def test_plain_links_ignored(self):
        assert find_markers("[[not an embed]]") == []

    def test_substitute_replaces_duplicates_once_rendered(self):
        text = "![[a]] and ![[a]]"
        calls = []

        def render(marker):
            calls.append(marker.text)
            return "X"

        assert substitute_markers(text, find_markers(text), render) == "X and X"
        assert calls == ["![[a]]"]

    def test_substitute_none_keeps_marker(self):
        text = "keep ![[missing]] here"
        assert substitute_markers(text, find_markers(text), lambda m: None) == text

    def test_substitute_does_not_rescan_inserted_text(self):
        text = "![[a]] ![[b]]"
        result = substitute_markers(
            text, find_markers(text),
            lambda m: "![[b]]" if m.reference == "a" else "B",
        )
        assert result == "![[b]] B"

    def test_special_characters_taken_literally(self):
        text = "![[a (1).*]] ![[a (1).*]]"
        result = substitute_markers(text, find_markers(text), lambda m: "ok")
        assert result == "ok ok"

    def test_transclusion_block(self):
        assert transclusion_block("Note", "hello") == "\n```transclusion\n# Note\n\nhello\n```\n"

    def test_data_uri_media_types(self):
        assert data_uri_image("a.png", "png", "AA==") == "![a.png](data:image/png;base64,AA==)"
        assert data_uri_image("a.jpg", "jpg", "AA==") == "![a.jpg](data:image/jpeg;base64,AA==)"
        assert data_uri_image("a.GIF", "GIF", "AA==") == "![a.GIF](data:image/gif;base64,AA==)"
