"""Tests for LinkResolver."""

from garden_publisher.core.discovery import VaultDiscovery
from garden_publisher.core.resolver import LinkResolver, get_linkpath

from conftest import write_note


class TestGetLinkpath:

    def test_plain(self):
        assert get_linkpath("Note") == "Note"

    def test_strips_heading(self):
        assert get_linkpath("Note#Section") == "Note"

    def test_strips_alias(self):
        assert get_linkpath("Note|Shown") == "Note"

    def test_strips_both(self):
        assert get_linkpath("Note#Section|Shown") == "Note"


class TestLinkResolver:
    """Tests for resolving references relative to a source note."""

    def _resolver(self, vault):
        return LinkResolver(VaultDiscovery(vault))

    def test_resolves_note_without_extension(self, vault):
        target = self._resolver(vault).resolve("Snippet", vault / "Published.md")
        assert target is not None
        assert target.name == "Snippet.md"
        assert target.extension == "md"

    def test_resolves_asset(self, vault):
        target = self._resolver(vault).resolve("pic.png", vault / "Published.md")
        assert target is not None
        assert target.extension == "png"

    def test_resolves_vault_path(self, vault):
        target = self._resolver(vault).resolve("sub/Nested", vault / "Published.md")
        assert target.vault_path_str == "sub/Nested.md"

    def test_resolves_relative_to_source(self, vault):
        write_note(vault, "sub/deeper/Leaf.md", "leaf")
        target = self._resolver(vault).resolve("deeper/Leaf", vault / "sub" / "Nested.md")
        assert target.vault_path_str == "sub/deeper/Leaf.md"

    def test_resolves_by_name_anywhere(self, vault):
        target = self._resolver(vault).resolve("Nested", vault / "Published.md")
        assert target.vault_path_str == "sub/Nested.md"

    def test_case_insensitive(self, vault):
        target = self._resolver(vault).resolve("snippet", vault / "Published.md")
        assert target.name == "Snippet.md"

    def test_dotted_note_name(self, vault):
        write_note(vault, "2024.01.05.md", "daily")
        write_note(vault, "Note v1.2.md", "versioned")
        resolver = self._resolver(vault)
        assert resolver.resolve("2024.01.05", vault / "Published.md").name == "2024.01.05.md"
        assert resolver.resolve("Note v1.2", vault / "Published.md").name == "Note v1.2.md"

    def test_literal_name_preferred_over_md(self, vault):
        (vault / "data.csv").write_text("a,b")
        write_note(vault, "data.csv.md", "note")
        target = self._resolver(vault).resolve("data.csv", vault / "Published.md")
        assert target.name == "data.csv"

    def test_missing(self, vault):
        assert self._resolver(vault).resolve("Nope", vault / "Published.md") is None

    def test_empty(self, vault):
        assert self._resolver(vault).resolve("", vault / "Published.md") is None

    def test_ambiguous_name_is_unresolved(self, vault):
        write_note(vault, "a/Twin.md", "one")
        write_note(vault, "b/Twin.md", "two")
        assert self._resolver(vault).resolve("Twin", vault / "Published.md") is None

    def test_ambiguous_name_prefers_source_folder(self, vault):
        write_note(vault, "a/Twin.md", "one")
        write_note(vault, "b/Twin.md", "two")
        target = self._resolver(vault).resolve("Twin", vault / "b" / "Source.md")
        assert target.vault_path_str == "b/Twin.md"

    def test_refresh_picks_up_new_files(self, vault):
        resolver = self._resolver(vault)
        assert resolver.resolve("Later", vault / "Published.md") is None
        write_note(vault, "Later.md", "late")
        assert resolver.resolve("Later", vault / "Published.md") is None
        resolver.refresh()
        assert resolver.resolve("Later", vault / "Published.md") is not None
