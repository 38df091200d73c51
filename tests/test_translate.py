"""Tests for trellis.routing.translate — filename to route descriptor."""

from pathlib import Path

import pytest

from trellis.routing.route import (
    CatchAllSegment,
    DynamicSegment,
    LiteralSegment,
    render_pattern,
)
from trellis.routing.translate import (
    FALLBACK_IDENTIFIER,
    parse_segment,
    sanitize_identifier,
    split_filename,
    translate_filename,
)


class TestParseSegment:
    def test_literal(self) -> None:
        assert parse_segment("users") == LiteralSegment("users")

    def test_dynamic(self) -> None:
        assert parse_segment("[id]") == DynamicSegment("id")

    def test_catch_all(self) -> None:
        assert parse_segment("[...slug]") == CatchAllSegment("slug")

    def test_empty_brackets_are_literal(self) -> None:
        assert parse_segment("[]") == LiteralSegment("[]")

    def test_unnamed_catch_all_is_literal(self) -> None:
        assert parse_segment("[...]") == LiteralSegment("[...]")


class TestSplitFilename:
    def test_method_token(self) -> None:
        assert split_filename("users.get.py") == ("users", "GET")

    def test_method_is_upper_cased(self) -> None:
        assert split_filename("users.Delete.py") == ("users", "DELETE")

    def test_bare_index_is_get(self) -> None:
        assert split_filename("index.py") == ("index", "GET")

    def test_single_token_not_index(self) -> None:
        assert split_filename("helpers.py") is None

    def test_dotted_base_is_rejoined(self) -> None:
        assert split_filename("feed.rss.get.py") == ("feed.rss", "GET")


class TestTranslateFilename:
    def test_unnamed_catch_all_file(self) -> None:
        route = translate_filename("[...].get.py", ["files"])
        assert route is not None
        assert route.pattern == "/files/[...]"
        assert route.segments == (LiteralSegment("files"), LiteralSegment("[...]"))

    def test_root_index(self) -> None:
        route = translate_filename("index.get.py", [])
        assert route is not None
        assert route.method == "GET"
        assert route.pattern == "/"
        assert route.segments == ()

    def test_simple(self) -> None:
        route = translate_filename("users.get.py", [])
        assert route is not None
        assert route.pattern == "/users"
        assert route.identifier == "users_get"

    def test_nested_dynamic(self) -> None:
        route = translate_filename("[id].get.py", ["users"])
        assert route is not None
        assert route.pattern == "/users/{id}"
        assert route.segments == (LiteralSegment("users"), DynamicSegment("id"))
        assert route.param_names == ("id",)

    def test_catch_all(self) -> None:
        route = translate_filename("[...slug].get.py", ["posts"])
        assert route is not None
        assert route.pattern == "/posts/{*slug}"
        assert route.param_names == ("slug",)

    def test_nested_index(self) -> None:
        route = translate_filename("index.post.py", ["api", "users"])
        assert route is not None
        assert route.method == "POST"
        assert route.pattern == "/api/users"

    def test_non_route_returns_none(self) -> None:
        assert translate_filename("notes.py", ["api"]) is None

    def test_methods_get_distinct_identifiers(self) -> None:
        get = translate_filename("users.get.py", ["api"])
        post = translate_filename("users.post.py", ["api"])
        assert get is not None and post is not None
        assert get.identifier == "api_users_get"
        assert post.identifier == "api_users_post"

    def test_identifier_sanitized(self) -> None:
        route = translate_filename("[id].get.py", ["users"])
        assert route is not None
        assert route.identifier == "users_id_get"

    def test_source_defaults_to_relative_path(self) -> None:
        route = translate_filename("users.get.py", ["api"])
        assert route is not None
        assert route.source == Path("api", "users.get.py")

    def test_explicit_source(self, tmp_path: Path) -> None:
        source = tmp_path / "users.get.py"
        route = translate_filename("users.get.py", [], source=source)
        assert route is not None
        assert route.source == source


class TestSanitizeIdentifier:
    @pytest.mark.parametrize(
        ("parts", "expected"),
        [
            (["users", "[id]"], "users_id"),
            (["api-v2", "items"], "api_v2_items"),
            (["[...slug]"], "slug"),
            (["__a__", "b"], "a_b"),
        ],
    )
    def test_sanitize(self, parts: list[str], expected: str) -> None:
        assert sanitize_identifier(parts) == expected

    def test_nothing_left(self) -> None:
        assert sanitize_identifier(["[]", "..."]) == ""

    def test_bare_index_identifier(self) -> None:
        route = translate_filename("index.py", [])
        assert route is not None
        assert route.identifier == "index"

    def test_fallback_identifier(self) -> None:
        route = translate_filename("-.-.py", [])
        assert route is not None
        assert route.identifier == FALLBACK_IDENTIFIER == "root_route"


class TestRenderPattern:
    def test_empty_is_root(self) -> None:
        assert render_pattern(()) == "/"

    def test_mixed(self) -> None:
        segments = (LiteralSegment("a"), DynamicSegment("b"), CatchAllSegment("c"))
        assert render_pattern(segments) == "/a/{b}/{*c}"
