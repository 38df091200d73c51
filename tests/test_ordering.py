"""Tests for trellis.routing.ordering — route order within a scope."""

import pytest

from trellis.errors import ConfigurationError
from trellis.routing.ordering import order_routes
from trellis.routing.route import RouteDescriptor
from trellis.routing.translate import translate_filename


def _route(filename: str, *ancestors: str) -> RouteDescriptor:
    route = translate_filename(filename, list(ancestors))
    assert route is not None
    return route


def _patterns(routes: tuple[RouteDescriptor, ...]) -> list[str]:
    return [r.pattern for r in routes]


class TestLengthOrdering:
    def test_longer_first(self) -> None:
        routes = [
            _route("index.get.py"),
            _route("[id].get.py", "users"),
            _route("users.get.py"),
        ]
        assert _patterns(order_routes(routes)) == ["/users/{id}", "/users", "/"]

    def test_ties_lexicographic(self) -> None:
        routes = [_route("b.get.py"), _route("a.get.py"), _route("c.get.py")]
        assert _patterns(order_routes(routes)) == ["/a", "/b", "/c"]

    def test_stable_for_same_pattern(self) -> None:
        get = _route("users.get.py")
        post = _route("users.post.py")
        assert order_routes([get, post]) == (get, post)
        assert order_routes([post, get]) == (post, get)

    def test_deterministic_regardless_of_input_order(self) -> None:
        routes = [
            _route("[id].get.py", "users"),
            _route("users.get.py"),
            _route("index.get.py"),
            _route("[...slug].get.py", "posts"),
        ]
        assert order_routes(routes) == order_routes(list(reversed(routes)))

    def test_empty(self) -> None:
        assert order_routes([]) == ()


class TestSpecificityOrdering:
    def test_static_before_dynamic_at_same_depth(self) -> None:
        routes = [_route("[id].get.py", "users"), _route("me.get.py", "users")]
        assert _patterns(order_routes(routes, "specificity")) == ["/users/me", "/users/{id}"]

    def test_length_ordering_prefers_longer_string(self) -> None:
        routes = [_route("[id].get.py", "users"), _route("me.get.py", "users")]
        assert _patterns(order_routes(routes)) == ["/users/{id}", "/users/me"]

    def test_deeper_first(self) -> None:
        routes = [_route("abcdefghij.get.py"), _route("b.get.py", "a")]
        assert _patterns(order_routes(routes, "specificity")) == ["/a/b", "/abcdefghij"]

    def test_catch_all_last(self) -> None:
        routes = [_route("[...rest].get.py", "files"), _route("[name].get.py", "files")]
        assert _patterns(order_routes(routes, "specificity")) == [
            "/files/{name}",
            "/files/{*rest}",
        ]


class TestUnknownStrategy:
    def test_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="ordering"):
            order_routes([], "alphabetical")
