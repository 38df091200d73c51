"""Tests for trellis.runtime — loading, layering, and dispatch."""

import logging
from pathlib import Path

import pytest
from conftest import HANDLER, TreeFactory, tagging_middleware, text_handler

from trellis.build import compile_routes
from trellis.compose.composer import compose_router
from trellis.errors import ConfigurationError, NotFound
from trellis.http.event import Event
from trellis.http.response import Response, json, text
from trellis.middleware.protocol import Middleware, Next
from trellis.middleware.scope import ScopeMiddleware
from trellis.routing.route import RouteDescriptor
from trellis.routing.translate import translate_filename
from trellis.runtime.backend import RuntimeBackend
from trellis.runtime.loader import load_handler, load_middleware
from trellis.runtime.table import RouteTable, to_response
from trellis.scopes.scanner import scan_routes
from trellis.scopes.types import MiddlewareMode


def _route(filename: str, *ancestors: str) -> RouteDescriptor:
    route = translate_filename(filename, list(ancestors))
    assert route is not None
    return route


def _tag(name: str) -> Middleware:
    async def mw(event: Event, next: Next) -> Response:
        response = await next(event)
        return text(f"{name}({response.text})")

    return mw


async def _get(table: RouteTable, url: str, method: str = "GET") -> Response:
    return await table.dispatch(Event.from_url(method, url))


class TestRouteTable:
    @pytest.mark.asyncio
    async def test_dispatch_sync_handler(self) -> None:
        table = RouteTable().with_route(_route("users.get.py"), lambda event: text("users"))
        response = await _get(table, "/users")
        assert response.status == 200
        assert response.text == "users"

    @pytest.mark.asyncio
    async def test_dispatch_async_handler_with_params(self) -> None:
        async def handler(event: Event) -> Response:
            return json({"id": event.path_params["id"]})

        table = RouteTable().with_route(_route("[id].get.py", "users"), handler)
        response = await _get(table, "/users/42")
        assert response.json() == {"id": "42"}
        assert response.content_type == "application/json"

    @pytest.mark.asyncio
    async def test_layer_order(self) -> None:
        table = RouteTable().with_route(_route("a.get.py"), lambda e: "h")
        table = table.layer(_tag("inner")).layer(_tag("outer"))
        response = await _get(table, "/a")
        assert response.text == "outer(inner(h))"

    @pytest.mark.asyncio
    async def test_layer_only_affects_existing_routes(self) -> None:
        table = RouteTable().with_route(_route("a.get.py"), lambda e: "a").layer(_tag("mw"))
        table = table.with_route(_route("b.get.py"), lambda e: "b")
        assert (await _get(table, "/a")).text == "mw(a)"
        assert (await _get(table, "/b")).text == "b"

    def test_merge_preserves_order(self) -> None:
        a = RouteTable().with_route(_route("a.get.py"), lambda e: "a")
        b = RouteTable().with_route(_route("b.get.py"), lambda e: "b")
        assert [ep.route.pattern for ep in a.merge(b).endpoints] == ["/a", "/b"]
        assert len(a.merge(b)) == 2

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        response = await _get(RouteTable(), "/missing")
        assert response.status == 404

    @pytest.mark.asyncio
    async def test_method_not_allowed(self) -> None:
        table = RouteTable().with_route(_route("a.get.py"), lambda e: "a")
        response = await _get(table, "/a", method="POST")
        assert response.status == 405
        assert response.header("allow") == "GET"

    @pytest.mark.asyncio
    async def test_http_error_from_handler(self) -> None:
        def handler(event: Event) -> Response:
            raise NotFound("no such user")

        table = RouteTable().with_route(_route("a.get.py"), handler)
        response = await _get(table, "/a")
        assert response.status == 404
        assert response.text == "no such user"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(event: Event) -> Response:
            msg = "boom"
            raise RuntimeError(msg)

        table = RouteTable().with_route(_route("a.get.py"), handler)
        with caplog.at_level(logging.ERROR, logger="trellis.runtime"):
            response = await _get(table, "/a")
        assert response.status == 500
        assert "500 GET /a" in caplog.text

    @pytest.mark.asyncio
    async def test_middleware_can_short_circuit(self) -> None:
        async def deny(event: Event, next: Next) -> Response:
            return text("denied", status=401)

        table = RouteTable().with_route(_route("a.get.py"), lambda e: "a").layer(deny)
        response = await _get(table, "/a")
        assert response.status == 401
        assert response.text == "denied"


class TestToResponse:
    def test_passthrough(self) -> None:
        response = text("x")
        assert to_response(response) is response

    def test_none_is_204(self) -> None:
        assert to_response(None).status == 204

    def test_str(self) -> None:
        assert to_response("hi").text == "hi"

    def test_bytes(self) -> None:
        assert to_response(b"\x00").content_type == "application/octet-stream"

    def test_dict_is_json(self) -> None:
        response = to_response({"a": 1})
        assert response.json() == {"a": 1}

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError, match="int"):
            to_response(3)


class TestScopeMiddleware:
    def test_modes(self) -> None:
        assert ScopeMiddleware.extend().mode is MiddlewareMode.EXTEND
        assert ScopeMiddleware.override().mode is MiddlewareMode.OVERRIDE

    def test_use_returns_copy(self) -> None:
        base = ScopeMiddleware.extend()
        mw = _tag("a")
        used = base.use(mw)
        assert base.layers == ()
        assert used.layers == (mw,)

    @pytest.mark.asyncio
    async def test_use_order_first_outermost(self) -> None:
        scope = ScopeMiddleware.extend().use(_tag("first"), _tag("second"))
        table = scope.apply(RouteTable().with_route(_route("a.get.py"), lambda e: "h"))
        assert (await _get(table, "/a")).text == "first(second(h))"

    @pytest.mark.asyncio
    async def test_wrap(self) -> None:
        extra = _route("extra.get.py")

        def add_route(table: RouteTable) -> RouteTable:
            return table.with_route(extra, lambda e: "extra")

        scope = ScopeMiddleware.extend().use(_tag("mw")).wrap(add_route)
        table = scope.apply(RouteTable().with_route(_route("a.get.py"), lambda e: "a"))
        assert (await _get(table, "/a")).text == "mw(a)"
        assert (await _get(table, "/extra")).text == "extra"

    def test_repr(self) -> None:
        assert "override" in repr(ScopeMiddleware.override())


class TestLoader:
    def test_load_handler(self, tmp_path: Path) -> None:
        source = tmp_path / "users.get.py"
        source.write_text(HANDLER)
        handler = load_handler(source, "users_get")
        assert callable(handler)

    def test_missing_handler(self, tmp_path: Path) -> None:
        source = tmp_path / "users.get.py"
        source.write_text("x = 1\n")
        with pytest.raises(ConfigurationError, match="handler"):
            load_handler(source, "users_get")

    def test_import_error(self, tmp_path: Path) -> None:
        source = tmp_path / "users.get.py"
        source.write_text("import does_not_exist_anywhere\n")
        with pytest.raises(ConfigurationError, match="Error importing"):
            load_handler(source, "users_get")

    def test_load_middleware(self, tmp_path: Path) -> None:
        source = tmp_path / "_middleware.py"
        source.write_text(tagging_middleware("x", override=True))
        scope = load_middleware(source, "mw")
        assert scope.mode is MiddlewareMode.OVERRIDE
        assert len(scope.layers) == 1

    def test_factory_must_return_scope_middleware(self, tmp_path: Path) -> None:
        source = tmp_path / "_middleware.py"
        source.write_text("def middleware():\n    return None\n")
        with pytest.raises(ConfigurationError, match="ScopeMiddleware"):
            load_middleware(source, "mw")


class TestRuntimeScenarios:
    @pytest.mark.asyncio
    async def test_onion_order(self, make_tree: TreeFactory) -> None:
        root = make_tree(
            {
                "_middleware.py": tagging_middleware("root"),
                "api/_middleware.py": tagging_middleware("api"),
                "api/users.get.py": text_handler("users"),
            }
        )
        table = compose_router(scan_routes(root), RuntimeBackend())
        response = await _get(table, "/api/users")
        assert response.text == "root(api(users))"

    @pytest.mark.asyncio
    async def test_override_bypasses_ancestors(self, make_tree: TreeFactory) -> None:
        root = make_tree(
            {
                "_middleware.py": tagging_middleware("root"),
                "index.get.py": text_handler("home"),
                "api/_middleware.py": tagging_middleware("api"),
                "api/users.get.py": text_handler("users"),
                "api/public/_middleware.py": tagging_middleware("public", override=True),
                "api/public/status.get.py": text_handler("ok"),
            }
        )
        table = compose_router(scan_routes(root), RuntimeBackend())
        assert (await _get(table, "/")).text == "root(home)"
        assert (await _get(table, "/api/users")).text == "root(api(users))"
        assert (await _get(table, "/api/public/status")).text == "public(ok)"

    @pytest.mark.asyncio
    async def test_path_params_reach_handler(self, make_tree: TreeFactory) -> None:
        root = make_tree(
            {
                "users/[id].get.py": (
                    "from trellis.http.extract import get_param_required\n"
                    "from trellis.http.response import json\n"
                    "def handler(event):\n"
                    "    return json({'id': int(get_param_required(event, 'id'))})\n"
                ),
            }
        )
        result = compile_routes(root, backend=RuntimeBackend())
        response = await _get(result.router, "/users/7")
        assert response.json() == {"id": 7}

    def test_mode_mismatch_warns(
        self, make_tree: TreeFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Mode is chosen at runtime, so the static read says extend
        source = (
            "from trellis.middleware import ScopeMiddleware\n"
            "FACTORY = getattr(ScopeMiddleware, 'over' + 'ride')\n"
            "def middleware():\n"
            "    return FACTORY()\n"
        )
        root = make_tree(
            {
                "_middleware.py": tagging_middleware("root"),
                "p/_middleware.py": source,
                "p/x.get.py": HANDLER,
            }
        )
        tree = scan_routes(root)
        assert tree.children[0].middleware is not None
        assert tree.children[0].middleware.mode is MiddlewareMode.EXTEND
        with caplog.at_level(logging.WARNING, logger="trellis.runtime"):
            table = compose_router(tree, RuntimeBackend())
        assert "factory returned override" in caplog.text
        assert [ep.middleware for ep in table.endpoints if ep.route.pattern == "/p/x"] == [()]

    def test_broken_handler_fails_at_compose_time(self, make_tree: TreeFactory) -> None:
        root = make_tree({"index.get.py": "def not_the_handler(event):\n    pass\n"})
        with pytest.raises(ConfigurationError, match="handler"):
            compose_router(scan_routes(root), RuntimeBackend())
