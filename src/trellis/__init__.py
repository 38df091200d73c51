"""Trellis — a convention-based router compiler.

Turns a directory of handler modules into a composed, middleware-wrapped
router and OpenAPI metadata, before any request is served.

Directory conventions::

    routes/
        _middleware.py          scope middleware for everything below
        index.get.py            GET /
        users.get.py            GET /users
        users/[id].get.py       GET /users/{id}
        files/[...path].get.py  GET /files/{*path}

Basic usage::

    from trellis import RuntimeBackend, compile_routes

    result = compile_routes("routes", backend=RuntimeBackend())
    response = await result.router.dispatch(Event.from_url("GET", "/users/42"))
"""

__version__ = "0.1.0"
__all__ = [
    "BuildResult",
    "CompilerConfig",
    "ConfigurationError",
    "Event",
    "ExpressionBackend",
    "HTTPError",
    "MetadataRegistry",
    "MiddlewareMode",
    "Response",
    "RouteTable",
    "RuntimeBackend",
    "ScopeMiddleware",
    "ScopeNode",
    "TrellisError",
    "compile_routes",
    "compose_router",
    "generate_spec",
    "scan_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import trellis`` cheap for the CLI.
    """
    if name in ("BuildResult", "compile_routes"):
        from trellis import build as _build

        return getattr(_build, name)

    if name == "CompilerConfig":
        from trellis.config import CompilerConfig

        return CompilerConfig

    if name in ("ConfigurationError", "HTTPError", "TrellisError"):
        from trellis import errors as _errors

        return getattr(_errors, name)

    if name == "Event":
        from trellis.http.event import Event

        return Event

    if name == "Response":
        from trellis.http.response import Response

        return Response

    if name in ("ExpressionBackend", "compose_router"):
        from trellis import compose as _compose

        return getattr(_compose, name)

    if name in ("MetadataRegistry", "generate_spec"):
        from trellis import openapi as _openapi

        return getattr(_openapi, name)

    if name in ("MiddlewareMode", "ScopeNode", "scan_routes"):
        from trellis import scopes as _scopes

        return getattr(_scopes, name)

    if name == "ScopeMiddleware":
        from trellis.middleware.scope import ScopeMiddleware

        return ScopeMiddleware

    if name in ("RouteTable", "RuntimeBackend"):
        from trellis import runtime as _runtime

        return getattr(_runtime, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
