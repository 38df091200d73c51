"""Build pass — scan, compose, and collect metadata in one call.

    result = compile_routes("routes")
    for detail in result.route_details():
        print(detail.method, detail.pattern, detail.chain)

The default backend is symbolic and never imports user code.  Pass
``backend=RuntimeBackend(config)`` for a dispatchable ``RouteTable``.
"""

import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from trellis.compose.backend import RouterBackend
from trellis.compose.composer import compose_router
from trellis.compose.expr import ExpressionBackend
from trellis.config import CompilerConfig
from trellis.openapi.analyze import analyze_file
from trellis.openapi.registry import MetadataRegistry
from trellis.routing.route import RouteDescriptor
from trellis.scopes.scanner import scan_routes
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode, ScopeNode

logger = logging.getLogger("trellis.build")


@dataclass(frozen=True, slots=True)
class RouteDetail:
    """A route and the middleware it runs through, outermost first."""

    method: str
    pattern: str
    identifier: str
    chain: tuple[MiddlewareDescriptor, ...]

    @property
    def chain_display(self) -> str:
        return " > ".join(mw.display_path for mw in self.chain) or "-"


@dataclass(frozen=True, slots=True)
class ScopeDetail:
    """A middleware scope, its mode, and the ancestor scopes it runs inside."""

    display_path: str
    identifier: str
    mode: MiddlewareMode
    inherits: tuple[str, ...]

    @property
    def inherits_display(self) -> str:
        return " > ".join(self.inherits) or "-"


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Everything a build pass produced."""

    tree: ScopeNode
    router: Any
    registry: MetadataRegistry

    def route_details(self) -> list[RouteDetail]:
        return [
            RouteDetail(
                method=route.method,
                pattern=route.pattern,
                identifier=route.identifier,
                chain=chain,
            )
            for route, chain in _route_chains(self.tree)
        ]

    def scope_details(self) -> list[ScopeDetail]:
        return [
            ScopeDetail(
                display_path=mw.display_path,
                identifier=mw.identifier,
                mode=mw.mode,
                inherits=tuple(outer.display_path for outer in chain[:-1]),
            )
            for mw, chain in _scope_chains(self.tree, ())
        ]


def _scope_chains(
    node: ScopeNode,
    inherited: tuple[MiddlewareDescriptor, ...],
) -> Iterator[tuple[MiddlewareDescriptor, tuple[MiddlewareDescriptor, ...]]]:
    """Yield each scope's middleware with the full chain ending at it."""
    chain = inherited
    if node.middleware is not None:
        if node.middleware.mode is MiddlewareMode.OVERRIDE:
            chain = (node.middleware,)
        else:
            chain = (*inherited, node.middleware)
        yield node.middleware, chain
    for child in node.children:
        yield from _scope_chains(child, chain)


def _route_chains(
    node: ScopeNode,
    inherited: tuple[MiddlewareDescriptor, ...] = (),
) -> Iterator[tuple[RouteDescriptor, tuple[MiddlewareDescriptor, ...]]]:
    chain = inherited
    if node.middleware is not None:
        if node.middleware.mode is MiddlewareMode.OVERRIDE:
            chain = (node.middleware,)
        else:
            chain = (*inherited, node.middleware)
    for route in node.routes:
        yield route, chain
    for child in node.children:
        yield from _route_chains(child, chain)


def compile_routes(
    root: str | Path | None = None,
    config: CompilerConfig | None = None,
    *,
    backend: RouterBackend[Any] | None = None,
    registry: MetadataRegistry | None = None,
) -> BuildResult:
    """Run one build pass over the routes directory *root*.

    *root* defaults to ``config.routes_dir``.

    Raises:
        ConfigurationError: If *root* cannot be scanned, or (runtime
            backend only) a handler or middleware module cannot be loaded.
    """
    config = config or CompilerConfig()
    tree = scan_routes(root, config)
    router = compose_router(tree, backend if backend is not None else ExpressionBackend())

    if registry is None:
        registry = MetadataRegistry()
    if config.extract_metadata:
        _register_metadata(tree, registry, config)

    result = BuildResult(tree=tree, router=router, registry=registry)
    _log_report(result)
    return result


def _register_metadata(tree: ScopeNode, registry: MetadataRegistry, config: CompilerConfig) -> None:
    routes = list(tree.all_routes())

    def analyze(route: RouteDescriptor) -> Any:
        return analyze_file(route.source, config.handler_name)

    if config.metadata_workers > 1 and len(routes) > 1:
        with ThreadPoolExecutor(max_workers=config.metadata_workers) as pool:
            metas = list(pool.map(analyze, routes))
    else:
        metas = [analyze(route) for route in routes]

    # Registration stays in scan order whatever the worker count
    for route, meta in zip(routes, metas, strict=True):
        registry.register(route.method, route.pattern, route.identifier, meta)


def _log_report(result: BuildResult) -> None:
    for detail in result.route_details():
        logger.info("%s %s  %s", detail.method, detail.pattern, detail.chain_display)
    for scope in result.scope_details():
        logger.info("%s  %s  %s", scope.display_path, scope.mode.value, scope.inherits_display)
    logger.info(
        "%d route(s), %d middleware scope(s) loaded",
        result.tree.route_count,
        result.tree.middleware_count,
    )
