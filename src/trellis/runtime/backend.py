"""Composer backend that builds a dispatchable ``RouteTable``."""

import logging
from collections.abc import Callable
from typing import Any

from trellis.config import CompilerConfig
from trellis.middleware.scope import ScopeMiddleware
from trellis.routing.route import RouteDescriptor
from trellis.runtime.loader import load_handler, load_middleware
from trellis.runtime.table import RouteTable
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode

logger = logging.getLogger("trellis.runtime")


class RuntimeBackend:
    """Loads route and middleware modules as the composer asks for them.

    Each middleware factory runs once per backend; the resulting
    ``ScopeMiddleware`` decides the scope's mode.
    """

    __slots__ = ("_config", "_handlers", "_middleware")

    def __init__(self, config: CompilerConfig | None = None) -> None:
        self._config = config or CompilerConfig()
        self._middleware: dict[str, ScopeMiddleware] = {}
        self._handlers: dict[str, Callable[..., Any]] = {}

    def empty(self) -> RouteTable:
        return RouteTable()

    def register_route(self, router: RouteTable, route: RouteDescriptor) -> RouteTable:
        handler = self._handlers.get(route.identifier)
        if handler is None:
            handler = load_handler(route.source, route.identifier, self._config.handler_name)
            self._handlers[route.identifier] = handler
        return router.with_route(route, handler)

    def merge(self, base: RouteTable, other: RouteTable) -> RouteTable:
        return base.merge(other)

    def apply_middleware(self, middleware: MiddlewareDescriptor, router: RouteTable) -> RouteTable:
        return self.middleware_for(middleware).apply(router)

    def mode_of(self, middleware: MiddlewareDescriptor) -> MiddlewareMode:
        mode = self.middleware_for(middleware).mode
        if mode is not middleware.mode:
            logger.warning(
                "%s: factory returned %s middleware but the source reads as %s",
                middleware.source,
                mode.value,
                middleware.mode.value,
            )
        return mode

    def middleware_for(self, middleware: MiddlewareDescriptor) -> ScopeMiddleware:
        """The loaded ``ScopeMiddleware`` for *middleware* (cached)."""
        loaded = self._middleware.get(middleware.identifier)
        if loaded is None:
            loaded = load_middleware(
                middleware.source,
                middleware.identifier,
                self._config.middleware_factory,
            )
            self._middleware[middleware.identifier] = loaded
        return loaded
