"""Data models for middleware scopes.

Immutable frozen dataclasses representing the scope tree.  Built once
per build pass by the scanner, consumed by the composer and the
metadata pass, then discarded.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from trellis.routing.route import RouteDescriptor


class MiddlewareMode(Enum):
    """How a scope's middleware relates to its ancestors'.

    ``EXTEND`` stacks on top of inherited middleware (the default).
    ``OVERRIDE`` replaces it: routes below skip every ancestor layer.
    """

    EXTEND = "extend"
    OVERRIDE = "override"


@dataclass(frozen=True, slots=True)
class MiddlewareDescriptor:
    """A ``_middleware.py`` file discovered in the tree.

    Attributes:
        source: Filesystem path to the middleware file.
        identifier: Sanitized identifier (``mw`` for the root,
            ``mw_api_public`` for ``api/public``).
        display_path: Scope path for reports (``/`` or ``/api/public``).
        mode: Mode detected from the source without executing it.
    """

    source: Path
    identifier: str
    display_path: str
    mode: MiddlewareMode = MiddlewareMode.EXTEND


@dataclass(frozen=True, slots=True)
class ScopeNode:
    """One materialized scope: a middleware-bearing directory, or the root.

    Attributes:
        middleware: The scope's middleware, ``None`` only for a root
            without ``_middleware.py``.
        routes: Routes owned directly by this scope, in match order.
        children: Nested middleware-bearing scopes, in scan order.
    """

    middleware: MiddlewareDescriptor | None = None
    routes: tuple[RouteDescriptor, ...] = ()
    children: tuple["ScopeNode", ...] = ()

    def walk(self) -> Iterator["ScopeNode"]:
        """Yield this node and every descendant, depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def all_routes(self) -> Iterator[RouteDescriptor]:
        """Yield every route in the tree, scope by scope."""
        for node in self.walk():
            yield from node.routes

    @property
    def route_count(self) -> int:
        return sum(len(node.routes) for node in self.walk())

    @property
    def middleware_count(self) -> int:
        return sum(1 for node in self.walk() if node.middleware is not None)

    @property
    def is_empty(self) -> bool:
        return self.middleware is None and not self.routes and not self.children
