"""Compiled router with trie-based path matching.

Endpoints are added while a ``RouteTable`` compiles and frozen into an
immutable lookup structure before the first request.  Matching tries
literal children first, then dynamic children in insertion order, then
a catch-all.
"""

from trellis.errors import ConfigurationError, MethodNotAllowed, NotFound
from trellis.routing.route import (
    CatchAllSegment,
    DynamicSegment,
    Endpoint,
    RouteMatch,
)


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "endpoints_by_method", "param_children")

    def __init__(self) -> None:
        # Literal segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Dynamic children keyed by parameter name, tried in insertion order
        self.param_children: dict[str, _TrieNode] = {}
        # Catch-all: (param name, endpoints by method)
        self.catch_all: tuple[str, dict[str, Endpoint]] | None = None
        # Endpoints terminating at this node, keyed by HTTP method
        self.endpoints_by_method: dict[str, Endpoint] = {}


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(endpoint)
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_endpoints", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._endpoints: list[Endpoint] = []

    def add(self, endpoint: Endpoint) -> None:
        """Add an endpoint. Must be called before compile().

        Raises ``ConfigurationError`` when the same method and pattern are
        registered twice (``users.get.py`` next to ``users/index.get.py``).
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        route = endpoint.route
        node = self._root
        for seg in route.segments:
            if isinstance(seg, CatchAllSegment):
                if node.catch_all is None:
                    node.catch_all = (seg.name, {})
                self._register(node.catch_all[1], endpoint)
                self._endpoints.append(endpoint)
                return

            if isinstance(seg, DynamicSegment):
                node = node.param_children.setdefault(seg.name, _TrieNode())
            else:
                node = node.children.setdefault(seg.text, _TrieNode())

        self._register(node.endpoints_by_method, endpoint)
        self._endpoints.append(endpoint)

    @staticmethod
    def _register(table: dict[str, Endpoint], endpoint: Endpoint) -> None:
        method = endpoint.route.method
        existing = table.get(method)
        if existing is not None:
            msg = (
                f"Duplicate route {method} {endpoint.route.pattern}: "
                f"{endpoint.route.source} conflicts with {existing.route.source}"
            )
            raise ConfigurationError(msg)
        table[method] = endpoint

    @property
    def endpoints(self) -> list[Endpoint]:
        """All endpoints in registration order."""
        return list(self._endpoints)

    def compile(self) -> None:
        """Freeze the router. No more endpoints can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled endpoints.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no endpoint matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        endpoints, params = result
        endpoint = endpoints.get(method.upper())
        if endpoint is not None:
            return RouteMatch(endpoint=endpoint, path_params=params)

        raise MethodNotAllowed(frozenset(endpoints))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Endpoint], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed, so this node holds the endpoints
        if index == len(parts):
            if node.endpoints_by_method:
                return node.endpoints_by_method, params
            return None

        part = parts[index]

        # 1. Literal child (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params)
            if result is not None:
                return result

        # 2. Dynamic children
        for name, param_node in node.param_children.items():
            result = self._match_node(param_node, parts, index + 1, {**params, name: part})
            if result is not None:
                return result

        # 3. Catch-all consumes the rest of the path
        if node.catch_all is not None:
            name, endpoints = node.catch_all
            return endpoints, {**params, name: "/".join(parts[index:])}

        return None
