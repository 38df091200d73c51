"""Deterministic route ordering within a scope.

The runtime router tries routes in registration order, so the most
specific pattern has to be registered first.  Two strategies:

``length`` (default)
    Longer rendered pattern first; equal lengths sort lexicographically.

``specificity``
    Segment-kind aware: more segments first, then per position
    literal < dynamic < catch-all, then lexicographically.  A static
    ``/abcdef`` beats ``/{id}`` regardless of string length.
"""

from collections.abc import Callable, Iterable
from typing import Any

from trellis.errors import ConfigurationError
from trellis.routing.route import (
    CatchAllSegment,
    DynamicSegment,
    LiteralSegment,
    PathSegment,
    RouteDescriptor,
)

_KIND_RANK: dict[type, int] = {
    LiteralSegment: 0,
    DynamicSegment: 1,
    CatchAllSegment: 2,
}


def length_key(route: RouteDescriptor) -> tuple[int, str]:
    """Sort key: decreasing pattern length, then ascending pattern."""
    return (-len(route.pattern), route.pattern)


def specificity_key(route: RouteDescriptor) -> tuple[Any, ...]:
    """Sort key: deeper first, literal before dynamic before catch-all."""
    kinds = tuple(_segment_rank(seg) for seg in route.segments)
    return (-len(route.segments), kinds, route.pattern)


def _segment_rank(segment: PathSegment) -> int:
    return _KIND_RANK[type(segment)]


_STRATEGIES: dict[str, Callable[[RouteDescriptor], Any]] = {
    "length": length_key,
    "specificity": specificity_key,
}


def order_routes(
    routes: Iterable[RouteDescriptor],
    strategy: str = "length",
) -> tuple[RouteDescriptor, ...]:
    """Return *routes* sorted by the named strategy.

    The sort is stable, so routes sharing a pattern (``GET`` and
    ``POST`` on ``/users``) keep their scan order.
    """
    key = _STRATEGIES.get(strategy)
    if key is None:
        msg = f"Unknown route ordering {strategy!r}"
        raise ConfigurationError(msg)
    return tuple(sorted(routes, key=key))
