"""Routing — filename translation, route descriptors, and ordering.

The runtime matcher lives in ``trellis.routing.router``; it is only
needed when a composed route table is dispatched in-process.
"""

from trellis.routing.ordering import order_routes
from trellis.routing.route import (
    CatchAllSegment,
    DynamicSegment,
    LiteralSegment,
    PathSegment,
    RouteDescriptor,
    render_pattern,
)
from trellis.routing.translate import translate_filename

__all__ = [
    "CatchAllSegment",
    "DynamicSegment",
    "LiteralSegment",
    "PathSegment",
    "RouteDescriptor",
    "order_routes",
    "render_pattern",
    "translate_filename",
]
