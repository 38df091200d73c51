"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(event: Event, next: Next) -> Response

Scope middleware (returned by ``_middleware.py`` files):
    ScopeMiddleware -- mode (extend/override) plus ordered layers
"""

from trellis.middleware.protocol import Middleware, Next
from trellis.middleware.scope import ScopeMiddleware
from trellis.scopes.types import MiddlewareMode

__all__ = [
    "Middleware",
    "MiddlewareMode",
    "Next",
    "ScopeMiddleware",
]
