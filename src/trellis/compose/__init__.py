"""Scope-tree composition.

``compose_router`` is written against the ``RouterBackend`` protocol;
``ExpressionBackend`` is the static backend, ``trellis.runtime`` the
dispatching one.
"""

from trellis.compose.backend import RouterBackend
from trellis.compose.composer import ComposedScope, compose_router, compose_scope
from trellis.compose.expr import (
    ExpressionBackend,
    MergeExpr,
    RouterExpr,
    RoutesExpr,
    WrapExpr,
    middleware_chains,
    render,
    routes_of,
)

__all__ = [
    "ComposedScope",
    "ExpressionBackend",
    "MergeExpr",
    "RouterBackend",
    "RouterExpr",
    "RoutesExpr",
    "WrapExpr",
    "compose_router",
    "compose_scope",
    "middleware_chains",
    "render",
    "routes_of",
]
