"""Scope middleware — what a ``_middleware.py`` file returns.

Each middleware file exposes a ``middleware()`` factory::

    from trellis.middleware import ScopeMiddleware

    async def require_token(event, next):
        if "authorization" not in event.headers:
            return text("Unauthorized", status=401)
        return await next(event)

    def middleware():
        return ScopeMiddleware.extend().use(require_token)

``ScopeMiddleware.override()`` opens a scope whose routes skip every
ancestor's middleware (public endpoints below an authenticated tree).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from trellis.middleware.protocol import Middleware
from trellis.scopes.types import MiddlewareMode

if TYPE_CHECKING:
    from trellis.runtime.table import RouteTable

# A custom transformation of a scope's route table
TableWrapper = Callable[["RouteTable"], "RouteTable"]


class ScopeMiddleware:
    """A scope's middleware: its mode plus the layers it applies.

    Immutable by convention: ``use()`` and ``wrap()`` return new objects.

    Attributes:
        mode: ``EXTEND`` (stack on ancestors) or ``OVERRIDE`` (replace them).
    """

    __slots__ = ("_layers", "_wrapper", "mode")

    def __init__(
        self,
        mode: MiddlewareMode = MiddlewareMode.EXTEND,
        *,
        layers: tuple[Middleware, ...] = (),
        wrapper: TableWrapper | None = None,
    ) -> None:
        self.mode = mode
        self._layers = layers
        self._wrapper = wrapper

    @classmethod
    def extend(cls) -> ScopeMiddleware:
        """Middleware that stacks on top of the inherited middleware."""
        return cls(MiddlewareMode.EXTEND)

    @classmethod
    def override(cls) -> ScopeMiddleware:
        """Middleware that replaces every ancestor's middleware."""
        return cls(MiddlewareMode.OVERRIDE)

    @property
    def layers(self) -> tuple[Middleware, ...]:
        return self._layers

    def use(self, *middleware: Middleware) -> ScopeMiddleware:
        """Return a copy with *middleware* appended.

        Layers run in the order added: the first sees the event first.
        """
        return ScopeMiddleware(
            self.mode,
            layers=(*self._layers, *middleware),
            wrapper=self._wrapper,
        )

    def wrap(self, wrapper: TableWrapper) -> ScopeMiddleware:
        """Return a copy that also passes the table through *wrapper*.

        The wrapper runs after the layers are applied and may return any
        ``RouteTable`` (add routes, re-layer, filter).
        """
        return ScopeMiddleware(self.mode, layers=self._layers, wrapper=wrapper)

    def apply(self, table: RouteTable) -> RouteTable:
        """Apply this scope's layers and wrapper to *table*."""
        if self._layers:
            table = table.layer(*self._layers)
        if self._wrapper is not None:
            table = self._wrapper(table)
        return table

    def __repr__(self) -> str:
        return (
            f"ScopeMiddleware(mode={self.mode.value!r}, layers={len(self._layers)}, "
            f"wrapped={self._wrapper is not None})"
        )
