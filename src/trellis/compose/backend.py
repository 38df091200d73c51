"""The router primitives the composer is written against.

A backend owns the router value type.  ``ExpressionBackend`` builds a
symbolic description; ``RuntimeBackend`` builds a dispatchable
``RouteTable`` from the real handler and middleware modules.
"""

from typing import Protocol, TypeVar

from trellis.routing.route import RouteDescriptor
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode

R = TypeVar("R")


class RouterBackend(Protocol[R]):
    """Route registration, merging, and middleware application.

    Every method returns a new router value; inputs are never mutated.
    """

    def empty(self) -> R:
        """A router with no routes."""
        ...

    def register_route(self, router: R, route: RouteDescriptor) -> R:
        """Append *route* to *router*."""
        ...

    def merge(self, base: R, other: R) -> R:
        """Routes of *base* followed by routes of *other*, order preserved."""
        ...

    def apply_middleware(self, middleware: MiddlewareDescriptor, router: R) -> R:
        """Wrap every route currently in *router* with *middleware*."""
        ...

    def mode_of(self, middleware: MiddlewareDescriptor) -> MiddlewareMode:
        """The mode *middleware* reports to its parent scope."""
        ...
