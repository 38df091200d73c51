"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(event: Event, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from trellis.http.event import Event
from trellis.http.response import Response

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Event], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for trellis middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(event: Event, next: Next) -> Response:
            start = time.monotonic()
            response = await next(event)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RequireToken:
            async def __call__(self, event: Event, next: Next) -> Response:
                ...
    """

    async def __call__(self, event: Event, next: Next) -> Response: ...
