"""Route table — the composed router value of the reference runtime.

A ``RouteTable`` is an ordered, immutable list of endpoints.  The
composer builds it with three primitives: ``with_route`` registers a
handler, ``layer`` wraps every endpoint currently in the table with
middleware (like a router layer, later routes are unaffected), and
``merge`` concatenates two tables.  ``dispatch`` runs a request through
the matched endpoint's middleware onion.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from trellis._internal.invoke import invoke
from trellis.errors import HTTPError
from trellis.http.event import Event
from trellis.http.response import Response
from trellis.http.response import json as json_response
from trellis.http.response import no_content
from trellis.middleware.protocol import Next
from trellis.routing.route import Endpoint, RouteDescriptor
from trellis.routing.router import Router

logger = logging.getLogger("trellis.runtime")


class RouteTable:
    """An ordered, immutable set of endpoints.

    Usage::

        table = RouteTable().with_route(route, handler).layer(timing)
        response = await table.dispatch(Event.from_url("GET", "/users/1"))
    """

    __slots__ = ("_endpoints", "_router")

    def __init__(self, endpoints: Iterable[Endpoint] = ()) -> None:
        self._endpoints: tuple[Endpoint, ...] = tuple(endpoints)
        self._router: Router | None = None

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    def __len__(self) -> int:
        return len(self._endpoints)

    def with_route(self, route: RouteDescriptor, handler: Callable[..., Any]) -> "RouteTable":
        """Return a table with *handler* registered for *route*."""
        return RouteTable((*self._endpoints, Endpoint(route=route, handler=handler)))

    def merge(self, other: "RouteTable") -> "RouteTable":
        """Return a table holding this table's endpoints, then *other*'s."""
        return RouteTable((*self._endpoints, *other._endpoints))

    def layer(self, *middleware: Callable[..., Any]) -> "RouteTable":
        """Wrap every current endpoint with *middleware*.

        The new layers sit outside the endpoint's existing middleware,
        first argument outermost.
        """
        return RouteTable(
            Endpoint(
                route=ep.route,
                handler=ep.handler,
                middleware=(*middleware, *ep.middleware),
            )
            for ep in self._endpoints
        )

    def compile(self) -> Router:
        """Build (once) and return the trie router for this table.

        Raises ``ConfigurationError`` on duplicate method and pattern.
        """
        if self._router is None:
            router = Router()
            for endpoint in self._endpoints:
                router.add(endpoint)
            router.compile()
            self._router = router
        return self._router

    async def dispatch(self, event: Event) -> Response:
        """Route *event* and run it through its endpoint's middleware.

        ``HTTPError`` becomes a plain-text error response; any other
        exception is logged and answered with a 500.
        """
        router = self.compile()
        try:
            match = router.match(event.method, event.path)
            endpoint = match.endpoint
            event = event.with_path_params(match.path_params)

            async def call_handler(ev: Event, _handler: Any = endpoint.handler) -> Response:
                return to_response(await invoke(_handler, ev))

            # Wrap middleware around the handler, last layer innermost
            handler: Next = call_handler
            for mw in reversed(endpoint.middleware):
                outer = handler

                async def make_next(ev: Event, _mw: Any = mw, _next: Next = outer) -> Response:
                    return to_response(await _mw(ev, _next))

                handler = make_next

            return await handler(event)
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, event.method, event.path, exc.detail)
            response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
            for name, value in exc.headers:
                response = response.with_header(name, value)
            return response
        except Exception:
            logger.exception("500 %s %s", event.method, event.path)
            return Response(body="Internal Server Error", status=500)


def to_response(value: Any) -> Response:
    """Coerce a handler return value into a ``Response``.

    ``Response`` passes through, ``str`` becomes text, ``dict``/``list``
    become JSON, ``None`` becomes 204.
    """
    if isinstance(value, Response):
        return value
    if value is None:
        return no_content()
    if isinstance(value, str):
        return Response(body=value)
    if isinstance(value, bytes):
        return Response(body=value, content_type="application/octet-stream")
    if isinstance(value, (dict, list)):
        return json_response(value)
    msg = f"Handler returned unsupported type {type(value).__name__}"
    raise TypeError(msg)
