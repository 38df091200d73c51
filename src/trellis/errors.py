"""Errors raised by a build pass and by the reference runtime.

Build-time problems (a routes root that cannot be scanned, a handler
module that fails to import, two files claiming one route) surface as
``ConfigurationError``.  Request-time problems are ``HTTPError``
subclasses that ``RouteTable.dispatch()`` turns into responses.
"""

from dataclasses import dataclass


class TrellisError(Exception):
    """Root of every exception trellis raises on purpose."""


class ConfigurationError(TrellisError):
    """The routes tree or compiler settings cannot produce a router."""


@dataclass(frozen=True, slots=True)
class HTTPError(TrellisError):
    """A request failure carrying the status it should be answered with.

    ``headers`` travel to the plain-text response built by the route table.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400. Raised by the ``get_*`` accessors for missing or malformed input."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404. No compiled pattern matches the event path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405. The path matches a pattern registered only for other methods."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )
