"""The request event handed to route handlers.

Frozen and minimal: the serving runtime owns the real request type and
builds an ``Event`` from it before dispatching into a ``RouteTable``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl, urlsplit


@dataclass(frozen=True, slots=True)
class Event:
    """An incoming request as seen by a handler.

    Attributes:
        method: Upper-cased HTTP method.
        path: Request path without the query string.
        path_params: Values captured by dynamic and catch-all segments.
        query: Query string parameters (first value wins).
        headers: Request headers, lower-cased names.
        body: Raw request body.
    """

    method: str
    path: str
    path_params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
    ) -> "Event":
        """Build an event from a method and a path with optional query."""
        parts = urlsplit(url)
        query: dict[str, str] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            query.setdefault(key, value)
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=query,
            headers={k.lower(): v for k, v in (headers or {}).items()},
            body=body.encode("utf-8") if isinstance(body, str) else body,
        )

    def with_path_params(self, params: Mapping[str, Any]) -> "Event":
        """Return a copy carrying the matched path parameters."""
        return replace(self, path_params={k: str(v) for k, v in params.items()})
