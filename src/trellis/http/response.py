"""HTTP response with chainable .with_*() transformation API, plus builders.

Each transformation returns a new Response.  The builder functions
(``json``, ``text``, ``html``, ``no_content``, ``redirect``, ``raw``) are
the vocabulary the metadata pass recognizes when it infers a handler's
response content type.
"""

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def header(self, name: str) -> str | None:
        """Return the last value set for *name*, case-insensitively."""
        lowered = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == lowered:
                return value
        return None

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        return json_module.loads(self.text)


def json(data: Any, *, status: int = 200) -> Response:
    """Serialize *data* as an ``application/json`` response."""
    return Response(
        body=json_module.dumps(data),
        status=status,
        content_type="application/json",
    )


def text(body: str, *, status: int = 200) -> Response:
    return Response(body=body, status=status, content_type="text/plain; charset=utf-8")


def html(body: str, *, status: int = 200) -> Response:
    return Response(body=body, status=status, content_type="text/html; charset=utf-8")


def no_content() -> Response:
    return Response(body=b"", status=204, content_type="")


def redirect(location: str, *, status: int = 302) -> Response:
    return Response(body=b"", status=status, content_type="").with_header("Location", location)


def raw(body: bytes, *, content_type: str = "application/octet-stream", status: int = 200) -> Response:
    """Return raw bytes, ``application/octet-stream`` unless told otherwise."""
    return Response(body=body, status=status, content_type=content_type)
