"""Path segments and route descriptors as frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    """A static segment: ``users`` in ``/users``."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class DynamicSegment:
    """A single-component parameter: ``[id]`` on disk, ``{id}`` rendered."""

    name: str

    def render(self) -> str:
        return "{" + self.name + "}"


@dataclass(frozen=True, slots=True)
class CatchAllSegment:
    """A trailing parameter matching one or more components.

    ``[...slug]`` on disk, ``{*slug}`` rendered.
    """

    name: str

    def render(self) -> str:
        return "{*" + self.name + "}"


PathSegment: TypeAlias = LiteralSegment | DynamicSegment | CatchAllSegment


def render_pattern(segments: tuple[PathSegment, ...]) -> str:
    """Render segments as a URL pattern. No segments render as ``/``."""
    if not segments:
        return "/"
    return "/" + "/".join(seg.render() for seg in segments)


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """The compiled record of one handler file.

    Created by the translator during scanning, owned by exactly one
    ``ScopeNode``.

    Attributes:
        method: Upper-cased HTTP method.
        segments: Parsed URL pattern.
        pattern: Rendered pattern (e.g. ``/users/{id}``).
        source: Path of the handler file.
        identifier: Stable, sanitized identifier (used as operation id).
    """

    method: str
    segments: tuple[PathSegment, ...]
    pattern: str
    source: Path
    identifier: str

    @property
    def param_names(self) -> tuple[str, ...]:
        """Names of dynamic and catch-all segments, in path order."""
        return tuple(
            seg.name
            for seg in self.segments
            if isinstance(seg, (DynamicSegment, CatchAllSegment))
        )


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A route bound to its handler and the middleware wrapping it.

    ``middleware`` is ordered outermost first: the first entry sees the
    request before every other middleware and the response last.
    """

    route: RouteDescriptor
    handler: Callable[..., Any]
    middleware: tuple[Callable[..., Any], ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    endpoint: Endpoint
    path_params: dict[str, str]
