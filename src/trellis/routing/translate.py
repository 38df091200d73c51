"""Filename-to-route translation.

Pure functions that turn a handler filename plus its ancestor directory
names into a :class:`RouteDescriptor`.  The naming convention::

    index.get.py          GET /
    users.get.py          GET /users
    users/[id].get.py     GET /users/{id}
    posts/[...slug].get.py  GET /posts/{*slug}

A file whose stem has no method token is a route only when it is
exactly ``index`` (served as ``GET``).
"""

import re
from collections.abc import Sequence
from pathlib import Path

from trellis.routing.route import (
    CatchAllSegment,
    DynamicSegment,
    LiteralSegment,
    PathSegment,
    RouteDescriptor,
    render_pattern,
)

# Identifier used when every component sanitizes to nothing
FALLBACK_IDENTIFIER = "root_route"

_INDEX = "index"
_NON_IDENT_RE = re.compile(r"\W")
_UNDERSCORE_RUN_RE = re.compile(r"_+")


def sanitize_part(part: str) -> str:
    """Replace every non-alphanumeric, non-underscore character with ``_``."""
    return _NON_IDENT_RE.sub("_", part)


def sanitize_identifier(parts: Sequence[str]) -> str:
    """Join sanitized parts with ``_``, collapse runs, strip the ends.

    Returns an empty string when nothing identifier-like remains.
    """
    raw = "_".join(sanitize_part(p) for p in parts)
    return _UNDERSCORE_RUN_RE.sub("_", raw).strip("_")


def parse_segment(name: str) -> PathSegment:
    """Classify a directory or base name as a path segment."""
    if name.startswith("[...") and name.endswith("]"):
        # "[...]" names nothing and stays literal
        return CatchAllSegment(name[4:-1]) if len(name) > 5 else LiteralSegment(name)
    if name.startswith("[") and name.endswith("]") and len(name) > 2:
        return DynamicSegment(name[1:-1])
    return LiteralSegment(name)


def split_filename(filename: str) -> tuple[str, str] | None:
    """Split a filename into ``(base_name, METHOD)``.

    Returns ``None`` when the file does not follow the convention.
    """
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    tokens = stem.split(".")
    if len(tokens) == 1:
        if tokens[0] == _INDEX:
            return _INDEX, "GET"
        return None
    base = ".".join(tokens[:-1])
    method = tokens[-1].upper()
    if not base or not method:
        return None
    return base, method


def translate_filename(
    filename: str,
    ancestors: Sequence[str],
    *,
    source: Path | None = None,
) -> RouteDescriptor | None:
    """Translate a handler filename into a route descriptor.

    Args:
        filename: File name including its extension (``users.get.py``).
        ancestors: Directory names between the routes root and the file.
        source: Filesystem path recorded on the descriptor.  Defaults to
            the ancestors joined with the filename.

    Returns:
        The descriptor, or ``None`` if the name is not a route.
    """
    split = split_filename(filename)
    if split is None:
        return None
    base, method = split

    parts = list(ancestors)
    if base != _INDEX:
        parts.append(base)
    segments = tuple(parse_segment(p) for p in parts)

    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    identifier = sanitize_identifier([*ancestors, stem]) or FALLBACK_IDENTIFIER

    return RouteDescriptor(
        method=method,
        segments=segments,
        pattern=render_pattern(segments),
        source=source if source is not None else Path(*ancestors, filename),
        identifier=identifier,
    )
