"""Metadata registry — collected operations for one build pass.

An explicit object threaded through the build, not a module global:
tests and repeated builds each get their own.  Appends are guarded by a
lock so metadata may be registered from worker threads.
"""

import re
import threading
from dataclasses import replace

from trellis.openapi.types import HandlerMeta, ParamLocation, ParamMeta, RouteEntry

_PARAM_RE = re.compile(r"\{\*?([^/{}]+)\}")


def path_param_names(pattern: str) -> list[str]:
    """Names of the dynamic and catch-all segments of *pattern*."""
    return _PARAM_RE.findall(pattern)


class MetadataRegistry:
    """Ordered, thread-safe collection of ``RouteEntry`` records."""

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: list[RouteEntry] = []
        self._lock = threading.Lock()

    def register(self, method: str, pattern: str, operation_id: str, meta: HandlerMeta) -> RouteEntry:
        """Reconcile *meta* with *pattern* and append it.

        Every parameter named in the pattern becomes a required path
        parameter, whether or not the handler reads it.  *meta* itself is
        left untouched.
        """
        params = [replace(p) for p in meta.parameters]
        declared = {p.name for p in params if p.location is ParamLocation.PATH}
        for name in path_param_names(pattern):
            if name not in declared:
                params.append(ParamMeta(name=name, location=ParamLocation.PATH, required=True))
                declared.add(name)
        for p in params:
            if p.location is ParamLocation.PATH:
                p.required = True

        entry = RouteEntry(
            method=method.upper(),
            pattern=pattern,
            operation_id=operation_id,
            meta=replace(meta, parameters=params),
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def snapshot(self) -> list[RouteEntry]:
        """All entries in registration order (a copy)."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
