"""Filesystem scanning and scope-tree construction.

Walks the routes directory depth-first and discovers:
- ``_middleware.py`` files, each opening a middleware scope
- handler files named ``<base>.<method>.py`` (or ``index.py``)

Directories without middleware are never materialized.  Their routes
are absorbed into the nearest ancestor scope and any middleware-bearing
descendants are promoted to children of that ancestor.  Entries are
visited in name order so identifiers and output are reproducible.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path

from trellis.config import CompilerConfig
from trellis.errors import ConfigurationError
from trellis.routing.ordering import order_routes
from trellis.routing.route import RouteDescriptor
from trellis.routing.translate import sanitize_identifier, translate_filename
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode, ScopeNode

logger = logging.getLogger("trellis.scan")

# Marker prefixed to middleware identifiers
MIDDLEWARE_MARKER = "mw"

# Call names that declare an override scope: ScopeMiddleware.override()
_OVERRIDE_CALLS = frozenset({"override", "override_parent"})


@dataclass(slots=True)
class _PendingScope:
    """A scope under construction. Frozen into a ScopeNode when done."""

    middleware: MiddlewareDescriptor | None
    routes: list[RouteDescriptor] = field(default_factory=list)
    children: list[ScopeNode] = field(default_factory=list)


def scan_routes(root: str | Path | None = None, config: CompilerConfig | None = None) -> ScopeNode:
    """Scan a routes directory and build its scope tree.

    Args:
        root: Path to the routes directory.  Defaults to
            ``config.routes_dir``.
        config: Compiler configuration (middleware filename, handler
            suffix, ordering).  Defaults to ``CompilerConfig()``.

    Returns:
        The root :class:`ScopeNode`.  An empty directory yields an empty
        root node.

    Raises:
        ConfigurationError: If *root* is missing, not a directory, or
            cannot be listed.
    """
    config = config or CompilerConfig()
    root_path = Path(config.routes_dir if root is None else root).resolve()
    if not root_path.is_dir():
        msg = f"Routes directory not found: {root_path}"
        raise ConfigurationError(msg)
    try:
        entries = _list_entries(root_path)
    except OSError as exc:
        msg = f"Routes directory is not readable: {root_path} ({exc.strerror or exc})"
        raise ConfigurationError(msg) from exc

    return _freeze(_scan_directory(root_path, (), config, entries=entries), config)


def _list_entries(directory: Path) -> list[tuple[Path, bool]]:
    """List *directory* as ``(entry, is_dir)`` pairs in name order.

    Entries that are neither files nor directories are dropped.  Raises
    ``OSError`` when the directory cannot be listed or its entries cannot
    be stat'ed (a directory readable but not searchable).
    """
    entries: list[tuple[Path, bool]] = []
    for item in sorted(directory.iterdir(), key=lambda p: p.name):
        if item.is_dir():
            entries.append((item, True))
        elif item.is_file():
            entries.append((item, False))
    return entries


def _scan_directory(
    directory: Path,
    ancestors: tuple[str, ...],
    config: CompilerConfig,
    *,
    entries: list[tuple[Path, bool]] | None = None,
) -> _PendingScope:
    """Recursively scan one directory.

    Args:
        directory: Directory being scanned.
        ancestors: Directory names between the root and *directory*.
        config: Compiler configuration.
        entries: Pre-listed entries (the root is listed by the caller so
            that failures there are fatal).
    """
    if entries is None:
        try:
            entries = _list_entries(directory)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return _PendingScope(middleware=None)

    scope = _PendingScope(middleware=_find_middleware(entries, ancestors, config))

    for item, is_dir in entries:
        name = item.name
        if name.startswith((".", "_")):
            continue

        if is_dir:
            child = _scan_directory(item, (*ancestors, name), config)
            if child.middleware is not None:
                # Own middleware: a separate scope
                scope.children.append(_freeze(child, config))
            elif child.children:
                # No middleware here, but deeper scopes exist: absorb the
                # direct routes and promote the deeper scopes
                scope.routes.extend(child.routes)
                scope.children.extend(child.children)
            else:
                scope.routes.extend(child.routes)
        elif name.endswith(config.handler_suffix):
            route = translate_filename(name, ancestors, source=item)
            if route is not None:
                scope.routes.append(route)

    return scope


def _freeze(scope: _PendingScope, config: CompilerConfig) -> ScopeNode:
    return ScopeNode(
        middleware=scope.middleware,
        routes=order_routes(scope.routes, config.ordering),
        children=tuple(scope.children),
    )


def _find_middleware(
    entries: list[tuple[Path, bool]],
    ancestors: tuple[str, ...],
    config: CompilerConfig,
) -> MiddlewareDescriptor | None:
    mw_file = next(
        (p for p, is_dir in entries if not is_dir and p.name == config.middleware_filename),
        None,
    )
    if mw_file is None:
        return None

    if ancestors:
        identifier = sanitize_identifier([MIDDLEWARE_MARKER, *ancestors])
        display_path = "/" + "/".join(ancestors)
    else:
        identifier = MIDDLEWARE_MARKER
        display_path = "/"

    return MiddlewareDescriptor(
        source=mw_file,
        identifier=identifier,
        display_path=display_path,
        mode=detect_mode(mw_file),
    )


def detect_mode(source: Path) -> MiddlewareMode:
    """Detect a middleware file's mode from its AST, without importing it.

    Reports ``OVERRIDE`` when the module calls ``ScopeMiddleware.override()``,
    references ``MiddlewareMode.OVERRIDE``, or passes ``mode="override"``.
    Anything else, including unreadable or invalid source, is ``EXTEND``.
    """
    try:
        tree = ast.parse(source.read_text(encoding="utf-8"), filename=str(source))
    except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as exc:
        logger.debug("Cannot inspect middleware %s: %s", source, exc)
        return MiddlewareMode.EXTEND

    for node in ast.walk(tree):
        if isinstance(node, ast.Attribute) and node.attr == "OVERRIDE":
            return MiddlewareMode.OVERRIDE
        if isinstance(node, ast.Call):
            func = node.func
            if isinstance(func, ast.Attribute) and func.attr in _OVERRIDE_CALLS:
                return MiddlewareMode.OVERRIDE
            for kw in node.keywords:
                if (
                    kw.arg == "mode"
                    and isinstance(kw.value, ast.Constant)
                    and kw.value.value == MiddlewareMode.OVERRIDE.value
                ):
                    return MiddlewareMode.OVERRIDE
    return MiddlewareMode.EXTEND
