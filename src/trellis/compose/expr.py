"""Symbolic router expressions.

``ExpressionBackend`` composes a scope tree without importing any user
code.  The result describes which route sits inside which middleware,
which is what ``trellis scopes`` prints and what the composition tests
assert against.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

from trellis.routing.route import RouteDescriptor
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode


@dataclass(frozen=True, slots=True)
class RoutesExpr:
    """A flat list of routes."""

    routes: tuple[RouteDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class WrapExpr:
    """*inner* with *middleware* applied to every route."""

    middleware: MiddlewareDescriptor
    inner: "RouterExpr"


@dataclass(frozen=True, slots=True)
class MergeExpr:
    """Routers combined in order."""

    parts: tuple["RouterExpr", ...]


RouterExpr: TypeAlias = RoutesExpr | WrapExpr | MergeExpr

EMPTY = RoutesExpr()


def is_empty(expr: RouterExpr) -> bool:
    """True if *expr* contains no routes."""
    return next(routes_of(expr), None) is None


class ExpressionBackend:
    """Composer backend producing :data:`RouterExpr` values.

    Middleware modes come from the descriptors the scanner filled in.
    """

    __slots__ = ()

    def empty(self) -> RouterExpr:
        return EMPTY

    def register_route(self, router: RouterExpr, route: RouteDescriptor) -> RouterExpr:
        if isinstance(router, RoutesExpr):
            return RoutesExpr((*router.routes, route))
        return self.merge(router, RoutesExpr((route,)))

    def merge(self, base: RouterExpr, other: RouterExpr) -> RouterExpr:
        parts: list[RouterExpr] = []
        for expr in (base, other):
            if is_empty(expr):
                continue
            if isinstance(expr, MergeExpr):
                parts.extend(expr.parts)
            else:
                parts.append(expr)
        if not parts:
            return EMPTY
        if len(parts) == 1:
            return parts[0]
        return MergeExpr(tuple(parts))

    def apply_middleware(self, middleware: MiddlewareDescriptor, router: RouterExpr) -> RouterExpr:
        if is_empty(router):
            return EMPTY
        return WrapExpr(middleware, router)

    def mode_of(self, middleware: MiddlewareDescriptor) -> MiddlewareMode:
        return middleware.mode


def routes_of(expr: RouterExpr) -> Iterator[RouteDescriptor]:
    """Yield every route in *expr*, in router order."""
    if isinstance(expr, RoutesExpr):
        yield from expr.routes
    elif isinstance(expr, WrapExpr):
        yield from routes_of(expr.inner)
    else:
        for part in expr.parts:
            yield from routes_of(part)


def middleware_chains(
    expr: RouterExpr,
) -> dict[tuple[str, str], tuple[MiddlewareDescriptor, ...]]:
    """Map each ``(method, pattern)`` to its middleware, outermost first."""
    chains: dict[tuple[str, str], tuple[MiddlewareDescriptor, ...]] = {}

    def visit(node: RouterExpr, outer: tuple[MiddlewareDescriptor, ...]) -> None:
        if isinstance(node, RoutesExpr):
            for route in node.routes:
                chains[(route.method, route.pattern)] = outer
        elif isinstance(node, WrapExpr):
            visit(node.inner, (*outer, node.middleware))
        else:
            for part in node.parts:
                visit(part, outer)

    visit(expr, ())
    return chains


def render(expr: RouterExpr, indent: str = "  ") -> str:
    """Render *expr* as an indented tree.

    Example::

        mw (/)
          GET /health
          mw_api (/api)
            GET /api/users
        mw_api_public (/api/public) [override]
          GET /api/public/status
    """
    lines: list[str] = []

    def visit(node: RouterExpr, depth: int) -> None:
        pad = indent * depth
        if isinstance(node, RoutesExpr):
            lines.extend(f"{pad}{r.method} {r.pattern}" for r in node.routes)
        elif isinstance(node, WrapExpr):
            mw = node.middleware
            suffix = " [override]" if mw.mode is MiddlewareMode.OVERRIDE else ""
            lines.append(f"{pad}{mw.identifier} ({mw.display_path}){suffix}")
            visit(node.inner, depth + 1)
        else:
            for part in node.parts:
                visit(part, depth)

    visit(expr, 0)
    return "\n".join(lines)
