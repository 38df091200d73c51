"""Scope-tree to router composition.

Compiles a :class:`ScopeNode` bottom-up into a single router value,
following the proximity principle: the middleware nearest a handler is
applied first (innermost), ancestors wrap outward.

Four structural cases per scope:

1. No middleware, no children: the direct routes, flat.
2. No middleware, children: the direct routes merged with every
   child's router (only the root can lack middleware).
3. Middleware, no children: ``apply(direct routes)``.
4. Middleware and children: ``apply(direct routes + EXTEND children)``
   merged with the ``OVERRIDE`` children, which stay outside.

A child reports ``(mode, router)`` to its parent.  Routers of
``OVERRIDE`` scopes are kept outside every ancestor's middleware, not
only the immediate parent's, so a public scope nested below an
authenticated one is never re-wrapped further up the tree.
"""

import logging
from dataclasses import dataclass
from typing import Generic

from trellis.compose.backend import R, RouterBackend
from trellis.scopes.types import MiddlewareMode, ScopeNode

logger = logging.getLogger("trellis.compose")


@dataclass(frozen=True, slots=True)
class ComposedScope(Generic[R]):
    """A compiled non-root scope as seen by its parent.

    Attributes:
        mode: The mode the scope's middleware reports.
        router: The scope's routes, already wrapped by its own middleware.
        bypass: Routers of ``OVERRIDE`` scopes below this one; they must
            not be wrapped by any ancestor.
    """

    mode: MiddlewareMode
    router: R
    bypass: R


def compose_router(root: ScopeNode, backend: RouterBackend[R]) -> R:
    """Compile the whole scope tree into one router value."""
    router, bypass = _compose(root, backend)
    return backend.merge(router, bypass)


def compose_scope(node: ScopeNode, backend: RouterBackend[R]) -> ComposedScope[R]:
    """Compile a middleware-bearing scope and report its mode.

    Raises:
        ValueError: If *node* has no middleware (only the root may).
    """
    if node.middleware is None:
        msg = "Only the root scope may lack middleware"
        raise ValueError(msg)
    router, bypass = _compose(node, backend)
    return ComposedScope(
        mode=backend.mode_of(node.middleware),
        router=router,
        bypass=bypass,
    )


def _flat_routes(node: ScopeNode, backend: RouterBackend[R]) -> R:
    router = backend.empty()
    for route in node.routes:
        router = backend.register_route(router, route)
    return router


def _compose(node: ScopeNode, backend: RouterBackend[R]) -> tuple[R, R]:
    """Return ``(router, bypass)`` for *node*."""
    router = _flat_routes(node, backend)
    children = [compose_scope(child, backend) for child in node.children]

    bypass = backend.empty()
    for child in children:
        bypass = backend.merge(bypass, child.bypass)

    middleware = node.middleware
    if middleware is None:
        # Cases 1 and 2: nothing to inherit into, modes are irrelevant
        for child in children:
            router = backend.merge(router, child.router)
        return router, bypass

    if not children:
        # Case 3
        logger.debug("Scope %s wraps %d route(s)", middleware.display_path, len(node.routes))
        return backend.apply_middleware(middleware, router), bypass

    # Case 4: partition children by the mode they report
    extend_group = router
    override_group = backend.empty()
    for child in children:
        if child.mode is MiddlewareMode.OVERRIDE:
            override_group = backend.merge(override_group, child.router)
        else:
            extend_group = backend.merge(extend_group, child.router)

    logger.debug(
        "Scope %s wraps %d route(s) and %d extending scope(s)",
        middleware.display_path,
        len(node.routes),
        sum(1 for c in children if c.mode is MiddlewareMode.EXTEND),
    )
    return (
        backend.apply_middleware(middleware, extend_group),
        backend.merge(override_group, bypass),
    )
