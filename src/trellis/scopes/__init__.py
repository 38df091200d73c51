"""Middleware scopes — the directory tree folded into a scope tree.

Conventions::

    routes/
      _middleware.py        # Root scope (applies to everything below)
      index.get.py          # GET /
      api/
        _middleware.py      # Scope /api (extend or override)
        users.get.py        # GET /api/users
        users/
          [id].get.py       # GET /api/users/{id}  (absorbed into /api)
"""

from trellis.scopes.scanner import detect_mode, scan_routes
from trellis.scopes.types import MiddlewareDescriptor, MiddlewareMode, ScopeNode

__all__ = [
    "MiddlewareDescriptor",
    "MiddlewareMode",
    "ScopeNode",
    "detect_mode",
    "scan_routes",
]
