"""Reference runtime: load a routes tree and dispatch events through it."""

from trellis.runtime.backend import RuntimeBackend
from trellis.runtime.loader import load_handler, load_middleware
from trellis.runtime.table import RouteTable, to_response

__all__ = [
    "RouteTable",
    "RuntimeBackend",
    "load_handler",
    "load_middleware",
    "to_response",
]
