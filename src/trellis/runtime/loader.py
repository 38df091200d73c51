"""Import handler and middleware modules from their source files.

Modules are loaded by path, never through ``sys.path``: a routes tree is
not a package, and two scopes may hold files with the same name.
"""

import importlib.util
import logging
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any

from trellis.errors import ConfigurationError
from trellis.middleware.scope import ScopeMiddleware

logger = logging.getLogger("trellis.runtime")


def load_module(source: Path, module_name: str) -> ModuleType:
    """Execute *source* as a fresh module named *module_name*.

    Raises:
        ConfigurationError: If the file cannot be loaded or raises on import.
    """
    spec = importlib.util.spec_from_file_location(module_name, source)
    if spec is None or spec.loader is None:
        msg = f"Cannot load module from {source}"
        raise ConfigurationError(msg)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        msg = f"Error importing {source}: {exc}"
        raise ConfigurationError(msg) from exc
    return module


def load_handler(source: Path, identifier: str, name: str = "handler") -> Callable[..., Any]:
    """Load the handler function *name* from a route file.

    Raises:
        ConfigurationError: If the function is missing or not callable.
    """
    module = load_module(source, f"_trellis_route_{identifier}")
    func = getattr(module, name, None)
    if func is None or not callable(func):
        msg = f"{source} does not define a callable {name!r}"
        raise ConfigurationError(msg)
    logger.debug("Loaded handler %s from %s", identifier, source)
    return func


def load_middleware(source: Path, identifier: str, factory: str = "middleware") -> ScopeMiddleware:
    """Call the middleware factory in a ``_middleware.py`` file.

    Raises:
        ConfigurationError: If the factory is missing, not callable, or
            does not return a ``ScopeMiddleware``.
    """
    module = load_module(source, f"_trellis_mw_{identifier}")
    func = getattr(module, factory, None)
    if func is None or not callable(func):
        msg = f"{source} does not define a callable {factory!r}"
        raise ConfigurationError(msg)

    result = func()
    if not isinstance(result, ScopeMiddleware):
        msg = (
            f"{source}: {factory}() must return a ScopeMiddleware, "
            f"got {type(result).__name__}"
        )
        raise ConfigurationError(msg)
    logger.debug("Loaded middleware %s (%s) from %s", identifier, result.mode.value, source)
    return result
