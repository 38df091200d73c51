"""Compiler configuration.

CompilerConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from trellis.errors import ConfigurationError

ORDERINGS = frozenset({"length", "specificity"})


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Build-pass configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = CompilerConfig(routes_dir="app/routes", ordering="specificity")
    """

    # Source tree
    routes_dir: str | Path = "routes"
    middleware_filename: str = "_middleware.py"
    handler_suffix: str = ".py"

    # Names looked up inside loaded modules (runtime backend only)
    handler_name: str = "handler"
    middleware_factory: str = "middleware"

    # Route ordering inside a scope: "length" or "specificity"
    ordering: str = "length"

    # Metadata pass
    extract_metadata: bool = True
    metadata_workers: int = 1

    def __post_init__(self) -> None:
        if self.ordering not in ORDERINGS:
            msg = (
                f"Unknown route ordering {self.ordering!r}. "
                f"Expected one of: {', '.join(sorted(ORDERINGS))}"
            )
            raise ConfigurationError(msg)
        if self.metadata_workers < 1:
            msg = f"metadata_workers must be at least 1, got {self.metadata_workers}"
            raise ConfigurationError(msg)
        if not self.handler_suffix.startswith("."):
            msg = f"handler_suffix must start with '.', got {self.handler_suffix!r}"
            raise ConfigurationError(msg)
