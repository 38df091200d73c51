"""Shared helpers for the sub-commands: run a build, print a table."""

import argparse
import logging
import sys
from collections.abc import Sequence

from trellis.build import BuildResult, compile_routes
from trellis.config import CompilerConfig
from trellis.errors import ConfigurationError

logger = logging.getLogger("trellis.build")


def build_or_exit(args: argparse.Namespace, *, extract_metadata: bool = False) -> BuildResult:
    """Compile ``args.directory``; print the error and exit 1 on failure."""
    try:
        config = CompilerConfig(ordering=args.ordering, extract_metadata=extract_metadata)
        return compile_routes(args.directory, config)
    except ConfigurationError as exc:
        logger.debug("Build failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def print_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Print *rows* as left-aligned columns under *headers*."""
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=True)]

    fmt = "  ".join(f"{{:<{w}}}" for w in widths[:-1]) + "  {}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row))
