"""Trellis CLI — inspect a routes tree and export its API description.

Entry point registered as ``trellis`` in ``pyproject.toml``::

    [project.scripts]
    trellis = "trellis.cli:main"
"""

import argparse
import logging
import sys

from trellis.config import ORDERINGS

_LOG_LEVELS = ("debug", "info", "warning", "error")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("directory", help="Routes directory to scan")
    parser.add_argument(
        "--ordering",
        choices=sorted(ORDERINGS),
        default="length",
        help="Route ordering within a scope (default: length)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="warning",
        help="Logging verbosity (default: warning)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``trellis`` command."""
    parser = argparse.ArgumentParser(
        prog="trellis",
        description="Trellis — compile a directory of handlers into a router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- trellis routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes and their middleware")
    _add_common(routes_parser)

    # -- trellis scopes ---------------------------------------------------
    scopes_parser = subparsers.add_parser("scopes", help="List middleware scopes")
    _add_common(scopes_parser)

    # -- trellis openapi --------------------------------------------------
    openapi_parser = subparsers.add_parser("openapi", help="Write an OpenAPI document")
    _add_common(openapi_parser)
    openapi_parser.add_argument("--title", default="API", help="API title")
    openapi_parser.add_argument("--version", default="0.1.0", help="API version")
    openapi_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write to this file instead of stdout",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "routes":
        from trellis.cli._routes import run_routes

        run_routes(args)
    elif args.command == "scopes":
        from trellis.cli._scopes import run_scopes

        run_scopes(args)
    elif args.command == "openapi":
        from trellis.cli._openapi import run_openapi

        run_openapi(args)
