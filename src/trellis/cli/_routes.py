"""``trellis routes`` — list compiled routes.

Prints METHOD, PATH and the middleware chain each route runs through,
outermost scope first.
"""

import argparse

from trellis.cli._build import build_or_exit, print_table


def run_routes(args: argparse.Namespace) -> None:
    """Scan ``args.directory`` and print its routes."""
    result = build_or_exit(args)
    details = result.route_details()
    if not details:
        print("No routes found.")
        return

    rows = [(d.method, d.pattern, d.chain_display) for d in details]
    print_table(("METHOD", "PATH", "MIDDLEWARE"), rows)
