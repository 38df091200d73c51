"""``trellis scopes`` — list middleware scopes with their modes."""

import argparse

from trellis.cli._build import build_or_exit, print_table


def run_scopes(args: argparse.Namespace) -> None:
    result = build_or_exit(args)
    details = result.scope_details()
    if not details:
        print("No middleware scopes found.")
        return

    rows = [(d.display_path, d.mode.value, d.inherits_display) for d in details]
    print_table(("SCOPE", "MODE", "INHERITS"), rows)
