"""``trellis openapi`` — export an OpenAPI 3.0 document.

Handler sources are analyzed statically; nothing under the routes
directory is imported.
"""

import argparse
import json
import sys
from pathlib import Path

from trellis.cli._build import build_or_exit
from trellis.openapi.spec import generate_spec


def run_openapi(args: argparse.Namespace) -> None:
    """Write the document for ``args.directory`` to stdout or ``args.output``."""
    result = build_or_exit(args, extract_metadata=True)
    document = generate_spec(result.registry.snapshot(), title=args.title, version=args.version)
    payload = json.dumps(document, indent=2) + "\n"

    if args.output is None:
        sys.stdout.write(payload)
        return

    output = Path(args.output)
    try:
        output.write_text(payload, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write {output}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    print(f"Wrote {len(result.registry)} operation(s) to {output}")
