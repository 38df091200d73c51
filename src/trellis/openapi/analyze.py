"""Static handler analysis entry points.

Nothing here imports or runs handler code, and nothing here raises:
a handler that cannot be read or parsed gets an empty ``HandlerMeta``
and a debug log line.
"""

import ast
import logging
from pathlib import Path

from trellis.openapi.docs import parse_doc_annotations
from trellis.openapi.types import HandlerMeta, RequestBodyMeta
from trellis.openapi.visitor import HandlerVisitor

logger = logging.getLogger("trellis.openapi")

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


def analyze_handler(func: FunctionNode) -> HandlerMeta:
    """Build ``HandlerMeta`` from a handler's docstring and body."""
    try:
        docs = parse_doc_annotations(ast.get_docstring(func))
        visitor = HandlerVisitor()
        for stmt in func.body:
            visitor.visit(stmt)
        visitor.apply_refinements()
    except Exception:
        logger.debug("Analysis of %s failed", func.name, exc_info=True)
        return HandlerMeta()

    return HandlerMeta(
        summary=docs.summary,
        description=docs.description,
        tags=docs.tags,
        security=docs.security,
        parameters=visitor.params,
        request_body=(
            RequestBodyMeta(type_name=visitor.body_type)
            if visitor.body_type is not None
            else None
        ),
        response_content_type=visitor.response_content_type,
        response_fields=visitor.response_fields or [],
        deprecated=docs.deprecated,
        responses=docs.responses,
    )


def find_handler(tree: ast.Module, name: str = "handler") -> FunctionNode | None:
    """The last module-level function called *name*, as Python binds it."""
    found: FunctionNode | None = None
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == name:
            found = node
    return found


def analyze_source(source: str, name: str = "handler", *, filename: str = "<handler>") -> HandlerMeta:
    """Analyze the handler function *name* defined in *source*."""
    try:
        tree = ast.parse(source, filename=filename)
    except (SyntaxError, ValueError) as exc:
        logger.debug("Cannot parse %s: %s", filename, exc)
        return HandlerMeta()

    func = find_handler(tree, name)
    if func is None:
        logger.debug("%s defines no function %r", filename, name)
        return HandlerMeta()
    return analyze_handler(func)


def analyze_file(path: Path, name: str = "handler") -> HandlerMeta:
    """Read and analyze the handler module at *path*."""
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return HandlerMeta()
    return analyze_source(source, name, filename=str(path))
