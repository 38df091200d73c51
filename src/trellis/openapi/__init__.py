"""Static handler metadata and OpenAPI output.

    meta = analyze_source(path.read_text())
    registry.register("GET", "/users/{id}", "users_id_get", meta)
    document = generate_spec(registry.snapshot(), title="Users")
"""

from trellis.openapi.analyze import analyze_file, analyze_handler, analyze_source
from trellis.openapi.docs import DocAnnotations, parse_doc_annotations
from trellis.openapi.registry import MetadataRegistry
from trellis.openapi.spec import generate_spec
from trellis.openapi.types import (
    HandlerMeta,
    ParamLocation,
    ParamMeta,
    RequestBodyMeta,
    RouteEntry,
)

__all__ = [
    "DocAnnotations",
    "HandlerMeta",
    "MetadataRegistry",
    "ParamLocation",
    "ParamMeta",
    "RequestBodyMeta",
    "RouteEntry",
    "analyze_file",
    "analyze_handler",
    "analyze_source",
    "generate_spec",
    "parse_doc_annotations",
]
