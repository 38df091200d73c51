"""OpenAPI 3.0.3 document generation from registered operations."""

import re
from collections.abc import Iterable
from typing import Any

from trellis.openapi.types import HandlerMeta, RouteEntry

OPENAPI_VERSION = "3.0.3"

_CATCH_ALL_RE = re.compile(r"\{\*([^/{}]+)\}")

_BODY_SCHEMA_PLACEHOLDER = {
    "type": "object",
    "description": "Auto-detected request body type; define its schema manually.",
}


def openapi_path(pattern: str) -> str:
    """``/files/{*path}`` -> ``/files/{path}``."""
    return _CATCH_ALL_RE.sub(r"{\1}", pattern)


def generate_spec(
    entries: Iterable[RouteEntry],
    title: str = "API",
    version: str = "0.1.0",
) -> dict[str, Any]:
    """Build an OpenAPI document as a JSON-ready dict."""
    entries = list(entries)
    paths: dict[str, dict[str, Any]] = {}
    for entry in entries:
        item = paths.setdefault(openapi_path(entry.pattern), {})
        item[entry.method.lower()] = build_operation(entry)

    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "paths": paths,
    }

    components: dict[str, Any] = {}
    if any("bearer" in e.meta.security for e in entries):
        components["securitySchemes"] = {
            "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
        }

    schemas: dict[str, Any] = {}
    for entry in entries:
        body = entry.meta.request_body
        if body is not None:
            schemas.setdefault(body.type_name, dict(_BODY_SCHEMA_PLACEHOLDER))
    if schemas:
        components["schemas"] = schemas

    if components:
        document["components"] = components
    return document


def build_operation(entry: RouteEntry) -> dict[str, Any]:
    """The operation object for one registered route."""
    meta = entry.meta
    operation: dict[str, Any] = {"operationId": entry.operation_id}

    if meta.summary:
        operation["summary"] = meta.summary
    if meta.description:
        operation["description"] = meta.description
    if meta.tags:
        operation["tags"] = list(meta.tags)
    if meta.deprecated:
        operation["deprecated"] = True

    if meta.parameters:
        parameters = []
        for p in meta.parameters:
            schema: dict[str, Any] = {"type": p.schema_type}
            if p.schema_format:
                schema["format"] = p.schema_format
            parameters.append(
                {
                    "name": p.name,
                    "in": p.location.value,
                    "required": p.required,
                    "schema": schema,
                }
            )
        operation["parameters"] = parameters

    if meta.request_body is not None:
        body = meta.request_body
        operation["requestBody"] = {
            "required": True,
            "content": {
                body.content_type: {
                    "schema": {"$ref": f"#/components/schemas/{body.type_name}"},
                },
            },
        }

    operation["responses"] = build_responses(meta)

    if meta.security:
        operation["security"] = [
            {"bearerAuth" if scheme == "bearer" else scheme: []} for scheme in meta.security
        ]
    return operation


def build_responses(meta: HandlerMeta) -> dict[str, Any]:
    content_type = meta.response_content_type
    responses: dict[str, Any] = {}

    if content_type == "none":
        responses["204"] = {"description": "No Content"}
    else:
        schema: dict[str, Any] = {}
        if meta.response_fields:
            schema = {
                "type": "object",
                "properties": {name: {} for name in meta.response_fields},
            }
        responses["200"] = {
            "description": "Successful response",
            "content": {content_type: {"schema": schema}},
        }

    for code, description in meta.responses:
        responses[code] = {"description": description}
    return responses
