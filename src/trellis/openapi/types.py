"""Handler metadata records.

Produced by static analysis of handler source, consumed by the
registry and the OpenAPI emitter.  Everything here is plain data.
"""

from dataclasses import dataclass, field
from enum import Enum


class ParamLocation(Enum):
    """Where an operation parameter is read from."""

    PATH = "path"
    QUERY = "query"


@dataclass(slots=True)
class ParamMeta:
    """A path or query parameter read by a handler."""

    name: str
    location: ParamLocation
    required: bool = False
    schema_type: str = "string"
    schema_format: str | None = None


@dataclass(frozen=True, slots=True)
class RequestBodyMeta:
    """The type a handler decodes its request body into."""

    type_name: str
    content_type: str = "application/json"


@dataclass(slots=True)
class HandlerMeta:
    """Everything known about one handler without running it.

    Attributes:
        summary: ``@summary`` or the first plain docstring line.
        description: ``@description`` lines, or the remaining plain lines.
        tags: ``@tag`` values, first occurrence order, no duplicates.
        security: ``@security`` scheme names.
        parameters: Path and query parameters, in first-access order.
        request_body: Set when the handler calls ``get_body``.
        response_content_type: Inferred from the response builder used;
            ``"none"`` for bodiless responses, ``application/json`` when
            no builder is recognized.
        response_fields: Top-level keys of the JSON object returned.
        deprecated: ``@deprecated`` was present.
        responses: Extra ``(status code, description)`` pairs.
    """

    summary: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    security: list[str] = field(default_factory=list)
    parameters: list[ParamMeta] = field(default_factory=list)
    request_body: RequestBodyMeta | None = None
    response_content_type: str = "application/json"
    response_fields: list[str] = field(default_factory=list)
    deprecated: bool = False
    responses: list[tuple[str, str]] = field(default_factory=list)

    def param(self, name: str) -> ParamMeta | None:
        """The first parameter called *name*, if any."""
        for p in self.parameters:
            if p.name == name:
                return p
        return None


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered operation: where it lives plus its handler metadata."""

    method: str
    pattern: str
    operation_id: str
    meta: HandlerMeta
