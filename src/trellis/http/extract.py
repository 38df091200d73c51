"""Parameter and body accessors for handlers.

These names are also the vocabulary the metadata pass looks for::

    get_param(event, "id")                  path, optional
    get_param_required(event, "id")         path, required
    get_query_param(event, "page")          query, optional
    get_query_param_required(event, "q")    query, required
    get_body(event, CreateUser)             request body of type CreateUser

Only string-literal names are visible to the metadata pass.
"""

import dataclasses
import json as json_module
from typing import Any, TypeVar, overload

from trellis.errors import BadRequest
from trellis.http.event import Event

T = TypeVar("T")


def get_param(event: Event, name: str) -> str | None:
    """Return a path parameter, or ``None`` if the route does not capture it."""
    return event.path_params.get(name)


def get_param_required(event: Event, name: str) -> str:
    """Return a path parameter. Raises ``BadRequest`` when it is missing."""
    value = event.path_params.get(name)
    if value is None:
        msg = f"Missing path parameter {name!r}"
        raise BadRequest(msg)
    return value


def get_query_param(event: Event, name: str) -> str | None:
    """Return a query parameter, or ``None`` when absent."""
    return event.query.get(name)


def get_query_param_required(event: Event, name: str) -> str:
    """Return a query parameter. Raises ``BadRequest`` when it is missing."""
    value = event.query.get(name)
    if value is None:
        msg = f"Missing query parameter {name!r}"
        raise BadRequest(msg)
    return value


@overload
def get_body(event: Event) -> Any: ...


@overload
def get_body(event: Event, model: type[T]) -> T: ...


def get_body(event: Event, model: type[Any] | None = None) -> Any:
    """Decode a JSON request body.

    Without *model* the decoded value is returned as-is.  A dataclass
    *model* is instantiated from the decoded object; any other callable
    is called with it.

    Raises:
        BadRequest: If the body is not valid JSON or does not fit *model*.
    """
    try:
        data = json_module.loads(event.body or b"null")
    except ValueError as exc:
        msg = f"Invalid JSON body: {exc}"
        raise BadRequest(msg) from exc

    if model is None:
        return data
    try:
        if dataclasses.is_dataclass(model) and isinstance(data, dict):
            return model(**data)
        return model(data)
    except (TypeError, ValueError) as exc:
        msg = f"Body does not match {model.__name__}: {exc}"
        raise BadRequest(msg) from exc
