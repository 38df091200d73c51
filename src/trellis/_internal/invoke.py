"""Calling loaded route handlers.

A ``*.get.py`` module may export ``def handler(event)`` or
``async def handler(event)``; the route table does not know which until
the call returns.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await its result when it returns an awaitable.

    ``RouteTable`` uses this as the innermost step of every middleware
    chain, so a plain function handler and a coroutine handler sit behind
    the same ``Next`` signature.
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
