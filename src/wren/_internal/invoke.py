"""Invoke helpers: call sync or async callables uniformly.

Handlers, middleware, and not-found handlers can be ``def`` or
``async def``. Any code that calls user-provided code goes through
this helper so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(handler, request, response, params)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        def show(request, response, params):
            return f"<p>{params['id']}</p>"

        async def show(request, response, params):
            user = await load_user(params["id"])
            return f"<p>{user.name}</p>"
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
