"""Request-scoped context via ContextVar.

Provides ``request_var``: the ``Request`` currently being dispatched in
this task/thread. The dispatcher sets it for the duration of a dispatch
and resets it afterwards; outside a dispatch, ``get_request()`` raises
``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local across
    threads. No locks needed.
"""

from contextvars import ContextVar

from wren.http.request import Request

request_var: ContextVar[Request] = ContextVar("wren_request")
"""The current request. Set by the dispatcher before the middleware chain runs."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a dispatch.
    """
    return request_var.get()
