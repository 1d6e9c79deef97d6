"""Built-in middleware: error boundary.

The dispatcher deliberately lets handler exceptions propagate. Hosts
that want exceptions turned into responses install ``ErrorBoundary``
(``Router.catch_errors()`` puts it first in the global chain).
"""

from __future__ import annotations

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from wren._internal.invoke import invoke
from wren.dispatch.negotiation import normalize
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next

if TYPE_CHECKING:
    from wren.dispatch.dispatcher import Dispatcher

logger = logging.getLogger("wren.middleware")


class ErrorBoundary:
    """Middleware that converts exceptions into error responses.

    - ``HTTPError`` -> its status; 404 renders the not-found page
    - any other exception -> the registered internal-error handler,
      or the default 500 page (with the traceback when ``debug`` is on)

    The internal-error handler is looked up on the dispatcher at call
    time, so it may be registered after the boundary is installed.

    Usage::

        router.set_internal_server_error(lambda request, exc: "<h1>Oops</h1>")
        router.catch_errors()
    """

    __slots__ = ("_dispatcher",)

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def __call__(self, request: Request, next: Next) -> Response:
        try:
            return await next(request)
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
            return self._http_error(exc)
        except Exception as exc:
            logger.exception("500 %s %s", request.method, request.path)
            return await self._internal_error(request, exc)

    def _http_error(self, exc: HTTPError) -> Response:
        config = self._dispatcher.config
        if exc.status == config.not_found_status:
            body = self._dispatcher.renderer.not_found_html()
        else:
            body = exc.detail or str(exc.status)
        response = (
            Response(body)
            .with_status(exc.status)
            .with_header("Content-type", config.html_content_type)
        )
        for name, value in exc.headers:
            response = response.with_header(name, value)
        return response

    async def _internal_error(self, request: Request, exc: Exception) -> Response:
        config = self._dispatcher.config
        handler = self._dispatcher.internal_error_handler
        if handler is not None:
            result = await call_error_handler(handler, request, exc)
            response = normalize(result, html_content_type=config.html_content_type)
            if not isinstance(result, Response):
                response = response.with_status(config.internal_error_status)
            return response

        detail = "".join(traceback.format_exception(exc)) if config.debug else ""
        return (
            Response(self._dispatcher.renderer.internal_error_html(detail))
            .with_status(config.internal_error_status)
            .with_header("Content-type", config.html_content_type)
        )


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Any:
    """Invoke an error handler with the arguments it accepts.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    try:
        params = list(inspect.signature(handler).parameters.values())
    except ValueError:
        params = []
    if len(params) >= 2:
        return await invoke(handler, request, exc)
    if len(params) == 1:
        return await invoke(handler, request)
    return await invoke(handler)
