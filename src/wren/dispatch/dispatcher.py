"""Request dispatch: lookup, resolve, bind, middleware, invoke, normalize.

One call to ``Dispatcher.dispatch()`` walks a single request through:

1. **Lookup**: first route in registration order matching method + path
2. **Resolve**: the route's action becomes a callable
3. **Bind**: path parameters overlaid on query-string values
4. **Middleware**: global stages, then the route's own stages
5. **Invoke & normalize**: handler result becomes a ``Response``

No route, or an action that cannot be resolved, ends in the not-found
outcome instead. Exceptions raised by handlers or middleware are not
caught here; they propagate to the caller of ``dispatch()``.
"""

import logging
from collections.abc import Callable, Sequence
from contextvars import Token
from typing import Any

from wren._internal.invoke import invoke
from wren.config import RouterConfig
from wren.context import request_var
from wren.dispatch.negotiation import normalize
from wren.dispatch.params import Params, bind_params
from wren.errors import ActionResolutionError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.chain import resolve_middleware, run_chain
from wren.rendering import FallbackRenderer, KidaFallbackRenderer
from wren.resolution.actions import ActionResolver
from wren.routing.route import RouteMatch
from wren.routing.table import RouteTable

logger = logging.getLogger("wren.dispatch")


class Dispatcher:
    """Executes the dispatch pipeline against a route table.

    Owns the fallback policy (not-found handler, internal-error handler,
    fallback renderer) and the global middleware chain. The route table
    and action resolver are collaborators passed in at construction.
    """

    __slots__ = (
        "_actions",
        "_config",
        "_middleware",
        "_not_found_handler",
        "_renderer",
        "_response",
        "_table",
        "internal_error_handler",
    )

    def __init__(
        self,
        table: RouteTable,
        actions: ActionResolver,
        *,
        config: RouterConfig | None = None,
        renderer: FallbackRenderer | None = None,
        response: Response | None = None,
    ) -> None:
        self._table = table
        self._actions = actions
        self._config = config or RouterConfig()
        self._renderer: FallbackRenderer = renderer or KidaFallbackRenderer()
        self._response = response or Response()
        self._middleware: list[Any] = []
        self._not_found_handler: Callable[..., Any] | None = None
        self.internal_error_handler: Callable[..., Any] | None = None

    # -- Configuration --

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def renderer(self) -> FallbackRenderer:
        return self._renderer

    @property
    def middleware(self) -> tuple[Any, ...]:
        """Global middleware references, in execution order."""
        return tuple(self._middleware)

    def add_middleware(self, ref: Any, *, first: bool = False) -> None:
        if first:
            self._middleware.insert(0, ref)
        else:
            self._middleware.append(ref)

    def set_not_found(self, handler: Callable[..., Any]) -> None:
        self._not_found_handler = handler

    def set_internal_server_error(self, handler: Callable[..., Any]) -> None:
        self.internal_error_handler = handler

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Turn one request into one response."""
        token: Token[Request] = request_var.set(request)
        try:
            response = await self._dispatch(request)
        finally:
            request_var.reset(token)

        if self._config.log_dispatch:
            logger.debug("%s %s -> %d", request.method, request.path, response.status)
        return response

    async def _dispatch(self, request: Request) -> Response:
        match = self._table.find(request.method, request.path)
        if match is None:
            logger.debug("no route for %s %s", request.method, request.path)
            return await self._not_found(request, bind_params({}, request.query))

        handler = self._resolve(match)
        if handler is None:
            return await self._not_found(request, bind_params({}, request.query))

        params = bind_params(match.path_params, request.query)
        request = request.with_path_params(match.path_params)
        request_var.set(request)
        stages = self._stages(match)

        async def terminal(req: Request) -> Response:
            result = await invoke(handler, req, self._response, params)
            return self._normalize(result)

        result = await run_chain(stages, request, terminal)
        return self._normalize(result)

    def _resolve(self, match: RouteMatch) -> Callable[..., Any] | None:
        route = match.route
        try:
            handler = self._actions.resolve(route.action)
        except ActionResolutionError as exc:
            logger.warning(
                "route %s %s has an unresolvable action: %s",
                route.method.upper(),
                route.pattern,
                exc,
            )
            return None
        if handler is None:
            logger.warning(
                "route %s %s has an unsupported action: %r",
                route.method.upper(),
                route.pattern,
                route.action,
            )
        return handler

    def _stages(self, match: RouteMatch) -> Sequence[Callable[..., Any]]:
        refs = (*self._middleware, *match.route.middleware)
        resolver = self._actions.resolver
        return [resolve_middleware(ref, resolver) for ref in refs]

    async def _not_found(self, request: Request, params: Params) -> Response:
        if self._not_found_handler is not None:
            result = await invoke(self._not_found_handler, request, self._response, params)
            return self._normalize(result)
        return (
            self._response.with_status(self._config.not_found_status)
            .with_body(self._renderer.not_found_html())
            .with_header("Content-type", self._config.html_content_type)
        )

    def _normalize(self, result: Any) -> Response:
        return normalize(
            result,
            base=self._response,
            html_content_type=self._config.html_content_type,
        )
