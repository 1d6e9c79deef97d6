"""The wren router.

Mutable during setup (route registration, middleware, fallback handlers).
Frozen on the first dispatch; registering afterwards raises
``ConfigurationError``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import anyio

from wren.config import MiddlewareMode, RouterConfig
from wren.dispatch.dispatcher import Dispatcher
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.builtin import ErrorBoundary
from wren.middleware.chain import is_middleware_ref
from wren.rendering import FallbackRenderer
from wren.resolution.actions import ActionResolver
from wren.resolution.resolvers import ClassResolver
from wren.routing.group import RouteGroup
from wren.routing.route import HTTP_METHODS, RouteInfo
from wren.routing.table import RouteHandle, RouteTable


class Router:
    """Registers routes and dispatches requests to them.

    Registration calls are chainable and return the router::

        router = Router()
        router.get("/", home).get("/users/{id}", "UserController@show").middleware(auth)
        router.set_pre_route("/api")

        response = await router.dispatch(Request.build("GET", "/api/users/42"))

    Composition, not inheritance: the router wires a ``RouteTable``, an
    ``ActionResolver`` (around the resolution strategy it was given),
    and a ``Dispatcher`` that owns the global middleware and the
    fallback handlers.

    Thread safety:
        Registration is single-threaded. The freeze transition uses a
        Lock + double-check so concurrent first dispatches freeze the
        table exactly once; dispatches never write shared state.
    """

    __slots__ = ("_dispatcher", "_freeze_lock", "_frozen", "_last", "_table", "config")

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        resolver: ClassResolver | None = None,
        renderer: FallbackRenderer | None = None,
        response: Response | None = None,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._table = RouteTable()
        self._dispatcher = Dispatcher(
            self._table,
            ActionResolver(resolver),
            config=self.config,
            renderer=renderer,
            response=response,
        )
        # Handles of the routes created by the latest registration call
        self._last: tuple[RouteHandle, ...] = ()
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Route registration --

    def register(self, method: str, pattern: str, action: Any) -> Router:
        """Register *action* for *method* requests matching *pattern*.

        Raises ``InvalidPattern`` immediately for a malformed pattern.
        """
        self._check_not_frozen()
        self._last = (self._table.register(method, pattern, action),)
        return self

    def get(self, pattern: str, action: Any) -> Router:
        """Register a GET route."""
        return self.register("get", pattern, action)

    def post(self, pattern: str, action: Any) -> Router:
        """Register a POST route."""
        return self.register("post", pattern, action)

    def put(self, pattern: str, action: Any) -> Router:
        """Register a PUT route."""
        return self.register("put", pattern, action)

    def delete(self, pattern: str, action: Any) -> Router:
        """Register a DELETE route."""
        return self.register("delete", pattern, action)

    def patch(self, pattern: str, action: Any) -> Router:
        """Register a PATCH route."""
        return self.register("patch", pattern, action)

    def options(self, pattern: str, action: Any) -> Router:
        """Register an OPTIONS route."""
        return self.register("options", pattern, action)

    def any(self, pattern: str, action: Any) -> Router:
        """Register *action* for every supported method.

        A following ``name()`` or ``middleware()`` applies to all of them.
        """
        self._check_not_frozen()
        self._last = tuple(self._table.register(m, pattern, action) for m in HTTP_METHODS)
        return self

    def name(self, name: str) -> Router:
        """Name the most recently registered route(s) for ``url_for()``."""
        for handle in self._require_last("name"):
            self._table.name(handle, name)
        return self

    def group(
        self,
        prefix: str,
        controller: type | str | None = None,
        *,
        middleware: tuple[Any, ...] = (),
    ) -> RouteGroup:
        """Start a group of routes sharing *prefix* (see ``RouteGroup``)."""
        return RouteGroup(self, prefix, controller, middleware=middleware)

    def set_pre_route(self, prefix: str) -> None:
        """Prepend *prefix* to every route registered so far."""
        self._check_not_frozen()
        self._table.apply_prefix(prefix)

    # -- Middleware --

    def middleware(self, ref: Any, *, scope: MiddlewareMode | None = None) -> Router:
        """Attach middleware.

        With ``scope="route"`` (or ``config.middleware_mode == "route"``)
        the middleware attaches to the most recently registered route(s);
        with ``"global"`` it joins the chain every matched dispatch runs.

        *ref* is a callable, a class, or a class name; classes are
        instantiated per dispatch through the resolution strategy.
        """
        self._check_not_frozen()
        if not is_middleware_ref(ref):
            msg = f"{ref!r} is not a valid middleware"
            raise ConfigurationError(msg)

        if (scope or self.config.middleware_mode) == "global":
            self._dispatcher.add_middleware(ref)
        else:
            for handle in self._require_last("middleware"):
                self._table.attach_middleware(handle, ref)
        return self

    def use(self, *refs: Any) -> Router:
        """Append global middleware, in order."""
        for ref in refs:
            self.middleware(ref, scope="global")
        return self

    def catch_errors(self) -> Router:
        """Install ``ErrorBoundary`` as the outermost global middleware."""
        self._check_not_frozen()
        self._dispatcher.add_middleware(ErrorBoundary(self._dispatcher), first=True)
        return self

    # -- Fallback handlers --

    def set_not_found(self, handler: Callable[..., Any]) -> None:
        """Handle requests no route (or no usable action) matches.

        Called as ``handler(request, response, params)``; the result is
        normalized like any handler result.
        """
        self._dispatcher.set_not_found(handler)

    def set_internal_server_error(self, handler: Callable[..., Any]) -> None:
        """Handler used by ``ErrorBoundary`` for unexpected exceptions.

        Called with ``(request, exc)``, ``(request)``, or no arguments,
        depending on its signature.
        """
        self._dispatcher.set_internal_server_error(handler)

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Dispatch *request* and return the response."""
        self._ensure_frozen()
        return await self._dispatcher.dispatch(request)

    def dispatch_sync(self, request: Request) -> Response:
        """Dispatch *request* from synchronous code on a fresh event loop."""
        return anyio.run(self.dispatch, request)

    # -- Introspection --

    def routes(self) -> list[RouteInfo]:
        """Describe every route in registration (= matching) order."""
        return [RouteInfo.from_route(route) for route in self._table]

    @property
    def table(self) -> RouteTable:
        return self._table

    def url_for(self, name: str, /, **params: Any) -> str:
        """Build the path of the route registered under *name*.

        Parameters not used by the pattern become the query string.
        Raises ``KeyError`` for an unknown name or a missing parameter.
        """
        route = self._table.by_name(name)
        if route is None:
            msg = f"No route named {name!r}"
            raise KeyError(msg)

        parts: list[str] = []
        for seg in route.segments:
            if not seg.is_param:
                parts.append(seg.value)
                continue
            if seg.param_name not in params:
                msg = f"Route {name!r} requires parameter {seg.param_name!r}"
                raise KeyError(msg)
            parts.append(str(params.pop(seg.param_name)))

        path = "/" + "/".join(p for p in parts if p)
        if params:
            return f"{path}?{urlencode(params, doseq=True)}"
        return path

    # -- Freeze --

    def freeze(self) -> None:
        """Make the route table read-only. Called on the first dispatch."""
        self._ensure_frozen()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._table.freeze()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the router after dispatch has started."
            raise ConfigurationError(msg)

    def _require_last(self, what: str) -> tuple[RouteHandle, ...]:
        if not self._last:
            msg = f"{what}() needs a registered route; register one first"
            raise ConfigurationError(msg)
        return self._last
