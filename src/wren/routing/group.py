"""Prefix groups: register several routes under one path prefix.

Sugar over ``Router.register()``: a group joins its prefix to each
pattern, fills in its controller for bare method names, and attaches
its middleware to every route it registers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.router import Router


class RouteGroup:
    """Routes sharing a prefix, and optionally a controller and middleware.

    Usage::

        users = router.group("/users", UserController, middleware=(auth,))
        users.get("/", "index").get("/{id}", "show").post("/", "create")

    registers ``GET /users -> (UserController, "index")`` and so on, each
    route carrying ``auth``.
    """

    __slots__ = ("_controller", "_middleware", "_prefix", "_router")

    def __init__(
        self,
        router: Router,
        prefix: str,
        controller: type | str | None = None,
        *,
        middleware: tuple[Any, ...] = (),
    ) -> None:
        self._router = router
        self._prefix = prefix.rstrip("/")
        self._controller = controller
        self._middleware = middleware

    @property
    def prefix(self) -> str:
        return self._prefix or "/"

    def register(self, method: str, pattern: str, action: Any) -> RouteGroup:
        """Register *action* for *method* at ``prefix + pattern``."""
        self._router.register(method, f"{self._prefix}/{pattern}", self._action(action))
        for ref in self._middleware:
            self._router.middleware(ref, scope="route")
        return self

    def get(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("get", pattern, action)

    def post(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("post", pattern, action)

    def put(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("put", pattern, action)

    def delete(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("delete", pattern, action)

    def patch(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("patch", pattern, action)

    def options(self, pattern: str, action: Any) -> RouteGroup:
        return self.register("options", pattern, action)

    def any(self, pattern: str, action: Any) -> RouteGroup:
        self._router.any(f"{self._prefix}/{pattern}", self._action(action))
        for ref in self._middleware:
            self._router.middleware(ref, scope="route")
        return self

    def _action(self, action: Any) -> Any:
        # A bare method name refers to the group's controller
        if self._controller is not None and isinstance(action, str) and "@" not in action:
            return (self._controller, action)
        return action
