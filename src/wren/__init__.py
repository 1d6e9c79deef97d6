"""Wren: an in-process HTTP request router.

Maps a method + path to a registered handler, binds path parameters,
runs an ordered middleware chain, and normalizes the result into a
response. No sockets, no server: it works on already-parsed requests.

Basic usage::

    from wren import Request, Router

    router = Router()
    router.get("/users/{id}", lambda request, response, params: f"<p>{params.id}</p>")

    response = router.dispatch_sync(Request.build("GET", "/users/42"))
    response.text  # "<p>42</p>"
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ActionResolutionError",
    "ConfigurationError",
    "ConstructorResolver",
    "ContainerResolver",
    "EmptyResponseError",
    "ErrorBoundary",
    "HTTPError",
    "InvalidPattern",
    "Middleware",
    "Next",
    "NotFound",
    "Params",
    "Request",
    "Response",
    "Router",
    "RouterConfig",
    "WrenError",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from wren.router import Router

        return Router

    if name == "RouterConfig":
        from wren.config import RouterConfig

        return RouterConfig

    if name in ("Request", "Response"):
        from wren import http as _http

        return getattr(_http, name)

    if name == "Params":
        from wren.dispatch.params import Params

        return Params

    if name in ("ConstructorResolver", "ContainerResolver"):
        from wren.resolution import resolvers as _resolvers

        return getattr(_resolvers, name)

    if name in ("ErrorBoundary", "Middleware", "Next"):
        from wren import middleware as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from wren.context import get_request

        return get_request

    if name in (
        "ActionResolutionError",
        "ConfigurationError",
        "EmptyResponseError",
        "HTTPError",
        "InvalidPattern",
        "NotFound",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
