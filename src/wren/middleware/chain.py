"""Middleware chain execution.

Stages run strictly in order. Each stage receives the request and a
``next`` callable representing the rest of the chain; the terminal
handler sits at the end. A stage that returns without awaiting
``next`` short-circuits: later stages and the handler never run.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from wren._internal.invoke import invoke
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.middleware.protocol import Next
from wren.resolution.resolvers import ClassResolver

logger = logging.getLogger("wren.middleware")

type Terminal = Callable[[Request], Awaitable[Any]]


def is_middleware_ref(ref: Any) -> bool:
    """True if *ref* can be resolved into a middleware stage."""
    return isinstance(ref, type) or (isinstance(ref, str) and bool(ref)) or callable(ref)


def resolve_middleware(ref: Any, resolver: ClassResolver) -> Callable[..., Any]:
    """Turn a middleware reference into a callable stage.

    Functions and callable instances are used as-is. Classes, and class
    names, are instantiated through *resolver*.
    """
    if isinstance(ref, str):
        ref = resolver.lookup(ref)
    if isinstance(ref, type):
        stage = resolver.resolve(ref)
        if not callable(stage):
            msg = f"Middleware class {ref.__qualname__} does not define __call__"
            raise ConfigurationError(msg)
        return stage
    if callable(ref):
        return ref
    msg = f"{ref!r} is not a valid middleware"
    raise ConfigurationError(msg)


async def run_chain(
    stages: Sequence[Callable[..., Any]],
    request: Request,
    terminal: Terminal,
) -> Any:
    """Run *stages* around *terminal* and return the outcome.

    Equivalent to ``stages[0](request, lambda r: stages[1](r, ... terminal(r)))``.
    """
    handler: Next = terminal
    for stage in reversed(stages):
        outer = handler

        async def make_next(
            req: Request, _stage: Callable[..., Any] = stage, _next: Next = outer
        ) -> Any:
            return await invoke(_stage, req, _next)

        handler = make_next

    if stages:
        logger.debug(
            "running %d middleware stages for %s %s", len(stages), request.method, request.path
        )
    return await handler(request)
