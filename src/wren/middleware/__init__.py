"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    ErrorBoundary -- Convert handler exceptions into 404/500 responses
"""

from wren.middleware.builtin import ErrorBoundary
from wren.middleware.chain import resolve_middleware, run_chain
from wren.middleware.protocol import Middleware, Next

__all__ = [
    "ErrorBoundary",
    "Middleware",
    "Next",
    "resolve_middleware",
    "run_chain",
]
