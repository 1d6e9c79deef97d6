"""Wren exception hierarchy.

Shared across the route table, resolver, dispatcher, and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when router setup is invalid.

    Surfaces at registration time, never deferred to dispatch.
    """


class InvalidPattern(ConfigurationError):  # noqa: N818
    """A route pattern could not be parsed."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class ActionResolutionError(WrenError):
    """A route action could not be turned into a callable handler.

    The dispatcher converts this into a not-found outcome.
    """

    def __init__(self, message: str, *, action: Any = None) -> None:
        self.action = action
        super().__init__(message)


class ResolutionError(ActionResolutionError):
    """The resolution strategy could not construct an instance of a class."""


class EmptyResponseError(WrenError):
    """A handler returned nothing usable as a response.

    Propagates out of ``dispatch()``: an empty body would hide the bug.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The router never catches these
    itself; ``ErrorBoundary`` turns them into responses when installed.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: raised by handler code that wants the not-found response."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
