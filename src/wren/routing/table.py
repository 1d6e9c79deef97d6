"""Ordered route table with first-match-wins lookup.

Routes are registered during setup and read concurrently at dispatch
time. The table only grows; ``apply_prefix`` rewrites every pattern at
once. After ``freeze()`` any mutation raises ``ConfigurationError``.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Any

from wren.errors import ConfigurationError
from wren.routing.pattern import match_segments, normalize_path, parse_pattern, split_path
from wren.routing.route import HTTP_METHODS, Route, RouteMatch

logger = logging.getLogger("wren.routing")


@dataclass(frozen=True, slots=True)
class RouteHandle:
    """Reference to a registered route, used to attach metadata later."""

    index: int


class RouteTable:
    """Registration-ordered route list.

    Usage::

        table = RouteTable()
        handle = table.register("GET", "/users/{id}", show_user)
        table.attach_middleware(handle, auth)
        match = table.find("get", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_frozen", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._frozen = False

    # -- Registration --

    def register(self, method: str, pattern: str, action: Any) -> RouteHandle:
        """Append a route and return a handle to it.

        Raises ``InvalidPattern`` for a malformed pattern and
        ``ConfigurationError`` for an unsupported method.
        """
        self._check_not_frozen()
        method_lower = method.lower()
        if method_lower not in HTTP_METHODS:
            msg = f"Unsupported HTTP method {method!r}; expected one of {HTTP_METHODS}"
            raise ConfigurationError(msg)

        normalized, segments = parse_pattern(pattern)
        self._routes.append(
            Route(method=method_lower, pattern=normalized, segments=segments, action=action)
        )
        logger.debug("registered %s %s", method_lower.upper(), normalized)
        return RouteHandle(len(self._routes) - 1)

    def attach_middleware(self, handle: RouteHandle, middleware: Any) -> None:
        """Append *middleware* to the route behind *handle*."""
        self._check_not_frozen()
        route = self._get(handle)
        self._routes[handle.index] = replace(route, middleware=(*route.middleware, middleware))

    def name(self, handle: RouteHandle, name: str) -> None:
        """Give the route behind *handle* a name for reverse routing."""
        self._check_not_frozen()
        self._routes[handle.index] = replace(self._get(handle), name=name)

    def apply_prefix(self, prefix: str) -> None:
        """Prepend *prefix* to every registered pattern.

        Placeholders in the prefix bind like any other placeholder.
        Applying several prefixes composes them outermost-last.
        """
        self._check_not_frozen()
        prefix_normalized = normalize_path(prefix)
        rewritten: list[Route] = []
        for route in self._routes:
            pattern, segments = parse_pattern(f"{prefix_normalized}/{route.pattern}")
            rewritten.append(
                replace(
                    route,
                    pattern=pattern,
                    segments=segments,
                    prefix=normalize_path(f"{prefix_normalized}/{route.prefix}"),
                )
            )
        self._routes = rewritten
        logger.debug("applied prefix %s to %d routes", prefix_normalized, len(rewritten))

    def freeze(self) -> None:
        """Make the table read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Lookup --

    def find(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``.

        Routes are tried in registration order; the segment count is
        compared before any segment is inspected.
        """
        method_lower = method.lower()
        parts = split_path(normalize_path(path))
        count = len(parts)
        for route in self._routes:
            if route.method != method_lower or route.segment_count != count:
                continue
            params = match_segments(route.segments, parts)
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        return None

    def by_name(self, name: str) -> Route | None:
        """Return the first route registered under *name*."""
        for route in self._routes:
            if route.name == name:
                return route
        return None

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """All routes in registration order."""
        return list(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes))

    def __len__(self) -> int:
        return len(self._routes)

    def _get(self, handle: RouteHandle) -> Route:
        try:
            return self._routes[handle.index]
        except IndexError:
            msg = f"No route registered for handle {handle.index}"
            raise ConfigurationError(msg) from None

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the route table after dispatch has started."
            raise ConfigurationError(msg)
