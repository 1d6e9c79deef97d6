"""Route, RouteMatch, and RouteInfo frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Methods a route can be registered for, stored lowercase
HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch", "options")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:      ``/users``  (is_param=False)
    Placeholder:  ``/{id}``   (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    Created by ``RouteTable.register()``. Replaced (never mutated) when
    middleware or a name is attached, or when a prefix is applied.
    """

    method: str
    pattern: str
    segments: tuple[PathSegment, ...]
    action: Any
    middleware: tuple[Any, ...] = ()
    name: str | None = None
    prefix: str = ""

    @property
    def param_names(self) -> tuple[str, ...]:
        """Placeholder names, left to right."""
        return tuple(s.param_name for s in self.segments if s.is_param and s.param_name)

    @property
    def segment_count(self) -> int:
        """Number of segments; the root pattern counts as one."""
        return len(self.segments)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """Introspection view of a route, as returned by ``Router.routes()``."""

    method: str
    pattern: str
    param_names: tuple[str, ...]
    action: str
    middleware: tuple[str, ...]
    name: str | None

    @classmethod
    def from_route(cls, route: Route) -> RouteInfo:
        return cls(
            method=route.method,
            pattern=route.pattern,
            param_names=route.param_names,
            action=describe(route.action),
            middleware=tuple(describe(m) for m in route.middleware),
            name=route.name,
        )


def describe(ref: Any) -> str:
    """Human-readable name for an action or middleware reference."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, (tuple, list)) and len(ref) == 2:
        cls, method = ref
        return f"{describe(cls)}@{method}"
    name = getattr(ref, "__qualname__", None)
    if name is not None:
        return str(name)
    return type(ref).__qualname__
