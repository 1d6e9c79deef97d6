"""Immutable HTTP request.

Frozen metadata only. The router never reads a body, so the request
is exactly what the host parsed: method, path, query, headers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace

from wren.http.headers import Headers
from wren.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` is empty when the host builds the request; the
    dispatcher hands handlers a copy carrying the bound path parameters.
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=QueryParams)
    headers: Headers = field(default_factory=Headers)
    path_params: Mapping[str, str] = field(default_factory=dict)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request target (path + query string)."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs}"
        return self.path

    # -- Transformations --

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying *path_params*."""
        return replace(self, path_params=dict(path_params))

    # -- Factory --

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] = (),
    ) -> Request:
        """Create a Request from a method and a request target.

        The target may carry a query string: ``Request.build("GET", "/a?x=1")``.
        """
        target, _, _fragment = target.partition("#")
        path, _, query_string = target.partition("?")
        return cls(
            method=method.upper(),
            path=path or "/",
            query=QueryParams(query_string),
            headers=Headers(headers),
        )
