"""Bound handler parameters.

Path parameters come first in pattern order, followed by query-string
values whose names the path did not already bind.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from wren.http.query import QueryParams


class Params(Mapping[str, str]):
    """Read-only mapping of parameter name to value, with attribute access.

    ``params["id"]`` and ``params.id`` are equivalent.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            msg = f"No parameter named {name!r}"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        msg = "Params is immutable"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"Params({self._data!r})"


def bind_params(path_params: Mapping[str, str], query: QueryParams) -> Params:
    """Merge path and query parameters; path values win on collision."""
    merged = dict(path_params)
    for key in query:
        if key not in merged:
            merged[key] = query[key]
    return Params(merged)
