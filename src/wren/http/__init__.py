"""HTTP message types: immutable request and response values."""

from wren.http.headers import Headers
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]
