"""Result normalization: maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from wren.errors import EmptyResponseError
from wren.http.response import Response

HTML_CONTENT_TYPE = "text/html; charset=UTF-8"


def normalize(
    value: Any,
    *,
    base: Response | None = None,
    html_content_type: str = HTML_CONTENT_TYPE,
) -> Response:
    """Convert a handler's return value to a Response.

    *base* is the response handed to the handler; plain results are
    built on top of it so headers a host put there survive.

    Dispatch order:

    1. falsy value           -> ``EmptyResponseError``
    2. ``Response``          -> pass through
    3. ``str``               -> 200, ``Content-type: text/html; charset=UTF-8``
    4. ``bytes``             -> 200, application/octet-stream
    5. ``dict`` / ``list``   -> 200, application/json
    6. ``(value, int)``      -> normalize value, override status
    7. ``(value, int, dict)`` -> normalize value, override status + headers
    """
    base = base if base is not None else Response()

    if isinstance(value, Response):
        return value
    if not value:
        msg = f"Handler returned an empty result ({value!r}); return a Response or a string"
        raise EmptyResponseError(msg)

    match value:
        case str():
            return (
                base.with_status(200)
                .with_body(value)
                .with_header("Content-type", html_content_type)
            )
        case bytes():
            return (
                base.with_status(200)
                .with_body(value)
                .with_header("Content-type", "application/octet-stream")
            )
        case dict() | list():
            return (
                base.with_status(200)
                .with_body(json_module.dumps(value, default=str))
                .with_header("Content-type", "application/json; charset=utf-8")
            )
        case (inner, int() as status):
            response = normalize(inner, base=base, html_content_type=html_content_type)
            return response.with_status(status)
        case (inner, int() as status, dict() as headers):
            response = normalize(inner, base=base, html_content_type=html_content_type)
            return response.with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, bytes, dict, list, or Response."
            )
            raise TypeError(msg)
