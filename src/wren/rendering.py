"""Fallback pages for responses the router synthesizes itself.

The dispatcher renders the not-found page when no route (or no usable
action) matches and no custom not-found handler is registered.
``ErrorBoundary`` renders the internal-error page. Both go through a
``FallbackRenderer`` so hosts can swap the markup without touching the
dispatch pipeline.
"""

from typing import Protocol

from kida import Environment

_PAGE = """\
<html>
    <head>
        <title>{{ status }} {{ title }}</title>
    </head>
    <style>
        body {
            font-family: sans-serif;
            text-align: center;
            margin: 50px;
        }

        h1 {
            color: #333;
        }

        hr {
            border: none;
            border-top: 1px solid #ccc;
            margin: 20px auto;
            width: 50%;
        }

        p {
            color: #666;
        }
    </style>
    <body>
        <h1>{{ status }} | {{ title }}</h1>
        <hr>
        <p>{{ message }}</p>
        {% if detail %}<pre>{{ detail }}</pre>{% endif %}
    </body>
</html>
"""


class FallbackRenderer(Protocol):
    """Supplies fixed HTML for synthesized 404 and 500 responses."""

    def not_found_html(self) -> str: ...

    def internal_error_html(self, detail: str = "") -> str: ...


class KidaFallbackRenderer:
    """Default renderer: one kida template shared by both pages.

    Pages are rendered once and cached, except internal-error pages
    carrying a *detail* (debug mode), which are rendered per call.
    """

    __slots__ = ("_env", "_not_found", "_template")

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or Environment(autoescape=True)
        self._template = self._env.from_string(_PAGE)
        self._not_found: str | None = None

    def not_found_html(self) -> str:
        if self._not_found is None:
            self._not_found = self._template.render(
                {
                    "status": 404,
                    "title": "Not Found",
                    "message": "The requested URL was not found on this server.",
                    "detail": "",
                }
            )
        return self._not_found

    def internal_error_html(self, detail: str = "") -> str:
        return self._template.render(
            {
                "status": 500,
                "title": "Internal Server Error",
                "message": "The server encountered an error processing the request.",
                "detail": detail,
            }
        )
