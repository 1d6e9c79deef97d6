"""Path normalization, pattern parsing, and segment matching.

Patterns are slash-delimited templates whose segments are either
literals or whole-segment placeholders::

    "/users"              -> [PathSegment("users")]
    "/users/{id}"         -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
    "/"                   -> [PathSegment("")]

There are no typed converters, optional segments, or catch-alls. A
path matches a pattern only when both have the same number of segments.
"""

import re

from wren.errors import InvalidPattern
from wren.routing.route import PathSegment

_SLASHES = re.compile(r"[/\\]+")

ROOT = "/"


def normalize_path(path: str) -> str:
    """Normalize a path or pattern for storage and comparison.

    Collapses runs of ``/`` and ``\\`` into one ``/``, drops a ``?query``
    suffix, strips the trailing slash, and guarantees a single leading
    slash. The root, and the empty string, normalize to ``"/"``.

    Idempotent: ``normalize_path(normalize_path(p)) == normalize_path(p)``.
    """
    path = path.split("?", 1)[0]
    path = _SLASHES.sub("/", path).strip("/")
    return "/" + path if path else ROOT


def split_path(path: str) -> tuple[str, ...]:
    """Split a *normalized* path into segments.

    The root is a single empty segment so it can only equal itself.
    """
    if path == ROOT:
        return ("",)
    return tuple(path[1:].split("/"))


def parse_pattern(pattern: str) -> tuple[str, tuple[PathSegment, ...]]:
    """Normalize *pattern* and parse it into segments.

    Returns ``(normalized_pattern, segments)``.

    Raises ``InvalidPattern`` when the pattern is empty, has unbalanced or
    nested braces, an empty placeholder name, a placeholder that does not
    span a whole segment, or a repeated name. Any other name is accepted
    as written: ``{user-id}`` binds ``"user-id"``.
    """
    if not pattern or not pattern.strip():
        raise InvalidPattern(pattern, "pattern is empty")

    _check_braces(pattern)

    normalized = normalize_path(pattern)
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in split_path(normalized):
        if "{" not in part:
            segments.append(PathSegment(value=part))
            continue
        if not (part.startswith("{") and part.endswith("}")) or part.count("{") != 1:
            msg = f"placeholder must span a whole segment, got {part!r}"
            raise InvalidPattern(pattern, msg)
        name = part[1:-1]
        if not name:
            raise InvalidPattern(pattern, "placeholder name is empty")
        if name in seen:
            msg = f"placeholder {name!r} appears more than once"
            raise InvalidPattern(pattern, msg)
        seen.add(name)
        segments.append(PathSegment(value=part, is_param=True, param_name=name))
    return normalized, tuple(segments)


def _check_braces(pattern: str) -> None:
    """Reject unmatched or nested ``{``/``}``."""
    depth = 0
    for char in pattern:
        if char == "{":
            if depth:
                raise InvalidPattern(pattern, "nested '{'")
            depth = 1
        elif char == "}":
            if not depth:
                raise InvalidPattern(pattern, "unmatched '}'")
            depth = 0
    if depth:
        raise InvalidPattern(pattern, "unmatched '{'")


def match_segments(
    segments: tuple[PathSegment, ...],
    parts: tuple[str, ...],
) -> dict[str, str] | None:
    """Match path *parts* against pattern *segments*.

    Literal segments must be equal (case-sensitive). Placeholders bind
    any non-empty part. Returns the bound parameters in pattern order,
    or ``None`` when the path does not match.
    """
    if len(segments) != len(parts):
        return None

    params: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if seg.is_param:
            if not part:
                return None
            params[seg.param_name or ""] = part
        elif seg.value != part:
            return None
    return params
