"""``wren routes`` and ``wren match``: route table introspection.

Resolves an import string to a wren Router and prints its routes in
matching order, or the route a given request would select.
"""

import argparse
import sys

from wren.cli._resolve import resolve_router
from wren.router import Router


def _load(import_string: str) -> Router:
    try:
        return resolve_router(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def run_routes(args: argparse.Namespace) -> None:
    """Print METHOD, PATTERN, ACTION (and middleware) for every route."""
    router = _load(args.router)
    routes = router.routes()
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for info in routes:
        action = info.action
        if info.name:
            action = f"{action} ({info.name})"
        if info.middleware:
            action = f"{action} [{' > '.join(info.middleware)}]"
        rows.append((info.method.upper(), info.pattern, action))

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_method}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "ACTION"))
    sep_len = max_method + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, pattern, action in rows:
        print(fmt.format(method, pattern, action))


def run_match(args: argparse.Namespace) -> None:
    """Print the route selected for ``args.method`` ``args.path``."""
    router = _load(args.router)
    match = router.table.find(args.method, args.path)
    if match is None:
        print(f"No route matches {args.method.upper()} {args.path}")
        raise SystemExit(1)

    route = match.route
    print(f"{route.method.upper()} {route.pattern}")
    for name, value in match.path_params.items():
        print(f"  {name} = {value}")
