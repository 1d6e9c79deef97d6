"""Router configuration.

RouterConfig is a frozen dataclass, immutable after creation.
"""

from dataclasses import dataclass
from typing import Literal

from wren.errors import ConfigurationError

type MiddlewareMode = Literal["route", "global"]

MIDDLEWARE_MODES: frozenset[str] = frozenset({"route", "global"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(middleware_mode="global", debug=True)
    """

    # "route": Router.middleware() attaches to the most recently registered route.
    # "global": Router.middleware() appends to the chain every dispatch runs.
    middleware_mode: MiddlewareMode = "route"

    # Render exception details in the default 500 page (ErrorBoundary)
    debug: bool = False

    # Log every dispatch outcome at DEBUG on the "wren.dispatch" logger
    log_dispatch: bool = False

    # Fallback responses
    not_found_status: int = 404
    internal_error_status: int = 500

    # Content type given to plain string results
    html_content_type: str = "text/html; charset=UTF-8"

    def __post_init__(self) -> None:
        if self.middleware_mode not in MIDDLEWARE_MODES:
            msg = (
                f"Unknown middleware_mode {self.middleware_mode!r}; "
                f"expected one of {sorted(MIDDLEWARE_MODES)}"
            )
            raise ConfigurationError(msg)
