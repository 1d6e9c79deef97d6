"""Action classification and resolution.

A route's action is stored exactly as registered. At dispatch time it
is classified once into an ``ActionKind`` and then resolved into a
callable taking ``(request, response, params)``:

=========================  ==========================================
Shape                      Kind
=========================  ==========================================
``def handler(...)``       ``INVOCABLE`` (returned unchanged)
``(UserController, "show")``  ``CLASS_METHOD_PAIR``
``"UserController@show"``  ``CLASS_METHOD_STRING``
``UserController``         ``CLASS_ONLY`` (``__call__`` or ``index``)
``"UserController"``       ``CLASS_ONLY``
anything else              ``UNSUPPORTED`` (no handler)
=========================  ==========================================
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from wren.errors import ActionResolutionError
from wren.resolution.resolvers import ClassResolver, ConstructorResolver

logger = logging.getLogger("wren.resolution")

type Handler = Callable[..., Any]


class ActionKind(Enum):
    """The closed set of action shapes a route can carry."""

    INVOCABLE = "invocable"
    CLASS_METHOD_PAIR = "class_method_pair"
    CLASS_METHOD_STRING = "class_method_string"
    CLASS_ONLY = "class_only"
    UNSUPPORTED = "unsupported"


def classify_action(action: Any) -> ActionKind:
    """Classify *action* without resolving anything.

    Classes are callable, but calling one only constructs it, so a class
    is ``CLASS_ONLY`` rather than ``INVOCABLE``.
    """
    match action:
        case type():
            return ActionKind.CLASS_ONLY
        case str() if "@" in action:
            cls_name, _, method = action.partition("@")
            if cls_name and method:
                return ActionKind.CLASS_METHOD_STRING
            return ActionKind.UNSUPPORTED
        case str() if action:
            return ActionKind.CLASS_ONLY
        case (type() | str(), str()):  # tuple or list
            return ActionKind.CLASS_METHOD_PAIR
        case _ if callable(action):
            return ActionKind.INVOCABLE
        case _:
            return ActionKind.UNSUPPORTED


class ActionResolver:
    """Turns stored actions into callables.

    Instances are produced by the resolution strategy on every call to
    ``resolve()``; nothing is cached here. Whether two resolutions share
    an instance is the strategy's decision (see ``ContainerResolver``).
    """

    __slots__ = ("_resolver",)

    def __init__(self, resolver: ClassResolver | None = None) -> None:
        self._resolver: ClassResolver = resolver or ConstructorResolver()

    @property
    def resolver(self) -> ClassResolver:
        return self._resolver

    def resolve(self, action: Any) -> Handler | None:
        """Resolve *action* to a callable, or ``None`` for unsupported shapes.

        Raises ``ActionResolutionError`` if a referenced class or method
        does not exist, or the class cannot be instantiated.
        """
        kind = classify_action(action)
        match kind:
            case ActionKind.INVOCABLE:
                return action
            case ActionKind.CLASS_METHOD_PAIR:
                cls_ref, method = action
                return self._bind(self._class(cls_ref), method)
            case ActionKind.CLASS_METHOD_STRING:
                cls_name, _, method = action.partition("@")
                return self._bind(self._class(cls_name), method)
            case ActionKind.CLASS_ONLY:
                return self._default_entry_point(self._class(action))
            case _:
                logger.debug("unsupported action shape: %r", action)
                return None

    def _class(self, ref: type | str) -> type:
        if isinstance(ref, type):
            return ref
        return self._resolver.lookup(ref)

    def _bind(self, cls: type, method: str) -> Handler:
        instance = self._resolver.resolve(cls)
        bound = getattr(instance, method, None)
        if bound is None or not callable(bound):
            msg = f"Method not found: {cls.__qualname__}.{method}"
            raise ActionResolutionError(msg, action=(cls, method))
        return bound

    def _default_entry_point(self, cls: type) -> Handler:
        if _defines_call(cls):
            return self._resolver.resolve(cls)  # type: ignore[return-value]
        if callable(getattr(cls, "index", None)):
            return self._bind(cls, "index")
        msg = f"Class {cls.__qualname__!r} does not define __call__ or index"
        raise ActionResolutionError(msg, action=cls)


def _defines_call(cls: type) -> bool:
    """True if instances of *cls* are callable."""
    return any("__call__" in vars(klass) for klass in cls.__mro__ if klass is not object)
