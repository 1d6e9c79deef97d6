"""Class resolution strategies.

A strategy turns a class reference into an instance. The router never
constructs controllers or middleware classes itself; it asks the
strategy it was given at construction time.

Two strategies ship with wren:

- ``ConstructorResolver``: the default. Calls ``cls()`` and builds a
  fresh instance on every resolution. Classes whose constructors
  require arguments cannot be built and raise ``ResolutionError``.
- ``ContainerResolver``: provider-based injection. Constructor
  parameters are filled by type annotation from registered providers;
  singletons are shared for the container's lifetime.
"""

import importlib
import inspect
import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from wren.errors import ActionResolutionError, ResolutionError

logger = logging.getLogger("wren.resolution")


@runtime_checkable
class ClassResolver(Protocol):
    """Protocol for resolution strategies.

    ``lookup`` maps a class name to a class; ``resolve`` produces an
    instance. Both raise ``ActionResolutionError`` (or its subclass
    ``ResolutionError``) when they cannot.
    """

    def lookup(self, name: str) -> type: ...

    def resolve(self, cls: type) -> object: ...


class ConstructorResolver:
    """Default strategy: zero-argument construction, no sharing.

    Class names resolve through registered aliases first, then as an
    import path (``"myapp.controllers.UserController"`` or
    ``"myapp.controllers:UserController"``)::

        resolver = ConstructorResolver()
        resolver.alias("UserController", UserController)
        router = Router(resolver=resolver)
        router.get("/users/{id}", "UserController@show")
    """

    __slots__ = ("_aliases",)

    def __init__(self, aliases: dict[str, type] | None = None) -> None:
        self._aliases: dict[str, type] = dict(aliases or {})

    def alias(self, name: str, cls: type) -> None:
        """Make *cls* resolvable by *name*."""
        self._aliases[name] = cls

    def lookup(self, name: str) -> type:
        cls = self._aliases.get(name)
        if cls is not None:
            return cls
        return import_class(name)

    def resolve(self, cls: type) -> object:
        try:
            inspect.signature(cls).bind()
        except TypeError as exc:
            msg = (
                f"Cannot construct {cls.__qualname__} without arguments ({exc}); "
                f"use a ContainerResolver to provide its dependencies"
            )
            raise ResolutionError(msg, action=cls) from exc
        except ValueError:
            # No introspectable signature (some builtins); try the call anyway
            pass
        return _construct(cls, {})


class ContainerResolver(ConstructorResolver):
    """Provider-based strategy with annotation-driven constructor injection.

    Usage::

        container = ContainerResolver()
        container.provide(Database, lambda: Database(url))
        container.singleton(Settings, Settings())

        # UserController.__init__(self, db: Database) gets a Database
        router = Router(resolver=container)

    Resolution order for a class:
    1. A registered singleton instance
    2. A registered provider factory (called on every resolution)
    3. Construction, with each constructor parameter filled by resolving
       its type annotation; parameters with defaults may be left out
    """

    __slots__ = ("_providers", "_singletons")

    def __init__(self, aliases: dict[str, type] | None = None) -> None:
        super().__init__(aliases)
        self._providers: dict[type, Callable[[], Any]] = {}
        self._singletons: dict[type, Any] = {}

    def provide(self, annotation: type, factory: Callable[[], Any]) -> None:
        """Register a zero-argument factory for *annotation*."""
        self._providers[annotation] = factory

    def singleton(self, annotation: type, instance: Any) -> None:
        """Register a shared instance for *annotation*."""
        self._singletons[annotation] = instance

    def __contains__(self, annotation: object) -> bool:
        return annotation in self._singletons or annotation in self._providers

    def resolve(self, cls: type) -> object:
        return self._resolve(cls, ())

    def _resolve(self, cls: type, resolving: tuple[type, ...]) -> object:
        # *resolving* is the chain of classes under construction in this call
        if cls in self._singletons:
            return self._singletons[cls]
        factory = self._providers.get(cls)
        if factory is not None:
            return factory()
        if cls in resolving:
            msg = f"Circular dependency while resolving {cls.__qualname__}"
            raise ResolutionError(msg, action=cls)

        kwargs = self._constructor_kwargs(cls, (*resolving, cls))
        logger.debug("constructing %s with %s", cls.__qualname__, sorted(kwargs))
        return _construct(cls, kwargs)

    def _constructor_kwargs(self, cls: type, resolving: tuple[type, ...]) -> dict[str, Any]:
        try:
            sig = inspect.signature(cls, eval_str=True)
        except ValueError:
            return {}
        except NameError as exc:
            msg = f"Cannot evaluate constructor annotations of {cls.__qualname__}: {exc}"
            raise ResolutionError(msg, action=cls) from exc

        kwargs: dict[str, Any] = {}
        for name, param in sig.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = param.annotation
            if isinstance(annotation, type) and (
                annotation in self or _is_constructible(annotation)
            ):
                kwargs[name] = self._resolve(annotation, resolving)
            elif param.default is not param.empty:
                continue
            else:
                msg = (
                    f"Cannot resolve parameter {name!r} of {cls.__qualname__}: "
                    f"no provider for {_annotation_name(annotation)}"
                )
                raise ResolutionError(msg, action=cls)
        return kwargs


def import_class(name: str) -> type:
    """Import a class from ``"module.Class"`` or ``"module:Class"``.

    Raises ``ActionResolutionError`` if the module or attribute is
    missing, or the attribute is not a class.
    """
    if ":" in name:
        module_path, _, attr = name.partition(":")
    else:
        module_path, _, attr = name.rpartition(".")
    if not module_path or not attr:
        msg = f"Controller class {name!r} not found"
        raise ActionResolutionError(msg, action=name)

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Controller class {name!r} not found: {exc}"
        raise ActionResolutionError(msg, action=name) from exc

    obj = getattr(module, attr, None)
    if not isinstance(obj, type):
        msg = f"Controller class {name!r} not found"
        raise ActionResolutionError(msg, action=name)
    return obj


def _construct(cls: type, kwargs: dict[str, Any]) -> object:
    try:
        return cls(**kwargs)
    except TypeError as exc:
        msg = f"Cannot construct {cls.__qualname__}: {exc}"
        raise ResolutionError(msg, action=cls) from exc


def _is_constructible(cls: type) -> bool:
    """True for user classes the container may build on its own."""
    return cls.__module__ != "builtins"


def _annotation_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "an unannotated parameter"
    return getattr(annotation, "__qualname__", repr(annotation))
