"""Tests for wren.resolution.actions: classification and resolution of route actions."""

import pytest

from wren.errors import ActionResolutionError
from wren.resolution.actions import ActionKind, ActionResolver, classify_action
from wren.resolution.resolvers import ConstructorResolver


def plain_handler(request, response, params):
    return "plain"


class UserController:
    def show(self, request, response, params):
        return f"user {params['id']}"

    def index(self, request, response, params):
        return "users"


class Invokable:
    def __call__(self, request, response, params):
        return "invoked"


class IndexOnly:
    def index(self, request, response, params):
        return "index"


class Nothing:
    pass


class NeedsArgs:
    def __init__(self, db) -> None:
        self.db = db

    def show(self, request, response, params):
        return "never"


class WithAttribute:
    label = "not callable"


class TestClassifyAction:
    @pytest.mark.parametrize(
        ("action", "kind"),
        [
            (plain_handler, ActionKind.INVOCABLE),
            (lambda r, s, p: "x", ActionKind.INVOCABLE),
            (Invokable(), ActionKind.INVOCABLE),
            ((UserController, "show"), ActionKind.CLASS_METHOD_PAIR),
            (["UserController", "show"], ActionKind.CLASS_METHOD_PAIR),
            (("UserController", "show"), ActionKind.CLASS_METHOD_PAIR),
            ("UserController@show", ActionKind.CLASS_METHOD_STRING),
            (UserController, ActionKind.CLASS_ONLY),
            ("UserController", ActionKind.CLASS_ONLY),
            ("", ActionKind.UNSUPPORTED),
            ("@show", ActionKind.UNSUPPORTED),
            ("UserController@", ActionKind.UNSUPPORTED),
            (42, ActionKind.UNSUPPORTED),
            (None, ActionKind.UNSUPPORTED),
            ((UserController,), ActionKind.UNSUPPORTED),
            ((UserController, "show", "extra"), ActionKind.UNSUPPORTED),
            ((UserController, 3), ActionKind.UNSUPPORTED),
        ],
    )
    def test_kinds(self, action: object, kind: ActionKind) -> None:
        assert classify_action(action) is kind

    def test_class_is_not_invocable(self) -> None:
        # Classes are callable, but only construct instances
        assert classify_action(Invokable) is ActionKind.CLASS_ONLY


class TestActionResolver:
    def _resolver(self) -> ActionResolver:
        strategy = ConstructorResolver()
        for cls in (UserController, Invokable, IndexOnly, Nothing, NeedsArgs, WithAttribute):
            strategy.alias(cls.__name__, cls)
        return ActionResolver(strategy)

    def test_invocable_unchanged(self) -> None:
        assert self._resolver().resolve(plain_handler) is plain_handler

    def test_pair(self) -> None:
        handler = self._resolver().resolve((UserController, "show"))
        assert handler is not None
        assert handler(None, None, {"id": "7"}) == "user 7"

    def test_pair_with_class_name(self) -> None:
        handler = self._resolver().resolve(("UserController", "index"))
        assert handler is not None
        assert handler(None, None, {}) == "users"

    def test_string(self) -> None:
        handler = self._resolver().resolve("UserController@show")
        assert handler is not None
        assert handler(None, None, {"id": "42"}) == "user 42"

    def test_class_only_prefers_call(self) -> None:
        handler = self._resolver().resolve(Invokable)
        assert isinstance(handler, Invokable)
        assert handler(None, None, {}) == "invoked"

    def test_class_only_falls_back_to_index(self) -> None:
        handler = self._resolver().resolve("IndexOnly")
        assert handler is not None
        assert handler(None, None, {}) == "index"

    def test_class_only_without_entry_point(self) -> None:
        with pytest.raises(ActionResolutionError, match="__call__ or index"):
            self._resolver().resolve(Nothing)

    def test_unsupported_returns_none(self) -> None:
        assert self._resolver().resolve(42) is None
        assert self._resolver().resolve("") is None

    def test_missing_method(self) -> None:
        with pytest.raises(ActionResolutionError, match="Method not found: UserController.edit"):
            self._resolver().resolve("UserController@edit")

    def test_non_callable_attribute(self) -> None:
        with pytest.raises(ActionResolutionError, match="Method not found"):
            self._resolver().resolve((WithAttribute, "label"))

    def test_unknown_class(self) -> None:
        with pytest.raises(ActionResolutionError, match="not found"):
            self._resolver().resolve("Ghost@show")

    def test_unconstructible_class(self) -> None:
        with pytest.raises(ActionResolutionError, match="without arguments"):
            self._resolver().resolve((NeedsArgs, "show"))

    def test_fresh_instance_per_resolution(self) -> None:
        resolver = self._resolver()
        first = resolver.resolve((UserController, "show"))
        second = resolver.resolve((UserController, "show"))
        assert first.__self__ is not second.__self__

    def test_default_strategy(self) -> None:
        assert isinstance(ActionResolver().resolver, ConstructorResolver)

    def test_import_path(self) -> None:
        handler = ActionResolver().resolve(f"{__name__}.UserController@show")
        assert handler is not None
        assert handler(None, None, {"id": "1"}) == "user 1"
