"""Tests for wren.router: registration API, prefixes, middleware scopes, freeze."""

import threading

import pytest

from wren import Request, Response, Router, RouterConfig
from wren.errors import ConfigurationError, InvalidPattern, NotFound

HTML = ("Content-type", "text/html; charset=UTF-8")


def _echo(request, response, params):
    return "<p>" + ",".join(f"{k}={v}" for k, v in params.items()) + "</p>"


def _ok(request, response, params):
    return "ok"


class UserController:
    def show(self, request, response, params):
        return f"<p>user {params.id}</p>"

    def index(self, request, response, params):
        return "<p>users</p>"


class TestRegistration:
    def test_chainable(self) -> None:
        router = Router()
        assert router.get("/a", _ok) is router
        assert router.get("/b", _ok).post("/c", _ok) is router

    @pytest.mark.parametrize("method", ["get", "post", "put", "delete", "patch", "options"])
    def test_method_helpers(self, method: str) -> None:
        router = Router()
        getattr(router, method)("/thing", _ok)
        response = router.dispatch_sync(Request.build(method.upper(), "/thing"))
        assert response.text == "ok"

    def test_any_registers_every_method(self) -> None:
        router = Router().any("/ping", _ok)
        methods = [info.method for info in router.routes()]
        assert methods == ["get", "post", "put", "delete", "patch", "options"]
        for method in methods:
            assert router.dispatch_sync(Request.build(method, "/ping")).status == 200

    def test_invalid_pattern_at_registration(self) -> None:
        with pytest.raises(InvalidPattern):
            Router().get("/users/{id", _ok)

    def test_routes_introspection(self) -> None:
        router = Router()
        router.get("/users/{id}", (UserController, "show")).name("user")
        router.get("/users", "UserController@index")
        info = router.routes()
        assert [r.pattern for r in info] == ["/users/{id}", "/users"]
        assert info[0].action == "UserController@show"
        assert info[0].param_names == ("id",)
        assert info[0].name == "user"
        assert info[1].action == "UserController@index"


class TestMatching:
    def test_exact_pattern_binds_in_order(self) -> None:
        router = Router().get("/orgs/{org}/repos/{repo}", _echo)
        response = router.dispatch_sync(Request.build("GET", "/orgs/acme/repos/wren"))
        assert response.text == "<p>org=acme,repo=wren</p>"

    def test_segment_count_mismatch_never_matches(self) -> None:
        router = Router().get("/users/{id}", _ok)
        assert router.dispatch_sync(Request.build("GET", "/users")).status == 404
        assert router.dispatch_sync(Request.build("GET", "/users/1/2")).status == 404

    def test_first_match_wins(self) -> None:
        router = Router()
        router.get("/dup", lambda req, res, params: "first")
        router.get("/dup", lambda req, res, params: "second")
        for _ in range(3):
            assert router.dispatch_sync(Request.build("GET", "/dup")).text == "first"

    def test_root_does_not_match_placeholder(self) -> None:
        router = Router().get("/{anything}", _ok)
        assert router.dispatch_sync(Request.build("GET", "/")).status == 404

    def test_trailing_and_double_slashes(self) -> None:
        router = Router().get("/users/{id}", _echo)
        response = router.dispatch_sync(Request.build("GET", "//users//42/"))
        assert response.text == "<p>id=42</p>"

    def test_query_merged_after_path(self) -> None:
        router = Router().get("/users/{id}", _echo)
        response = router.dispatch_sync(Request.build("GET", "/users/42?tab=posts&id=7"))
        assert response.text == "<p>id=42,tab=posts</p>"

    def test_hyphenated_placeholder(self) -> None:
        router = Router().get("/users/{user-id}", lambda req, res, params: params["user-id"])
        response = router.dispatch_sync(Request.build("GET", "/users/42"))
        assert response.text == "42"


class TestPreRoute:
    def test_prefix_applies(self) -> None:
        router = Router().get("/users/{id}", _echo)
        router.set_pre_route("/api")
        assert router.dispatch_sync(Request.build("GET", "/api/users/42")).text == "<p>id=42</p>"
        assert router.dispatch_sync(Request.build("GET", "/users/42")).status == 404

    def test_prefix_only_affects_existing_routes(self) -> None:
        router = Router().get("/a", _ok)
        router.set_pre_route("/api")
        router.get("/b", _ok)
        assert [r.pattern for r in router.routes()] == ["/api/a", "/b"]


class TestStringResult:
    def test_string_becomes_html_200(self) -> None:
        router = Router().get("/", lambda req, res, params: "<p>ok</p>")
        response = router.dispatch_sync(Request.build("GET", "/"))
        assert response.status == 200
        assert HTML in response.headers
        assert response.body == "<p>ok</p>"


class TestNotFound:
    def test_default(self) -> None:
        router = Router().get("/unknown", _ok)
        response = router.dispatch_sync(Request.build("DELETE", "/unknown"))
        assert response.status == 404
        assert HTML in response.headers
        assert "Not Found" in response.text

    def test_custom_handler(self) -> None:
        router = Router().get("/unknown", _ok)
        router.set_not_found(lambda req, res, params: res.with_status(404).with_body("gone"))
        response = router.dispatch_sync(Request.build("DELETE", "/unknown"))
        assert response.status == 404
        assert response.body == "gone"

    def test_custom_handler_plain_string(self) -> None:
        router = Router()
        router.set_not_found(lambda req, res, params: "<p>missing</p>")
        response = router.dispatch_sync(Request.build("GET", "/nowhere"))
        assert response.status == 200
        assert response.body == "<p>missing</p>"


class TestMiddleware:
    def test_route_scope_attaches_to_last_route(self) -> None:
        calls: list[str] = []

        async def mw(request, next):
            calls.append(request.path)
            return await next(request)

        router = Router().get("/a", _ok).get("/b", _ok).middleware(mw)
        router.dispatch_sync(Request.build("GET", "/a"))
        router.dispatch_sync(Request.build("GET", "/b"))
        assert calls == ["/b"]

    def test_order_and_short_circuit(self) -> None:
        log: list[str] = []

        async def first(request, next):
            log.append("first")
            return await next(request)

        async def gate(request, next):
            log.append("gate")
            return Response("stop").with_status(403)

        async def never(request, next):
            log.append("never")
            return await next(request)

        def handler(request, response, params):
            log.append("handler")
            return "ok"

        router = Router().get("/", handler).middleware(first).middleware(gate).middleware(never)
        response = router.dispatch_sync(Request.build("GET", "/"))
        assert response.status == 403
        assert log == ["first", "gate"]

    def test_global_mode(self) -> None:
        calls: list[str] = []

        async def mw(request, next):
            calls.append(request.path)
            return await next(request)

        router = Router(RouterConfig(middleware_mode="global"))
        router.get("/a", _ok).middleware(mw).get("/b", _ok)
        router.dispatch_sync(Request.build("GET", "/a"))
        router.dispatch_sync(Request.build("GET", "/b"))
        assert calls == ["/a", "/b"]

    def test_explicit_scope_overrides_mode(self) -> None:
        router = Router(RouterConfig(middleware_mode="global"))
        router.get("/a", _ok).middleware("Auth", scope="route")
        assert router.routes()[0].middleware == ("Auth",)

    def test_use_is_global(self) -> None:
        log: list[str] = []

        def stage(label: str):
            async def mw(request, next):
                log.append(label)
                return await next(request)

            return mw

        router = Router().get("/", _ok).middleware(stage("route"))
        router.use(stage("global-1"), stage("global-2"))
        router.dispatch_sync(Request.build("GET", "/"))
        assert log == ["global-1", "global-2", "route"]

    def test_any_shares_middleware(self) -> None:
        router = Router().any("/ping", _ok).middleware("Auth")
        assert all(info.middleware == ("Auth",) for info in router.routes())

    def test_route_scope_without_route(self) -> None:
        with pytest.raises(ConfigurationError, match="register one first"):
            Router().middleware(lambda request, next: next(request))

    def test_invalid_ref(self) -> None:
        with pytest.raises(ConfigurationError):
            Router().get("/", _ok).middleware(42)

    def test_class_middleware_instantiated(self) -> None:
        class AddHeader:
            async def __call__(self, request, next):
                response = await next(request)
                return response.with_header("X-Added", "yes")

        router = Router().get("/", _ok).middleware(AddHeader)
        assert router.dispatch_sync(Request.build("GET", "/")).header("X-Added") == "yes"


class TestCatchErrors:
    def test_without_boundary_exceptions_propagate(self) -> None:
        def boom(request, response, params):
            raise RuntimeError("boom")

        router = Router().get("/", boom)
        with pytest.raises(RuntimeError):
            router.dispatch_sync(Request.build("GET", "/"))

    def test_boundary_renders_500(self) -> None:
        def boom(request, response, params):
            raise RuntimeError("boom")

        router = Router().get("/", boom).catch_errors()
        response = router.dispatch_sync(Request.build("GET", "/"))
        assert response.status == 500
        assert "Internal Server Error" in response.text

    def test_boundary_uses_internal_error_handler(self) -> None:
        def boom(request, response, params):
            raise RuntimeError("boom")

        router = Router().get("/", boom).catch_errors()
        router.set_internal_server_error(lambda request, exc: f"<p>{exc}</p>")
        response = router.dispatch_sync(Request.build("GET", "/"))
        assert response.status == 500
        assert response.text == "<p>boom</p>"

    def test_boundary_maps_not_found(self) -> None:
        def missing(request, response, params):
            raise NotFound()

        router = Router().get("/", missing).catch_errors()
        response = router.dispatch_sync(Request.build("GET", "/"))
        assert response.status == 404


class TestUrlFor:
    def test_builds_path(self) -> None:
        router = Router().get("/users/{id}", _ok).name("user")
        assert router.url_for("user", id=42) == "/users/42"

    def test_placeholder_called_name(self) -> None:
        router = Router().get("/users/{name}", _ok).name("user")
        assert router.url_for("user", name="bob") == "/users/bob"

    def test_extra_params_become_query(self) -> None:
        router = Router().get("/users/{id}", _ok).name("user")
        assert router.url_for("user", id=1, tab="posts") == "/users/1?tab=posts"

    def test_after_prefix(self) -> None:
        router = Router().get("/users/{id}", _ok).name("user")
        router.set_pre_route("/api")
        assert router.url_for("user", id=1) == "/api/users/1"

    def test_root(self) -> None:
        router = Router().get("/", _ok).name("home")
        assert router.url_for("home") == "/"

    def test_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            Router().url_for("nope")

    def test_missing_param(self) -> None:
        router = Router().get("/users/{id}", _ok).name("user")
        with pytest.raises(KeyError, match="id"):
            router.url_for("user")

    def test_name_without_route(self) -> None:
        with pytest.raises(ConfigurationError):
            Router().name("orphan")


class TestFreeze:
    def test_dispatch_freezes(self) -> None:
        router = Router().get("/", _ok)
        assert router.frozen is False
        router.dispatch_sync(Request.build("GET", "/"))
        assert router.frozen is True
        assert router.table.frozen is True

    def test_registration_after_freeze(self) -> None:
        router = Router().get("/", _ok)
        router.freeze()
        with pytest.raises(ConfigurationError):
            router.get("/late", _ok)
        with pytest.raises(ConfigurationError):
            router.set_pre_route("/api")
        with pytest.raises(ConfigurationError):
            router.use(lambda request, next: next(request))

    def test_concurrent_freeze(self) -> None:
        router = Router().get("/", _ok)
        threads = [threading.Thread(target=router.freeze) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert router.frozen is True

    async def test_async_dispatch(self) -> None:
        router = Router().get("/users/{id}", _echo)
        response = await router.dispatch(Request.build("GET", "/users/5"))
        assert response.text == "<p>id=5</p>"
