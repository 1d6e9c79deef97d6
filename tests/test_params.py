"""Tests for wren.dispatch.params: bound handler parameters."""

import pytest

from wren.dispatch.params import Params, bind_params
from wren.http.query import QueryParams


class TestParams:
    def test_mapping(self) -> None:
        params = Params({"id": "42"})
        assert params["id"] == "42"
        assert len(params) == 1
        assert list(params) == ["id"]
        assert dict(params) == {"id": "42"}

    def test_attribute_access(self) -> None:
        assert Params({"slug": "hello"}).slug == "hello"

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError, match="No parameter named 'nope'"):
            _ = Params().nope

    def test_missing_key(self) -> None:
        with pytest.raises(KeyError):
            Params()["nope"]

    def test_immutable(self) -> None:
        params = Params({"id": "1"})
        with pytest.raises(AttributeError):
            params.id = "2"  # type: ignore[misc]

    def test_copies_input(self) -> None:
        source = {"id": "1"}
        params = Params(source)
        source["id"] = "2"
        assert params["id"] == "1"


class TestBindParams:
    def test_path_only(self) -> None:
        assert dict(bind_params({"id": "1"}, QueryParams())) == {"id": "1"}

    def test_query_only(self) -> None:
        assert dict(bind_params({}, QueryParams("page=2&sort=asc"))) == {
            "page": "2",
            "sort": "asc",
        }

    def test_path_wins(self) -> None:
        params = bind_params({"id": "42"}, QueryParams("id=99&page=2"))
        assert params["id"] == "42"
        assert params["page"] == "2"

    def test_path_first_in_order(self) -> None:
        params = bind_params({"b": "1", "a": "2"}, QueryParams("z=3"))
        assert list(params) == ["b", "a", "z"]

    def test_repeated_query_key_takes_first(self) -> None:
        assert bind_params({}, QueryParams("tag=a&tag=b"))["tag"] == "a"

    def test_blank_query_value(self) -> None:
        assert bind_params({}, QueryParams("flag="))["flag"] == ""
