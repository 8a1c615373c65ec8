"""Tests for schmock.http.response: Response and payload normalization."""

import pytest

from schmock.http.response import (
    Response,
    coerce_response,
    error_body,
    is_status_tuple,
    normalize_payload,
)


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body is None
        assert response.headers == {}

    def test_with_methods_return_new_instances(self) -> None:
        original = Response(body="x")
        changed = original.with_status(201).with_header("X-A", "1").with_headers({"X-B": "2"})
        assert original.status == 200
        assert original.headers == {}
        assert changed.status == 201
        assert changed.headers == {"X-A": "1", "X-B": "2"}
        assert changed.with_body("y").body == "y"


class TestStatusTuple:
    @pytest.mark.parametrize("value", [(201, {}), [404, "x"], (204, None, {"A": "b"})])
    def test_recognized(self, value: object) -> None:
        assert is_status_tuple(value)

    @pytest.mark.parametrize(
        "value",
        [[1, 2], [1, 2, 3], [200], [200, 1, 2, 3], [True, "x"], ["200", "x"], (600, "x"), "200"],
    )
    def test_rejected(self, value: object) -> None:
        assert not is_status_tuple(value)


class TestNormalizePayload:
    def test_plain_value(self) -> None:
        assert normalize_payload({"a": 1}) == Response(200, {"a": 1}, {})

    def test_tuple_with_headers(self) -> None:
        response = normalize_payload([201, {"id": 1}, {"Location": "/users/1"}])
        assert response == Response(201, {"id": 1}, {"Location": "/users/1"})

    def test_tuple_without_headers(self) -> None:
        assert normalize_payload((204, None)) == Response(204, None, {})

    def test_numeric_list_is_data(self) -> None:
        assert normalize_payload([1, 2, 3]).body == [1, 2, 3]

    def test_response_passes_through(self) -> None:
        response = Response(418, "teapot")
        assert normalize_payload(response) is response

    def test_none_is_200_with_null_body(self) -> None:
        assert normalize_payload(None) == Response(200, None, {})


class TestCoerceResponse:
    def test_mapping_with_status(self) -> None:
        assert coerce_response({"status": 200, "body": "recovered"}) == Response(200, "recovered", {})

    def test_mapping_without_status(self) -> None:
        assert coerce_response({"body": "x"}) is None

    def test_other_values(self) -> None:
        assert coerce_response("x") is None
        assert coerce_response(None) is None

    def test_error_body(self) -> None:
        assert error_body("boom", "X") == {"error": "boom", "code": "X"}
