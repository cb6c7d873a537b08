"""Tests for URL composition, the outcome mapper and the operation shapes."""

from __future__ import annotations

import json

import pytest

from clusterkv.client.operation import (
    JsonOperation,
    LogicalRequest,
    StatusOperation,
    build_url,
    map_status,
)
from clusterkv.exceptions import ApplicationError, SerializationError, UnexpectedStatusError


class TestBuildUrl:
    def test_adds_slash_when_missing(self) -> None:
        assert build_url("http://10.0.0.1:2379", "/enable") == "http://10.0.0.1:2379/v2/auth/enable"

    def test_keeps_single_trailing_slash(self) -> None:
        assert build_url("http://10.0.0.1:2379/", "/enable") == "http://10.0.0.1:2379/v2/auth/enable"

    def test_endpoint_with_path_prefix(self) -> None:
        assert build_url("https://proxy/etcd", "/users") == "https://proxy/etcd/v2/auth/users"


class TestMapStatus:
    TABLE = {200: "ok", 409: "conflict"}

    def test_known_codes(self) -> None:
        assert map_status(self.TABLE, 200) == "ok"
        assert map_status(self.TABLE, 409) == "conflict"

    @pytest.mark.parametrize("code", [201, 204, 400, 404, 418, 500, 503])
    def test_unknown_code_preserved(self, code: int) -> None:
        with pytest.raises(UnexpectedStatusError) as exc_info:
            map_status(self.TABLE, code)
        assert exc_info.value.status_code == code

    def test_same_code_same_outcome(self) -> None:
        assert map_status(self.TABLE, 409) == map_status(self.TABLE, 409)


class TestStatusOperation:
    def test_request_is_reused(self) -> None:
        op = StatusOperation("enable", "PUT", "/enable", {200: "on"}, content="")
        first = op.build_request()
        assert first == LogicalRequest(method="PUT", path="/enable", content="")
        assert op.build_request() is first

    def test_does_not_read_body(self) -> None:
        op = StatusOperation("disable", "DELETE", "/enable", {200: "off"})
        assert op.reads_body is False
        assert op.map_response(200, b"") == "off"

    def test_outcomes_are_a_copy(self) -> None:
        op = StatusOperation("disable", "DELETE", "/enable", {200: "off"})
        op.outcomes[500] = "broken"  # type: ignore[index]
        with pytest.raises(UnexpectedStatusError):
            op.map_response(500, b"")


class TestJsonOperation:
    def _op(self) -> JsonOperation[int]:
        return JsonOperation("count", "GET", "/count", lambda body: json.loads(body)["count"])

    def test_success_body_parsed(self) -> None:
        assert self._op().map_response(200, b'{"count": 3}') == 3

    def test_success_body_garbage(self) -> None:
        with pytest.raises(SerializationError):
            self._op().map_response(200, b"<html>")

    def test_success_body_wrong_shape(self) -> None:
        with pytest.raises(SerializationError):
            self._op().map_response(200, b'{"total": 3}')

    def test_error_payload(self) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            self._op().map_response(403, b'{"message": "Insufficient credentials"}')
        assert exc_info.value.status_code == 403
        assert exc_info.value.api_error.message == "Insufficient credentials"

    def test_error_payload_with_code(self) -> None:
        body = b'{"errorCode": 100, "message": "Key not found", "cause": "/foo", "index": 7}'
        with pytest.raises(ApplicationError) as exc_info:
            self._op().map_response(404, body)
        api_error = exc_info.value.api_error
        assert api_error.error_code == 100
        assert api_error.cause == "/foo"
        assert api_error.index == 7

    def test_unparseable_error_body(self) -> None:
        with pytest.raises(SerializationError):
            self._op().map_response(500, b"internal error")

    def test_empty_error_body(self) -> None:
        with pytest.raises(SerializationError):
            self._op().map_response(502, b"")

    def test_extra_success_codes(self) -> None:
        op = JsonOperation("create", "PUT", "/x", lambda body: body, success_codes=(200, 201))
        assert op.map_response(201, b"made") == b"made"
        assert op.build_request().json_body is None
