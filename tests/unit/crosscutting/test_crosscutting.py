"""Unit tests for error responses, logging and request context."""

import json
import logging

import pytest
from backoffice.context import (
    clear_context,
    get_context_dict,
    set_actor_context,
    set_request_context,
)
from backoffice.crosscutting.error_responses import (
    ErrorCode,
    bad_request,
    conflict,
    forbidden,
    internal_error,
    not_found,
    problem_response,
    service_unavailable,
    unauthorized,
)
from backoffice.crosscutting.logger import JSONFormatter, redact
from backoffice.crosscutting.middleware import pick_request_id
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_context():
    clear_context()
    yield
    clear_context()


class TestErrorFactories:
    def test_bad_request_carries_errors(self):
        exc = bad_request("Invalid status", ErrorCode.INVALID_STATUS, [{"field": "status"}])
        assert exc.status_code == 400
        assert exc.code == ErrorCode.INVALID_STATUS
        assert exc.errors == [{"field": "status"}]

    def test_not_found(self):
        exc = not_found("Thread", "42", ErrorCode.THREAD_NOT_FOUND)
        assert exc.status_code == 404
        assert exc.code == ErrorCode.THREAD_NOT_FOUND
        assert "42" in exc.detail

    def test_conflict(self):
        assert conflict("dup", ErrorCode.USER_ALREADY_EXISTS).status_code == 409

    def test_auth_factories(self):
        assert unauthorized().status_code == 401
        assert forbidden().code == ErrorCode.FORBIDDEN

    def test_server_side_factories(self):
        assert internal_error().status_code == 500
        exc = service_unavailable("threads store")
        assert exc.status_code == 503
        assert "threads store" in exc.detail


class TestProblemResponse:
    def _app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/boom")
        def boom(request: Request):
            request.state.request_id = "rid-7"
            return problem_response(
                request,
                status=400,
                code=ErrorCode.INVALID_PRIORITY,
                detail="Invalid priority",
                errors=[{"field": "priority", "allowed": ["LOW"]}],
            )

        return app

    def test_body_follows_problem_details(self):
        resp = TestClient(self._app()).get("/boom")

        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["title"] == "Bad Request"
        assert body["code"] == "INVALID_PRIORITY"
        assert body["type"] == "about:blank/invalid_priority"
        assert body["instance"].endswith("/boom")
        assert body["errors"] == [
            {"field": "priority", "allowed": ["LOW"]},
            {"request_id": "rid-7"},
        ]


class TestLogging:
    @pytest.mark.parametrize(
        "key", ["password", "jwt_secret", "access_token", "Authorization", "set-cookie"]
    )
    def test_sensitive_keys_are_redacted(self, key):
        assert redact(key, "value") == "[redacted]"

    def test_nested_dicts_are_redacted(self):
        assert redact("payload", {"email": "a@b.c", "password": "x"}) == {
            "email": "a@b.c",
            "password": "[redacted]",
        }

    def test_plain_values_pass_through(self):
        assert redact("thread_id", 42) == 42

    def test_json_formatter_merges_context_and_extra(self):
        set_request_context(request_id="rid-1", method="PATCH", path="/threads/42")
        record = logging.LogRecord(
            "backoffice", logging.INFO, __file__, 10, "Thread updated", (), None
        )
        record.thread_id = 42
        record.session_token = "abc"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["msg"] == "Thread updated"
        assert entry["request_id"] == "rid-1"
        assert entry["method"] == "PATCH"
        assert entry["thread_id"] == 42
        assert entry["session_token"] == "[redacted]"


class TestRequestContext:
    def test_actor_is_added_to_current_request(self):
        set_request_context(request_id="rid-2", method="GET", path="/users")
        set_actor_context("acc-1")

        assert get_context_dict() == {
            "request_id": "rid-2",
            "method": "GET",
            "path": "/users",
            "actor_id": "acc-1",
        }

    def test_new_request_drops_previous_actor(self):
        set_actor_context("acc-1")
        set_request_context(request_id="rid-3")

        assert get_context_dict() == {"request_id": "rid-3"}

    def test_clear_context(self):
        set_request_context(request_id="rid-4")
        clear_context()

        assert get_context_dict() == {}

    @pytest.mark.parametrize("incoming", ["req-abc-123", "9f1c:01.x"])
    def test_client_request_id_is_kept(self, incoming):
        assert pick_request_id(incoming) == incoming

    @pytest.mark.parametrize("incoming", [None, "", "has space", "x" * 129])
    def test_invalid_request_id_is_replaced(self, incoming):
        generated = pick_request_id(incoming)
        assert generated != incoming
        assert len(generated) == 32
