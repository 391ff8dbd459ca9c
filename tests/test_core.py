"""Tests for logging, request context and error bodies."""
import json
import logging

import pytest
from fastapi import Request

from app.core.context import RequestContext, get_request_context
from app.core.exceptions import (
    PersistenceError,
    UpstreamError,
    ValidationError,
    error_response,
)
from app.core.logging import (
    JSONFormatter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_includes_correlation_id(self):
        token = set_correlation_id("corr-123")
        try:
            payload = json.loads(JSONFormatter().format(_record("hello")))
        finally:
            clear_correlation_id(token)

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.test"
        assert payload["correlation_id"] == "corr-123"
        assert get_correlation_id() == ""

    def test_extra_fields_are_nested(self):
        payload = json.loads(JSONFormatter().format(_record("vote", user_id="user-1")))

        assert payload["extra"] == {"user_id": "user-1"}


class TestErrorBodies:

    @pytest.mark.parametrize(
        "exc, status, kind",
        [
            (ValidationError("Missing required fields"), 400, "validation"),
            (UpstreamError("Failed to fetch NFL matchups"), 500, "upstream"),
            (PersistenceError("Failed to fetch votes: boom"), 500, "persistence"),
        ],
    )
    def test_error_response_shape(self, exc, status, kind):
        response = error_response(exc)

        assert response.status_code == status
        assert json.loads(response.body) == {"error": exc.message, "kind": kind}

    def test_public_message_replaces_cause(self):
        response = error_response(PersistenceError("Failed to fetch: password auth failed"), "Failed to fetch game results")

        assert json.loads(response.body)["error"] == "Failed to fetch game results"


class TestRequestContext:

    def _request(self, correlation_id: str = "") -> Request:
        request = Request({"type": "http", "headers": [], "state": {}})
        request.state.correlation_id = correlation_id
        return request

    def test_context_from_header(self):
        context = get_request_context(self._request("corr-1"), " user-1 ")

        assert context == RequestContext(correlation_id="corr-1", user_id="user-1")
        assert context.is_authenticated
        assert context.require_user() == "user-1"

    def test_anonymous_context(self):
        context = get_request_context(self._request(), None)

        assert not context.is_authenticated
        with pytest.raises(ValidationError):
            context.require_user()
