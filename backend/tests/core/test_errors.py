"""Error Taxonomy: envelopes, display messages and client/server exposure rules."""

import logging

from toolbox_gateway.core.domain_types import ErrorClass, ErrorCode, RateLimitScope
from toolbox_gateway.core.errors import (
    ErrorContext,
    InternalError,
    InvalidToolArgsError,
    PayloadTooLargeError,
    RateLimitExceededError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    TooManyConnectionsError,
    ValidationFailedError,
)


def _issues(n):
    return [{"path": f"nodes.{i}.id", "message": "too short", "type": "string_too_short"}
            for i in range(n)]


def test_validation_failed_display_caps_at_five_issues():
    error = ValidationFailedError("swimlanes", _issues(8))
    text = error.display_message()
    assert text.startswith("Input validation failed:\n")
    assert text.count("  • ") == 5
    assert text.endswith("\n  ... and 3 more issues")
    assert len(error.issues) == 8


def test_validation_failed_without_overflow_has_no_tail():
    text = ValidationFailedError("swimlanes", _issues(2)).display_message()
    assert "more issues" not in text


def test_tool_not_found_lists_available_tools():
    error = ToolNotFoundError("nope", ["a", "b"])
    assert error.display_message() == "Unknown tool: nope. Available tools: a, b"
    assert error.code == ErrorCode.TOOL_NOT_FOUND


def test_payload_too_large_reports_megabytes():
    error = PayloadTooLargeError(12_940_000, 10 * 1024 * 1024)
    assert error.data["size_mb"] == 12.34
    assert error.data["max_mb"] == 10
    assert "Maximum allowed: 10MB" in error.display_message()
    assert error.http_status == 413


def test_client_error_tool_response_exposes_data():
    response = InvalidToolArgsError("test_tool").to_tool_response()
    assert response["isError"] is True
    assert response["_meta"]["errorCode"] == -32004
    assert "errorData" in response["_meta"]
    assert "timestamp" not in response["_meta"]


def test_server_error_tool_response_hides_data():
    error = ToolExecutionFailedError("swimlanes", "KeyError: 'secret'")
    response = error.to_tool_response()
    assert response["_meta"].keys() == {"errorCode", "timestamp"}
    assert "secret" not in response["content"][0]["text"]
    assert error.error_class is ErrorClass.SERVER
    assert error.log_level == logging.ERROR


def test_internal_error_is_static():
    error = InternalError(ErrorContext(session_id="s1"))
    assert error.kind == "InternalError"
    assert error.display_message() == "An internal error occurred. Please try again."
    assert "data" not in error.to_response()["error"]


def test_rate_limit_display_depends_on_scope():
    window = RateLimitExceededError(42)
    session = RateLimitExceededError(None, RateLimitScope.SESSION)
    assert "42 seconds" in window.display_message()
    assert "Open a new connection" in session.display_message()
    assert window.log_level == logging.WARNING


def test_too_many_connections_response_envelope():
    body = TooManyConnectionsError(120).to_response()
    assert body["error"]["code"] == -32101
    assert body["error"]["kind"] == "TooManyConnections"
    assert body["error"]["data"] == {"retry_after": 120}
