"""Error Taxonomy: typed, coded exceptions for every gateway failure mode.

Invariants:
    - Every error has a stable numeric code (ErrorCode), an ErrorClass and a data payload
    - Client-class errors expose their data; server-class errors expose only the code
    - display_message() is the only text that reaches a client
    - Errors are never mutated after construction

Design Decisions:
    - Single hierarchy with ToolboxError base: raised by tool executors,
      carried inside Err by checks, caught once at the dispatch boundary
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from toolbox_gateway.core.domain_types import ErrorClass, ErrorCode, RateLimitScope

MAX_DISPLAYED_ISSUES = 5
BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened. Logged, never sent to clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    tool_name: str | None = None


class ToolboxError(Exception):
    """Base exception for all gateway errors."""

    error_class: ErrorClass = ErrorClass.CLIENT
    http_status: int = 400

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        data: dict[str, Any] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = dict(data) if data else {}
        self.context = context or ErrorContext()

    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Error")

    @property
    def log_level(self) -> int:
        if self.error_class is ErrorClass.SERVER:
            return logging.ERROR
        return logging.WARNING

    def display_message(self) -> str:
        return self.message

    def to_response(self) -> dict:
        """REST envelope for errors surfaced outside a tool call."""
        body: dict[str, Any] = {
            "code": int(self.code),
            "kind": self.kind,
            "message": self.display_message(),
        }
        if self.error_class is ErrorClass.CLIENT and self.data:
            body["data"] = self.data
        return {"error": body}

    def to_tool_response(self) -> dict:
        """Tool-call envelope: human text plus machine-readable code."""
        meta: dict[str, Any] = {"errorCode": int(self.code)}
        if self.error_class is ErrorClass.CLIENT:
            meta["errorData"] = self.data
        else:
            meta["timestamp"] = self.context.timestamp.isoformat()
        return {
            "content": [{"type": "text", "text": self.display_message()}],
            "isError": True,
            "_meta": meta,
        }


# ─── Client Errors ──────────────────────────────────────────────

class ValidationFailedError(ToolboxError):
    """Tool arguments failed schema validation."""

    def __init__(
        self,
        tool_name: str,
        issues: Sequence[dict[str, Any]],
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Input validation failed for tool '{tool_name}'",
            ErrorCode.VALIDATION_FAILED,
            {"issues": [dict(issue) for issue in issues]},
            context,
        )

    @property
    def issues(self) -> list[dict[str, Any]]:
        return self.data["issues"]

    def display_message(self) -> str:
        if not self.issues:
            return f"Validation failed: {self.message}"
        lines = [
            f"  • {issue.get('path') or 'unknown'}: {issue.get('message', '')}"
            for issue in self.issues[:MAX_DISPLAYED_ISSUES]
        ]
        text = "Input validation failed:\n" + "\n".join(lines)
        remaining = len(self.issues) - MAX_DISPLAYED_ISSUES
        if remaining > 0:
            text += f"\n  ... and {remaining} more issues"
        return text


class ToolNotFoundError(ToolboxError):
    """Requested tool is not registered."""

    def __init__(
        self,
        tool_name: str,
        available: Sequence[str] = (),
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Unknown tool: {tool_name}",
            ErrorCode.TOOL_NOT_FOUND,
            {"tool_name": tool_name},
            context,
        )
        self.available = tuple(available)

    def display_message(self) -> str:
        known = ", ".join(self.available) if self.available else "none"
        return f"Unknown tool: {self.data['tool_name']}. Available tools: {known}"


class PayloadTooLargeError(ToolboxError):
    """Serialized arguments exceed the configured ceiling."""

    http_status = 413

    def __init__(
        self, size_bytes: int, max_bytes: int, context: ErrorContext | None = None,
    ):
        size_mb = size_bytes / BYTES_PER_MB
        max_mb = max_bytes / BYTES_PER_MB
        super().__init__(
            f"Payload too large: {size_mb:.2f}MB (max {max_mb:g}MB)",
            ErrorCode.PAYLOAD_TOO_LARGE,
            {
                "size_bytes": size_bytes,
                "max_bytes": max_bytes,
                "size_mb": round(size_mb, 2),
                "max_mb": max_mb,
            },
            context,
        )

    def display_message(self) -> str:
        return (
            f"Payload too large ({self.data['size_mb']:.2f}MB). "
            f"Maximum allowed: {self.data['max_mb']:g}MB. "
            "Please reduce the amount of data."
        )


class InvalidToolArgsError(ToolboxError):
    """Arguments are not a JSON object."""

    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Arguments for tool '{tool_name}' must be a JSON object",
            ErrorCode.INVALID_TOOL_ARGS,
            None,
            context,
        )


class RateLimitExceededError(ToolboxError):
    """Session invocation limiter rejected the call."""

    http_status = 429

    def __init__(
        self,
        retry_after: int | None,
        scope: RateLimitScope = RateLimitScope.WINDOW,
        context: ErrorContext | None = None,
    ):
        if scope is RateLimitScope.SESSION:
            message = "Session invocation limit reached."
        else:
            message = f"Rate limit exceeded. Please try again in {retry_after}s."
        super().__init__(
            message,
            ErrorCode.RATE_LIMIT_EXCEEDED,
            {"retry_after": retry_after, "scope": scope.value},
            context,
        )

    @property
    def retry_after(self) -> int | None:
        return self.data["retry_after"]

    def display_message(self) -> str:
        if self.data["scope"] == RateLimitScope.SESSION.value:
            return (
                "Session invocation limit reached. "
                "Open a new connection to continue using the tools."
            )
        wait = self.retry_after or 60
        return f"Rate limit exceeded. Please wait {wait} seconds before trying again."


class TooManyConnectionsError(ToolboxError):
    """Connection-open limiter rejected a new stream."""

    http_status = 429

    def __init__(self, retry_after: int, context: ErrorContext | None = None):
        super().__init__(
            f"Too many connections. Please try again in {retry_after}s.",
            ErrorCode.TOO_MANY_CONNECTIONS,
            {"retry_after": retry_after},
            context,
        )

    @property
    def retry_after(self) -> int:
        return self.data["retry_after"]

    def display_message(self) -> str:
        return "Too many active connections. Please close some connections and try again."


# ─── Server Errors ──────────────────────────────────────────────

class InternalError(ToolboxError):
    """Unexpected failure. Original exception is logged, never exposed."""

    error_class = ErrorClass.SERVER
    http_status = 500

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred", ErrorCode.INTERNAL_ERROR, None, context,
        )

    @property
    def kind(self) -> str:
        return "InternalError"

    def display_message(self) -> str:
        return "An internal error occurred. Please try again."


class ToolExecutionFailedError(ToolboxError):
    """A tool executor raised a non-taxonomy exception."""

    error_class = ErrorClass.SERVER
    http_status = 500

    def __init__(
        self, tool_name: str, error: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Tool execution failed: {tool_name}",
            ErrorCode.TOOL_EXECUTION_FAILED,
            {"tool_name": tool_name, "error": error},
            context,
        )

    def display_message(self) -> str:
        return (
            f"Tool execution failed: {self.data['tool_name']}. "
            "Please check your input and try again."
        )
