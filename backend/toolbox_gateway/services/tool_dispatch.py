"""Tool Dispatch: per-invocation state machine from admission to response envelope.

Invariants:
    - Stages advance RECEIVED -> ADMISSION_CHECKED -> VALIDATED -> EXECUTED -> RESPONDED;
      FAILED is terminal and carries the ToolboxError that caused it
    - Admission runs before any await, so check-and-increment cannot interleave
    - Unknown tools fail with ToolNotFound before the Validation Engine sees them
    - Every failure becomes a well-formed envelope; dispatch() never raises
      (asyncio.CancelledError excepted)
    - Server-class errors expose only a generic message and code; client-class
      errors expose their data
    - At-most-once: nothing is retried
    - Invocation logs carry metadata (sizes, counts), never argument contents

Design Decisions:
    - Checks return Result, so the happy path reads as a plain sequence
    - ToolboxError raised by an executor passes through unchanged; any other
      exception becomes ToolExecutionFailed
"""

import logging
from dataclasses import dataclass
from typing import Any

from toolbox_gateway.core.domain_types import InvocationStage, SessionId, ToolName
from toolbox_gateway.core.errors import (
    ErrorContext,
    InternalError,
    ToolboxError,
    ToolExecutionFailedError,
    ToolNotFoundError,
)
from toolbox_gateway.core.rate_limit import AdmissionController
from toolbox_gateway.core.validation import ValidatedArguments, ValidationEngine
from toolbox_gateway.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    pass


@dataclass
class Invocation:
    """One tool call as it moves through the dispatcher."""
    session_id: SessionId
    tool_name: ToolName
    arguments: Any
    stage: InvocationStage = InvocationStage.RECEIVED
    error: ToolboxError | None = None

    def advance(self, stage: InvocationStage) -> None:
        if self.stage.is_terminal:
            raise InvalidTransitionError(
                f"Invocation already {self.stage.value}, cannot move to {stage.value}",
            )
        self.stage = stage

    def fail(self, error: ToolboxError) -> None:
        self.advance(InvocationStage.FAILED)
        self.error = error

    @property
    def context(self) -> ErrorContext:
        return ErrorContext(session_id=self.session_id, tool_name=self.tool_name)


def success_response(summary: str, structured: dict[str, Any]) -> dict[str, Any]:
    return {
        "content": [{"type": "text", "text": summary}],
        "structuredContent": structured,
        "isError": False,
    }


class InvocationDispatcher:
    """Admission -> tool lookup -> validation -> execution -> response shaping."""

    def __init__(
        self,
        registry: ToolRegistry,
        admission: AdmissionController,
        validator: ValidationEngine,
    ):
        self._registry = registry
        self._admission = admission
        self._validator = validator

    async def dispatch(
        self, session_id: str, tool_name: str, arguments: Any,
    ) -> dict[str, Any]:
        invocation = Invocation(SessionId(session_id), ToolName(tool_name), arguments)
        response, _ = await self.run(invocation)
        return response

    async def run(self, invocation: Invocation) -> tuple[dict[str, Any], Invocation]:
        """Process one invocation; returns the envelope and the finished Invocation."""
        try:
            return await self._run(invocation), invocation
        except ToolboxError as exc:
            return self._fail(invocation, exc), invocation
        except Exception as exc:
            return self._fail(invocation, InternalError(invocation.context), exc), invocation

    async def _run(self, invocation: Invocation) -> dict[str, Any]:
        admitted = self._admission.admit_invocation(invocation.session_id)
        if not admitted.ok:
            return self._fail(invocation, admitted.error)
        invocation.advance(InvocationStage.ADMISSION_CHECKED)

        capability = self._registry.get(invocation.tool_name)
        if capability is None:
            return self._fail(invocation, ToolNotFoundError(
                invocation.tool_name, self._registry.names(), invocation.context,
            ))

        validated = self._validator.validate(invocation.tool_name, invocation.arguments)
        if not validated.ok:
            return self._fail(invocation, validated.error)
        invocation.advance(InvocationStage.VALIDATED)
        _log_invocation(invocation, validated.value)

        try:
            result = await capability.executor(validated.value.value)
        except ToolboxError:
            raise
        except Exception as exc:
            error = ToolExecutionFailedError(
                invocation.tool_name, str(exc), invocation.context,
            )
            return self._fail(invocation, error, exc)
        invocation.advance(InvocationStage.EXECUTED)

        response = success_response(result.summary, result.structured_payload())
        invocation.advance(InvocationStage.RESPONDED)
        return response

    def _fail(
        self,
        invocation: Invocation,
        error: ToolboxError,
        cause: BaseException | None = None,
    ) -> dict[str, Any]:
        if not invocation.stage.is_terminal:
            invocation.fail(error)
        extra = {
            "event": "tool_error",
            "session_id": invocation.session_id,
            "tool_name": invocation.tool_name,
            "error_code": int(error.code),
        }
        if "issues" in error.data:
            extra["issue_count"] = len(error.data["issues"])
        if error.log_level >= logging.ERROR:
            logger.error(
                "Tool %s failed: %s (%s)",
                invocation.tool_name, error.message, error.data or cause,
                extra=extra,
                exc_info=cause,
            )
        else:
            logger.warning(
                "Tool %s rejected: %s", invocation.tool_name, error.message,
                extra=extra,
            )
        return error.to_tool_response()


def _log_invocation(invocation: Invocation, validated: ValidatedArguments) -> None:
    """Metadata only: sizes and counts, never user data."""
    model = validated.value
    logger.info(
        "Tool %s invoked", invocation.tool_name,
        extra={
            "event": "tool_invoked",
            "session_id": invocation.session_id,
            "tool_name": invocation.tool_name,
            "args_size_bytes": validated.size_bytes,
            "node_count": len(getattr(model, "nodes", None) or []),
            "data_row_count": len(getattr(model, "data", None) or []),
        },
    )
