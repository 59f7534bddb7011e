"""Domain Types: rich types that replace bare primitives across the gateway.

Invariants:
    - SessionId wraps the opaque transport-assigned string; never parse it
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum, IntEnum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", str)
ToolName = NewType("ToolName", str)
ClientAddress = NewType("ClientAddress", str)


# ─── Enums ───────────────────────────────────────────────────────

class ErrorCode(IntEnum):
    """Stable numeric codes, JSON-RPC 2.0 server-error range."""
    # Input errors (client fault)
    VALIDATION_FAILED = -32001
    TOOL_NOT_FOUND = -32002
    PAYLOAD_TOO_LARGE = -32003
    INVALID_TOOL_ARGS = -32004

    # Rate limiting (client fault)
    RATE_LIMIT_EXCEEDED = -32100
    TOO_MANY_CONNECTIONS = -32101

    # Server errors (server fault)
    INTERNAL_ERROR = -32200
    TOOL_EXECUTION_FAILED = -32201


class ErrorClass(str, Enum):
    """Severity class. Drives log level only, never client-visible behavior."""
    CLIENT = "client"
    SERVER = "server"


class InvocationStage(str, Enum):
    """Per-invocation state machine. FAILED is reachable from any non-terminal stage."""
    RECEIVED = "received"
    ADMISSION_CHECKED = "admission_checked"
    VALIDATED = "validated"
    EXECUTED = "executed"
    RESPONDED = "responded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (InvocationStage.RESPONDED, InvocationStage.FAILED)


class RateLimitScope(str, Enum):
    """Which session cap rejected an invocation."""
    WINDOW = "window"
    SESSION = "session"


class FindingSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
