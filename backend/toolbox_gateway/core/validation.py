"""Validation Engine: payload-size ceiling, then per-tool schema validation.

Invariants:
    - Size check runs first: an oversized payload is PayloadTooLarge, never ValidationFailed
    - Pure: never mutates input, performs no IO, same input gives the same Result
    - Issues keep Pydantic's order; the full list is carried, display caps at 5
    - Each tool's schema is looked up by name; no shared monolithic schema

Design Decisions:
    - Size measured as UTF-8 bytes of compact JSON: what the client actually sent
    - Returns Result instead of raising so the dispatcher reads checks in sequence
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from toolbox_gateway.core.errors import (
    BYTES_PER_MB,
    InvalidToolArgsError,
    PayloadTooLargeError,
    ToolNotFoundError,
    ValidationFailedError,
)
from toolbox_gateway.core.result import Err, Ok, Result

DEFAULT_MAX_PAYLOAD_BYTES = 10 * BYTES_PER_MB


class SchemaSource(Protocol):
    """Name-keyed lookup of argument models; implemented by ToolRegistry."""
    def schema_for(self, tool_name: str) -> type[BaseModel] | None: ...
    def names(self) -> list[str]: ...


@dataclass(frozen=True)
class ValidatedArguments:
    tool_name: str
    value: BaseModel
    size_bytes: int


def measure_payload(data: Any) -> int:
    """UTF-8 byte length of the compact JSON encoding."""
    encoded = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
    return len(encoded.encode("utf-8"))


def issues_from(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors(include_url=False)
    ]


class ValidationEngine:
    def __init__(
        self,
        schemas: SchemaSource,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    ):
        self._schemas = schemas
        self.max_payload_bytes = max_payload_bytes

    def check_size(self, raw_args: Any) -> Result[int]:
        size = measure_payload(raw_args)
        if size > self.max_payload_bytes:
            return Err(PayloadTooLargeError(size, self.max_payload_bytes))
        return Ok(size)

    def validate(self, tool_name: str, raw_args: Any) -> Result[ValidatedArguments]:
        size = self.check_size(raw_args)
        if not size.ok:
            return size

        schema = self._schemas.schema_for(tool_name)
        if schema is None:
            return Err(ToolNotFoundError(tool_name, self._schemas.names()))

        args = {} if raw_args is None else raw_args
        if not isinstance(args, Mapping):
            return Err(InvalidToolArgsError(tool_name))

        try:
            model = schema.model_validate(args)
        except ValidationError as exc:
            return Err(ValidationFailedError(tool_name, issues_from(exc)))
        return Ok(ValidatedArguments(tool_name, model, size.value))
