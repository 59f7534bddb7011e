"""JSON-RPC Envelopes: request/response models for the invocation submission endpoint.

Invariants:
    - Requests without an id are notifications and get no JSON-RPC reply
    - tools/call arguments are passed through untouched; the dispatcher validates them
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"

# JSON-RPC 2.0 protocol errors (transport level, outside the tool taxonomy)
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    method: str = Field(min_length=1)
    id: int | str | None = None
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class ToolCallParams(BaseModel):
    name: str = Field(min_length=1)
    arguments: Any = None


def rpc_result(request_id: int | str | None, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def rpc_error(
    request_id: int | str | None,
    code: int,
    message: str,
    data: Any = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
