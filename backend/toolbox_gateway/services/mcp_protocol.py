"""Protocol Router: JSON-RPC method -> handler for messages posted to a session.

Invariants:
    - Notifications (no id) produce no reply
    - Unknown methods get JSON-RPC -32601; malformed tools/call params get -32602
    - tools/call results, including tool errors, are JSON-RPC results (isError flag),
      never JSON-RPC errors
    - Resolution of the session happens before this router is reached

Design Decisions:
    - Explicit method dict: every supported method visible in one place
    - Resources and prompts (static documentation) are not served here
"""

import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from toolbox_gateway.core.validation import issues_from
from toolbox_gateway.schemas.messages import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    ToolCallParams,
    rpc_error,
    rpc_result,
)
from toolbox_gateway.services.tool_dispatch import InvocationDispatcher
from toolbox_gateway.services.tools_registry import WIDGET_TEMPLATE_URI, ToolRegistry

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

MethodHandler = Callable[[str, JsonRpcRequest], Awaitable[dict[str, Any]]]


class ProtocolRouter:
    def __init__(
        self,
        registry: ToolRegistry,
        dispatcher: InvocationDispatcher,
        server_name: str,
        server_version: str,
        output_template: str = WIDGET_TEMPLATE_URI,
    ):
        self._registry = registry
        self._dispatcher = dispatcher
        self._server_info = {"name": server_name, "version": server_version}
        self._output_template = output_template
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def handle(self, session_id: str, request: JsonRpcRequest) -> dict[str, Any] | None:
        if request.is_notification:
            logger.debug("Notification %s (session=%s)", request.method, session_id)
            return None
        handler = self._methods.get(request.method)
        if handler is None:
            return rpc_error(
                request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}",
            )
        return await handler(session_id, request)

    async def _initialize(self, session_id: str, request: JsonRpcRequest) -> dict[str, Any]:
        return rpc_result(request.id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": self._server_info,
        })

    async def _ping(self, session_id: str, request: JsonRpcRequest) -> dict[str, Any]:
        return rpc_result(request.id, {})

    async def _tools_list(self, session_id: str, request: JsonRpcRequest) -> dict[str, Any]:
        return rpc_result(request.id, {
            "tools": self._registry.catalog(self._output_template),
        })

    async def _tools_call(self, session_id: str, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = ToolCallParams.model_validate(request.params or {})
        except ValidationError as exc:
            return rpc_error(request.id, INVALID_PARAMS, "Invalid params", issues_from(exc))
        result = await self._dispatcher.dispatch(session_id, params.name, params.arguments)
        return rpc_result(request.id, result)
