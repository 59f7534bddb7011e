"""Protocol Router: JSON-RPC method routing for posted messages."""

import pytest

from toolbox_gateway.schemas.messages import INVALID_PARAMS, METHOD_NOT_FOUND, JsonRpcRequest
from toolbox_gateway.services.mcp_protocol import PROTOCOL_VERSION


def _request(method, params=None, request_id=1):
    return JsonRpcRequest(jsonrpc="2.0", id=request_id, method=method, params=params)


@pytest.fixture
def router(gateway):
    return gateway.protocol


async def test_initialize_reports_server_info(router, settings):
    reply = await router.handle("s1", _request("initialize"))
    assert reply["id"] == 1
    assert reply["result"]["protocolVersion"] == PROTOCOL_VERSION
    assert reply["result"]["serverInfo"] == {
        "name": settings.service_name, "version": settings.service_version,
    }
    assert reply["result"]["capabilities"] == {"tools": {}}


async def test_notifications_get_no_reply(router):
    request = JsonRpcRequest(jsonrpc="2.0", method="notifications/initialized")
    assert await router.handle("s1", request) is None


async def test_ping(router):
    assert (await router.handle("s1", _request("ping", request_id="abc")))["result"] == {}


async def test_tools_list_returns_catalog(router):
    reply = await router.handle("s1", _request("tools/list"))
    names = [tool["name"] for tool in reply["result"]["tools"]]
    assert names[0] == "test_tool"
    assert len(names) == 6


async def test_unknown_method_is_method_not_found(router):
    reply = await router.handle("s1", _request("resources/list"))
    assert reply["error"]["code"] == METHOD_NOT_FOUND
    assert "result" not in reply


async def test_tools_call_without_name_is_invalid_params(router):
    reply = await router.handle("s1", _request("tools/call", {"arguments": {}}))
    assert reply["error"]["code"] == INVALID_PARAMS
    assert reply["error"]["data"][0]["path"] == "name"


async def test_tools_call_errors_are_results_not_rpc_errors(router):
    reply = await router.handle("s1", _request("tools/call", {"name": "nope"}))
    assert "error" not in reply
    assert reply["result"]["isError"] is True
    assert reply["result"]["_meta"]["errorCode"] == -32002
