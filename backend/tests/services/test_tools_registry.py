"""Tools Registry: registration rules and the advertised catalog."""

import pytest

from toolbox_gateway.schemas.tool_args import TestToolArgs
from toolbox_gateway.services.handle_tools import run_test_tool
from toolbox_gateway.services.tools_registry import (
    WIDGET_TEMPLATE_URI,
    ToolCapability,
    ToolRegistry,
    build_default_registry,
)

EXPECTED_TOOLS = [
    "test_tool", "swimlanes", "needle_finder", "tickntie", "scheduler", "auditverse",
]


def test_default_registry_has_all_tools_in_order():
    assert build_default_registry().names() == EXPECTED_TOOLS


def test_duplicate_registration_is_rejected():
    registry = ToolRegistry()
    capability = ToolCapability(
        name="test_tool", description="", args_model=TestToolArgs,
        executor=run_test_tool, invoking="", invoked="",
    )
    registry.register(capability)
    with pytest.raises(ValueError):
        registry.register(capability)
    assert len(registry) == 1


def test_schema_lookup_by_name():
    registry = build_default_registry()
    assert registry.schema_for("test_tool") is TestToolArgs
    assert registry.schema_for("missing") is None
    assert "swimlanes" in registry


def test_catalog_uses_wire_names_and_display_strings():
    entry = next(t for t in build_default_registry().catalog() if t["name"] == "swimlanes")
    node_schema = entry["inputSchema"]["$defs"]["SwimlaneNode"]
    assert "laneId" in node_schema["properties"]
    assert entry["inputSchema"]["required"] == ["lanes", "nodes", "edges"]
    assert entry["_meta"]["openai/outputTemplate"] == WIDGET_TEMPLATE_URI
    assert entry["_meta"]["openai/toolInvocation/invoking"] == "Creating swimlane diagram…"
