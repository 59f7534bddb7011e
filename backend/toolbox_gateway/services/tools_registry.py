"""Tools Registry: tool name -> capability bundle {schema, executor, display strings}.

Invariants:
    - A tool name maps to exactly one ToolCapability; re-registering a name is rejected
    - Adding a tool is pure registration; dispatch code never changes
    - Display strings are presentation only, never consulted for control flow
    - names() preserves registration order (used in ToolNotFound messages)

Design Decisions:
    - Explicit register() calls in build_default_registry(): every tool visible
      in one place, no auto-discovery
    - JSON input schemas generated from the Pydantic models, so the advertised
      schema and the enforced schema cannot drift
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from toolbox_gateway.schemas.tool_args import (
    AuditVerseArgs,
    NeedleFinderArgs,
    SchedulerArgs,
    SwimlanesArgs,
    TestToolArgs,
    TicknTieArgs,
)
from toolbox_gateway.services.handle_tools import (
    ToolResult,
    run_auditverse,
    run_needle_finder,
    run_scheduler,
    run_swimlanes,
    run_test_tool,
    run_tickntie,
)

ToolExecutor = Callable[[Any], Awaitable[ToolResult]]

WIDGET_TEMPLATE_URI = "ui://widget/widget.html"


@dataclass(frozen=True)
class ToolCapability:
    name: str
    description: str
    args_model: type[BaseModel]
    executor: ToolExecutor
    invoking: str
    invoked: str

    def describe(self, output_template: str = WIDGET_TEMPLATE_URI) -> dict[str, Any]:
        """tools/list entry."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(by_alias=True),
            "_meta": {
                "openai/outputTemplate": output_template,
                "openai/toolInvocation/invoking": self.invoking,
                "openai/toolInvocation/invoked": self.invoked,
            },
        }


class ToolRegistry:
    """Name-keyed capability table. Also serves as the Validation Engine's SchemaSource."""

    def __init__(self):
        self._tools: dict[str, ToolCapability] = {}

    def register(self, capability: ToolCapability) -> None:
        if capability.name in self._tools:
            raise ValueError(f"Tool '{capability.name}' is already registered")
        self._tools[capability.name] = capability

    def get(self, name: str) -> ToolCapability | None:
        return self._tools.get(name)

    def schema_for(self, tool_name: str) -> type[BaseModel] | None:
        capability = self._tools.get(tool_name)
        return capability.args_model if capability else None

    def names(self) -> list[str]:
        return list(self._tools)

    def catalog(self, output_template: str = WIDGET_TEMPLATE_URI) -> list[dict[str, Any]]:
        return [tool.describe(output_template) for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(ToolCapability(
        name="test_tool",
        description=(
            "TEST TOOL - verifies the widget integration by displaying a message "
            "in a formatted view."
        ),
        args_model=TestToolArgs,
        executor=run_test_tool,
        invoking="Displaying test message…",
        invoked="Test message displayed",
    ))
    registry.register(ToolCapability(
        name="swimlanes",
        description=(
            "Create interactive process/sequence diagrams with swim lanes from "
            "process descriptions, flowcharts or described workflows."
        ),
        args_model=SwimlanesArgs,
        executor=run_swimlanes,
        invoking="Creating swimlane diagram…",
        invoked="Swimlane diagram ready",
    ))
    registry.register(ToolCapability(
        name="needle_finder",
        description=(
            "Find anomalies and outliers in tabular data (CSV, Excel): unusual "
            "patterns, duplicates, or values outside expected ranges."
        ),
        args_model=NeedleFinderArgs,
        executor=run_needle_finder,
        invoking="Analyzing data for anomalies…",
        invoked="Anomaly analysis complete",
    ))
    registry.register(ToolCapability(
        name="tickntie",
        description=(
            "Link spreadsheet cells to supporting documents/images, building an "
            "audit trail of which documents support which numbers."
        ),
        args_model=TicknTieArgs,
        executor=run_tickntie,
        invoking="Creating document links…",
        invoked="Tick & tie complete",
    ))
    registry.register(ToolCapability(
        name="scheduler",
        description=(
            "Generate team schedules from people, time slots and assignments."
        ),
        args_model=SchedulerArgs,
        executor=run_scheduler,
        invoking="Generating schedule…",
        invoked="Schedule ready",
    ))
    registry.register(ToolCapability(
        name="auditverse",
        description=(
            "Visualize relationships and hierarchies in 3D graph space from "
            "organizational data, process flows or any connected data."
        ),
        args_model=AuditVerseArgs,
        executor=run_auditverse,
        invoking="Building 3D universe…",
        invoked="3D visualization ready",
    ))
    return registry
