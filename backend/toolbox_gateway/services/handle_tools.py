"""Tool Handlers: executors that turn validated arguments into a summary and structured content.

Invariants:
    - Handlers receive only validated argument models, never raw dicts
    - Handlers return ToolResult or raise; they never build error envelopes
    - Rendering and file-format work happen in the front-end; handlers only shape data

Design Decisions:
    - Async functions even where no IO happens: the registry awaits every executor uniformly
    - Spreadsheet data URLs are left empty; the client fills them in
"""

from dataclasses import dataclass

from pydantic import BaseModel

from toolbox_gateway.schemas.tool_args import (
    AuditVerseArgs,
    NeedleFinderArgs,
    SchedulerArgs,
    SwimlanesArgs,
    TestToolArgs,
    TicknTieArgs,
)
from toolbox_gateway.schemas.tool_content import (
    AuditEdge,
    AuditNode,
    AuditVerseContent,
    AuditVerseModel,
    NeedleContent,
    NeedleFinderResult,
    SchedulerContent,
    SchedulerResult,
    SwimlanesContent,
    TestToolContent,
    TickTieContent,
    TickTieLink,
    TickTieResult,
)


@dataclass(frozen=True)
class ToolResult:
    summary: str
    structured: BaseModel

    def structured_payload(self) -> dict:
        return self.structured.model_dump(mode="json", by_alias=True)


async def run_test_tool(args: TestToolArgs) -> ToolResult:
    return ToolResult(
        summary=f'Test message: "{args.message}"',
        structured=TestToolContent(message=args.message),
    )


async def run_swimlanes(args: SwimlanesArgs) -> ToolResult:
    return ToolResult(
        summary=(
            f"Created swimlane diagram with {len(args.lanes)} lanes, "
            f"{len(args.nodes)} nodes, and {len(args.edges)} connections."
        ),
        structured=SwimlanesContent(
            spec=args.model_dump(mode="json", by_alias=True, exclude_none=True),
        ),
    )


async def run_needle_finder(args: NeedleFinderArgs) -> ToolResult:
    by_severity: dict[str, int] = {}
    for finding in args.findings:
        key = finding.severity.value
        by_severity[key] = by_severity.get(key, 0) + 1
    return ToolResult(
        summary=f"Found {len(args.findings)} anomalies in {len(args.data)} rows.",
        structured=NeedleContent(
            result=NeedleFinderResult(rows=args.data, summary=by_severity),
        ),
    )


async def run_tickntie(args: TicknTieArgs) -> ToolResult:
    links = [
        TickTieLink(cell=link.cell_ref, file=link.document_id, page=link.page_number)
        for link in args.links
    ]
    return ToolResult(
        summary=(
            f"Created {len(args.links)} links between spreadsheet cells "
            f"and {len(args.documents)} documents."
        ),
        structured=TickTieContent(result=TickTieResult(links=links)),
    )


async def run_scheduler(args: SchedulerArgs) -> ToolResult:
    people = {person.id: person.name for person in args.people}
    slots = {slot.id: slot for slot in args.slots}
    table = []
    for assignment in args.assignments:
        slot = slots.get(assignment.slot_id)
        table.append({
            "person": people.get(assignment.person_id, assignment.person_id),
            "slot": assignment.slot_id,
            "start": slot.start if slot else "",
            "end": slot.end if slot else "",
        })
    return ToolResult(
        summary=(
            f"Created schedule for {len(args.people)} people "
            f"across {len(args.slots)} time slots."
        ),
        structured=SchedulerContent(result=SchedulerResult(table=table)),
    )


async def run_auditverse(args: AuditVerseArgs) -> ToolResult:
    nodes = [
        AuditNode(id=node.id, type=node.type or "entity", label=node.label)
        for node in args.nodes
    ]
    edges = [
        AuditEdge(from_=edge.from_, to=edge.to, label=edge.label)
        for edge in args.edges
    ]
    return ToolResult(
        summary=(
            f"Created 3D visualization with {len(args.nodes)} nodes "
            f"and {len(args.edges)} connections."
        ),
        structured=AuditVerseContent(model=AuditVerseModel(nodes=nodes, edges=edges)),
    )
