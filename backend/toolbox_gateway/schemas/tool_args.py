"""Tool Argument Schemas: one Pydantic model per tool, with size and shape bounds.

Invariants:
    - Every collection has an explicit upper bound; required collections have min_length=1
    - Identifier strings are non-empty; labels and notes have length ceilings
    - String and integer fields are strict: no coercion from other JSON types
    - Wire names are camelCase (aliases); Python attributes are snake_case

Design Decisions:
    - Field-level constraints over custom validators: Pydantic reports every
      issue with its location, which becomes the issue path
    - Unknown keys are ignored, matching the permissive tool input schemas
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from toolbox_gateway.core.domain_types import FindingSeverity

NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]
Label = Annotated[str, Field(strict=True, min_length=1, max_length=500)]
OptionalLabel = Annotated[str, Field(strict=True, max_length=500)] | None


class ToolArgs(BaseModel):
    """Base for tool argument models."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- test_tool ---------------------------------------------------------------

class TestToolArgs(ToolArgs):
    __test__ = False  # not a pytest class

    message: Annotated[str, Field(strict=True, min_length=1, max_length=5000)]


# --- swimlanes ---------------------------------------------------------------

class SwimlaneLane(ToolArgs):
    id: NonEmptyStr
    title: NonEmptyStr


class SwimlaneNode(ToolArgs):
    id: NonEmptyStr
    lane_id: NonEmptyStr = Field(alias="laneId")
    label: Label


class GraphEdge(ToolArgs):
    """Directed edge shared by swimlanes and auditverse."""
    from_: NonEmptyStr = Field(alias="from")
    to: NonEmptyStr
    label: OptionalLabel = None


class SwimlanesArgs(ToolArgs):
    lanes: list[SwimlaneLane] = Field(min_length=1, max_length=100)
    nodes: list[SwimlaneNode] = Field(min_length=1, max_length=1000)
    edges: list[GraphEdge] = Field(max_length=2000)


# --- needle_finder -----------------------------------------------------------

class NeedleFinding(ToolArgs):
    row_index: int = Field(alias="rowIndex", strict=True, ge=0)
    field: NonEmptyStr
    value: Any = None
    reason: Annotated[str, Field(strict=True, min_length=1, max_length=1000)]
    severity: FindingSeverity


class NeedleFinderArgs(ToolArgs):
    data: list[dict[str, Any]] = Field(min_length=1, max_length=10_000)
    findings: list[NeedleFinding] = Field(max_length=1000)


# --- tickntie ----------------------------------------------------------------

class TickTieLinkArgs(ToolArgs):
    cell_ref: str = Field(alias="cellRef", strict=True, min_length=1, max_length=50)
    document_id: NonEmptyStr = Field(alias="documentId")
    page_number: int | None = Field(None, alias="pageNumber", strict=True, ge=1)
    note: Annotated[str, Field(strict=True, max_length=1000)] | None = None


class TickTieDocument(ToolArgs):
    id: NonEmptyStr
    name: Label
    data_url: str | None = Field(None, alias="dataUrl", strict=True)


class TicknTieArgs(ToolArgs):
    workbook: dict[str, Any]
    links: list[TickTieLinkArgs] = Field(max_length=5000)
    documents: list[TickTieDocument] = Field(max_length=100)


# --- scheduler ---------------------------------------------------------------

class SchedulePerson(ToolArgs):
    id: NonEmptyStr
    name: Annotated[str, Field(strict=True, min_length=1, max_length=200)]


class ScheduleSlot(ToolArgs):
    id: NonEmptyStr
    start: Annotated[str, Field(strict=True)]
    end: Annotated[str, Field(strict=True)]


class ScheduleAssignment(ToolArgs):
    person_id: NonEmptyStr = Field(alias="personId")
    slot_id: NonEmptyStr = Field(alias="slotId")


class SchedulerArgs(ToolArgs):
    people: list[SchedulePerson] = Field(min_length=1, max_length=500)
    slots: list[ScheduleSlot] = Field(min_length=1, max_length=5000)
    assignments: list[ScheduleAssignment] = Field(max_length=10_000)


# --- auditverse --------------------------------------------------------------

class AuditVerseNode(ToolArgs):
    id: NonEmptyStr
    label: Label
    type: Annotated[str, Field(strict=True, max_length=100)] | None = None
    metadata: dict[str, Any] | None = None


class AuditVerseArgs(ToolArgs):
    nodes: list[AuditVerseNode] = Field(min_length=1, max_length=5000)
    edges: list[GraphEdge] = Field(max_length=10_000)
