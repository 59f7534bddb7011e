"""Structured Content: machine-readable payloads returned alongside tool summaries.

Invariants:
    - Every payload carries a `tool` discriminator consumed by the rendering front-end
    - Payloads are built from validated arguments only, never from raw input
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StructuredContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TestToolContent(StructuredContent):
    __test__ = False  # not a pytest class

    tool: Literal["test"] = "test"
    message: str


class SwimlanesContent(StructuredContent):
    tool: Literal["swimlanes"] = "swimlanes"
    spec: dict[str, Any]


class NeedleFinderResult(BaseModel):
    rows: list[dict[str, Any]]
    summary: dict[str, int] = Field(default_factory=dict)


class NeedleContent(StructuredContent):
    tool: Literal["needle"] = "needle"
    result: NeedleFinderResult


class TickTieLink(BaseModel):
    cell: str
    file: str
    page: int | None = None


class TickTieResult(BaseModel):
    xlsx_data_url: str = Field("", alias="xlsxDataUrl")
    links: list[TickTieLink] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class TickTieContent(StructuredContent):
    tool: Literal["tickntie"] = "tickntie"
    result: TickTieResult


class SchedulerResult(BaseModel):
    xlsx_data_url: str = Field("", alias="xlsxDataUrl")
    table: list[dict[str, str]] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class SchedulerContent(StructuredContent):
    tool: Literal["scheduler"] = "scheduler"
    result: SchedulerResult


class AuditNode(BaseModel):
    id: str
    type: str = "entity"
    label: str


class AuditEdge(BaseModel):
    from_: str = Field(alias="from")
    to: str
    label: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class AuditVerseModel(BaseModel):
    nodes: list[AuditNode]
    edges: list[AuditEdge]


class AuditVerseContent(StructuredContent):
    tool: Literal["auditverse"] = "auditverse"
    model: AuditVerseModel
