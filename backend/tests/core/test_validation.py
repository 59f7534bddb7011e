"""Validation Engine: size ceiling, shape check and per-tool schemas.

Tests cover:
    - Valid arguments produce ValidatedArguments with the measured size
    - Missing required collection -> exactly one issue at its path
    - Oversized payload is PayloadTooLarge even when also schema-invalid
    - Idempotent and side-effect free
    - Unknown tool -> ToolNotFound; non-object args -> InvalidToolArgs
"""

import copy

from toolbox_gateway.core.domain_types import ErrorCode
from toolbox_gateway.core.validation import ValidationEngine, measure_payload
from toolbox_gateway.services.tools_registry import build_default_registry

SWIMLANES = {
    "lanes": [{"id": "a", "title": "A"}],
    "nodes": [{"id": "n1", "laneId": "a", "label": "Start"}],
    "edges": [],
}


def _engine(max_payload_bytes=10 * 1024 * 1024):
    return ValidationEngine(build_default_registry(), max_payload_bytes)


def test_valid_swimlanes_arguments_pass():
    result = _engine().validate("swimlanes", SWIMLANES)
    assert result.ok
    assert result.value.tool_name == "swimlanes"
    assert result.value.value.nodes[0].lane_id == "a"
    assert result.value.size_bytes == measure_payload(SWIMLANES)


def test_missing_lanes_yields_single_issue_at_lanes():
    args = {k: v for k, v in SWIMLANES.items() if k != "lanes"}
    result = _engine().validate("swimlanes", args)
    assert not result.ok
    assert result.error.code == ErrorCode.VALIDATION_FAILED
    assert [issue["path"] for issue in result.error.issues] == ["lanes"]


def test_nested_issue_paths_are_dotted():
    args = copy.deepcopy(SWIMLANES)
    args["lanes"][0]["id"] = ""
    result = _engine().validate("swimlanes", args)
    assert result.error.issues[0]["path"] == "lanes.0.id"


def test_strict_types_reject_coercion():
    result = _engine().validate("test_tool", {"message": 42})
    assert not result.ok
    assert result.error.issues[0]["path"] == "message"


def test_collection_upper_bound_enforced():
    args = copy.deepcopy(SWIMLANES)
    args["lanes"] = [{"id": str(i), "title": "t"} for i in range(101)]
    result = _engine().validate("swimlanes", args)
    assert not result.ok
    assert result.error.issues[0]["path"] == "lanes"


def test_invalid_severity_is_reported():
    args = {
        "data": [{"a": 1}],
        "findings": [{"rowIndex": 0, "field": "a", "reason": "odd", "severity": "critical"}],
    }
    result = _engine().validate("needle_finder", args)
    assert result.error.issues[0]["path"] == "findings.0.severity"


def test_oversized_payload_is_payload_too_large_not_validation_failed():
    args = {"message": "x" * 2000, "unexpected": "y" * 2000}
    result = _engine(max_payload_bytes=1024).validate("swimlanes", args)
    assert not result.ok
    assert result.error.code == ErrorCode.PAYLOAD_TOO_LARGE
    assert result.error.data["max_bytes"] == 1024
    assert result.error.data["size_bytes"] > 1024


def test_size_counts_utf8_bytes():
    assert measure_payload({"m": "é"}) == len('{"m":"é"}'.encode("utf-8"))


def test_validation_is_idempotent_and_does_not_mutate_input():
    args = copy.deepcopy(SWIMLANES)
    snapshot = copy.deepcopy(args)
    engine = _engine()
    first = engine.validate("swimlanes", args)
    second = engine.validate("swimlanes", args)
    assert args == snapshot
    assert first.value.value == second.value.value


def test_unknown_tool_is_tool_not_found():
    result = _engine().validate("nope", {})
    assert result.error.code == ErrorCode.TOOL_NOT_FOUND
    assert result.error.data["tool_name"] == "nope"


def test_non_object_arguments_are_invalid_tool_args():
    result = _engine().validate("test_tool", ["message"])
    assert result.error.code == ErrorCode.INVALID_TOOL_ARGS


def test_missing_arguments_are_treated_as_empty_object():
    result = _engine().validate("test_tool", None)
    assert result.error.code == ErrorCode.VALIDATION_FAILED
    assert result.error.issues[0]["path"] == "message"
