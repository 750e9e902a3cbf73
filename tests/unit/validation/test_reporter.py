"""
swimlane-layout — unit tests for the validation reporter and its exports

File: tests/unit/validation/test_reporter.py
Last updated: 2026-10-19

Purpose
- Validate report aggregation (summary, lane analysis, recommendations) and
  the JSON, CSV and text exports.
"""

from __future__ import annotations

import csv
import io
import json

import pytest

from swimlane_layout.domain.models import (
    BoundaryViolation,
    IssueSeverity,
    LaneBoundary,
    Position,
    ValidationResult,
    ViolationSeverity,
    ViolationType,
)
from swimlane_layout.validation.reporter import (
    ALL_CLEAR_RECOMMENDATION,
    CSV_HEADER,
    ValidationReporter,
    export_csv,
    export_json,
    render_text,
)

FARM = LaneBoundary(lane="Farm", start_y=25.0, end_y=145.0, buffer=20.0)


def _record(
    reporter: ValidationReporter,
    node_id: str,
    *,
    lane: str = "Farm",
    calculated_y: float = 85.0,
    final_y: float = 85.0,
    elapsed_ms: float = 0.5,
    violation: BoundaryViolation | None = None,
) -> None:
    reporter.record_position_calculation(
        node_id=node_id,
        node_name=node_id.title(),
        lane=lane,
        tier=0,
        calculated_position=Position(270.0, calculated_y),
        final_position=Position(270.0, final_y),
        boundary=FARM if lane == "Farm" else None,
        within_bounds=violation is None,
        calculation_time_ms=elapsed_ms,
        violation=violation,
    )


def _top_violation(node_id: str) -> BoundaryViolation:
    return BoundaryViolation(
        node_id=node_id,
        violation_type=ViolationType.TOP,
        severity=ViolationSeverity.MAJOR,
        allowed_boundary=65.0,
        actual_position=50.0,
    )


@pytest.mark.unit
def test_empty_report_is_all_clear() -> None:
    reporter = ValidationReporter()
    reporter.start_validation()

    report = reporter.generate_report()

    assert report.summary.total_nodes == 0
    assert report.summary.average_calculation_time_ms == 0.0
    assert report.lane_analysis == ()
    assert report.recommendations == (ALL_CLEAR_RECOMMENDATION,)
    assert report.timestamp.endswith("Z")


@pytest.mark.unit
def test_clean_nodes_produce_the_all_clear_recommendation() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a")
    _record(reporter, "b", lane="Tower")

    report = reporter.generate_report()

    assert report.summary.validated_nodes == 2
    assert [lane.lane for lane in report.lane_analysis] == ["Farm", "Tower"]
    assert report.recommendations == (ALL_CLEAR_RECOMMENDATION,)


@pytest.mark.unit
def test_adjustments_and_violations_drive_recommendations() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a", calculated_y=50.0, final_y=65.0, violation=_top_violation("a"))

    report = reporter.generate_report()

    info = reporter.get_node_debug_info("a")
    assert info is not None
    assert info.adjustment_applied
    assert info.adjustment_reason == "Y position adjusted from 50.0 to 65.0"
    assert report.summary.adjustments_made == 1
    assert report.summary.boundary_violations == 1
    assert report.lane("Farm").violation_count == 1  # type: ignore[union-attr]
    assert report.recommendations == (
        "1 boundary violations in lane Farm - review lane height calculation",
        "High adjustment rate (1/1) - consider increasing lane heights",
    )


@pytest.mark.unit
def test_overcrowded_lanes_are_listed_even_without_nodes() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a")
    reporter.mark_lane_overcrowded("Farm", "lane_expansion")
    reporter.mark_lane_overcrowded("Tower", "emergency_packing")

    report = reporter.generate_report()

    tower = report.lane("Tower")
    assert tower is not None
    assert tower.node_count == 0
    assert tower.overcrowded
    assert report.recommendations == (
        "Lane Farm is overcrowded - resolved by lane_expansion",
        "CRITICAL: lane Tower required emergency packing - node spacing is below the "
        "minimum; split its items across tiers or raise the lane height cap",
    )


@pytest.mark.unit
def test_slow_nodes_and_failed_tests_are_recommended() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a", elapsed_ms=5.0)
    results = [
        ValidationResult(test_name="Boundary Compliance", passed=False),
        ValidationResult(test_name="Tier Alignment Across Lanes", passed=True),
    ]

    report = reporter.generate_report(results)

    assert report.summary.tests_passed == 1
    assert report.summary.tests_failed == 1
    assert report.recommendations == (
        "Average calculation time 5.00ms is high - consider optimizing the layout pass",
        "Validation test failed: Boundary Compliance",
    )


@pytest.mark.unit
def test_start_validation_discards_previous_records() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a")
    reporter.add_issue(IssueSeverity.WARNING, "old", node_id="a")
    reporter.mark_lane_overcrowded("Farm")

    reporter.start_validation()
    report = reporter.generate_report()

    assert reporter.get_all_debug_info() == ()
    assert reporter.issues == ()
    assert report.lane_analysis == ()


@pytest.mark.unit
def test_issues_are_carried_into_the_report() -> None:
    reporter = ValidationReporter()
    issue = reporter.add_issue(IssueSeverity.ERROR, "cycle", node_id="b", lane="Farm")

    report = reporter.generate_report()

    assert report.issues == (issue,)
    assert report.to_dict()["issues"] == [
        {"severity": "error", "message": "cycle", "nodeId": "b", "lane": "Farm"}
    ]


@pytest.mark.unit
def test_csv_export_has_fixed_header_and_one_row_per_node() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a", calculated_y=50.0, final_y=65.0, violation=_top_violation("a"))
    _record(reporter, "b", lane="Tower")

    rows = list(csv.reader(io.StringIO(export_csv(reporter.generate_report()))))

    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1] == [
        "a",
        "A",
        "Farm",
        "0",
        "270.00",
        "50.00",
        "270.00",
        "65.00",
        "false",
        "true",
        "0.5000",
    ]
    assert rows[2][0] == "b"
    assert rows[2][8:10] == ["true", "false"]
    assert len(rows) == 3


@pytest.mark.unit
def test_json_export_is_sorted_and_versioned() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a")

    payload = json.loads(export_json(reporter.generate_report()))

    assert payload["schemaVersion"] == 1
    assert payload["summary"]["totalNodes"] == 1
    assert payload["nodeDetails"][0]["boundaryUsed"]["lane"] == "Farm"
    assert list(payload) == sorted(payload)
    assert export_json(reporter.generate_report(), indent=None).count("\n") == 0


@pytest.mark.unit
def test_text_report_lists_lanes_and_recommendations() -> None:
    reporter = ValidationReporter()
    _record(reporter, "a", calculated_y=50.0, final_y=65.0, violation=_top_violation("a"))
    reporter.mark_lane_overcrowded("Farm", "emergency_packing")

    text = render_text(reporter.generate_report())

    assert text.startswith("Swimlane validation report (")
    assert "Nodes: 1 total, 0 within bounds\n" in text
    assert "Boundary violations: 1\n" in text
    assert "- Farm: 1 nodes, 1 violations, overcrowded (emergency_packing)\n" in text
    assert "\nRecommendations:\n- 1 boundary violations in lane Farm" in text


@pytest.mark.unit
def test_text_report_for_an_empty_build() -> None:
    reporter = ValidationReporter()

    text = render_text(reporter.generate_report())

    assert "Lanes:\n- (none)\n" in text
    assert f"- {ALL_CLEAR_RECOMMENDATION}\n" in text
