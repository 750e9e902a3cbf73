"""Unit tests for lane band sizing, stacking, validation, and clamping."""

from __future__ import annotations

import pytest

from swimlane_layout.domain.models import (
    Item,
    LaneBoundary,
    Position,
    PositionedNode,
    ViolationSeverity,
    ViolationType,
)
from swimlane_layout.layout.boundaries import (
    build_lane_boundaries,
    calculate_lane_heights,
    classify_violation_severity,
    enforce_boundary_constraints,
    ordered_lanes,
    required_lane_height,
    valid_y_range,
    validate_all_positions,
    validate_position_within_bounds,
)
from swimlane_layout.layout.settings import LayoutSettings

FARM = LaneBoundary(lane="Farm", start_y=25.0, end_y=145.0, buffer=20.0)
BOUNDARIES = {"Farm": FARM}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("busiest", "height"),
    [(0, 80.0), (1, 80.0), (2, 120.0), (3, 160.0), (10, 440.0)],
)
def test_required_lane_height(busiest: int, height: float) -> None:
    assert required_lane_height(busiest) == height


@pytest.mark.unit
def test_lane_heights_use_busiest_tier_and_cap() -> None:
    counts = {"Farm": {0: 2, 1: 5}, "Tower": {0: 1}, "Empty": {}}

    assert calculate_lane_heights(counts) == {"Farm": 240.0, "Tower": 80.0}
    capped = calculate_lane_heights(counts, LayoutSettings(max_lane_height=200))
    assert capped == {"Farm": 200.0, "Tower": 80.0}


@pytest.mark.unit
def test_cap_below_the_lane_floor_is_raised_to_the_floor() -> None:
    settings = LayoutSettings(max_lane_height=50)

    assert settings.lane_height_cap == 80.0
    assert calculate_lane_heights({"Farm": {0: 1}, "Tower": {0: 4}}, settings) == {
        "Farm": 80.0,
        "Tower": 80.0,
    }


@pytest.mark.unit
def test_lanes_stack_in_canonical_order_with_padding() -> None:
    boundaries = build_lane_boundaries({"Tower": 80.0, "Farm": 120.0, "Combat": 100.0})

    assert list(boundaries) == ["Farm", "Combat", "Tower"]
    assert (boundaries["Farm"].start_y, boundaries["Farm"].end_y) == (25.0, 145.0)
    assert (boundaries["Combat"].start_y, boundaries["Combat"].end_y) == (170.0, 270.0)
    assert (boundaries["Tower"].start_y, boundaries["Tower"].end_y) == (295.0, 375.0)


@pytest.mark.unit
def test_unknown_lanes_sort_after_canonical_lanes() -> None:
    assert ordered_lanes(["Zeta", "General", "Alpha", "Farm"]) == [
        "Farm",
        "General",
        "Alpha",
        "Zeta",
    ]


@pytest.mark.unit
def test_valid_range_collapses_for_thin_bands() -> None:
    assert valid_y_range(FARM) == (65.0, 105.0)
    thin = LaneBoundary(lane="Farm", start_y=0.0, end_y=60.0, buffer=20.0)
    assert valid_y_range(thin) == (30.0, 30.0)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("excess", "severity"),
    [
        (0.5, ViolationSeverity.MINOR),
        (9.99, ViolationSeverity.MINOR),
        (10.0, ViolationSeverity.MAJOR),
        (20.0, ViolationSeverity.MAJOR),
        (20.01, ViolationSeverity.CRITICAL),
    ],
)
def test_violation_severity_thresholds(excess: float, severity: ViolationSeverity) -> None:
    assert classify_violation_severity(excess) is severity


@pytest.mark.unit
def test_position_checks_honor_tolerance() -> None:
    inside = validate_position_within_bounds(Position(0, 104.5), "Farm", BOUNDARIES)
    slack = validate_position_within_bounds(Position(0, 105.9), "Farm", BOUNDARIES)

    assert inside.within_bounds and inside.violation is None
    assert slack.within_bounds


@pytest.mark.unit
def test_top_and_bottom_violations() -> None:
    top = validate_position_within_bounds(Position(0, 50.0), "Farm", BOUNDARIES, node_id="a")
    bottom = validate_position_within_bounds(Position(0, 130.0), "Farm", BOUNDARIES, node_id="b")

    assert top.violation is not None
    assert top.violation.violation_type is ViolationType.TOP
    assert top.violation.severity is ViolationSeverity.MAJOR
    assert top.violation.allowed_boundary == 65.0
    assert top.violation.node_id == "a"
    assert bottom.violation is not None
    assert bottom.violation.violation_type is ViolationType.BOTTOM
    assert bottom.violation.severity is ViolationSeverity.CRITICAL
    assert bottom.violation.excess == 25.0


@pytest.mark.unit
def test_unknown_lane_is_out_of_bounds_without_violation() -> None:
    check = validate_position_within_bounds(Position(0, 80.0), "Tower", BOUNDARIES)

    assert not check.within_bounds
    assert check.violation is None


@pytest.mark.unit
def test_enforce_clamps_y_and_keeps_x() -> None:
    assert enforce_boundary_constraints(Position(290, 10.0), "Farm", BOUNDARIES) == Position(
        290, 65.0
    )
    assert enforce_boundary_constraints(Position(290, 500.0), "Farm", BOUNDARIES) == Position(
        290, 105.0
    )
    inside = Position(290, 80.0)
    assert enforce_boundary_constraints(inside, "Farm", BOUNDARIES) is inside
    assert enforce_boundary_constraints(inside, "Tower", BOUNDARIES) is inside


@pytest.mark.unit
def test_validate_all_positions_skips_unknown_lanes() -> None:
    def node(node_id: str, lane: str, y: float) -> PositionedNode:
        return PositionedNode(
            item=Item(id=node_id, name=node_id, category="Actions"),
            position=Position(270.0, y),
            lane=lane,
            tier=0,
        )

    violations = validate_all_positions(
        [node("ok", "Farm", 80.0), node("low", "Farm", 200.0), node("lost", "Tower", 0.0)],
        BOUNDARIES,
    )

    assert [violation.node_id for violation in violations] == ["low"]
