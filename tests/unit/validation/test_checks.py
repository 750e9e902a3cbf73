"""Unit tests for structural layout checks and the automated test runners."""

from __future__ import annotations

import pytest

from swimlane_layout.domain.models import (
    Edge,
    IssueSeverity,
    Item,
    LaneBoundary,
    Position,
    PositionedNode,
)
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.layout.tiers import BrokenEdge
from swimlane_layout.validation.checks import (
    AUTOMATED_BOUNDARY_TESTS,
    AUTOMATED_PERFORMANCE_TESTS,
    EDGE_CONNECTIONS,
    NO_TREE_ITEMS,
    PREREQUISITE_POSITIONING,
    TIER_ALIGNMENT,
    TIER_SWIMLANE_INTEGRATION,
    run_all_automated_tests,
    run_automated_boundary_tests,
    run_automated_performance_tests,
    validate_boundary_compliance,
    validate_prerequisite_edge_connections,
    validate_prerequisite_positioning,
    validate_tier_alignment_across_lanes,
    validate_tier_based_positioning,
    validate_tier_swimlane_integration,
)

FARM = LaneBoundary(lane="Farm", start_y=25.0, end_y=145.0, buffer=20.0)


def _node(
    node_id: str,
    tier: int,
    *,
    lane: str = "Farm",
    y: float = 85.0,
    x: float | None = None,
) -> PositionedNode:
    return PositionedNode(
        item=Item(id=node_id, name=node_id, category="Actions"),
        position=Position(x=270.0 + 180.0 * tier if x is None else x, y=y),
        lane=lane,
        tier=tier,
    )


@pytest.mark.unit
def test_prerequisite_positioning_accepts_left_to_right_edges() -> None:
    result = validate_prerequisite_positioning(
        [_node("a", 0), _node("b", 1)], [Edge(source="a", target="b")]
    )

    assert result.passed
    assert result.test_name == PREREQUISITE_POSITIONING
    assert result.metrics == {"edges_checked": 1, "violations": 0}


@pytest.mark.unit
def test_prerequisite_positioning_flags_backward_edges() -> None:
    result = validate_prerequisite_positioning(
        [_node("a", 1), _node("b", 0)], [Edge(source="a", target="b")]
    )

    assert not result.passed
    assert result.errors[0].node_id == "b"
    assert result.errors[0].lane == "Farm"
    assert result.recommendations == ("Recompute tiers before positioning nodes",)


@pytest.mark.unit
def test_tier_alignment_tolerates_sub_pixel_drift() -> None:
    aligned = validate_tier_alignment_across_lanes(
        [_node("a", 0), _node("b", 0, lane="Tower", x=270.5)]
    )
    drifted = validate_tier_alignment_across_lanes(
        [_node("a", 0), _node("b", 0, lane="Tower", x=272.0)]
    )

    assert aligned.passed
    assert aligned.test_name == TIER_ALIGNMENT
    assert not drifted.passed
    assert drifted.errors[0].message == (
        "tier 0 x positions differ by 2.00px across lanes Farm, Tower"
    )
    assert drifted.metrics == {"tiers_checked": 1, "misaligned_tiers": 1}


@pytest.mark.unit
def test_edge_connections_grade_each_kind_of_problem() -> None:
    nodes = [_node("a", 0), _node("b", 1)]

    unknown = validate_prerequisite_edge_connections(nodes, [Edge(source="a", target="ghost")])
    broken = validate_prerequisite_edge_connections(
        nodes, [], broken_edges=[BrokenEdge("b", "a", ("a", "b", "a"))]
    )
    missing = validate_prerequisite_edge_connections(
        nodes, [], missing_prerequisites=[("a", "stale")]
    )

    assert not unknown.passed
    assert unknown.errors[0].message == "edge prereq-a-to-ghost references unknown node ghost"
    assert not broken.passed
    assert "a -> b -> a" in broken.errors[0].message
    assert broken.recommendations == ("Remove one prerequisite link from each reported cycle",)
    assert missing.passed
    assert missing.issues[0].severity is IssueSeverity.INFO
    assert missing.test_name == EDGE_CONNECTIONS
    assert missing.metrics["missing_prerequisites"] == 1


@pytest.mark.unit
def test_boundary_compliance_reports_unknown_lanes_and_violations() -> None:
    result = validate_boundary_compliance(
        [_node("ok", 0), _node("lost", 0, lane="Tower"), _node("low", 0, y=130.0)],
        {"Farm": FARM},
    )

    assert not result.passed
    messages = [issue.message for issue in result.issues]
    assert messages == [
        "lane Tower has no boundary",
        "critical bottom violation: y=130.0, limit 105.0",
    ]
    assert result.issues[1].lane == "Farm"
    assert result.metrics == {"nodes_checked": 3, "violations": 2}


@pytest.mark.unit
def test_tier_swimlane_integration_metrics() -> None:
    result = validate_tier_swimlane_integration(
        [_node("a", 0), _node("b", 1, x=455.0)],
        [Edge(source="a", target="b")],
        {"Farm": FARM},
    )

    assert not result.passed
    assert result.test_name == TIER_SWIMLANE_INTEGRATION
    assert result.metrics == {
        "total_tiers": 2,
        "boundary_violations": 0,
        "tier_relationship_violations": 0,
        "positioning_violations": 1,
    }


@pytest.mark.unit
def test_tier_based_positioning_runs_four_checks() -> None:
    results = validate_tier_based_positioning(
        [_node("a", 0), _node("b", 1)], [Edge(source="a", target="b")], {"Farm": FARM}
    )

    assert [result.test_name for result in results] == [
        PREREQUISITE_POSITIONING,
        TIER_ALIGNMENT,
        EDGE_CONNECTIONS,
        TIER_SWIMLANE_INTEGRATION,
    ]
    assert all(result.passed for result in results)


@pytest.mark.unit
@pytest.mark.parametrize(
    "items",
    [[], [Item(id="ore", name="Ore", category="Resources")]],
    ids=["empty", "no-tree-items"],
)
def test_automated_boundary_tests_need_tree_items(items: list[Item]) -> None:
    result = run_automated_boundary_tests(items)

    assert not result.passed
    assert result.test_name == AUTOMATED_BOUNDARY_TESTS
    assert result.errors[0].message == NO_TREE_ITEMS
    assert result.metrics == {"tested_nodes": 0}


@pytest.mark.unit
def test_automated_boundary_tests_pass_on_generated_layout() -> None:
    items = [
        Item(id="a", name="A", category="Actions", source_file="farm_actions.csv"),
        Item(id="b", name="B", category="Unlocks", source_file="mining.csv", prerequisites=("a",)),
    ]

    result = run_automated_boundary_tests(items)

    assert result.passed
    assert result.metrics == {"tested_nodes": 2, "violations": 0}


@pytest.mark.unit
def test_performance_test_fails_over_threshold() -> None:
    items = [Item(id="a", name="A", category="Actions")]

    result = run_automated_performance_tests(items, threshold_ms=-1)

    assert not result.passed
    assert result.test_name == AUTOMATED_PERFORMANCE_TESTS
    assert "exceeds -1ms" in result.errors[0].message
    assert result.metrics["nodes_processed"] == 1
    assert result.recommendations == ("Profile the layout pass on this dataset",)


@pytest.mark.unit
def test_performance_threshold_defaults_to_settings() -> None:
    items = [Item(id="a", name="A", category="Actions")]

    result = run_automated_performance_tests(
        items, settings=LayoutSettings(performance_threshold_ms=120_000)
    )

    assert result.passed
    assert result.metrics["threshold_ms"] == 120_000


@pytest.mark.unit
def test_run_all_automated_tests_order() -> None:
    items = [Item(id="a", name="A", category="Actions")]

    results = run_all_automated_tests(items, LayoutSettings(performance_threshold_ms=120_000))

    assert [result.test_name for result in results] == [
        AUTOMATED_BOUNDARY_TESTS,
        AUTOMATED_PERFORMANCE_TESTS,
    ]
    assert all(result.passed for result in results)
