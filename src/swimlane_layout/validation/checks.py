"""
Structural checks over a finished layout and the automated test runners.

Every check returns a ``ValidationResult``; none of them raise for bad
layouts. A check passes when it produced no error-severity issue.
"""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from swimlane_layout.domain.models import (
    Edge,
    IssueSeverity,
    Item,
    JSONValue,
    LaneBoundary,
    PositionedNode,
    ValidationIssue,
    ValidationResult,
)
from swimlane_layout.layout.boundaries import validate_all_positions
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.layout.tiers import BrokenEdge

PREREQUISITE_POSITIONING = "Prerequisite Positioning"
TIER_ALIGNMENT = "Tier Alignment Across Lanes"
EDGE_CONNECTIONS = "Prerequisite Edge Connections"
TIER_SWIMLANE_INTEGRATION = "Tier Swimlane Integration"
BOUNDARY_COMPLIANCE = "Boundary Compliance"
AUTOMATED_BOUNDARY_TESTS = "Automated Boundary Tests"
AUTOMATED_PERFORMANCE_TESTS = "Automated Performance Tests"

NO_TREE_ITEMS = "No tree items found"


def validate_prerequisite_positioning(
    nodes: Sequence[PositionedNode], edges: Sequence[Edge]
) -> ValidationResult:
    started = time.perf_counter()
    by_id = {node.id: node for node in nodes}
    issues: list[ValidationIssue] = []
    for edge in edges:
        source = by_id.get(edge.source)
        target = by_id.get(edge.target)
        if source is None or target is None:
            continue
        if source.position.x >= target.position.x or source.tier >= target.tier:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=(
                        f"prerequisite {edge.source} (tier {source.tier}) is not to the left "
                        f"of {edge.target} (tier {target.tier})"
                    ),
                    node_id=edge.target,
                    lane=target.lane,
                )
            )
    return _result(
        PREREQUISITE_POSITIONING,
        issues,
        started,
        metrics={"edges_checked": len(edges), "violations": len(issues)},
        recommendations=("Recompute tiers before positioning nodes",) if issues else (),
    )


def validate_tier_alignment_across_lanes(
    nodes: Sequence[PositionedNode], settings: LayoutSettings | None = None
) -> ValidationResult:
    """Nodes sharing a tier must share an x position regardless of lane."""

    started = time.perf_counter()
    settings = settings if settings is not None else LayoutSettings()
    by_tier: dict[int, list[PositionedNode]] = defaultdict(list)
    for node in nodes:
        by_tier[node.tier].append(node)

    issues: list[ValidationIssue] = []
    for tier in sorted(by_tier):
        members = by_tier[tier]
        xs = [node.position.x for node in members]
        spread = max(xs) - min(xs)
        if spread > settings.tier_alignment_tolerance:
            lanes = sorted({node.lane for node in members})
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=(
                        f"tier {tier} x positions differ by {spread:.2f}px across lanes "
                        f"{', '.join(lanes)}"
                    ),
                )
            )
    return _result(
        TIER_ALIGNMENT,
        issues,
        started,
        metrics={"tiers_checked": len(by_tier), "misaligned_tiers": len(issues)},
    )


def validate_prerequisite_edge_connections(
    nodes: Sequence[PositionedNode],
    edges: Sequence[Edge],
    broken_edges: Sequence[BrokenEdge] = (),
    missing_prerequisites: Sequence[tuple[str, str]] = (),
) -> ValidationResult:
    """Edges must connect known nodes; cycle-breaking drops are errors, missing ids are info."""

    started = time.perf_counter()
    known = {node.id for node in nodes}
    issues: list[ValidationIssue] = []
    for edge in edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in known:
                issues.append(
                    ValidationIssue(
                        severity=IssueSeverity.ERROR,
                        message=f"edge {edge.id} references unknown node {endpoint}",
                        node_id=endpoint,
                    )
                )
    for broken in broken_edges:
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=(
                    f"circular prerequisite {broken.prerequisite} of {broken.dependent} "
                    f"ignored ({broken.describe()})"
                ),
                node_id=broken.dependent,
            )
        )
    for dependent, prerequisite in missing_prerequisites:
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.INFO,
                message=f"prerequisite {prerequisite} of {dependent} not found; treated as met",
                node_id=dependent,
            )
        )
    recommendations: list[str] = []
    if broken_edges:
        recommendations.append("Remove one prerequisite link from each reported cycle")
    if missing_prerequisites:
        recommendations.append("Check for stale prerequisite ids in the source data")
    return _result(
        EDGE_CONNECTIONS,
        issues,
        started,
        metrics={
            "edges": len(edges),
            "broken_edges": len(broken_edges),
            "missing_prerequisites": len(missing_prerequisites),
        },
        recommendations=tuple(recommendations),
    )


def validate_boundary_compliance(
    nodes: Sequence[PositionedNode],
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings | None = None,
) -> ValidationResult:
    started = time.perf_counter()
    settings = settings if settings is not None else LayoutSettings()
    issues: list[ValidationIssue] = []
    lanes = {node.id: node.lane for node in nodes}
    for node in nodes:
        if node.lane not in boundaries:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=f"lane {node.lane} has no boundary",
                    node_id=node.id,
                    lane=node.lane,
                )
            )
    for violation in validate_all_positions(nodes, boundaries, settings):
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=(
                    f"{violation.severity.value} {violation.violation_type.value} violation: "
                    f"y={violation.actual_position:.1f}, limit {violation.allowed_boundary:.1f}"
                ),
                node_id=violation.node_id,
                lane=lanes.get(violation.node_id),
            )
        )
    return _result(
        BOUNDARY_COMPLIANCE,
        issues,
        started,
        metrics={"nodes_checked": len(nodes), "violations": len(issues)},
        recommendations=("Review lane height calculations",) if issues else (),
    )


def validate_tier_swimlane_integration(
    nodes: Sequence[PositionedNode],
    edges: Sequence[Edge],
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings | None = None,
) -> ValidationResult:
    """Tier order, x placement and lane containment checked together."""

    started = time.perf_counter()
    settings = settings if settings is not None else LayoutSettings()
    by_id = {node.id: node for node in nodes}
    issues: list[ValidationIssue] = []

    tier_violations = 0
    for edge in edges:
        source = by_id.get(edge.source)
        target = by_id.get(edge.target)
        if source is None or target is None:
            continue
        if source.tier >= target.tier:
            tier_violations += 1
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=f"tier of {edge.source} must be lower than tier of {edge.target}",
                    node_id=edge.target,
                )
            )

    positioning_violations = 0
    for node in nodes:
        expected = settings.lane_start_x + node.tier * settings.tier_width + settings.node_width / 2
        if abs(node.position.x - expected) > settings.tier_alignment_tolerance:
            positioning_violations += 1
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=(
                        f"x={node.position.x:.1f} does not match tier {node.tier} "
                        f"({expected:.1f})"
                    ),
                    node_id=node.id,
                    lane=node.lane,
                )
            )

    boundary_violations = validate_all_positions(nodes, boundaries, settings)
    for violation in boundary_violations:
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"{violation.violation_type.value} boundary exceeded",
                node_id=violation.node_id,
            )
        )

    metrics: dict[str, JSONValue] = {
        "total_tiers": len({node.tier for node in nodes}),
        "boundary_violations": len(boundary_violations),
        "tier_relationship_violations": tier_violations,
        "positioning_violations": positioning_violations,
    }
    return _result(TIER_SWIMLANE_INTEGRATION, issues, started, metrics=metrics)


def validate_tier_based_positioning(
    nodes: Sequence[PositionedNode],
    edges: Sequence[Edge],
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings | None = None,
    *,
    broken_edges: Sequence[BrokenEdge] = (),
    missing_prerequisites: Sequence[tuple[str, str]] = (),
) -> tuple[ValidationResult, ...]:
    return (
        validate_prerequisite_positioning(nodes, edges),
        validate_tier_alignment_across_lanes(nodes, settings),
        validate_prerequisite_edge_connections(
            nodes, edges, broken_edges, missing_prerequisites
        ),
        validate_tier_swimlane_integration(nodes, edges, boundaries, settings),
    )


def run_automated_boundary_tests(
    items: Iterable[Item], settings: LayoutSettings | None = None
) -> ValidationResult:
    from swimlane_layout.layout.builder import build_graph_elements

    started = time.perf_counter()
    materialized = tuple(items)
    if not any(item.is_tree_item for item in materialized):
        return _result(
            AUTOMATED_BOUNDARY_TESTS,
            [ValidationIssue(severity=IssueSeverity.ERROR, message=NO_TREE_ITEMS)],
            started,
            metrics={"tested_nodes": 0},
        )

    graph = build_graph_elements(materialized, settings=_without_checks(settings))
    compliance = validate_boundary_compliance(graph.nodes, graph.lane_boundaries, settings)
    return _result(
        AUTOMATED_BOUNDARY_TESTS,
        list(compliance.issues),
        started,
        metrics={"tested_nodes": len(graph.nodes), "violations": len(compliance.issues)},
        recommendations=("Review lane height calculations",) if compliance.issues else (),
    )


def run_automated_performance_tests(
    items: Iterable[Item],
    threshold_ms: float | None = None,
    settings: LayoutSettings | None = None,
) -> ValidationResult:
    from swimlane_layout.layout.builder import build_graph_elements

    resolved = settings if settings is not None else LayoutSettings()
    limit = threshold_ms if threshold_ms is not None else resolved.performance_threshold_ms
    materialized = tuple(items)

    started = time.perf_counter()
    graph = build_graph_elements(materialized, settings=_without_checks(resolved))
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    issues: list[ValidationIssue] = []
    if elapsed_ms > limit:
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"layout took {elapsed_ms:.1f}ms which exceeds {limit:.0f}ms",
            )
        )
    return _result(
        AUTOMATED_PERFORMANCE_TESTS,
        issues,
        started,
        metrics={
            "validation_time": round(elapsed_ms, 3),
            "nodes_processed": len(graph.nodes),
            "threshold_ms": limit,
        },
        recommendations=("Profile the layout pass on this dataset",) if issues else (),
    )


def run_all_automated_tests(
    items: Iterable[Item], settings: LayoutSettings | None = None
) -> tuple[ValidationResult, ...]:
    materialized = tuple(items)
    return (
        run_automated_boundary_tests(materialized, settings),
        run_automated_performance_tests(materialized, settings=settings),
    )


def _without_checks(settings: LayoutSettings | None) -> LayoutSettings:
    base = settings if settings is not None else LayoutSettings()
    if not base.comprehensive_validation:
        return base
    return replace(base, comprehensive_validation=False)


def _result(
    name: str,
    issues: Sequence[ValidationIssue],
    started: float,
    *,
    metrics: Mapping[str, JSONValue] | None = None,
    recommendations: tuple[str, ...] = (),
) -> ValidationResult:
    return ValidationResult(
        test_name=name,
        passed=not any(issue.severity is IssueSeverity.ERROR for issue in issues),
        duration_ms=(time.perf_counter() - started) * 1000.0,
        issues=tuple(issues),
        metrics=dict(metrics or {}),
        recommendations=recommendations,
    )


__all__ = [
    "AUTOMATED_BOUNDARY_TESTS",
    "AUTOMATED_PERFORMANCE_TESTS",
    "BOUNDARY_COMPLIANCE",
    "EDGE_CONNECTIONS",
    "NO_TREE_ITEMS",
    "PREREQUISITE_POSITIONING",
    "TIER_ALIGNMENT",
    "TIER_SWIMLANE_INTEGRATION",
    "run_all_automated_tests",
    "run_automated_boundary_tests",
    "run_automated_performance_tests",
    "validate_boundary_compliance",
    "validate_prerequisite_edge_connections",
    "validate_prerequisite_positioning",
    "validate_tier_alignment_across_lanes",
    "validate_tier_based_positioning",
    "validate_tier_swimlane_integration",
]
