"""
File: src/swimlane_layout/layout/builder.py

Last updated: 2026-10-19

Purpose
- Turn an ordered collection of items into a positioned swimlane graph plus
  the reports describing everything the build had to work around.

What should be included in this file
- ``build_graph_elements``: the single synchronous build pass.
- ``GraphElements``: the renderer-facing result and its dict payload.
- ``LayoutSession``: explicit per-run owner of settings and the optional
  debug monitor.

Functional requirements
- Pipeline order: tree filter, duplicate ids, lane assignment, tiers,
  lane/tier buckets, lane-by-lane placement with overcrowding recovery,
  boundary enforcement, edges, structural checks, reports.
- Never raises for item content. Every workaround lands in the error
  recovery report and the validation report.
- Node order is (tier, input order). Edge order is node order, then
  prerequisite list order.

Non-functional requirements
- Deterministic positions for identical input.
- No module-level mutable state. A monitor persists only if the caller
  passes the same instance to several builds.
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Final

import structlog

from swimlane_layout.domain.models import (
    BoundaryViolation,
    CalculationStep,
    Edge,
    IssueSeverity,
    Item,
    JSONValue,
    LaneBoundary,
    Position,
    PositionedNode,
    ValidationResult,
    ViolationSeverity,
    canonical_json,
    slugify,
)
from swimlane_layout.layout.boundaries import (
    calculate_lane_heights,
    ordered_lanes,
    validate_position_within_bounds,
)
from swimlane_layout.layout.lanes import LaneDecision, explain_lane
from swimlane_layout.layout.recovery import (
    ErrorKind,
    ErrorRecoveryReport,
    ErrorSeverity,
    RecoveryEngine,
)
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.layout.spacing import DistributionRequest, centered_pitch, distribute
from swimlane_layout.layout.tiers import PrerequisiteGraph, TierAssignment
from swimlane_layout.observability.logging import correlation_scope
from swimlane_layout.validation.checks import (
    validate_boundary_compliance,
    validate_tier_based_positioning,
)
from swimlane_layout.validation.reporter import ValidationReport, ValidationReporter

if TYPE_CHECKING:
    from swimlane_layout.observability.monitor import (
        AssignmentStatistics,
        DebugMonitor,
        VisualBoundaryElement,
    )

PLACEHOLDER_ID_PREFIX: Final[str] = "item-"
_OVERFLOW: Final[str] = "overflow"
_MATERIAL_GAIN_KEYS: Final[tuple[str, ...]] = ("materialsGain", "materials_gain")
_MATERIAL_COST_KEYS: Final[tuple[str, ...]] = ("materialsCost", "materials_cost")

_VIOLATION_TO_ERROR: Final[dict[ViolationSeverity, ErrorSeverity]] = {
    ViolationSeverity.MINOR: ErrorSeverity.LOW,
    ViolationSeverity.MAJOR: ErrorSeverity.MEDIUM,
    ViolationSeverity.CRITICAL: ErrorSeverity.HIGH,
}


@dataclass(frozen=True, slots=True)
class MaterialEdge:
    """Producer to consumer link for a shared material."""

    source: str
    target: str
    material: str

    @property
    def id(self) -> str:
        return f"mat-{self.source}-to-{self.target}"

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "data": {
                "id": self.id,
                "source": self.source,
                "target": self.target,
                "type": "material",
                "material": self.material,
            },
            "classes": "edge-material",
        }


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    total_tests: int
    passed_tests: int
    failed_tests: int
    errors: int
    warnings: int

    @property
    def all_passed(self) -> bool:
        return self.failed_tests == 0

    @classmethod
    def from_results(cls, results: Sequence[ValidationResult]) -> ValidationSummary:
        passed = sum(1 for result in results if result.passed)
        errors = sum(len(result.errors) for result in results)
        warnings = sum(
            1
            for result in results
            for issue in result.issues
            if issue.severity is IssueSeverity.WARNING
        )
        return cls(
            total_tests=len(results),
            passed_tests=passed,
            failed_tests=len(results) - passed,
            errors=errors,
            warnings=warnings,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "totalTests": self.total_tests,
            "passedTests": self.passed_tests,
            "failedTests": self.failed_tests,
            "errors": self.errors,
            "warnings": self.warnings,
            "allPassed": self.all_passed,
        }


@dataclass(frozen=True, slots=True)
class GraphElements:
    nodes: tuple[PositionedNode, ...]
    edges: tuple[Edge, ...]
    lane_heights: Mapping[str, float]
    lane_boundaries: Mapping[str, LaneBoundary]
    validation_results: tuple[ValidationResult, ...]
    validation_summary: ValidationSummary
    comprehensive_report: ValidationReport
    error_recovery_report: ErrorRecoveryReport
    tier_assignment: TierAssignment
    lane_decisions: Mapping[str, LaneDecision] = field(default_factory=dict)
    material_edges: tuple[MaterialEdge, ...] = ()
    visual_boundaries: tuple[VisualBoundaryElement, ...] = ()
    build_id: str = ""

    def node(self, node_id: str) -> PositionedNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def layout_dict(self) -> dict[str, JSONValue]:
        """Geometry only: nodes, edges and lanes. Stable across identical builds."""

        return {
            "nodes": [_node_payload(node) for node in self.nodes],
            "edges": [_edge_payload(edge) for edge in self.edges],
            "laneHeights": dict(self.lane_heights),
            "laneBoundaries": {
                lane: boundary.to_dict() for lane, boundary in self.lane_boundaries.items()
            },
        }

    def to_dict(self) -> dict[str, JSONValue]:
        """Full renderer payload including every report."""

        payload = self.layout_dict()
        payload.update(
            {
                "buildId": self.build_id,
                "validationResults": [result.to_dict() for result in self.validation_results],
                "validationSummary": self.validation_summary.to_dict(),
                "comprehensiveReport": self.comprehensive_report.to_dict(),
                "errorRecoveryReport": self.error_recovery_report.to_dict(),
            }
        )
        if self.material_edges:
            payload["materialEdges"] = [edge.to_dict() for edge in self.material_edges]
        if self.visual_boundaries:
            payload["visualBoundaries"] = [
                element.to_dict() for element in self.visual_boundaries
            ]
        return payload


@dataclass(frozen=True, slots=True)
class TreeItems:
    """Tree items that take part in a build, each with its lane decision."""

    items: tuple[Item, ...]
    decisions: Mapping[str, LaneDecision]
    duplicates: tuple[Item, ...] = ()
    invalid: tuple[str, ...] = ()

    def decision_of(self, item: Item) -> LaneDecision:
        return self.decisions[item.id]

    def lane_of(self, item: Item) -> str:
        return self.decisions[item.id].lane


def collect_tree_items(items: Iterable[Item]) -> TreeItems:
    """Keep ``Actions`` and ``Unlocks`` items, first occurrence per id.

    An item with an empty id is keyed as ``item-<index>``, ``index`` being its
    position in ``items``. Its lane is decided before the key is assigned, so
    it still falls back to the default lane. Later items repeating a kept id
    are returned in ``duplicates`` and take no further part.
    """

    kept: list[Item] = []
    decisions: dict[str, LaneDecision] = {}
    duplicates: list[Item] = []
    invalid: list[str] = []
    for index, item in enumerate(items):
        if not item.is_tree_item:
            continue
        decision = explain_lane(item)
        keyed = item if item.id else replace(item, id=f"{PLACEHOLDER_ID_PREFIX}{index}")
        if keyed.id in decisions:
            duplicates.append(keyed)
            continue
        decisions[keyed.id] = decision
        kept.append(keyed)
        if not item.id or not item.name:
            invalid.append(keyed.id)
    return TreeItems(
        items=tuple(kept),
        decisions=decisions,
        duplicates=tuple(duplicates),
        invalid=tuple(invalid),
    )


@dataclass(slots=True)
class _NodeTrace:
    calculated: Position
    steps: list[CalculationStep]
    elapsed_ms: float


def build_graph_elements(
    items: Iterable[Item],
    *,
    settings: LayoutSettings | None = None,
    monitor: DebugMonitor | None = None,
    reporter: ValidationReporter | None = None,
    logger: Any | None = None,
    include_material_edges: bool = False,
) -> GraphElements:
    """Lay out ``items`` as a swimlane graph.

    Parameters
    ----------
    items:
        Items in upstream order. Only ``Actions`` and ``Unlocks`` are kept.
    settings:
        Layout tunables; defaults to the built-in geometry.
    monitor:
        Optional debug session. It accumulates across calls until cleared.
    reporter:
        Optional reporter; it is reset at the start of the build.
    logger:
        structlog-compatible logger.
    include_material_edges:
        Also emit producer to consumer material links.
    """

    materialized = tuple(items)
    build_id = _build_id(materialized)
    with correlation_scope(build_id=build_id):
        return _Build(
            settings=settings if settings is not None else LayoutSettings(),
            monitor=monitor,
            reporter=reporter if reporter is not None else ValidationReporter(),
            logger=logger if logger is not None else structlog.get_logger(__name__),
        ).run(materialized, build_id=build_id, include_material_edges=include_material_edges)


class _Build:
    """State for one build pass; discarded when the pass returns."""

    def __init__(
        self,
        *,
        settings: LayoutSettings,
        monitor: DebugMonitor | None,
        reporter: ValidationReporter,
        logger: Any,
    ) -> None:
        self._settings = settings
        self._monitor = monitor
        self._reporter = reporter
        self._logger = logger
        self._recovery = RecoveryEngine(settings, logger=logger)
        self._traces: dict[str, _NodeTrace] = {}
        self._step_counter: dict[str, int] = {}

    def run(
        self,
        items: Sequence[Item],
        *,
        build_id: str,
        include_material_edges: bool,
    ) -> GraphElements:
        started = time.perf_counter()
        settings = self._settings
        self._reporter.start_validation()

        tree = collect_tree_items(items)
        self._record_input_problems(tree)
        unique = list(tree.items)
        decisions = dict(tree.decisions)

        graph = PrerequisiteGraph(unique)
        assignment = graph.compute_tiers()
        self._record_tier_problems(assignment)

        ordered = [
            item
            for _, item in sorted(
                enumerate(unique), key=lambda pair: (assignment.tier_of(pair[1].id), pair[0])
            )
        ]
        buckets: dict[str, dict[int, list[Item]]] = {}
        for item in ordered:
            lane = decisions[item.id].lane
            buckets.setdefault(lane, {}).setdefault(assignment.tier_of(item.id), []).append(item)
            self._step(
                item.id,
                "Assign lane",
                {"sourceFile": item.source_file, "categories": list(item.categories)},
                {"lane": lane, "rule": decisions[item.id].rule.value},
            )
            self._step(
                item.id,
                "Compute tier",
                {"prerequisites": list(graph.prerequisites_of(item.id))},
                {"tier": assignment.tier_of(item.id)},
            )

        tier_counts = {
            lane: {tier: len(members) for tier, members in tiers.items()}
            for lane, tiers in buckets.items()
        }
        initial_heights = calculate_lane_heights(tier_counts, settings)

        boundaries: dict[str, LaneBoundary] = {}
        placed_by_lane: dict[str, list[PositionedNode]] = {}
        cursor = settings.lane_padding
        for lane in ordered_lanes(buckets):
            boundary = LaneBoundary(
                lane=lane,
                start_y=cursor,
                end_y=cursor + initial_heights[lane],
                buffer=settings.lane_buffer,
            )
            placed, boundary = self._place_lane(lane, buckets[lane], boundary)
            boundaries[lane] = boundary
            placed_by_lane[lane] = placed
            cursor = boundary.end_y + settings.lane_padding

        final_by_id: dict[str, PositionedNode] = {}
        for placed in placed_by_lane.values():
            for node in placed:
                final_by_id[node.id] = self._enforce(node, boundaries)
        nodes = tuple(final_by_id[item.id] for item in ordered)

        edges = graph.edges(assignment)
        material_edges = _material_edges(ordered) if include_material_edges else ()

        results: tuple[ValidationResult, ...] = ()
        if settings.comprehensive_validation:
            results = (
                *validate_tier_based_positioning(
                    nodes,
                    edges,
                    boundaries,
                    settings,
                    broken_edges=assignment.broken_edges,
                    missing_prerequisites=assignment.missing_prerequisites,
                ),
                validate_boundary_compliance(nodes, boundaries, settings),
            )

        visual: tuple[VisualBoundaryElement, ...] = ()
        if self._monitor is not None:
            self._monitor.record_visual_boundary_data(boundaries, assignment.max_tier)
            if self._monitor.get_config().enable_assignment_stats:
                self._monitor.generate_assignment_statistics(
                    unique, assign=tree.lane_of, explain=tree.decision_of
                )
            visual = self._monitor.generate_visual_boundary_elements()

        report = self._reporter.generate_report(results)
        recovery_report = self._recovery.generate_report()
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self._logger.info(
            "layout_built",
            nodes=len(nodes),
            edges=len(edges),
            lanes=len(boundaries),
            max_tier=assignment.max_tier,
            recovered_errors=recovery_report.total_errors,
            duration_ms=round(elapsed_ms, 3),
        )

        return GraphElements(
            nodes=nodes,
            edges=edges,
            lane_heights={lane: boundary.height for lane, boundary in boundaries.items()},
            lane_boundaries=boundaries,
            validation_results=results,
            validation_summary=ValidationSummary.from_results(results),
            comprehensive_report=report,
            error_recovery_report=recovery_report,
            tier_assignment=assignment,
            lane_decisions=decisions,
            material_edges=material_edges,
            visual_boundaries=visual,
            build_id=build_id,
        )

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def _record_input_problems(self, tree: TreeItems) -> None:
        for item in tree.duplicates:
            message = f"duplicate item id {item.id!r} ignored"
            self._recovery.record_error(
                ErrorKind.DUPLICATE_ID, ErrorSeverity.LOW, message, node_id=item.id
            )
            self._reporter.add_issue(IssueSeverity.WARNING, message, node_id=item.id)

        invalid = set(tree.invalid)
        for item in tree.items:
            decision = tree.decision_of(item)
            if item.id in invalid:
                message = "item is missing an id or name"
                self._recovery.record_error(
                    ErrorKind.INVALID_ITEM, ErrorSeverity.LOW, message, node_id=item.id
                )
                self._reporter.add_issue(IssueSeverity.WARNING, message, node_id=item.id)
            if self._monitor is not None:
                self._monitor.log_lane_assignment(item, decision.lane, decision.reason)

    def _record_tier_problems(self, assignment: TierAssignment) -> None:
        for dependent, prerequisite in assignment.missing_prerequisites:
            self._recovery.record_error(
                ErrorKind.MISSING_PREREQUISITE,
                ErrorSeverity.LOW,
                f"prerequisite {prerequisite!r} not found; treated as satisfied",
                node_id=dependent,
            )
        for broken in assignment.broken_edges:
            message = f"circular prerequisite ignored: {broken.describe()}"
            self._recovery.record_error(
                ErrorKind.CIRCULAR_PREREQUISITE,
                ErrorSeverity.HIGH,
                message,
                node_id=broken.dependent,
            )
            self._reporter.add_issue(IssueSeverity.ERROR, message, node_id=broken.dependent)
            self._logger.warning(
                "prerequisite_cycle_broken",
                dependent=broken.dependent,
                prerequisite=broken.prerequisite,
                cycle=list(broken.cycle),
            )

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def _place_lane(
        self,
        lane: str,
        tiers: Mapping[int, Sequence[Item]],
        boundary: LaneBoundary,
    ) -> tuple[list[PositionedNode], LaneBoundary]:
        settings = self._settings
        placed: list[PositionedNode] = []
        overflow = False

        for tier in sorted(tiers):
            bucket = tiers[tier]
            started = time.perf_counter()
            x = settings.lane_start_x + tier * settings.tier_width + settings.node_width / 2
            distribution = distribute(DistributionRequest(len(bucket), boundary, settings))
            if distribution is None:
                overflow = True
                centers = centered_pitch(
                    len(bucket), boundary.center_y, settings.min_node_spacing
                )
                strategy = _OVERFLOW
            else:
                centers = distribution.centers
                strategy = distribution.strategy.value
            share_ms = (time.perf_counter() - started) * 1000.0 / len(bucket)

            for index, (item, y) in enumerate(zip(bucket, centers, strict=True)):
                position = Position(x=x, y=y)
                self._step(item.id, "Compute x from tier", {"tier": tier}, {"x": x})
                self._step(
                    item.id,
                    "Distribute within lane tier bucket",
                    {"bucketSize": len(bucket), "index": index, "centerY": boundary.center_y},
                    {"y": y, "strategy": strategy},
                )
                self._traces[item.id].calculated = position
                self._traces[item.id].elapsed_ms += share_ms
                placed.append(PositionedNode(item=item, position=position, lane=lane, tier=tier))

        analysis = self._recovery.analyze_lane_overcrowding(lane, placed, boundary)
        if not (analysis.is_overcrowded or overflow):
            return placed, boundary

        outcome = self._recovery.recover_overcrowded_lane(analysis, placed)
        self._reporter.mark_lane_overcrowded(lane, outcome.strategy.value)
        severity = IssueSeverity.ERROR if outcome.is_emergency else IssueSeverity.WARNING
        self._reporter.add_issue(
            severity,
            (
                f"lane {lane} overcrowded (ratio {analysis.overcrowding_ratio:.2f}, "
                f"{analysis.severity.value}); applied {outcome.strategy.value}"
            ),
            lane=lane,
        )
        for context in outcome.contexts:
            self._step(
                context.node_id,
                "Overcrowding recovery",
                {"y": context.original_position.y, "ratio": round(analysis.overcrowding_ratio, 4)},
                {"y": context.recovered_position.y, "strategy": context.recovery_strategy},
            )
            self._traces[context.node_id].calculated = context.recovered_position
        return list(outcome.nodes), outcome.boundary

    def _enforce(
        self, node: PositionedNode, boundaries: Mapping[str, LaneBoundary]
    ) -> PositionedNode:
        started = time.perf_counter()
        settings = self._settings
        trace = self._traces[node.id]
        check = validate_position_within_bounds(
            node.position, node.lane, boundaries, settings, node_id=node.id
        )
        final = node.position
        violation: BoundaryViolation | None = check.violation
        if not check.within_bounds:
            final, context = self._recovery.handle_boundary_enforcement_failure(
                node.position, node.lane, boundaries, node.id
            )
            severity = (
                _VIOLATION_TO_ERROR[violation.severity]
                if violation is not None
                else ErrorSeverity.MEDIUM
            )
            self._recovery.record_error(
                ErrorKind.BOUNDARY_VIOLATION,
                severity,
                "; ".join(context.applied_adjustments),
                node_id=node.id,
                lane=node.lane,
            )
        self._step(
            node.id,
            "Enforce lane boundary",
            {"y": node.position.y},
            {"y": final.y, "withinBounds": check.within_bounds},
        )
        trace.elapsed_ms += (time.perf_counter() - started) * 1000.0

        enforced = validate_position_within_bounds(
            final, node.lane, boundaries, settings, node_id=node.id
        )
        result = replace(node, position=final, within_bounds=enforced.within_bounds)
        self._reporter.record_position_calculation(
            node_id=node.id,
            node_name=node.item.name,
            lane=node.lane,
            tier=node.tier,
            calculated_position=trace.calculated,
            final_position=final,
            boundary=boundaries.get(node.lane),
            within_bounds=check.within_bounds,
            calculation_time_ms=trace.elapsed_ms,
            steps=trace.steps,
            violation=violation,
        )
        if self._monitor is not None:
            self._monitor.log_position_calculation(
                node.id, node.lane, node.tier, trace.calculated, final, trace.elapsed_ms
            )
        if settings.detailed_logging:
            self._logger.debug(
                "node_positioned",
                node_id=node.id,
                lane=node.lane,
                tier=node.tier,
                x=final.x,
                y=final.y,
                adjusted=trace.calculated != final,
            )
        return result

    def _step(
        self, node_id: str, description: str, given: JSONValue, produced: JSONValue
    ) -> None:
        trace = self._traces.get(node_id)
        if trace is None:
            trace = _NodeTrace(calculated=Position(0.0, 0.0), steps=[], elapsed_ms=0.0)
            self._traces[node_id] = trace
        trace.steps.append(
            CalculationStep(
                step=len(trace.steps) + 1,
                description=description,
                input=given,
                output=produced,
                timestamp=time.time(),
            )
        )


class LayoutSession:
    """Explicit owner of settings and debug state for a series of builds.

    Each ``build`` is independent except for the optional monitor, which
    aggregates across builds until ``reset`` is called.
    """

    def __init__(
        self,
        settings: LayoutSettings | None = None,
        *,
        monitor: DebugMonitor | None = None,
        logger: Any | None = None,
    ) -> None:
        self.settings = settings if settings is not None else LayoutSettings()
        self.monitor = monitor
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self.builds = 0

    @classmethod
    def from_config(
        cls, config: Mapping[str, object], *, logger: Any | None = None
    ) -> LayoutSession:
        from swimlane_layout.observability.monitor import DebugConfig, DebugMonitor

        settings = LayoutSettings.from_config(config)
        monitor = DebugMonitor(DebugConfig.from_config(config), settings=settings, logger=logger)
        return cls(settings, monitor=monitor, logger=logger)

    def build(
        self, items: Iterable[Item], *, include_material_edges: bool = False
    ) -> GraphElements:
        self.builds += 1
        return build_graph_elements(
            items,
            settings=self.settings,
            monitor=self.monitor,
            logger=self._logger,
            include_material_edges=include_material_edges,
        )

    def assignment_statistics(self, items: Iterable[Item]) -> AssignmentStatistics:
        """Lane tallies for ``items`` using the same filtering and keying as ``build``."""

        if self.monitor is None:
            raise RuntimeError("assignment statistics need a debug monitor")
        tree = collect_tree_items(items)
        return self.monitor.generate_assignment_statistics(
            tree.items, assign=tree.lane_of, explain=tree.decision_of
        )

    def run_automated_tests(self, items: Iterable[Item]) -> tuple[ValidationResult, ...]:
        from swimlane_layout.validation.checks import run_all_automated_tests

        return run_all_automated_tests(items, self.settings)

    def reset(self) -> None:
        self.builds = 0
        if self.monitor is not None:
            self.monitor.clear_monitoring_data()


def _build_id(items: Sequence[Item]) -> str:
    digest = hashlib.sha256(
        canonical_json([item.to_dict() for item in items]).encode("utf-8")
    ).hexdigest()
    return f"build-{digest[:12]}"


def _node_payload(node: PositionedNode) -> dict[str, JSONValue]:
    item = node.item
    category = item.categories[0] if item.categories else "general"
    feature = item.game_feature or node.lane
    classes = " ".join(
        (
            "game-node",
            f"lane-{slugify(node.lane)}",
            f"tier-{node.tier}",
            f"category-{slugify(category)}",
            f"feature-{slugify(feature)}",
        )
    )
    return {
        "data": {
            "id": item.id,
            "label": item.name or item.id,
            "swimLane": node.lane,
            "tier": node.tier,
            "category": category,
            "prerequisites": list(item.prerequisites),
        },
        "position": node.position.to_dict(),
        "classes": classes,
    }


def _edge_payload(edge: Edge) -> dict[str, JSONValue]:
    return {
        "data": {
            "id": edge.id,
            "source": edge.source,
            "target": edge.target,
            "type": "prerequisite",
        },
        "classes": "edge-prerequisite",
    }


def _material_edges(items: Sequence[Item]) -> tuple[MaterialEdge, ...]:
    producers: dict[str, list[str]] = {}
    for item in items:
        for material in _material_names(item, _MATERIAL_GAIN_KEYS):
            producers.setdefault(material, []).append(item.id)

    edges: list[MaterialEdge] = []
    for consumer in items:
        for material in _material_names(consumer, _MATERIAL_COST_KEYS):
            for producer in producers.get(material, ()):
                if producer == consumer.id:
                    continue
                edges.append(MaterialEdge(source=producer, target=consumer.id, material=material))
    return tuple(edges)


def _material_names(item: Item, keys: tuple[str, ...]) -> tuple[str, ...]:
    for key in keys:
        value = item.attributes.get(key)
        if isinstance(value, Mapping):
            return tuple(str(name) for name in value)
    return ()


__all__ = [
    "GraphElements",
    "LayoutSession",
    "MaterialEdge",
    "PLACEHOLDER_ID_PREFIX",
    "TreeItems",
    "ValidationSummary",
    "build_graph_elements",
    "collect_tree_items",
]
