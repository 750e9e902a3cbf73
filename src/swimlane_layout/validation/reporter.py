"""
Per-node calculation traces aggregated into a validation report.

A ``ValidationReporter`` is created fresh for every build. It stores one
``NodeDebugInfo`` per positioned node and turns them into a
``ValidationReport`` with a summary, per-lane analysis and threshold-driven
recommendations. Reports export as a structured dict, JSON, a CSV table, or a
plain-text summary rendered with Jinja2.
"""

from __future__ import annotations

import csv
import io
import json
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Final

import structlog
from jinja2 import Environment, StrictUndefined

from swimlane_layout.constants import PERFORMANCE_THRESHOLD_MS, REPORT_SCHEMA_VERSION
from swimlane_layout.domain.models import (
    BoundaryViolation,
    CalculationStep,
    IssueSeverity,
    JSONValue,
    LaneBoundary,
    Position,
    ValidationIssue,
    ValidationResult,
)
from swimlane_layout.layout.boundaries import ordered_lanes

CSV_HEADER: Final[tuple[str, ...]] = (
    "Node ID",
    "Node Name",
    "Lane",
    "Tier",
    "Calculated X",
    "Calculated Y",
    "Final X",
    "Final Y",
    "Within Bounds",
    "Adjustment Applied",
    "Calculation Time (ms)",
)

_HIGH_ADJUSTMENT_RATE: Final[float] = 0.2
# Average per-node budget derived from the whole-build threshold.
_SLOW_NODE_MS: Final[float] = PERFORMANCE_THRESHOLD_MS / 1000
ALL_CLEAR_RECOMMENDATION: Final[str] = "All nodes positioned correctly within lane boundaries"

_TEXT_TEMPLATE: Final[str] = """\
Swimlane validation report ({{ report.timestamp }})
Nodes: {{ summary.total_nodes }} total, {{ summary.validated_nodes }} within bounds
Adjustments: {{ summary.adjustments_made }}
Boundary violations: {{ summary.boundary_violations }}
Average calculation time: {{ "%.3f"|format(summary.average_calculation_time_ms) }} ms
Tests: {{ summary.tests_passed }} passed, {{ summary.tests_failed }} failed

Lanes:
{% for lane in report.lane_analysis %}
- {{ lane.lane }}: {{ lane.node_count }} nodes, {{ lane.violation_count }} violations\
{% if lane.overcrowded %}, overcrowded{% if lane.recovery_strategy %} ({{ lane.recovery_strategy }}){% endif %}{% endif %}

{% else %}
- (none)
{% endfor %}

Recommendations:
{% for line in report.recommendations %}
- {{ line }}
{% endfor %}
"""


@dataclass(frozen=True, slots=True)
class NodeDebugInfo:
    node_id: str
    node_name: str
    lane: str
    tier: int
    calculation_steps: tuple[CalculationStep, ...]
    calculated_position: Position
    final_position: Position
    boundary: LaneBoundary | None
    within_bounds: bool
    calculation_time_ms: float
    adjustment_reason: str | None = None
    boundary_violation: BoundaryViolation | None = None

    @property
    def adjustment_applied(self) -> bool:
        return self.calculated_position != self.final_position

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "nodeId": self.node_id,
            "nodeName": self.node_name,
            "lane": self.lane,
            "tier": self.tier,
            "calculationSteps": [step.to_dict() for step in self.calculation_steps],
            "calculatedPosition": self.calculated_position.to_dict(),
            "finalPosition": self.final_position.to_dict(),
            "boundaryUsed": self.boundary.to_dict() if self.boundary is not None else None,
            "withinBounds": self.within_bounds,
            "adjustmentApplied": self.adjustment_applied,
            "adjustmentReason": self.adjustment_reason,
            "boundaryViolation": (
                self.boundary_violation.to_dict() if self.boundary_violation is not None else None
            ),
            "calculationTime": round(self.calculation_time_ms, 4),
        }


@dataclass(frozen=True, slots=True)
class LaneAnalysis:
    lane: str
    node_count: int
    violation_count: int
    adjustment_count: int
    overcrowded: bool
    recovery_strategy: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "lane": self.lane,
            "nodeCount": self.node_count,
            "violationCount": self.violation_count,
            "adjustmentCount": self.adjustment_count,
            "overcrowded": self.overcrowded,
            "recoveryStrategy": self.recovery_strategy,
        }


@dataclass(frozen=True, slots=True)
class ReportSummary:
    total_nodes: int
    validated_nodes: int
    adjustments_made: int
    boundary_violations: int
    average_calculation_time_ms: float
    tests_passed: int = 0
    tests_failed: int = 0

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "totalNodes": self.total_nodes,
            "validatedNodes": self.validated_nodes,
            "adjustmentsMade": self.adjustments_made,
            "boundaryViolations": self.boundary_violations,
            "averageCalculationTime": round(self.average_calculation_time_ms, 4),
            "testsPassed": self.tests_passed,
            "testsFailed": self.tests_failed,
        }


@dataclass(frozen=True, slots=True)
class ValidationReport:
    timestamp: str
    summary: ReportSummary
    lane_analysis: tuple[LaneAnalysis, ...]
    recommendations: tuple[str, ...]
    node_details: tuple[NodeDebugInfo, ...]
    test_results: tuple[ValidationResult, ...] = ()
    issues: tuple[ValidationIssue, ...] = ()

    def lane(self, name: str) -> LaneAnalysis | None:
        for analysis in self.lane_analysis:
            if analysis.lane == name:
                return analysis
        return None

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "schemaVersion": REPORT_SCHEMA_VERSION,
            "timestamp": self.timestamp,
            "summary": self.summary.to_dict(),
            "laneAnalysis": [lane.to_dict() for lane in self.lane_analysis],
            "recommendations": list(self.recommendations),
            "nodeDetails": [node.to_dict() for node in self.node_details],
            "testResults": [result.to_dict() for result in self.test_results],
            "issues": [issue.to_dict() for issue in self.issues],
        }


class ValidationReporter:
    """Collects per-node debug records for one build."""

    def __init__(self, *, logger: Any | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._nodes: dict[str, NodeDebugInfo] = {}
        self._overcrowded: dict[str, str | None] = {}
        self._issues: list[ValidationIssue] = []
        self._started_at: float | None = None

    def start_validation(self) -> None:
        self.clear_debug_info()
        self._started_at = time.time()
        self._logger.debug("validation_started")

    def record_position_calculation(
        self,
        *,
        node_id: str,
        node_name: str,
        lane: str,
        tier: int,
        calculated_position: Position,
        final_position: Position,
        boundary: LaneBoundary | None,
        within_bounds: bool,
        calculation_time_ms: float,
        steps: Sequence[CalculationStep] = (),
        violation: BoundaryViolation | None = None,
    ) -> NodeDebugInfo:
        reason: str | None = None
        if calculated_position != final_position:
            reason = (
                f"Y position adjusted from {calculated_position.y:.1f} "
                f"to {final_position.y:.1f}"
            )
        info = NodeDebugInfo(
            node_id=node_id,
            node_name=node_name,
            lane=lane,
            tier=tier,
            calculation_steps=tuple(steps),
            calculated_position=calculated_position,
            final_position=final_position,
            boundary=boundary,
            within_bounds=within_bounds,
            calculation_time_ms=max(calculation_time_ms, 0.0),
            adjustment_reason=reason,
            boundary_violation=violation,
        )
        self._nodes[node_id] = info
        return info

    def mark_lane_overcrowded(self, lane: str, strategy: str | None = None) -> None:
        self._overcrowded[lane] = strategy

    def add_issue(
        self,
        severity: IssueSeverity,
        message: str,
        *,
        node_id: str | None = None,
        lane: str | None = None,
    ) -> ValidationIssue:
        issue = ValidationIssue(severity=severity, message=message, node_id=node_id, lane=lane)
        self._issues.append(issue)
        return issue

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return tuple(self._issues)

    def get_node_debug_info(self, node_id: str) -> NodeDebugInfo | None:
        return self._nodes.get(node_id)

    def get_all_debug_info(self) -> tuple[NodeDebugInfo, ...]:
        return tuple(self._nodes.values())

    def clear_debug_info(self) -> None:
        self._nodes.clear()
        self._overcrowded.clear()
        self._issues.clear()

    def generate_report(
        self, test_results: Iterable[ValidationResult] = ()
    ) -> ValidationReport:
        results = tuple(test_results)
        nodes = tuple(self._nodes.values())

        total = len(nodes)
        validated = sum(1 for node in nodes if node.within_bounds)
        adjustments = sum(1 for node in nodes if node.adjustment_applied)
        violations = sum(1 for node in nodes if node.boundary_violation is not None)
        average = sum(node.calculation_time_ms for node in nodes) / total if total else 0.0
        passed = sum(1 for result in results if result.passed)

        summary = ReportSummary(
            total_nodes=total,
            validated_nodes=validated,
            adjustments_made=adjustments,
            boundary_violations=violations,
            average_calculation_time_ms=average,
            tests_passed=passed,
            tests_failed=len(results) - passed,
        )
        lanes = self._analyze_lanes(nodes)
        recommendations = self._recommend(summary, lanes, results)
        timestamp = datetime.fromtimestamp(self._started_at or time.time(), tz=UTC)

        report = ValidationReport(
            timestamp=timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            summary=summary,
            lane_analysis=lanes,
            recommendations=recommendations,
            node_details=nodes,
            test_results=results,
            issues=tuple(self._issues),
        )
        self._logger.info(
            "validation_report_generated",
            total_nodes=total,
            adjustments=adjustments,
            boundary_violations=violations,
            tests_failed=summary.tests_failed,
        )
        return report

    def _analyze_lanes(self, nodes: Sequence[NodeDebugInfo]) -> tuple[LaneAnalysis, ...]:
        by_lane: dict[str, list[NodeDebugInfo]] = {}
        for node in nodes:
            by_lane.setdefault(node.lane, []).append(node)
        for lane in self._overcrowded:
            by_lane.setdefault(lane, [])

        analysis: list[LaneAnalysis] = []
        for lane in ordered_lanes(by_lane):
            members = by_lane[lane]
            analysis.append(
                LaneAnalysis(
                    lane=lane,
                    node_count=len(members),
                    violation_count=sum(
                        1 for node in members if node.boundary_violation is not None
                    ),
                    adjustment_count=sum(1 for node in members if node.adjustment_applied),
                    overcrowded=lane in self._overcrowded,
                    recovery_strategy=self._overcrowded.get(lane),
                )
            )
        return tuple(analysis)

    @staticmethod
    def _recommend(
        summary: ReportSummary,
        lanes: Sequence[LaneAnalysis],
        results: Sequence[ValidationResult],
    ) -> tuple[str, ...]:
        out: list[str] = []
        for lane in lanes:
            if lane.violation_count:
                out.append(
                    f"{lane.violation_count} boundary violations in lane {lane.lane} "
                    "- review lane height calculation"
                )
        for lane in lanes:
            if not lane.overcrowded:
                continue
            if lane.recovery_strategy == "emergency_packing":
                out.append(
                    f"CRITICAL: lane {lane.lane} required emergency packing - node spacing "
                    "is below the minimum; split its items across tiers or raise the lane "
                    "height cap"
                )
            else:
                strategy = lane.recovery_strategy or "recovery"
                out.append(f"Lane {lane.lane} is overcrowded - resolved by {strategy}")
        if summary.total_nodes and summary.adjustments_made / summary.total_nodes > (
            _HIGH_ADJUSTMENT_RATE
        ):
            out.append(
                f"High adjustment rate ({summary.adjustments_made}/{summary.total_nodes}) "
                "- consider increasing lane heights"
            )
        if summary.average_calculation_time_ms > _SLOW_NODE_MS:
            out.append(
                f"Average calculation time {summary.average_calculation_time_ms:.2f}ms "
                "is high - consider optimizing the layout pass"
            )
        for result in results:
            if not result.passed:
                out.append(f"Validation test failed: {result.test_name}")
        if not out:
            out.append(ALL_CLEAR_RECOMMENDATION)
        return tuple(out)


def export_json(report: ValidationReport, *, indent: int | None = 2) -> str:
    return json.dumps(report.to_dict(), sort_keys=True, indent=indent, ensure_ascii=False)


def export_csv(report: ValidationReport) -> str:
    """One row per node under the fixed ``CSV_HEADER``."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for node in report.node_details:
        writer.writerow(
            (
                node.node_id,
                node.node_name,
                node.lane,
                node.tier,
                _fmt(node.calculated_position.x),
                _fmt(node.calculated_position.y),
                _fmt(node.final_position.x),
                _fmt(node.final_position.y),
                "true" if node.within_bounds else "false",
                "true" if node.adjustment_applied else "false",
                f"{node.calculation_time_ms:.4f}",
            )
        )
    return buffer.getvalue()


def render_text(report: ValidationReport) -> str:
    environment = Environment(
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = environment.from_string(_TEXT_TEMPLATE)
    return template.render(report=report, summary=report.summary)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


__all__ = [
    "ALL_CLEAR_RECOMMENDATION",
    "CSV_HEADER",
    "LaneAnalysis",
    "NodeDebugInfo",
    "ReportSummary",
    "ValidationReport",
    "ValidationReporter",
    "export_csv",
    "export_json",
    "render_text",
]
