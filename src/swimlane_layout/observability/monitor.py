"""
File: src/swimlane_layout/observability/monitor.py

Last updated: 2026-10-19

Purpose
- Session-scoped debug instrumentation for layout builds.

What should be included in this file
- ``DebugConfig`` resolved from the ``[debug]`` config section.
- ``DebugMonitor``: lane-assignment log, assignment statistics, position
  calculation log, visual lane-boundary metadata, monitoring report and
  JSON export.

Functional requirements
- State accumulates across builds that share one monitor until
  ``clear_monitoring_data`` is called. Callers running independent
  experiments must create a new monitor or clear the existing one.
- Position entries are stored only when position monitoring is enabled.
- Visual boundary elements are produced only when visual boundaries are
  enabled.

Non-functional requirements
- No module-level instances; every monitor is created explicitly.
- Console echo goes through ``structlog`` and honors ``log_level``.
"""

from __future__ import annotations

import json
import time
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Final

import structlog

from swimlane_layout.constants import DEFAULT_LANE, LANE_COLORS
from swimlane_layout.domain.models import Item, JSONValue, LaneBoundary, Position, slugify
from swimlane_layout.layout.boundaries import ordered_lanes
from swimlane_layout.layout.lanes import LaneDecision, assign_lane, explain_lane
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.observability.metrics import LayoutMetrics

_CALC_TIME_METRIC: Final[str] = "position.calculation_ms"
_ADJUSTMENT_METRIC: Final[str] = "position.adjustments"
_ASSIGNMENT_METRIC: Final[str] = "lane.assignments"
_HIGH_ADJUSTMENT_RATE: Final[float] = 0.2
_FALLBACK_COLOR: Final[str] = "#6b7280"


class MonitorLogLevel(StrEnum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    VERBOSE = "verbose"
    DEBUG = "debug"


@dataclass(frozen=True, slots=True)
class DebugConfig:
    enable_console_logging: bool = True
    log_level: MonitorLogLevel = MonitorLogLevel.STANDARD
    enable_assignment_stats: bool = True
    enable_position_monitoring: bool = False
    enable_visual_boundaries: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> DebugConfig:
        section = config.get("debug", config)
        if not isinstance(section, Mapping):
            return cls()
        defaults = cls()
        return cls(
            enable_console_logging=bool(
                section.get("enable_console_logging", defaults.enable_console_logging)
            ),
            log_level=MonitorLogLevel(str(section.get("log_level", defaults.log_level))),
            enable_assignment_stats=bool(
                section.get("enable_assignment_stats", defaults.enable_assignment_stats)
            ),
            enable_position_monitoring=bool(
                section.get("enable_position_monitoring", defaults.enable_position_monitoring)
            ),
            enable_visual_boundaries=bool(
                section.get("enable_visual_boundaries", defaults.enable_visual_boundaries)
            ),
        )

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "enableConsoleLogging": self.enable_console_logging,
            "logLevel": self.log_level.value,
            "enableAssignmentStats": self.enable_assignment_stats,
            "enablePositionMonitoring": self.enable_position_monitoring,
            "enableVisualBoundaries": self.enable_visual_boundaries,
        }


@dataclass(frozen=True, slots=True)
class LaneAssignmentEntry:
    item_id: str
    item_name: str
    lane: str
    reason: str
    timestamp: float

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "itemId": self.item_id,
            "itemName": self.item_name,
            "lane": self.lane,
            "reason": self.reason,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class PositionLogEntry:
    node_id: str
    lane: str
    tier: int
    calculated: Position
    final: Position
    calculation_time_ms: float
    timestamp: float

    @property
    def adjusted(self) -> bool:
        return self.calculated != self.final

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "nodeId": self.node_id,
            "lane": self.lane,
            "tier": self.tier,
            "calculated": self.calculated.to_dict(),
            "final": self.final.to_dict(),
            "adjusted": self.adjusted,
            "calculationTime": round(self.calculation_time_ms, 4),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class AssignmentStatistics:
    total_items: int
    assignments_by_lane: Mapping[str, int]
    unassigned_items: tuple[str, ...]
    assignment_reasons: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "totalItems": self.total_items,
            "assignmentsByLane": dict(self.assignments_by_lane),
            "unassignedItems": list(self.unassigned_items),
            "assignmentReasons": dict(self.assignment_reasons),
        }


@dataclass(frozen=True, slots=True)
class VisualBoundaryData:
    boundaries: Mapping[str, LaneBoundary]
    max_tier: int
    recorded_at: float


@dataclass(frozen=True, slots=True)
class VisualBoundaryElement:
    """Lane background rectangle for the renderer."""

    lane: str
    x: float
    y: float
    width: float
    height: float
    color: str
    label: str

    @property
    def id(self) -> str:
        return f"lane-bg-{slugify(self.lane)}"

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "id": self.id,
            "lane": self.lane,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "width": round(self.width, 3),
            "height": round(self.height, 3),
            "color": self.color,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class MonitoringReport:
    session_duration_ms: float
    assignment_stats: AssignmentStatistics | None
    total_calculations: int
    average_calculation_time_ms: float
    adjustment_rate: float
    recommendations: tuple[str, ...]

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "sessionDuration": round(self.session_duration_ms, 3),
            "assignmentStats": (
                self.assignment_stats.to_dict() if self.assignment_stats is not None else None
            ),
            "positioningMetrics": {
                "totalCalculations": self.total_calculations,
                "averageCalculationTime": round(self.average_calculation_time_ms, 4),
                "adjustmentRate": round(self.adjustment_rate, 4),
            },
            "recommendations": list(self.recommendations),
        }


class DebugMonitor:
    """Debug session that outlives individual builds.

    Pass the same instance to several ``build_graph_elements`` calls to
    aggregate their statistics; call ``clear_monitoring_data`` between
    independent runs.
    """

    def __init__(
        self,
        config: DebugConfig | None = None,
        *,
        settings: LayoutSettings | None = None,
        logger: Any | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._config = config if config is not None else DebugConfig()
        self._settings = settings if settings is not None else LayoutSettings()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._clock = clock
        self._session_start = clock()
        self._assignments: list[LaneAssignmentEntry] = []
        self._positions: list[PositionLogEntry] = []
        self._visual: VisualBoundaryData | None = None
        self._last_stats: AssignmentStatistics | None = None
        self._metrics = LayoutMetrics()

    # ------------------------------------------------------------------
    # Session and config
    # ------------------------------------------------------------------

    def start_session(self) -> None:
        self._session_start = self._clock()
        self._echo(MonitorLogLevel.MINIMAL, "debug_session_started")

    def update_config(self, **changes: object) -> DebugConfig:
        if "log_level" in changes:
            changes["log_level"] = MonitorLogLevel(str(changes["log_level"]))
        self._config = replace(self._config, **changes)  # type: ignore[arg-type]
        return self._config

    def get_config(self) -> DebugConfig:
        return self._config

    @property
    def metrics(self) -> LayoutMetrics:
        return self._metrics

    # ------------------------------------------------------------------
    # Logging hooks
    # ------------------------------------------------------------------

    def log_lane_assignment(self, item: Item, lane: str, reason: str) -> LaneAssignmentEntry:
        entry = LaneAssignmentEntry(
            item_id=item.id,
            item_name=item.name,
            lane=lane,
            reason=reason,
            timestamp=time.time(),
        )
        self._assignments.append(entry)
        self._metrics.inc(_ASSIGNMENT_METRIC, labels={"lane": lane})
        self._echo(
            MonitorLogLevel.VERBOSE,
            "lane_assigned",
            item_id=item.id,
            lane=lane,
            reason=reason,
        )
        return entry

    def log_position_calculation(
        self,
        node_id: str,
        lane: str,
        tier: int,
        calculated: Position,
        final: Position,
        calculation_time_ms: float,
    ) -> PositionLogEntry | None:
        """Record one node's placement; returns ``None`` when monitoring is off."""

        if not self._config.enable_position_monitoring:
            return None
        entry = PositionLogEntry(
            node_id=node_id,
            lane=lane,
            tier=tier,
            calculated=calculated,
            final=final,
            calculation_time_ms=max(calculation_time_ms, 0.0),
            timestamp=time.time(),
        )
        self._positions.append(entry)
        self._metrics.observe(_CALC_TIME_METRIC, entry.calculation_time_ms)
        if entry.adjusted:
            self._metrics.inc(_ADJUSTMENT_METRIC, labels={"lane": lane})
            self._echo(
                MonitorLogLevel.STANDARD,
                "position_adjusted",
                node_id=node_id,
                lane=lane,
                y_before=calculated.y,
                y_after=final.y,
            )
        else:
            self._echo(MonitorLogLevel.VERBOSE, "position_calculated", node_id=node_id, lane=lane)
        return entry

    @property
    def lane_assignments(self) -> tuple[LaneAssignmentEntry, ...]:
        return tuple(self._assignments)

    @property
    def position_log(self) -> tuple[PositionLogEntry, ...]:
        return tuple(self._positions)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def generate_assignment_statistics(
        self,
        items: Iterable[Item],
        assign: Callable[[Item], str] = assign_lane,
        explain: Callable[[Item], LaneDecision] | None = explain_lane,
    ) -> AssignmentStatistics:
        """Tally lanes for ``items``; items that fell back to the default lane are listed.

        ``explain`` supplies reason strings; pass ``None`` to skip them when
        ``assign`` is not the standard lane assigner.
        """

        counts: Counter[str] = Counter()
        unassigned: list[str] = []
        reasons: dict[str, str] = {}
        total = 0
        for item in items:
            total += 1
            lane = assign(item)
            counts[lane] += 1
            if explain is not None:
                decision = explain(item)
                reasons[item.id] = decision.reason
                fell_back = decision.is_fallback
            else:
                fell_back = lane == DEFAULT_LANE
            if fell_back:
                unassigned.append(item.id)

        stats = AssignmentStatistics(
            total_items=total,
            assignments_by_lane={lane: counts[lane] for lane in ordered_lanes(counts)},
            unassigned_items=tuple(unassigned),
            assignment_reasons=reasons if self._config.enable_assignment_stats else {},
        )
        self._last_stats = stats
        self._echo(
            MonitorLogLevel.STANDARD,
            "assignment_statistics",
            total_items=total,
            lanes=len(counts),
            unassigned=len(unassigned),
        )
        return stats

    # ------------------------------------------------------------------
    # Visual boundaries
    # ------------------------------------------------------------------

    def record_visual_boundary_data(
        self, boundaries: Mapping[str, LaneBoundary], max_tier: int
    ) -> None:
        self._visual = VisualBoundaryData(
            boundaries=dict(boundaries),
            max_tier=max(max_tier, 0),
            recorded_at=time.time(),
        )

    def get_visual_boundary_data(self) -> VisualBoundaryData | None:
        return self._visual

    def generate_visual_boundary_elements(self) -> tuple[VisualBoundaryElement, ...]:
        if not self._config.enable_visual_boundaries or self._visual is None:
            return ()
        settings = self._settings
        width = (
            settings.lane_start_x
            + (self._visual.max_tier + 1) * settings.tier_width
            + settings.node_width
        )
        elements: list[VisualBoundaryElement] = []
        for lane in ordered_lanes(self._visual.boundaries):
            boundary = self._visual.boundaries[lane]
            elements.append(
                VisualBoundaryElement(
                    lane=lane,
                    x=0.0,
                    y=boundary.start_y,
                    width=width,
                    height=boundary.height,
                    color=LANE_COLORS.get(lane, _FALLBACK_COLOR),
                    label=lane,
                )
            )
        return tuple(elements)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def generate_monitoring_report(self) -> MonitoringReport:
        total = len(self._positions)
        adjusted = sum(1 for entry in self._positions if entry.adjusted)
        rate = adjusted / total if total else 0.0
        average = self._metrics.average(_CALC_TIME_METRIC)

        recommendations: list[str] = []
        if rate > _HIGH_ADJUSTMENT_RATE:
            recommendations.append(
                f"High adjustment rate ({rate:.0%}) - consider increasing lane heights"
            )
        if self._last_stats is not None and self._last_stats.unassigned_items:
            recommendations.append(
                f"{len(self._last_stats.unassigned_items)} items fell back to the "
                f"{DEFAULT_LANE} lane - review source tags"
            )
        if not self._config.enable_position_monitoring:
            recommendations.append("Enable position monitoring for detailed positioning metrics")
        if not recommendations:
            recommendations.append("Positioning is stable - no adjustments needed")

        return MonitoringReport(
            session_duration_ms=(self._clock() - self._session_start) * 1000.0,
            assignment_stats=self._last_stats,
            total_calculations=total,
            average_calculation_time_ms=average,
            adjustment_rate=rate,
            recommendations=tuple(recommendations),
        )

    def export_monitoring_data(self) -> str:
        """Full session as a JSON document."""

        payload: dict[str, JSONValue] = {
            "config": self._config.to_dict(),
            "report": self.generate_monitoring_report().to_dict(),
            "laneAssignments": [entry.to_dict() for entry in self._assignments],
            "positionLog": [entry.to_dict() for entry in self._positions],
            "visualBoundaries": [
                element.to_dict() for element in self.generate_visual_boundary_elements()
            ],
            "metrics": self._metrics.snapshot(),
        }
        return json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False)

    def clear_monitoring_data(self) -> None:
        self._assignments.clear()
        self._positions.clear()
        self._visual = None
        self._last_stats = None
        self._metrics.reset()
        self._session_start = self._clock()

    def _echo(self, level: MonitorLogLevel, event: str, **fields: object) -> None:
        if not self._config.enable_console_logging:
            return
        if _LEVEL_RANK[level] > _LEVEL_RANK[self._config.log_level]:
            return
        self._logger.debug(event, **fields)


_LEVEL_RANK: Final[dict[MonitorLogLevel, int]] = {
    MonitorLogLevel.MINIMAL: 0,
    MonitorLogLevel.STANDARD: 1,
    MonitorLogLevel.VERBOSE: 2,
    MonitorLogLevel.DEBUG: 3,
}


__all__ = [
    "AssignmentStatistics",
    "DebugConfig",
    "DebugMonitor",
    "LaneAssignmentEntry",
    "MonitorLogLevel",
    "MonitoringReport",
    "PositionLogEntry",
    "VisualBoundaryData",
    "VisualBoundaryElement",
]
