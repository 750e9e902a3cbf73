"""
Overcrowding recovery and error-recovery bookkeeping.

``RecoveryEngine`` owns three concerns for a single build:

- Overcrowding analysis per lane (ratio of height needed at minimum spacing
  to usable height, bucketed into severities with a recommended action).
- Lane recovery through the spacing strategy chain (compression, lane
  expansion, emergency packing).
- A ledger of every error the build worked around and every recovery it
  applied, rendered as user-facing messages and an aggregate report.

Nothing in here raises for bad layout input. Problems are recorded and a
best-effort position is always returned.
"""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Final

import structlog

from swimlane_layout.constants import DEFAULT_LANE
from swimlane_layout.domain.models import (
    JSONValue,
    LaneBoundary,
    Position,
    PositionedNode,
)
from swimlane_layout.layout.boundaries import (
    enforce_boundary_constraints,
    ordered_lanes,
    valid_y_range,
)
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.layout.spacing import (
    STRATEGY_RANK,
    DistributionRequest,
    DistributionStrategy,
    distribute,
    spread,
)


class OvercrowdingSeverity(StrEnum):
    NONE = "none"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class RecoveryAction(StrEnum):
    NONE = "none"
    COMPRESS = "compress"
    EXPAND = "expand"
    EMERGENCY = "emergency"


class ErrorSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorKind(StrEnum):
    INVALID_ITEM = "invalid_item"
    DUPLICATE_ID = "duplicate_id"
    MISSING_PREREQUISITE = "missing_prerequisite"
    CIRCULAR_PREREQUISITE = "circular_prerequisite"
    BOUNDARY_VIOLATION = "boundary_violation"
    OVERCROWDING = "overcrowding"


FALLBACK_STRATEGY: Final[str] = "fallback"

_OVERCROWDING_TO_ERROR: Final[dict[OvercrowdingSeverity, ErrorSeverity]] = {
    OvercrowdingSeverity.NONE: ErrorSeverity.LOW,
    OvercrowdingSeverity.MODERATE: ErrorSeverity.MEDIUM,
    OvercrowdingSeverity.SEVERE: ErrorSeverity.HIGH,
    OvercrowdingSeverity.CRITICAL: ErrorSeverity.CRITICAL,
}

_FRIENDLY_TEXT: Final[dict[ErrorKind, tuple[str, tuple[str, ...]]]] = {
    ErrorKind.INVALID_ITEM: (
        "Incomplete item",
        ("Give every item a non-empty id and name", "Check the source tag spelling"),
    ),
    ErrorKind.DUPLICATE_ID: (
        "Duplicate item id",
        ("Make item ids unique across all source files",),
    ),
    ErrorKind.MISSING_PREREQUISITE: (
        "Unknown prerequisite",
        ("Remove the stale prerequisite id", "Confirm the prerequisite item is exported"),
    ),
    ErrorKind.CIRCULAR_PREREQUISITE: (
        "Circular prerequisites",
        ("Remove one prerequisite link from the cycle",),
    ),
    ErrorKind.BOUNDARY_VIOLATION: (
        "Node outside its lane",
        ("Review lane height calculations", "Reduce the number of items in the lane"),
    ),
    ErrorKind.OVERCROWDING: (
        "Crowded lane",
        (
            "Split the lane's items across more tiers",
            "Raise layout.max_lane_height or enable recovery.allow_lane_expansion",
        ),
    ),
}


@dataclass(frozen=True, slots=True)
class OvercrowdingAnalysis:
    lane: str
    node_count: int
    max_nodes_in_tier: int
    required_height: float
    usable_height: float
    overcrowding_ratio: float
    severity: OvercrowdingSeverity
    recommended_action: RecoveryAction
    boundary: LaneBoundary

    @property
    def is_overcrowded(self) -> bool:
        return self.severity is not OvercrowdingSeverity.NONE

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "lane": self.lane,
            "nodeCount": self.node_count,
            "maxNodesInTier": self.max_nodes_in_tier,
            "requiredHeight": self.required_height,
            "usableHeight": self.usable_height,
            "overcrowdingRatio": round(self.overcrowding_ratio, 4),
            "severity": self.severity.value,
            "recommendedAction": self.recommended_action.value,
            "boundary": self.boundary.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class RecoveryContext:
    node_id: str
    error_type: ErrorKind
    recovery_strategy: str
    original_position: Position
    recovered_position: Position
    applied_adjustments: tuple[str, ...]
    lane: str = ""

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "nodeId": self.node_id,
            "lane": self.lane,
            "errorType": self.error_type.value,
            "recoveryStrategy": self.recovery_strategy,
            "originalPosition": self.original_position.to_dict(),
            "recoveredPosition": self.recovered_position.to_dict(),
            "appliedAdjustments": list(self.applied_adjustments),
        }


@dataclass(frozen=True, slots=True)
class RecoveryOutcome:
    lane: str
    nodes: tuple[PositionedNode, ...]
    contexts: tuple[RecoveryContext, ...]
    strategy: DistributionStrategy
    boundary: LaneBoundary

    @property
    def is_emergency(self) -> bool:
        return self.strategy is DistributionStrategy.EMERGENCY_PACKING


@dataclass(frozen=True, slots=True)
class RecordedError:
    kind: ErrorKind
    severity: ErrorSeverity
    message: str
    node_id: str | None = None
    lane: str | None = None
    recovered: bool = True
    timestamp: float = 0.0

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "nodeId": self.node_id,
            "lane": self.lane,
            "recovered": self.recovered,
        }


@dataclass(frozen=True, slots=True)
class UserFriendlyError:
    title: str
    message: str
    suggested_actions: tuple[str, ...]
    recovery_applied: bool

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "title": self.title,
            "message": self.message,
            "suggestedActions": list(self.suggested_actions),
            "recoveryApplied": self.recovery_applied,
        }


@dataclass(frozen=True, slots=True)
class ErrorRecoveryReport:
    total_errors: int
    total_recoveries: int
    errors_by_severity: Mapping[str, int]
    errors_by_kind: Mapping[str, int]
    recoveries_by_strategy: Mapping[str, int]
    emergency_lanes: tuple[str, ...]
    summary: str
    errors: tuple[RecordedError, ...] = ()

    @property
    def has_critical(self) -> bool:
        return self.errors_by_severity.get(ErrorSeverity.CRITICAL.value, 0) > 0

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "totalErrors": self.total_errors,
            "totalRecoveries": self.total_recoveries,
            "errorsBySeverity": dict(self.errors_by_severity),
            "errorsByKind": dict(self.errors_by_kind),
            "recoveriesByStrategy": dict(self.recoveries_by_strategy),
            "emergencyLanes": list(self.emergency_lanes),
            "summary": self.summary,
            "errors": [error.to_dict() for error in self.errors],
        }


class RecoveryEngine:
    """Overcrowding analysis, lane recovery, and the per-build error ledger."""

    def __init__(
        self,
        settings: LayoutSettings | None = None,
        *,
        logger: Any | None = None,
    ) -> None:
        self._settings = settings if settings is not None else LayoutSettings()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._errors: list[RecordedError] = []
        self._contexts: list[RecoveryContext] = []
        self._emergency_lanes: list[str] = []

    @property
    def settings(self) -> LayoutSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Overcrowding
    # ------------------------------------------------------------------

    def analyze_lane_overcrowding(
        self,
        lane: str,
        nodes: Sequence[PositionedNode],
        boundary: LaneBoundary,
    ) -> OvercrowdingAnalysis:
        settings = self._settings
        tier_counts = Counter(node.tier for node in nodes)
        busiest = max(tier_counts.values(), default=0)
        if busiest == 0:
            required = 0.0
        else:
            required = settings.node_height + (busiest - 1) * settings.min_node_spacing
        usable = boundary.usable_height
        ratio = required / max(usable, 1.0)

        if ratio <= 1.0:
            severity = OvercrowdingSeverity.NONE
        elif ratio <= settings.moderate_ratio:
            severity = OvercrowdingSeverity.MODERATE
        elif ratio <= settings.severe_ratio:
            severity = OvercrowdingSeverity.SEVERE
        else:
            severity = OvercrowdingSeverity.CRITICAL

        if severity is OvercrowdingSeverity.NONE:
            action = RecoveryAction.NONE
        elif severity is not OvercrowdingSeverity.CRITICAL:
            action = RecoveryAction.COMPRESS
        elif settings.allow_lane_expansion:
            action = RecoveryAction.EXPAND
        else:
            action = RecoveryAction.EMERGENCY

        return OvercrowdingAnalysis(
            lane=lane,
            node_count=len(nodes),
            max_nodes_in_tier=busiest,
            required_height=required,
            usable_height=usable,
            overcrowding_ratio=ratio,
            severity=severity,
            recommended_action=action,
            boundary=boundary,
        )

    def recover_overcrowded_lane(
        self,
        analysis: OvercrowdingAnalysis,
        nodes: Sequence[PositionedNode],
    ) -> RecoveryOutcome:
        """Re-place every tier bucket of one lane through the recovery chain.

        The lane's band may grow (lane expansion) but never shrinks. Every
        bucket is then placed again inside the final band so that all
        buckets of the lane share one boundary.
        """

        settings = self._settings
        buckets = _group_by_tier(nodes)
        boundary = analysis.boundary

        expanded_tiers: set[int] = set()
        for tier, bucket in buckets.items():
            trial = distribute(
                DistributionRequest(len(bucket), boundary, settings, recovery=True)
            )
            if trial is not None and trial.expanded:
                expanded_tiers.add(tier)
                if trial.boundary.height > boundary.height:
                    boundary = trial.boundary

        recovered: dict[str, PositionedNode] = {}
        contexts: list[RecoveryContext] = []
        lane_strategy = DistributionStrategy.CENTER_SINGLE
        for tier, bucket in buckets.items():
            placed = distribute(
                DistributionRequest(len(bucket), boundary, settings, recovery=True)
            )
            if placed is None:
                low, high = valid_y_range(boundary, settings)
                centers = spread(len(bucket), low, high)
                strategy = DistributionStrategy.EMERGENCY_PACKING
            else:
                centers = placed.centers
                strategy = placed.strategy
            if tier in expanded_tiers and strategy is not DistributionStrategy.EMERGENCY_PACKING:
                strategy = DistributionStrategy.LANE_EXPANSION
            if STRATEGY_RANK[strategy] > STRATEGY_RANK[lane_strategy]:
                lane_strategy = strategy

            for node, center in zip(bucket, centers, strict=True):
                target = Position(x=node.position.x, y=center)
                recovered[node.id] = replace(node, position=target, within_bounds=True)
                if target == node.position:
                    continue
                adjustments = [f"y {node.position.y:.1f} -> {center:.1f} via {strategy.value}"]
                if boundary.height != analysis.boundary.height:
                    adjustments.append(
                        f"lane height {analysis.boundary.height:.1f} -> {boundary.height:.1f}"
                    )
                contexts.append(
                    RecoveryContext(
                        node_id=node.id,
                        error_type=ErrorKind.OVERCROWDING,
                        recovery_strategy=strategy.value,
                        original_position=node.position,
                        recovered_position=target,
                        applied_adjustments=tuple(adjustments),
                        lane=analysis.lane,
                    )
                )

        emergency = lane_strategy is DistributionStrategy.EMERGENCY_PACKING
        severity = (
            ErrorSeverity.CRITICAL if emergency else _OVERCROWDING_TO_ERROR[analysis.severity]
        )
        self._record(
            RecordedError(
                kind=ErrorKind.OVERCROWDING,
                severity=severity,
                message=(
                    f"lane {analysis.lane} needs {analysis.required_height:.0f}px but has "
                    f"{analysis.usable_height:.0f}px usable "
                    f"(ratio {analysis.overcrowding_ratio:.2f}); applied {lane_strategy.value}"
                ),
                lane=analysis.lane,
            )
        )
        if emergency and analysis.lane not in self._emergency_lanes:
            self._emergency_lanes.append(analysis.lane)
        self._contexts.extend(contexts)

        log = self._logger.warning if emergency else self._logger.info
        log(
            "lane_recovered",
            lane=analysis.lane,
            strategy=lane_strategy.value,
            ratio=round(analysis.overcrowding_ratio, 4),
            severity=analysis.severity.value,
            height_before=analysis.boundary.height,
            height_after=boundary.height,
        )

        ordered = tuple(recovered[node.id] for node in nodes if node.id in recovered)
        return RecoveryOutcome(
            lane=analysis.lane,
            nodes=ordered,
            contexts=tuple(contexts),
            strategy=lane_strategy,
            boundary=boundary,
        )

    def create_emergency_spacing(
        self,
        nodes: Sequence[PositionedNode],
        available_height: float,
    ) -> tuple[float, ...]:
        """Centers relative to the top of ``available_height``, always inside ``[0, available_height]``."""

        half = self._settings.node_height / 2
        height = max(available_height, 0.0)
        if height >= self._settings.node_height:
            return spread(len(nodes), half, height - half)
        return spread(len(nodes), height / 2, height / 2)

    # ------------------------------------------------------------------
    # Boundary enforcement
    # ------------------------------------------------------------------

    def handle_boundary_enforcement_failure(
        self,
        position: Position,
        lane: str,
        boundaries: Mapping[str, LaneBoundary],
        node_id: str,
    ) -> tuple[Position, RecoveryContext]:
        """Force ``position`` into a lane band, falling back to another lane if needed."""

        adjustments: list[str] = []
        target_lane = lane
        if lane not in boundaries:
            target_lane = _fallback_lane(boundaries)
            adjustments.append(f"lane {lane!r} has no boundary; used {target_lane!r}")

        if target_lane in boundaries:
            corrected = enforce_boundary_constraints(
                position, target_lane, boundaries, self._settings
            )
        else:
            corrected = position
            adjustments.append("no lane boundaries available; position kept")

        if corrected.y != position.y:
            adjustments.append(f"clamped y from {position.y:.1f} to {corrected.y:.1f}")
        if not adjustments:
            adjustments.append("position already inside the lane band")

        context = RecoveryContext(
            node_id=node_id,
            error_type=ErrorKind.BOUNDARY_VIOLATION,
            recovery_strategy=FALLBACK_STRATEGY,
            original_position=position,
            recovered_position=corrected,
            applied_adjustments=tuple(adjustments),
            lane=target_lane,
        )
        self._contexts.append(context)
        self._logger.info(
            "boundary_enforced",
            node_id=node_id,
            lane=lane,
            target_lane=target_lane,
            y_before=position.y,
            y_after=corrected.y,
        )
        return corrected, context

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def record_error(
        self,
        kind: ErrorKind,
        severity: ErrorSeverity,
        message: str,
        *,
        node_id: str | None = None,
        lane: str | None = None,
        recovered: bool = True,
    ) -> RecordedError:
        error = RecordedError(
            kind=kind,
            severity=severity,
            message=message,
            node_id=node_id,
            lane=lane,
            recovered=recovered,
        )
        return self._record(error)

    def recovery_context(self, node_id: str) -> RecoveryContext | None:
        """Most recent recovery applied to ``node_id``."""

        for context in reversed(self._contexts):
            if context.node_id == node_id:
                return context
        return None

    @property
    def errors(self) -> tuple[RecordedError, ...]:
        return tuple(self._errors)

    @property
    def contexts(self) -> tuple[RecoveryContext, ...]:
        return tuple(self._contexts)

    def user_friendly_errors(self) -> tuple[UserFriendlyError, ...]:
        friendly: list[UserFriendlyError] = []
        for error in self._errors:
            title, actions = _FRIENDLY_TEXT[error.kind]
            subject = error.node_id or error.lane
            message = f"{subject}: {error.message}" if subject else error.message
            friendly.append(
                UserFriendlyError(
                    title=title,
                    message=message,
                    suggested_actions=actions,
                    recovery_applied=error.recovered,
                )
            )
        return tuple(friendly)

    def generate_report(self) -> ErrorRecoveryReport:
        by_severity = Counter(error.severity.value for error in self._errors)
        by_kind = Counter(error.kind.value for error in self._errors)
        by_strategy = Counter(context.recovery_strategy for context in self._contexts)

        total_errors = len(self._errors)
        total_recoveries = len(self._contexts)
        if total_errors == 0:
            summary = "No layout errors detected."
        else:
            parts = [f"{total_errors} layout error(s) handled", f"{total_recoveries} recovery(ies)"]
            if self._emergency_lanes:
                lanes = ", ".join(self._emergency_lanes)
                parts.append(f"CRITICAL emergency packing in: {lanes}")
            summary = "; ".join(parts) + "."

        return ErrorRecoveryReport(
            total_errors=total_errors,
            total_recoveries=total_recoveries,
            errors_by_severity={key: by_severity[key] for key in sorted(by_severity)},
            errors_by_kind={key: by_kind[key] for key in sorted(by_kind)},
            recoveries_by_strategy={key: by_strategy[key] for key in sorted(by_strategy)},
            emergency_lanes=tuple(self._emergency_lanes),
            summary=summary,
            errors=tuple(self._errors),
        )

    def clear(self) -> None:
        self._errors.clear()
        self._contexts.clear()
        self._emergency_lanes.clear()

    def _record(self, error: RecordedError) -> RecordedError:
        stamped = replace(error, timestamp=time.time())
        self._errors.append(stamped)
        return stamped


def _group_by_tier(nodes: Sequence[PositionedNode]) -> dict[int, list[PositionedNode]]:
    buckets: dict[int, list[PositionedNode]] = {}
    for node in nodes:
        buckets.setdefault(node.tier, []).append(node)
    return {tier: buckets[tier] for tier in sorted(buckets)}


def _fallback_lane(boundaries: Mapping[str, LaneBoundary]) -> str:
    if DEFAULT_LANE in boundaries:
        return DEFAULT_LANE
    lanes = ordered_lanes(boundaries)
    return lanes[0] if lanes else DEFAULT_LANE


__all__ = [
    "ErrorKind",
    "ErrorRecoveryReport",
    "ErrorSeverity",
    "FALLBACK_STRATEGY",
    "OvercrowdingAnalysis",
    "OvercrowdingSeverity",
    "RecordedError",
    "RecoveryAction",
    "RecoveryContext",
    "RecoveryEngine",
    "RecoveryOutcome",
    "UserFriendlyError",
]
