"""Lane band construction, boundary validation, and clamping."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from swimlane_layout.constants import CANONICAL_LANE_ORDER
from swimlane_layout.domain.models import (
    BoundaryViolation,
    LaneBoundary,
    Position,
    PositionedNode,
    ViolationSeverity,
    ViolationType,
)
from swimlane_layout.layout.settings import LayoutSettings

_DEFAULT_SETTINGS = LayoutSettings()


@dataclass(frozen=True, slots=True)
class BoundaryCheck:
    within_bounds: bool
    violation: BoundaryViolation | None = None


def required_lane_height(
    max_nodes_in_tier: int, settings: LayoutSettings = _DEFAULT_SETTINGS
) -> float:
    needed = max_nodes_in_tier * settings.node_height + 2 * settings.lane_buffer
    return max(settings.min_lane_height, needed)


def calculate_lane_heights(
    lane_tier_counts: Mapping[str, Mapping[int, int]],
    settings: LayoutSettings = _DEFAULT_SETTINGS,
) -> dict[str, float]:
    """Height per populated lane, capped by ``settings.max_lane_height`` when set."""

    heights: dict[str, float] = {}
    cap = settings.lane_height_cap
    for lane in ordered_lanes(lane_tier_counts):
        counts = lane_tier_counts[lane]
        busiest = max(counts.values(), default=0)
        if busiest <= 0:
            continue
        height = required_lane_height(busiest, settings)
        if cap is not None:
            height = min(height, cap)
        heights[lane] = height
    return heights


def build_lane_boundaries(
    lane_heights: Mapping[str, float],
    settings: LayoutSettings = _DEFAULT_SETTINGS,
) -> dict[str, LaneBoundary]:
    """Stack lanes top-to-bottom in canonical order separated by ``lane_padding``."""

    boundaries: dict[str, LaneBoundary] = {}
    cursor = settings.lane_padding
    for lane in ordered_lanes(lane_heights):
        height = lane_heights[lane]
        boundaries[lane] = LaneBoundary(
            lane=lane,
            start_y=cursor,
            end_y=cursor + height,
            buffer=settings.lane_buffer,
        )
        cursor = cursor + height + settings.lane_padding
    return boundaries


def ordered_lanes(lanes: Iterable[str]) -> list[str]:
    """Canonical lanes first in canonical order, then unknown lanes alphabetically."""

    present = set(lanes)
    known = [lane for lane in CANONICAL_LANE_ORDER if lane in present]
    extra = sorted(present.difference(CANONICAL_LANE_ORDER))
    return [*known, *extra]


def valid_y_range(
    boundary: LaneBoundary, settings: LayoutSettings = _DEFAULT_SETTINGS
) -> tuple[float, float]:
    """Inclusive center-y range; collapses to ``center_y`` when the band is too thin."""

    low = boundary.min_center_y(settings.node_height)
    high = boundary.max_center_y(settings.node_height)
    if low > high:
        return boundary.center_y, boundary.center_y
    return low, high


def classify_violation_severity(
    excess: float, settings: LayoutSettings = _DEFAULT_SETTINGS
) -> ViolationSeverity:
    if excess < settings.minor_violation_px:
        return ViolationSeverity.MINOR
    if excess <= settings.critical_violation_px:
        return ViolationSeverity.MAJOR
    return ViolationSeverity.CRITICAL


def validate_position_within_bounds(
    position: Position,
    lane: str,
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings = _DEFAULT_SETTINGS,
    *,
    node_id: str = "",
) -> BoundaryCheck:
    """Check ``position.y`` against the lane's valid range.

    An unknown lane is reported as out of bounds with no violation attached.
    """

    boundary = boundaries.get(lane)
    if boundary is None:
        return BoundaryCheck(within_bounds=False)

    low, high = valid_y_range(boundary, settings)
    tolerance = settings.boundary_tolerance
    if position.y < low - tolerance:
        violation = BoundaryViolation(
            node_id=node_id,
            violation_type=ViolationType.TOP,
            severity=classify_violation_severity(low - position.y, settings),
            allowed_boundary=low,
            actual_position=position.y,
        )
        return BoundaryCheck(within_bounds=False, violation=violation)
    if position.y > high + tolerance:
        violation = BoundaryViolation(
            node_id=node_id,
            violation_type=ViolationType.BOTTOM,
            severity=classify_violation_severity(position.y - high, settings),
            allowed_boundary=high,
            actual_position=position.y,
        )
        return BoundaryCheck(within_bounds=False, violation=violation)
    return BoundaryCheck(within_bounds=True)


def enforce_boundary_constraints(
    position: Position,
    lane: str,
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings = _DEFAULT_SETTINGS,
) -> Position:
    """Clamp ``y`` into the lane's valid range; ``x`` is never touched."""

    boundary = boundaries.get(lane)
    if boundary is None:
        return position
    low, high = valid_y_range(boundary, settings)
    if low <= position.y <= high:
        return position
    return Position(x=position.x, y=min(max(position.y, low), high))


def validate_all_positions(
    nodes: Iterable[PositionedNode],
    boundaries: Mapping[str, LaneBoundary],
    settings: LayoutSettings = _DEFAULT_SETTINGS,
) -> tuple[BoundaryViolation, ...]:
    """Collect violations for every node whose lane is known."""

    violations: list[BoundaryViolation] = []
    for node in nodes:
        if node.lane not in boundaries:
            continue
        check = validate_position_within_bounds(
            node.position, node.lane, boundaries, settings, node_id=node.id
        )
        if check.violation is not None:
            violations.append(check.violation)
    return tuple(violations)


__all__ = [
    "BoundaryCheck",
    "build_lane_boundaries",
    "calculate_lane_heights",
    "classify_violation_severity",
    "enforce_boundary_constraints",
    "ordered_lanes",
    "required_lane_height",
    "valid_y_range",
    "validate_all_positions",
    "validate_position_within_bounds",
]
