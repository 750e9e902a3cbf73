"""Typed layout tunables resolved from the validated config mapping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from swimlane_layout.constants import (
    BOUNDARY_TOLERANCE,
    CRITICAL_VIOLATION_PX,
    LANE_BUFFER,
    LANE_PADDING,
    LANE_START_X,
    MIN_LANE_HEIGHT,
    MIN_NODE_SPACING,
    MINOR_VIOLATION_PX,
    MODERATE_OVERCROWDING_RATIO,
    NODE_HEIGHT,
    NODE_WIDTH,
    PERFORMANCE_THRESHOLD_MS,
    SEVERE_OVERCROWDING_RATIO,
    TIER_ALIGNMENT_TOLERANCE,
    TIER_WIDTH,
)


@dataclass(frozen=True, slots=True)
class LayoutSettings:
    """Every knob the build pipeline reads.

    ``max_lane_height`` of ``0`` means lanes may grow without limit. A cap
    below ``min_lane_height`` is raised to it.
    """

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    tier_width: float = TIER_WIDTH
    lane_start_x: float = LANE_START_X
    lane_padding: float = LANE_PADDING
    lane_buffer: float = LANE_BUFFER
    min_lane_height: float = MIN_LANE_HEIGHT
    min_node_spacing: float = MIN_NODE_SPACING
    max_lane_height: float = 0
    boundary_tolerance: float = BOUNDARY_TOLERANCE
    tier_alignment_tolerance: float = TIER_ALIGNMENT_TOLERANCE
    moderate_ratio: float = MODERATE_OVERCROWDING_RATIO
    severe_ratio: float = SEVERE_OVERCROWDING_RATIO
    allow_lane_expansion: bool = True
    comprehensive_validation: bool = True
    detailed_logging: bool = False
    performance_threshold_ms: float = PERFORMANCE_THRESHOLD_MS
    minor_violation_px: float = MINOR_VIOLATION_PX
    critical_violation_px: float = CRITICAL_VIOLATION_PX

    @property
    def ideal_spacing(self) -> float:
        return max(self.node_height, self.min_node_spacing)

    @property
    def lane_height_cap(self) -> float | None:
        if self.max_lane_height <= 0:
            return None
        return max(self.max_lane_height, self.min_lane_height)

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> LayoutSettings:
        """Project a validated config (see ``config.schema``) onto settings."""

        layout = _section(config, "layout")
        recovery = _section(config, "recovery")
        validation = _section(config, "validation")
        defaults = cls()
        return cls(
            node_width=_number(layout, "node_width", defaults.node_width),
            node_height=_number(layout, "node_height", defaults.node_height),
            tier_width=_number(layout, "tier_width", defaults.tier_width),
            lane_start_x=_number(layout, "lane_start_x", defaults.lane_start_x),
            lane_padding=_number(layout, "lane_padding", defaults.lane_padding),
            lane_buffer=_number(layout, "lane_buffer", defaults.lane_buffer),
            min_lane_height=_number(layout, "min_lane_height", defaults.min_lane_height),
            min_node_spacing=_number(layout, "min_node_spacing", defaults.min_node_spacing),
            max_lane_height=_number(layout, "max_lane_height", defaults.max_lane_height),
            boundary_tolerance=_number(layout, "boundary_tolerance", defaults.boundary_tolerance),
            tier_alignment_tolerance=_number(
                layout, "tier_alignment_tolerance", defaults.tier_alignment_tolerance
            ),
            moderate_ratio=_number(recovery, "moderate_ratio", defaults.moderate_ratio),
            severe_ratio=_number(recovery, "severe_ratio", defaults.severe_ratio),
            allow_lane_expansion=bool(
                recovery.get("allow_lane_expansion", defaults.allow_lane_expansion)
            ),
            comprehensive_validation=bool(
                validation.get("comprehensive", defaults.comprehensive_validation)
            ),
            detailed_logging=bool(validation.get("detailed_logging", defaults.detailed_logging)),
            performance_threshold_ms=_number(
                validation, "performance_threshold_ms", defaults.performance_threshold_ms
            ),
            minor_violation_px=_number(
                validation, "minor_violation_px", defaults.minor_violation_px
            ),
            critical_violation_px=_number(
                validation, "critical_violation_px", defaults.critical_violation_px
            ),
        )


def _section(config: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = config.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _number(section: Mapping[str, object], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


__all__ = ["LayoutSettings"]
