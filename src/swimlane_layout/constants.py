"""Stable constants shared across the layout, validation, and monitoring layers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
REPORT_SCHEMA_VERSION: Final[int] = 1

# Node and grid geometry (pixels).
NODE_WIDTH: Final[int] = 140
NODE_HEIGHT: Final[int] = 40
TIER_WIDTH: Final[int] = 180
LANE_START_X: Final[int] = 200

# Lane band geometry (pixels).
LANE_PADDING: Final[int] = 25
LANE_BUFFER: Final[int] = 20
MIN_LANE_HEIGHT: Final[int] = 80
MIN_NODE_SPACING: Final[int] = 15

# Floating-point slack for containment and cross-lane alignment checks.
BOUNDARY_TOLERANCE: Final[float] = 1.0
TIER_ALIGNMENT_TOLERANCE: Final[float] = 1.0

# Violation severity thresholds (pixels beyond the valid range).
MINOR_VIOLATION_PX: Final[float] = 10.0
CRITICAL_VIOLATION_PX: Final[float] = 20.0

# Overcrowding ratio thresholds (required height / usable height).
MODERATE_OVERCROWDING_RATIO: Final[float] = 1.5
SEVERE_OVERCROWDING_RATIO: Final[float] = 2.5

PERFORMANCE_THRESHOLD_MS: Final[float] = 2000.0

DEFAULT_LANE: Final[str] = "General"
TREE_CATEGORIES: Final[frozenset[str]] = frozenset({"Actions", "Unlocks"})

# Top-to-bottom stacking order.
CANONICAL_LANE_ORDER: Final[tuple[str, ...]] = (
    "Farm",
    "Vendors",
    "Blacksmith",
    "Agronomist",
    "Carpenter",
    "Land Steward",
    "Material Trader",
    "Skills Trainer",
    "Adventure",
    "Combat",
    "Forge",
    "Mining",
    "Tower",
    "General",
)

LANE_COLORS: Final[dict[str, str]] = {
    "Farm": "#84cc16",
    "Vendors": "#8b5cf6",
    "Blacksmith": "#f59e0b",
    "Agronomist": "#10b981",
    "Carpenter": "#06b6d4",
    "Land Steward": "#84cc16",
    "Material Trader": "#6366f1",
    "Skills Trainer": "#ec4899",
    "Adventure": "#ef4444",
    "Combat": "#dc2626",
    "Forge": "#f97316",
    "Mining": "#78716c",
    "Tower": "#3b82f6",
    "General": "#6b7280",
}

__all__ = [
    "BOUNDARY_TOLERANCE",
    "CANONICAL_LANE_ORDER",
    "CONFIG_SCHEMA_VERSION",
    "CRITICAL_VIOLATION_PX",
    "DEFAULT_LANE",
    "LANE_BUFFER",
    "LANE_COLORS",
    "LANE_PADDING",
    "LANE_START_X",
    "MINOR_VIOLATION_PX",
    "MIN_LANE_HEIGHT",
    "MIN_NODE_SPACING",
    "MODERATE_OVERCROWDING_RATIO",
    "NODE_HEIGHT",
    "NODE_WIDTH",
    "PERFORMANCE_THRESHOLD_MS",
    "REPORT_SCHEMA_VERSION",
    "SEVERE_OVERCROWDING_RATIO",
    "TIER_ALIGNMENT_TOLERANCE",
    "TIER_WIDTH",
    "TREE_CATEGORIES",
]
