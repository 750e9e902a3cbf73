"""Layout engine: lanes, tiers, lane bands, vertical spacing and recovery.

``swimlane_layout.layout.builder`` is not imported here; it pulls in the
validation and observability layers, which themselves depend on this package.
"""

from swimlane_layout.layout.boundaries import (
    BoundaryCheck,
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
from swimlane_layout.layout.lanes import (
    KEYWORD_LANE_RULES,
    SOURCE_LANE_RULES,
    AssignmentRule,
    LaneDecision,
    LaneRule,
    assign_lane,
    explain_lane,
)
from swimlane_layout.layout.recovery import (
    ErrorKind,
    ErrorRecoveryReport,
    ErrorSeverity,
    OvercrowdingAnalysis,
    OvercrowdingSeverity,
    RecoveryAction,
    RecoveryContext,
    RecoveryEngine,
    RecoveryOutcome,
)
from swimlane_layout.layout.settings import LayoutSettings
from swimlane_layout.layout.spacing import (
    DEFAULT_STRATEGIES,
    Distribution,
    DistributionRequest,
    DistributionStrategy,
    SpacingStrategy,
    distribute,
)
from swimlane_layout.layout.tiers import (
    BrokenEdge,
    PrerequisiteGraph,
    TierAssignment,
    calculate_tiers,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "KEYWORD_LANE_RULES",
    "SOURCE_LANE_RULES",
    "AssignmentRule",
    "BoundaryCheck",
    "BrokenEdge",
    "Distribution",
    "DistributionRequest",
    "DistributionStrategy",
    "ErrorKind",
    "ErrorRecoveryReport",
    "ErrorSeverity",
    "LaneDecision",
    "LaneRule",
    "LayoutSettings",
    "OvercrowdingAnalysis",
    "OvercrowdingSeverity",
    "PrerequisiteGraph",
    "RecoveryAction",
    "RecoveryContext",
    "RecoveryEngine",
    "RecoveryOutcome",
    "SpacingStrategy",
    "TierAssignment",
    "assign_lane",
    "build_lane_boundaries",
    "calculate_lane_heights",
    "calculate_tiers",
    "classify_violation_severity",
    "distribute",
    "enforce_boundary_constraints",
    "explain_lane",
    "ordered_lanes",
    "required_lane_height",
    "valid_y_range",
    "validate_all_positions",
    "validate_position_within_bounds",
]
