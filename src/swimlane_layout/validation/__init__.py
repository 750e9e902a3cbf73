"""Structural layout checks and the per-build validation reporter."""

from swimlane_layout.validation.checks import (
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
from swimlane_layout.validation.reporter import (
    CSV_HEADER,
    LaneAnalysis,
    NodeDebugInfo,
    ReportSummary,
    ValidationReport,
    ValidationReporter,
    export_csv,
    export_json,
    render_text,
)

__all__ = [
    "CSV_HEADER",
    "LaneAnalysis",
    "NodeDebugInfo",
    "ReportSummary",
    "ValidationReport",
    "ValidationReporter",
    "export_csv",
    "export_json",
    "render_text",
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
