"""Observability primitives: structured logging, metrics, and the debug monitor."""

from swimlane_layout.observability.logging import (
    correlation_scope,
    get_correlation_context,
    reset_correlation_fields,
    set_correlation_fields,
    setup_logging,
)
from swimlane_layout.observability.metrics import LayoutMetrics
from swimlane_layout.observability.monitor import (
    AssignmentStatistics,
    DebugConfig,
    DebugMonitor,
    MonitoringReport,
    VisualBoundaryElement,
)

__all__ = [
    "AssignmentStatistics",
    "DebugConfig",
    "DebugMonitor",
    "LayoutMetrics",
    "MonitoringReport",
    "VisualBoundaryElement",
    "correlation_scope",
    "get_correlation_context",
    "reset_correlation_fields",
    "set_correlation_fields",
    "setup_logging",
]
