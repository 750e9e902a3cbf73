"""Domain types shared by the layout, validation, and monitoring layers.

The domain layer stays free of IO and logging side effects.
"""

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
    ValidationIssue,
    ValidationResult,
    ViolationSeverity,
    ViolationType,
    canonical_json,
    slugify,
)

__all__ = [
    "BoundaryViolation",
    "CalculationStep",
    "Edge",
    "IssueSeverity",
    "Item",
    "JSONValue",
    "LaneBoundary",
    "Position",
    "PositionedNode",
    "ValidationIssue",
    "ValidationResult",
    "ViolationSeverity",
    "ViolationType",
    "canonical_json",
    "slugify",
]
