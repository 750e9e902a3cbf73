"""Frozen dataclass domain models with canonical dict serialization."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from swimlane_layout.constants import LANE_BUFFER, NODE_HEIGHT, TREE_CATEGORIES

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_SOURCE_KEYS: Final[tuple[str, ...]] = ("sourceFile", "source_file", "source")
_FEATURE_KEYS: Final[tuple[str, ...]] = ("gameFeature", "game_feature", "feature")
_KNOWN_ITEM_KEYS: Final[frozenset[str]] = frozenset(
    {
        "id",
        "name",
        "category",
        "categories",
        "prerequisites",
        *_SOURCE_KEYS,
        *_FEATURE_KEYS,
    }
)


class ViolationType(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"


class ViolationSeverity(StrEnum):
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class IssueSeverity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Item:
    """Game-content item as delivered by the upstream data loader.

    Only ``id``, ``category``, ``source_file``, ``prerequisites`` and
    ``categories`` influence layout. Everything else rides along in
    ``attributes`` untouched.
    """

    id: str
    name: str
    category: str
    source_file: str = ""
    prerequisites: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    game_feature: str = ""
    attributes: Mapping[str, object] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_tree_item(self) -> bool:
        return self.category in TREE_CATEGORIES

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Item:
        """Build an item from a loosely typed record without raising on bad fields."""

        prerequisites = _text_sequence(data.get("prerequisites"))
        categories = _text_sequence(data.get("categories"))
        attributes = {
            str(key): value for key, value in data.items() if str(key) not in _KNOWN_ITEM_KEYS
        }
        return cls(
            id=_text(data.get("id")),
            name=_text(data.get("name")),
            category=_text(data.get("category")),
            source_file=_first_text(data, _SOURCE_KEYS),
            prerequisites=prerequisites,
            categories=categories,
            game_feature=_first_text(data, _FEATURE_KEYS),
            attributes=attributes,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "sourceFile": self.source_file,
            "prerequisites": list(self.prerequisites),
            "categories": list(self.categories),
            "gameFeature": self.game_feature,
        }


@dataclass(frozen=True, slots=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> dict[str, JSONValue]:
        return {"x": _round(self.x), "y": _round(self.y)}


@dataclass(frozen=True, slots=True)
class LaneBoundary:
    """Vertical band occupied by one lane.

    ``height``, ``center_y`` and ``usable_height`` are derived from the
    stored span so the band can never disagree with itself.
    """

    lane: str
    start_y: float
    end_y: float
    buffer: float = LANE_BUFFER

    @property
    def height(self) -> float:
        return self.end_y - self.start_y

    @property
    def center_y(self) -> float:
        return self.start_y + self.height / 2

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.buffer

    def min_center_y(self, node_height: float = NODE_HEIGHT) -> float:
        return self.start_y + self.buffer + node_height / 2

    def max_center_y(self, node_height: float = NODE_HEIGHT) -> float:
        return self.end_y - self.buffer - node_height / 2

    def with_height(self, height: float) -> LaneBoundary:
        return LaneBoundary(
            lane=self.lane,
            start_y=self.start_y,
            end_y=self.start_y + height,
            buffer=self.buffer,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "lane": self.lane,
            "startY": _round(self.start_y),
            "endY": _round(self.end_y),
            "centerY": _round(self.center_y),
            "height": _round(self.height),
            "usableHeight": _round(self.usable_height),
        }


@dataclass(frozen=True, slots=True)
class PositionedNode:
    item: Item
    position: Position
    lane: str
    tier: int
    within_bounds: bool = True

    @property
    def id(self) -> str:
        return self.item.id

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "id": self.item.id,
            "name": self.item.name,
            "lane": self.lane,
            "tier": self.tier,
            "position": self.position.to_dict(),
            "withinBounds": self.within_bounds,
        }


@dataclass(frozen=True, slots=True)
class Edge:
    source: str
    target: str

    @property
    def id(self) -> str:
        return f"prereq-{self.source}-to-{self.target}"

    def to_dict(self) -> dict[str, JSONValue]:
        return {"id": self.id, "source": self.source, "target": self.target}


@dataclass(frozen=True, slots=True)
class BoundaryViolation:
    node_id: str
    violation_type: ViolationType
    severity: ViolationSeverity
    allowed_boundary: float
    actual_position: float

    @property
    def excess(self) -> float:
        return abs(self.actual_position - self.allowed_boundary)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "node": self.node_id,
            "violationType": self.violation_type.value,
            "severity": self.severity.value,
            "allowedBoundary": _round(self.allowed_boundary),
            "actualPosition": _round(self.actual_position),
        }


@dataclass(frozen=True, slots=True)
class CalculationStep:
    step: int
    description: str
    input: JSONValue
    output: JSONValue
    timestamp: float

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "step": self.step,
            "description": self.description,
            "input": self.input,
            "output": self.output,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    severity: IssueSeverity
    message: str
    node_id: str | None = None
    lane: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.node_id is not None:
            payload["nodeId"] = self.node_id
        if self.lane is not None:
            payload["lane"] = self.lane
        return payload


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of one named structural check or automated test run."""

    test_name: str
    passed: bool
    duration_ms: float = 0.0
    issues: tuple[ValidationIssue, ...] = ()
    metrics: Mapping[str, JSONValue] = field(default_factory=dict)
    recommendations: tuple[str, ...] = ()

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.severity is IssueSeverity.ERROR)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "testName": self.test_name,
            "passed": self.passed,
            "duration": _round(self.duration_ms),
            "issues": [issue.to_dict() for issue in self.issues],
            "metrics": dict(self.metrics),
            "recommendations": list(self.recommendations),
        }


def canonical_json(value: JSONValue) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def slugify(text: str) -> str:
    """Lower-case, whitespace and underscores collapsed to single hyphens."""

    words = text.replace("_", " ").lower().split()
    return "-".join(words) if words else "general"


def _round(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return round(value, 3)


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _first_text(data: Mapping[str, object], keys: tuple[str, ...]) -> str:
    for key in keys:
        if key in data:
            parsed = _text(data[key])
            if parsed:
                return parsed
    return ""


def _text_sequence(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        # Upstream CSV exports join prerequisite ids with semicolons.
        parts = value.replace(",", ";").split(";")
        return tuple(part.strip() for part in parts if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(text for text in (_text(item) for item in value) if text)
    return ()


__all__ = [
    "BoundaryViolation",
    "CalculationStep",
    "Edge",
    "IssueSeverity",
    "Item",
    "JSONScalar",
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
