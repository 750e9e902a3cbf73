"""
swimlane-layout — unit tests for positioning metrics

File: tests/unit/observability/test_metrics.py
Last updated: 2026-10-19

Purpose
- Verify counter and distribution updates and deterministic snapshot export.

What this test file should cover
- Labelled counters and input validation.
- Distribution aggregates.
- Snapshot key stability and reset.
"""

from __future__ import annotations

import json
import math

import pytest

from swimlane_layout.observability.metrics import LayoutMetrics


@pytest.mark.unit
def test_counters_are_keyed_by_name_and_labels() -> None:
    metrics = LayoutMetrics()
    metrics.inc("lane.assignments", labels={"lane": "Farm"})
    metrics.inc("lane.assignments", 2, labels={"lane": "Farm"})
    metrics.inc("lane.assignments", labels={"lane": "Tower"})

    assert metrics.get_counter("lane.assignments", labels={"lane": "Farm"}) == 3.0
    assert metrics.get_counter("lane.assignments", labels={"lane": "Tower"}) == 1.0
    assert metrics.get_counter("lane.assignments") == 0.0


@pytest.mark.unit
def test_distribution_aggregates() -> None:
    metrics = LayoutMetrics()
    for sample in (4.0, 1.0, 7.0):
        metrics.observe("position.calculation_ms", sample)

    assert metrics.count("position.calculation_ms") == 3
    assert metrics.average("position.calculation_ms") == 4.0
    assert metrics.get_distribution("position.calculation_ms") == {
        "count": 3,
        "sum": 12.0,
        "min": 1.0,
        "max": 7.0,
        "avg": 4.0,
        "last": 7.0,
    }
    assert metrics.get_distribution("missing") is None
    assert metrics.average("missing") == 0.0


@pytest.mark.unit
def test_snapshot_is_deterministic_and_json_serializable() -> None:
    metrics = LayoutMetrics()
    metrics.inc("position.adjustments", labels={"z": "9", "a": "1"})
    metrics.inc("lane.assignments")
    metrics.observe("position.calculation_ms", 2.5)

    first = metrics.snapshot()
    second = metrics.snapshot()

    assert first == second
    assert list(first["counters"]) == [  # type: ignore[arg-type]
        "lane.assignments",
        "position.adjustments{a=1,z=9}",
    ]
    assert json.loads(metrics.to_json())["distributions"]["position.calculation_ms"]["count"] == 1


@pytest.mark.unit
def test_reset_clears_everything() -> None:
    metrics = LayoutMetrics()
    metrics.inc("lane.assignments")
    metrics.observe("position.calculation_ms", 1.0)

    metrics.reset()

    snapshot = metrics.snapshot()
    assert snapshot["counters"] == {}
    assert snapshot["distributions"] == {}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "amount", "message"),
    [
        ("", 1.0, "non-empty"),
        ("x" * 129, 1.0, "<= 128"),
        ("lane.assignments", -1.0, ">= 0"),
        ("lane.assignments", math.inf, "finite"),
        ("lane.assignments", True, "numeric"),
    ],
)
def test_invalid_updates_are_rejected(name: str, amount: float, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        LayoutMetrics().inc(name, amount)


@pytest.mark.unit
def test_non_finite_samples_are_rejected() -> None:
    with pytest.raises(ValueError, match="value must be finite"):
        LayoutMetrics().observe("position.calculation_ms", math.nan)
