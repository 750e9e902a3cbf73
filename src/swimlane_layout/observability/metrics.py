"""In-memory positioning metrics with deterministic snapshot export."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from swimlane_layout.domain.models import JSONValue

_MetricLabels = tuple[tuple[str, str], ...]

_METRIC_NAME_MAX_LEN: Final[int] = 128


@dataclass(frozen=True, order=True, slots=True)
class _MetricKey:
    name: str
    labels: _MetricLabels


@dataclass(slots=True)
class _DistributionState:
    count: int = 0
    total: float = 0.0
    minimum: float | None = None
    maximum: float | None = None
    last: float | None = None

    def observe(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.last = value
        if self.minimum is None or value < self.minimum:
            self.minimum = value
        if self.maximum is None or value > self.maximum:
            self.maximum = value

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def as_dict(self) -> dict[str, JSONValue]:
        return {
            "count": self.count,
            "sum": self.total,
            "min": self.minimum,
            "max": self.maximum,
            "avg": self.average,
            "last": self.last,
        }


class LayoutMetrics:
    """Counters and sample distributions for one monitoring session.

    Single-threaded by contract: a session belongs to one build loop.
    """

    def __init__(self) -> None:
        self._created_at = datetime.now(tz=UTC)
        self._counters: dict[_MetricKey, float] = {}
        self._distributions: dict[_MetricKey, _DistributionState] = {}

    def inc(
        self,
        name: str,
        amount: float = 1.0,
        *,
        labels: Mapping[str, str] | None = None,
    ) -> None:
        delta = _as_finite_float(amount, path="amount")
        if delta < 0:
            raise ValueError("counter increment amount must be >= 0")
        key = _metric_key(name, labels)
        self._counters[key] = self._counters.get(key, 0.0) + delta

    def observe(
        self,
        name: str,
        value: float,
        *,
        labels: Mapping[str, str] | None = None,
    ) -> None:
        key = _metric_key(name, labels)
        sample = _as_finite_float(value, path="value")
        state = self._distributions.get(key)
        if state is None:
            state = _DistributionState()
            self._distributions[key] = state
        state.observe(sample)

    def get_counter(self, name: str, *, labels: Mapping[str, str] | None = None) -> float:
        return self._counters.get(_metric_key(name, labels), 0.0)

    def get_distribution(
        self,
        name: str,
        *,
        labels: Mapping[str, str] | None = None,
    ) -> dict[str, JSONValue] | None:
        state = self._distributions.get(_metric_key(name, labels))
        if state is None:
            return None
        return state.as_dict()

    def average(self, name: str, *, labels: Mapping[str, str] | None = None) -> float:
        state = self._distributions.get(_metric_key(name, labels))
        return state.average if state is not None else 0.0

    def count(self, name: str, *, labels: Mapping[str, str] | None = None) -> int:
        state = self._distributions.get(_metric_key(name, labels))
        return state.count if state is not None else 0

    def reset(self) -> None:
        self._counters.clear()
        self._distributions.clear()
        self._created_at = datetime.now(tz=UTC)

    def snapshot(self) -> dict[str, JSONValue]:
        """Stable-ordered view of every counter and distribution."""

        counters: dict[str, JSONValue] = {
            _metric_identifier(key): value for key, value in sorted(self._counters.items())
        }
        distributions: dict[str, JSONValue] = {
            _metric_identifier(key): state.as_dict()
            for key, state in sorted(self._distributions.items())
        }
        return {
            "created_at": self._created_at.isoformat(timespec="seconds").replace("+00:00", "Z"),
            "counters": counters,
            "distributions": distributions,
        }

    def to_json(self) -> str:
        return json.dumps(
            self.snapshot(), sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )


def _metric_key(name: str, labels: Mapping[str, str] | None) -> _MetricKey:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("metric name must be a non-empty string")
    normalized = name.strip()
    if len(normalized) > _METRIC_NAME_MAX_LEN:
        raise ValueError(f"metric name must be <= {_METRIC_NAME_MAX_LEN} characters")
    if not labels:
        return _MetricKey(name=normalized, labels=())
    pairs = sorted((str(key).strip(), str(value).strip()) for key, value in labels.items())
    return _MetricKey(name=normalized, labels=tuple(pairs))


def _metric_identifier(key: _MetricKey) -> str:
    if not key.labels:
        return key.name
    labels = ",".join(f"{k}={v}" for k, v in key.labels)
    return f"{key.name}{{{labels}}}"


def _as_finite_float(value: float, *, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{path} must be numeric, got {type(value).__name__}")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValueError(f"{path} must be finite")
    return parsed


__all__ = ["LayoutMetrics"]
