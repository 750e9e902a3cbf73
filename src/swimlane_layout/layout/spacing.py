"""
Vertical distribution of one (lane, tier) bucket as an ordered strategy chain.

Each strategy declares a precondition (``applies``) and produces a candidate
``Distribution`` or ``None``. ``distribute`` walks the chain in order and
returns the first candidate that satisfies the containment postcondition
(plus the spacing floor for every strategy except emergency packing).

Order:

1. ``CenterSingle``: one node sits on the lane's ``center_y``.
2. ``IdealSpacing``: pitch ``max(node_height, min_node_spacing)``, group
   centered in the band.
3. ``Compression``: pitch shrinks to fill the valid range, floored at
   ``min_node_spacing``.
4. ``LaneExpansion``: recovery only. Grows the band just enough to fit at
   the floor pitch, bounded by ``max_lane_height``.
5. ``EmergencyPacking``: recovery only. Spreads centers across whatever
   range exists, ignoring the spacing floor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Protocol

from swimlane_layout.domain.models import LaneBoundary
from swimlane_layout.layout.boundaries import valid_y_range
from swimlane_layout.layout.settings import LayoutSettings

_EPSILON: Final[float] = 1e-6


class DistributionStrategy(StrEnum):
    CENTER_SINGLE = "center_single"
    IDEAL_SPACING = "ideal_spacing"
    COMPRESSION = "compression"
    LANE_EXPANSION = "lane_expansion"
    EMERGENCY_PACKING = "emergency_packing"


# Higher rank means a more invasive fix.
STRATEGY_RANK: Final[dict[DistributionStrategy, int]] = {
    DistributionStrategy.CENTER_SINGLE: 0,
    DistributionStrategy.IDEAL_SPACING: 1,
    DistributionStrategy.COMPRESSION: 2,
    DistributionStrategy.LANE_EXPANSION: 3,
    DistributionStrategy.EMERGENCY_PACKING: 4,
}


@dataclass(frozen=True, slots=True)
class DistributionRequest:
    count: int
    boundary: LaneBoundary
    settings: LayoutSettings
    recovery: bool = False


@dataclass(frozen=True, slots=True)
class Distribution:
    strategy: DistributionStrategy
    centers: tuple[float, ...]
    boundary: LaneBoundary
    spacing: float | None = None

    @property
    def is_emergency(self) -> bool:
        return self.strategy is DistributionStrategy.EMERGENCY_PACKING

    @property
    def expanded(self) -> bool:
        return self.strategy is DistributionStrategy.LANE_EXPANSION

    def compression_ratio(self, settings: LayoutSettings) -> float:
        if self.spacing is None:
            return 1.0
        return self.spacing / settings.ideal_spacing


class SpacingStrategy(Protocol):
    name: DistributionStrategy

    def applies(self, request: DistributionRequest) -> bool: ...

    def place(self, request: DistributionRequest) -> Distribution | None: ...


class CenterSingle:
    name = DistributionStrategy.CENTER_SINGLE

    def applies(self, request: DistributionRequest) -> bool:
        return request.count == 1

    def place(self, request: DistributionRequest) -> Distribution | None:
        return Distribution(
            strategy=self.name,
            centers=(request.boundary.center_y,),
            boundary=request.boundary,
        )


class IdealSpacing:
    name = DistributionStrategy.IDEAL_SPACING

    def applies(self, request: DistributionRequest) -> bool:
        return request.count >= 2

    def place(self, request: DistributionRequest) -> Distribution | None:
        pitch = request.settings.ideal_spacing
        low, high = valid_y_range(request.boundary, request.settings)
        if pitch * (request.count - 1) > (high - low) + _EPSILON:
            return None
        return Distribution(
            strategy=self.name,
            centers=centered_pitch(request.count, request.boundary.center_y, pitch),
            boundary=request.boundary,
            spacing=pitch,
        )


class Compression:
    name = DistributionStrategy.COMPRESSION

    def applies(self, request: DistributionRequest) -> bool:
        return request.count >= 2

    def place(self, request: DistributionRequest) -> Distribution | None:
        low, high = valid_y_range(request.boundary, request.settings)
        pitch = (high - low) / (request.count - 1)
        if pitch < request.settings.min_node_spacing - _EPSILON:
            return None
        pitch = min(pitch, request.settings.ideal_spacing)
        return Distribution(
            strategy=self.name,
            centers=centered_pitch(request.count, request.boundary.center_y, pitch),
            boundary=request.boundary,
            spacing=pitch,
        )


class LaneExpansion:
    name = DistributionStrategy.LANE_EXPANSION

    def applies(self, request: DistributionRequest) -> bool:
        return (
            request.recovery
            and request.count >= 2
            and request.settings.allow_lane_expansion
        )

    def place(self, request: DistributionRequest) -> Distribution | None:
        settings = request.settings
        needed = (
            (request.count - 1) * settings.min_node_spacing
            + settings.node_height
            + 2 * settings.lane_buffer
        )
        height = max(request.boundary.height, needed)
        cap = settings.lane_height_cap
        if cap is not None and height > cap + _EPSILON:
            return None
        expanded = request.boundary.with_height(height)
        low, high = valid_y_range(expanded, settings)
        pitch = min((high - low) / (request.count - 1), settings.ideal_spacing)
        return Distribution(
            strategy=self.name,
            centers=centered_pitch(request.count, expanded.center_y, pitch),
            boundary=expanded,
            spacing=pitch,
        )


class EmergencyPacking:
    name = DistributionStrategy.EMERGENCY_PACKING

    def applies(self, request: DistributionRequest) -> bool:
        return request.recovery and request.count >= 1

    def place(self, request: DistributionRequest) -> Distribution | None:
        low, high = valid_y_range(request.boundary, request.settings)
        centers = spread(request.count, low, high)
        spacing = (high - low) / (request.count - 1) if request.count > 1 else None
        return Distribution(
            strategy=self.name,
            centers=centers,
            boundary=request.boundary,
            spacing=spacing,
        )


DEFAULT_STRATEGIES: Final[tuple[SpacingStrategy, ...]] = (
    CenterSingle(),
    IdealSpacing(),
    Compression(),
    LaneExpansion(),
    EmergencyPacking(),
)


def distribute(
    request: DistributionRequest,
    strategies: Sequence[SpacingStrategy] = DEFAULT_STRATEGIES,
) -> Distribution | None:
    """Return the first distribution that satisfies the postcondition.

    ``None`` means no strategy in the chain could place the bucket, which
    can only happen outside recovery (``request.recovery`` is false).
    """

    if request.count <= 0:
        return Distribution(
            strategy=DistributionStrategy.CENTER_SINGLE,
            centers=(),
            boundary=request.boundary,
        )
    for strategy in strategies:
        if not strategy.applies(request):
            continue
        candidate = strategy.place(request)
        if candidate is None:
            continue
        if satisfies_postcondition(candidate, request.settings):
            return candidate
    return None


def satisfies_postcondition(distribution: Distribution, settings: LayoutSettings) -> bool:
    low, high = valid_y_range(distribution.boundary, settings)
    for center in distribution.centers:
        if center < low - _EPSILON or center > high + _EPSILON:
            return False
    if distribution.is_emergency:
        return True
    ordered = sorted(distribution.centers)
    return all(
        later - earlier >= settings.min_node_spacing - _EPSILON
        for earlier, later in zip(ordered, ordered[1:], strict=False)
    )


def centered_pitch(count: int, center: float, pitch: float) -> tuple[float, ...]:
    start = center - pitch * (count - 1) / 2
    return tuple(start + index * pitch for index in range(count))


def spread(count: int, low: float, high: float) -> tuple[float, ...]:
    """``count`` evenly spaced centers covering ``[low, high]``; one node sits mid-range."""

    if count <= 0:
        return ()
    if count == 1 or high <= low:
        mid = (low + high) / 2
        return tuple(mid for _ in range(count))
    pitch = (high - low) / (count - 1)
    return tuple(low + index * pitch for index in range(count))


__all__ = [
    "CenterSingle",
    "Compression",
    "DEFAULT_STRATEGIES",
    "Distribution",
    "DistributionRequest",
    "DistributionStrategy",
    "EmergencyPacking",
    "IdealSpacing",
    "LaneExpansion",
    "STRATEGY_RANK",
    "SpacingStrategy",
    "centered_pitch",
    "distribute",
    "satisfies_postcondition",
    "spread",
]
