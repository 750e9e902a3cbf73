"""
Lane assignment: ordered lookup tables plus one fallback rule.

Rules are evaluated first-match-wins:

1. Items missing an id or a name: ``DEFAULT_LANE``.
2. ``SOURCE_LANE_RULES``: glob patterns over the lower-cased basename of the
   item's source tag.
3. ``KEYWORD_LANE_RULES``: keywords matched against the tokens of the item's
   free-form category tags, then its game feature.
4. ``DEFAULT_LANE``.

Every function here is pure; identical items always land in the same lane.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath
from typing import Final

from swimlane_layout.constants import DEFAULT_LANE
from swimlane_layout.domain.models import Item

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

INVALID_ITEM_REASON: Final[str] = f"missing id or name; defaulted to {DEFAULT_LANE}"


class AssignmentRule(StrEnum):
    SOURCE = "source"
    KEYWORD = "keyword"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class LaneRule:
    pattern: str
    lane: str


@dataclass(frozen=True, slots=True)
class LaneDecision:
    lane: str
    rule: AssignmentRule
    matched: str | None
    reason: str

    @property
    def is_fallback(self) -> bool:
        return self.rule is AssignmentRule.FALLBACK


SOURCE_LANE_RULES: Final[tuple[LaneRule, ...]] = (
    LaneRule("farm_actions.csv", "Farm"),
    LaneRule("crops.csv", "Farm"),
    LaneRule("farm_stages.csv", "Farm"),
    LaneRule("helpers.csv", "Farm"),
    LaneRule("helper_roles.csv", "Farm"),
    LaneRule("vendors.csv", "Vendors"),
    LaneRule("town_blacksmith.csv", "Blacksmith"),
    LaneRule("town_agronomist.csv", "Agronomist"),
    LaneRule("town_carpenter.csv", "Carpenter"),
    LaneRule("town_land_steward.csv", "Land Steward"),
    LaneRule("town_material_trader.csv", "Material Trader"),
    LaneRule("town_skills_trainer.csv", "Skills Trainer"),
    LaneRule("adventures.csv", "Adventure"),
    LaneRule("weapons.csv", "Combat"),
    LaneRule("xp_progression.csv", "Combat"),
    LaneRule("boss_materials.csv", "Combat"),
    LaneRule("armor_*.csv", "Combat"),
    LaneRule("route_*.csv", "Combat"),
    LaneRule("enemy_types_damage.csv", "Combat"),
    LaneRule("forge_actions.csv", "Forge"),
    LaneRule("tools.csv", "Forge"),
    LaneRule("mining.csv", "Mining"),
    LaneRule("tower_actions.csv", "Tower"),
)

# Specific town vendors precede the generic "town" keyword.
KEYWORD_LANE_RULES: Final[tuple[LaneRule, ...]] = (
    LaneRule("blacksmith", "Blacksmith"),
    LaneRule("agronomist", "Agronomist"),
    LaneRule("carpenter", "Carpenter"),
    LaneRule("steward", "Land Steward"),
    LaneRule("trader", "Material Trader"),
    LaneRule("trainer", "Skills Trainer"),
    LaneRule("vendor", "Vendors"),
    LaneRule("vendors", "Vendors"),
    LaneRule("town", "Vendors"),
    LaneRule("farm", "Farm"),
    LaneRule("adventure", "Adventure"),
    LaneRule("adventures", "Adventure"),
    LaneRule("route", "Adventure"),
    LaneRule("combat", "Combat"),
    LaneRule("forge", "Forge"),
    LaneRule("mining", "Mining"),
    LaneRule("mine", "Mining"),
    LaneRule("tower", "Tower"),
)


def explain_lane(item: Item) -> LaneDecision:
    """Return the lane for ``item`` together with the rule that selected it."""

    if not item.id or not item.name:
        return LaneDecision(
            lane=DEFAULT_LANE,
            rule=AssignmentRule.FALLBACK,
            matched=None,
            reason=INVALID_ITEM_REASON,
        )

    source = _source_basename(item.source_file)
    if source:
        for rule in SOURCE_LANE_RULES:
            if fnmatch.fnmatchcase(source, rule.pattern):
                return LaneDecision(
                    lane=rule.lane,
                    rule=AssignmentRule.SOURCE,
                    matched=rule.pattern,
                    reason=f"source {source!r} matches {rule.pattern!r}",
                )

    for tag in (*item.categories, item.game_feature):
        tokens = _tokens(tag)
        if not tokens:
            continue
        for rule in KEYWORD_LANE_RULES:
            if rule.pattern in tokens:
                return LaneDecision(
                    lane=rule.lane,
                    rule=AssignmentRule.KEYWORD,
                    matched=rule.pattern,
                    reason=f"tag {tag!r} contains keyword {rule.pattern!r}",
                )

    if not item.source_file:
        detail = "no source tag"
    else:
        detail = f"unrecognized source {item.source_file!r}"
    return LaneDecision(
        lane=DEFAULT_LANE,
        rule=AssignmentRule.FALLBACK,
        matched=None,
        reason=f"{detail}; defaulted to {DEFAULT_LANE}",
    )


def assign_lane(item: Item) -> str:
    return explain_lane(item).lane


def _source_basename(source_file: str) -> str:
    text = source_file.strip().replace("\\", "/")
    if not text:
        return ""
    return PurePosixPath(text).name.lower()


def _tokens(tag: str) -> frozenset[str]:
    return frozenset(token for token in _TOKEN_SPLIT.split(tag.lower()) if token)


__all__ = [
    "AssignmentRule",
    "INVALID_ITEM_REASON",
    "KEYWORD_LANE_RULES",
    "LaneDecision",
    "LaneRule",
    "SOURCE_LANE_RULES",
    "assign_lane",
    "explain_lane",
]
