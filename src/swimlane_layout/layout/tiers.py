"""
Tier computation over the prerequisite graph.

``tier(item) = 0`` without prerequisites, otherwise ``1 + max(tier(p))``.

The traversal is an iterative depth-first search with an explicit frame
stack. Start nodes are visited in input order and prerequisites in list
order. Cycle policy: a prerequisite that is still on the active traversal
path (a back edge, self-loops included) is ignored for tier purposes. The
edge is recorded in ``TierAssignment.broken_edges`` and is never rendered.
Prerequisites that name unknown ids are ignored and recorded in
``TierAssignment.missing_prerequisites``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from swimlane_layout.domain.models import Edge, Item

_UNVISITED = 0
_ACTIVE = 1
_DONE = 2


@dataclass(frozen=True, slots=True)
class BrokenEdge:
    """Prerequisite edge dropped to break a cycle."""

    dependent: str
    prerequisite: str
    cycle: tuple[str, ...]

    def describe(self) -> str:
        return " -> ".join(self.cycle)


@dataclass(frozen=True, slots=True)
class TierAssignment:
    tiers: Mapping[str, int]
    broken_edges: tuple[BrokenEdge, ...] = ()
    missing_prerequisites: tuple[tuple[str, str], ...] = ()

    def tier_of(self, item_id: str) -> int:
        return self.tiers.get(item_id, 0)

    @property
    def max_tier(self) -> int:
        return max(self.tiers.values(), default=0)

    def is_broken(self, dependent: str, prerequisite: str) -> bool:
        return any(
            edge.dependent == dependent and edge.prerequisite == prerequisite
            for edge in self.broken_edges
        )


class PrerequisiteGraph:
    """Items keyed by id with their ordered prerequisite lists.

    The first item carrying a given id wins; later duplicates are ignored.
    """

    __slots__ = ("_order", "_prerequisites")

    def __init__(self, items: Iterable[Item]) -> None:
        self._order: list[str] = []
        self._prerequisites: dict[str, tuple[str, ...]] = {}
        for item in items:
            if item.id in self._prerequisites:
                continue
            self._order.append(item.id)
            self._prerequisites[item.id] = _unique(item.prerequisites)

    @property
    def nodes(self) -> tuple[str, ...]:
        return tuple(self._order)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._prerequisites

    def prerequisites_of(self, item_id: str) -> tuple[str, ...]:
        return self._prerequisites.get(item_id, ())

    def compute_tiers(self) -> TierAssignment:
        state: dict[str, int] = {}
        tiers: dict[str, int] = {}
        best: dict[str, int] = {}
        stack_index: dict[str, int] = {}
        stack: list[str] = []
        broken: list[BrokenEdge] = []
        missing: list[tuple[str, str]] = []

        for start in self._order:
            if state.get(start, _UNVISITED) != _UNVISITED:
                continue

            state[start] = _ACTIVE
            best[start] = 0
            stack_index[start] = len(stack)
            stack.append(start)
            frames: list[tuple[str, Iterator[str]]] = [
                (start, iter(self._prerequisites[start]))
            ]

            while frames:
                node, prereq_iter = frames[-1]

                try:
                    prereq = next(prereq_iter)
                except StopIteration:
                    frames.pop()
                    tiers[node] = best[node]
                    state[node] = _DONE
                    stack.pop()
                    del stack_index[node]
                    if frames:
                        parent = frames[-1][0]
                        best[parent] = max(best[parent], tiers[node] + 1)
                    continue

                if prereq not in self._prerequisites:
                    missing.append((node, prereq))
                    continue

                prereq_state = state.get(prereq, _UNVISITED)
                if prereq_state == _DONE:
                    best[node] = max(best[node], tiers[prereq] + 1)
                    continue

                if prereq_state == _ACTIVE:
                    cycle = (*stack[stack_index[prereq] :], prereq)
                    broken.append(BrokenEdge(dependent=node, prerequisite=prereq, cycle=cycle))
                    continue

                state[prereq] = _ACTIVE
                best[prereq] = 0
                stack_index[prereq] = len(stack)
                stack.append(prereq)
                frames.append((prereq, iter(self._prerequisites[prereq])))

        ordered = {item_id: tiers[item_id] for item_id in self._order}
        return TierAssignment(
            tiers=ordered,
            broken_edges=tuple(broken),
            missing_prerequisites=tuple(missing),
        )

    def edges(self, assignment: TierAssignment) -> tuple[Edge, ...]:
        """Renderable prerequisite edges in node order, then prerequisite order."""

        broken = {(edge.dependent, edge.prerequisite) for edge in assignment.broken_edges}
        out: list[Edge] = []
        for dependent in self._order:
            for prereq in self._prerequisites[dependent]:
                if prereq not in self._prerequisites:
                    continue
                if (dependent, prereq) in broken:
                    continue
                out.append(Edge(source=prereq, target=dependent))
        return tuple(out)


def calculate_tiers(items: Iterable[Item]) -> dict[str, int]:
    """Convenience wrapper returning only the ``id -> tier`` mapping."""

    return dict(PrerequisiteGraph(items).compute_tiers().tiers)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return tuple(seen)


__all__ = [
    "BrokenEdge",
    "PrerequisiteGraph",
    "TierAssignment",
    "calculate_tiers",
]
