from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, Iterator, List, Set, Tuple

from .constants import ELEVATION_STEP, HEURISTIC_DIVISOR
from .grid import Map
from .pos import Pos

logger = logging.getLogger(__name__)

# Horizontal steps along the x and z grid axes
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
# Same level, half a step up, half a step down
ELEVATION_DELTAS: Tuple[float, ...] = (0.0, ELEVATION_STEP, -ELEVATION_STEP)

_NO_BLOCKS: AbstractSet[Pos] = frozenset()


class PathStatus(Enum):
    FOUND = "found"
    AT_GOAL = "at_goal"
    NO_PATH = "no_path"


@dataclass(frozen=True)
class PathResult:
    """
    Outcome of a path search. ``path`` excludes the start and ends at the
    goal. An empty path means AT_GOAL or NO_PATH; check ``status`` (or
    truthiness, which is False only for NO_PATH).
    """

    status: PathStatus
    path: Tuple[Pos, ...] = ()

    @property
    def found(self) -> bool:
        return self.status is not PathStatus.NO_PATH

    def __bool__(self) -> bool:
        return self.found

    def __len__(self) -> int:
        return len(self.path)

    def __iter__(self) -> Iterator[Pos]:
        return iter(self.path)


NO_PATH = PathResult(PathStatus.NO_PATH)
AT_GOAL = PathResult(PathStatus.AT_GOAL)


def can_stand(grid: Map, pos: Pos, blocked: AbstractSet[Pos] = _NO_BLOCKS) -> bool:
    return pos in grid and not grid.is_covered(pos) and pos not in blocked


def frontier(grid: Map, pos: Pos, blocked: AbstractSet[Pos] = _NO_BLOCKS) -> Set[Pos]:
    """
    Occupied, uncovered neighbours one horizontal step away, at the same
    elevation or half a step up/down. At most 12 candidates.
    """
    out: Set[Pos] = set()
    for dx, dz in DIRECTIONS:
        for dy in ELEVATION_DELTAS:
            cand = Pos(pos.x + dx, pos.y + dy, pos.z + dz)
            if can_stand(grid, cand, blocked):
                out.add(cand)
    return out


def reachable(grid: Map, start: Pos, budget: int, blocked: AbstractSet[Pos] = _NO_BLOCKS) -> Set[Pos]:
    """
    Everything within ``budget`` frontier expansions of ``start``,
    excluding ``start`` itself. Layer-by-layer BFS, no goal.
    """
    if start not in grid or budget <= 0:
        return set()

    seen: Set[Pos] = {start}
    layer: Set[Pos] = {start}
    out: Set[Pos] = set()
    for _ in range(budget):
        nxt: Set[Pos] = set()
        for p in layer:
            for q in frontier(grid, p, blocked):
                if q in seen:
                    continue
                seen.add(q)
                nxt.add(q)
        if not nxt:
            break
        out |= nxt
        layer = nxt
    return out


def heuristic(a: Pos, b: Pos) -> float:
    return (abs(a.x - b.x) + abs(a.y - b.y) + abs(a.z - b.z)) / HEURISTIC_DIVISOR


def shortest_path(grid: Map, start: Pos, goal: Pos, blocked: AbstractSet[Pos] = _NO_BLOCKS) -> PathResult:
    """
    A* over the frontier graph, unit edge weights.
    Returns AT_GOAL for start == goal and NO_PATH when disconnected.
    """
    if start == goal:
        return AT_GOAL
    if not can_stand(grid, goal, blocked):
        logger.debug("no path %r -> %r: goal not standable", start, goal)
        return NO_PATH

    tie = itertools.count()
    open_heap: List[Tuple[float, int, Pos]] = [(heuristic(start, goal), next(tie), start)]
    came_from: Dict[Pos, Pos] = {}
    g: Dict[Pos, int] = {start: 0}
    closed: Set[Pos] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current == goal:
            path: List[Pos] = []
            while current != start:
                path.append(current)
                current = came_from[current]
            path.reverse()
            return PathResult(PathStatus.FOUND, tuple(path))
        if current in closed:
            continue
        closed.add(current)

        for nxt in frontier(grid, current, blocked):
            if nxt in closed:
                continue
            tentative = g[current] + 1
            if tentative < g.get(nxt, 1_000_000):
                came_from[nxt] = current
                g[nxt] = tentative
                heapq.heappush(open_heap, (tentative + heuristic(nxt, goal), next(tie), nxt))

    logger.debug("no path %r -> %r: disconnected", start, goal)
    return NO_PATH
