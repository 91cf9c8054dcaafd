from __future__ import annotations

import logging
import math
from typing import AbstractSet, Optional

from ..components import Unit, facing_towards
from ..constants import ARRIVAL_EPS
from ..events import EventBus, UnitArrived
from ..grid import Map
from ..pathing import PathResult, PathStatus, shortest_path
from ..pos import Pos
from ..world import Roster

logger = logging.getLogger(__name__)


class MotionSystem:
    """
    Path following at constant speed per tick:
      - Idle while the unit's path is empty, Moving otherwise
      - facing is taken from the logical step (current pos -> next waypoint)
      - the logical position only changes when a waypoint is reached
      - aborts the path if the next tile vanished or another unit took it,
        returning to the last reached tile when caught mid-step
    """

    def __init__(self, grid: Map, roster: Roster, bus: Optional[EventBus] = None) -> None:
        self.grid = grid
        self.roster = roster
        self.bus = bus

    def assign(self, unit: Unit, target: Pos, blocked: AbstractSet[Pos] = frozenset()) -> PathResult:
        """
        Replace the unit's pending path with a route to ``target``, planned
        once from its last reached waypoint (not its screen position).
        On NO_PATH the current path is kept.
        """
        result = shortest_path(self.grid, unit.pos, target, blocked)
        if result.status is PathStatus.FOUND:
            unit.path.clear()
            unit.path.extend(result.path)
        elif result.status is PathStatus.AT_GOAL:
            unit.path.clear()
            # Mid-step: walk back onto the tile we logically stand on
            if (unit.sx, unit.sy) != self.grid.to_screen(unit.pos)[:2]:
                unit.path.append(unit.pos)
        return result

    def update(self) -> None:
        for unit in self.roster:
            self.step(unit)

    def step(self, unit: Unit) -> None:
        # record previous screen pos for interpolation
        unit.prev_sx, unit.prev_sy = unit.sx, unit.sy
        if not unit.path:
            return

        nxt = unit.path[0]
        tile = self.grid.get(nxt)
        other = self.roster.at(nxt)
        if tile is None or (other is not None and other.uid != unit.uid):
            logger.info("unit %d: waypoint %r no longer free, stopping", unit.uid, nxt)
            unit.path.clear()
            # Mid-step: walk back onto the last reached tile
            if nxt != unit.pos and (unit.sx, unit.sy) != self.grid.to_screen(unit.pos)[:2]:
                unit.path.append(unit.pos)
            return

        if nxt != unit.pos:
            unit.facing = facing_towards(unit.pos, nxt)

        tx, ty, _ = self.grid.to_screen(nxt)
        dx, dy = tx - unit.sx, ty - unit.sy
        dist = math.hypot(dx, dy)
        if dist > 0.0:
            travel = min(unit.move_speed, dist)
            unit.sx += dx / dist * travel
            unit.sy += dy / dist * travel

        if math.hypot(tx - unit.sx, ty - unit.sy) < ARRIVAL_EPS:
            unit.sx, unit.sy = tx, ty
            unit.pos = nxt
            unit.tile = tile
            unit.path.popleft()
            if self.bus is not None:
                self.bus.publish(UnitArrived(unit.uid, nxt))
