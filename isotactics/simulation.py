"""
Tick function for the spatial core.

Stage order per tick: picking -> selection -> path assignment -> movement.
Requests raised during a tick are queued on the bus and drained here, so
same-tick behaviour does not depend on handler registration order.
"""
from __future__ import annotations

from typing import Optional, Tuple

from .constants import DEFAULT_SEED, MAP_D, MAP_W, TILE_SIZE
from .events import DeselectUnit, EventBus, MoveCommand, SelectUnit
from .grid import Map
from .picking import pick
from .pos import Pos
from .systems.controller import ControllerSystem
from .systems.motion import MotionSystem
from .world import Roster, build_world


class Simulation:
    def __init__(self, grid: Map, roster: Roster, bus: Optional[EventBus] = None) -> None:
        self.grid = grid
        self.roster = roster
        self.bus = bus if bus is not None else EventBus()
        self.motion = MotionSystem(grid, roster, self.bus)
        self.controller = ControllerSystem(grid, roster, self.motion, self.bus)
        self.ticks = 0

    @classmethod
    def demo(
        cls, tile_size: float = TILE_SIZE, width: int = MAP_W, depth: int = MAP_D, seed: int = DEFAULT_SEED
    ) -> Simulation:
        grid, roster = build_world(tile_size, width, depth, seed)
        return cls(grid, roster)

    def tick(self, pointer: Optional[Tuple[float, float]], clicked: bool = False) -> Optional[Pos]:
        """
        One simulation step. ``pointer`` is in world space (None when the
        pointer is outside the viewport); ``clicked`` is the left-click edge.
        Returns the hovered tile.
        """
        self.controller.begin_tick()

        # 1. picking
        hovered = pick(self.grid, pointer)
        self.controller.set_hover(hovered)
        if clicked:
            self.controller.interpret_click(hovered)

        # 2. selection, 3. path assignment
        self.bus.dispatch_pending(SelectUnit, DeselectUnit)
        self.bus.dispatch_pending(MoveCommand)

        # 4. movement
        self.motion.update()
        self.controller.refresh()

        # anything else posted this tick (app events)
        self.bus.dispatch_pending()
        self.ticks += 1
        return hovered
