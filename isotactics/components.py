from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Tuple, Union

from .constants import DEFAULT_MOVE_RANGE, DEFAULT_MOVE_SPEED
from .grid import Tile
from .pos import Pos


# ---- Facing ----
class Facing(Enum):
    NORTH_EAST = "north_east"
    NORTH_WEST = "north_west"
    SOUTH_EAST = "south_east"
    SOUTH_WEST = "south_west"


# Spawn sprite; also used when a step gives no single-axis direction
DEFAULT_FACING = Facing.SOUTH_EAST

# Grid step -> facing, matching where the step lands on screen
# (+x projects right/down, +z projects left/down).
_STEP_FACING = {
    (1, 0): Facing.SOUTH_EAST,
    (-1, 0): Facing.NORTH_WEST,
    (0, 1): Facing.SOUTH_WEST,
    (0, -1): Facing.NORTH_EAST,
}


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def facing_towards(src: Pos, dst: Pos) -> Facing:
    """Sign comparison on x/z; diagonal or vertical-only steps fall back to the default."""
    return _STEP_FACING.get((_sign(dst.x - src.x), _sign(dst.z - src.z)), DEFAULT_FACING)


# ---- Units ----
@dataclass
class Unit:
    uid: int
    pos: Pos
    tile: Tile
    # Screen position of the unit's feet; previous value kept for render interpolation
    sx: float = 0.0
    sy: float = 0.0
    prev_sx: float = 0.0
    prev_sy: float = 0.0
    move_speed: float = DEFAULT_MOVE_SPEED  # screen units per tick
    move_range: int = DEFAULT_MOVE_RANGE
    facing: Facing = DEFAULT_FACING
    path: Deque[Pos] = field(default_factory=deque)

    @property
    def moving(self) -> bool:
        return bool(self.path)

    @property
    def screen(self) -> Tuple[float, float]:
        return self.sx, self.sy


# ---- Selection ----
class SelectMode(Enum):
    MOVE = "move"


@dataclass(frozen=True)
class NoSelection:
    pass


@dataclass(frozen=True)
class SelectedUnit:
    uid: int
    mode: SelectMode = SelectMode.MOVE


Selection = Union[NoSelection, SelectedUnit]
NOTHING_SELECTED = NoSelection()
