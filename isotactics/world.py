from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, Optional, Tuple

from .components import Unit
from .constants import (
    DEFAULT_MOVE_RANGE,
    DEFAULT_MOVE_SPEED,
    DEFAULT_SEED,
    FULL_TILE_VARIANTS,
    MAP_D,
    MAP_W,
    TILE_SIZE,
    UNIT_START,
)
from .coords import to_screen
from .errors import ConfigurationError, InvariantViolation
from .grid import Map, TileHeight
from .pos import Pos

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileSprite:
    """Render node for a tile: which sprite variant to draw."""
    variant: int = 0


class Roster:
    """Units by id; at most one unit per tile."""

    def __init__(self) -> None:
        self._units: Dict[int, Unit] = {}
        self._next_uid: int = 1

    def new_uid(self) -> int:
        uid = self._next_uid
        self._next_uid += 1
        return uid

    def add(self, unit: Unit) -> None:
        if unit.uid in self._units:
            raise InvariantViolation(f"unit {unit.uid} already exists")
        other = self.at(unit.pos)
        if other is not None:
            raise InvariantViolation(f"{unit.pos!r} already holds unit {other.uid}")
        self._units[unit.uid] = unit

    def get(self, uid: int) -> Optional[Unit]:
        return self._units.get(uid)

    def at(self, pos: Pos) -> Optional[Unit]:
        for unit in self._units.values():
            if unit.pos == pos:
                return unit
        return None

    def positions(self, exclude: Optional[int] = None) -> FrozenSet[Pos]:
        return frozenset(u.pos for u in self._units.values() if u.uid != exclude)

    def __iter__(self) -> Iterator[Unit]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)


def centred_origin(width: int, depth: int, tile_size: float) -> Tuple[float, float]:
    """Origin offset that puts the middle of a width x depth map at world (0, 0)."""
    mid = Pos((width - 1) / 2, 0.0, (depth - 1) / 2)
    sx, sy, _ = to_screen(mid, tile_size)
    return -sx, -sy


def build_demo_map(
    tile_size: float = TILE_SIZE, width: int = MAP_W, depth: int = MAP_D, seed: int = DEFAULT_SEED
) -> Map:
    """
    Ground layer of full tiles with a random sprite each, and half tiles
    on every second x and third z.
    """
    rng = random.Random(seed)
    grid = Map(tile_size, centred_origin(width, depth, tile_size))

    for x in range(width):
        for z in range(depth):
            grid.insert(Pos(x, 0, z), TileSprite(rng.randrange(FULL_TILE_VARIANTS)), TileHeight.FULL)

    for x in range(width):
        for z in range(depth):
            if x % 2 == 0 and z % 3 == 0:
                grid.stack(x, z, TileHeight.HALF, TileSprite())

    logger.info("built %dx%d map: %d tiles, elevations %s", width, depth, len(grid), grid.elevations())
    return grid


def spawn_unit(grid: Map, roster: Roster, pos: Pos, **kwargs) -> Unit:
    """Place a unit on an occupied, uncovered tile."""
    tile = grid.get(pos)
    if tile is None:
        raise InvariantViolation(f"cannot spawn on {pos!r}: no tile")
    if grid.is_covered(pos):
        raise InvariantViolation(f"cannot spawn on {pos!r}: tile is covered")
    if kwargs.get("move_speed", DEFAULT_MOVE_SPEED) <= 0:
        raise ConfigurationError(f"move_speed must be positive, got {kwargs['move_speed']!r}")
    if kwargs.get("move_range", DEFAULT_MOVE_RANGE) < 0:
        raise ConfigurationError(f"move_range must not be negative, got {kwargs['move_range']!r}")

    sx, sy, _ = grid.to_screen(pos)
    unit = Unit(uid=roster.new_uid(), pos=pos, tile=tile, sx=sx, sy=sy, prev_sx=sx, prev_sy=sy, **kwargs)
    roster.add(unit)
    logger.info("spawned unit %d at %r", unit.uid, pos)
    return unit


def build_world(
    tile_size: float = TILE_SIZE, width: int = MAP_W, depth: int = MAP_D, seed: int = DEFAULT_SEED
) -> Tuple[Map, Roster]:
    grid = build_demo_map(tile_size, width, depth, seed)
    roster = Roster()
    x, _, z = UNIT_START
    # Stand on whatever is on top of the start column
    start = grid.top_of(min(x, width - 1), min(z, depth - 1))
    spawn_unit(grid, roster, start)
    return grid, roster
