from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, DefaultDict, Dict, Iterator, List, Mapping, Optional, Tuple

from . import coords
from .constants import WIN_H, WIN_W
from .errors import InvalidPosition, InvariantViolation
from .pos import Pos

Column = Tuple[float, float]


class TileHeight(Enum):
    """
    Closed set of tile shapes, valued by their rise in elevation units.
    A new shape needs a row here and a rule in pathing.frontier.
    """

    FULL = 1.0
    HALF = 0.5

    @property
    def rise(self) -> float:
        return self.value


@dataclass(frozen=True)
class Tile:
    pos: Pos
    height: TileHeight
    node: Any = None  # render-side reference, owned by the renderer


@dataclass
class Camera:
    """
    Orthographic camera. (x, y) is the world point at the viewport centre.
    Device pixels grow downwards, world y grows upwards.
    """

    x: float = 0.0
    y: float = 0.0
    w: int = WIN_W
    h: int = WIN_H

    def world_to_screen(self, wx: float, wy: float) -> Tuple[int, int]:
        return int(round(wx - self.x + self.w / 2)), int(round(self.h / 2 - (wy - self.y)))

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return sx - self.w / 2 + self.x, self.h / 2 - sy + self.y

    def contains(self, sx: float, sy: float) -> bool:
        return 0 <= sx < self.w and 0 <= sy < self.h


class Map:
    """
    Tile Store: occupied grid positions -> Tile, plus the isometric
    transform for this map's tile size and origin.

    Single writer; queries must not run while a mutation is in progress.
    """

    def __init__(self, tile_size: float, origin_offset: Tuple[float, float] = (0.0, 0.0)) -> None:
        self.tile_size = coords.check_tile_size(tile_size)
        # Fail fast on a degenerate basis too
        coords.inverse(coords.basis(self.tile_size))
        self.origin_offset = (float(origin_offset[0]), float(origin_offset[1]))
        self._tiles: Dict[Pos, Tile] = {}
        self._columns: DefaultDict[Column, List[float]] = defaultdict(list)
        self._elevations: DefaultDict[float, int] = defaultdict(int)

    # --- Occupancy ---
    def insert(self, pos: Pos, node: Any = None, height: TileHeight = TileHeight.FULL) -> Tile:
        """Raises InvariantViolation on an occupied position; never overwrites."""
        if not pos.is_grid_aligned():
            raise InvalidPosition(f"{pos!r} is not grid aligned")
        if pos in self._tiles:
            raise InvariantViolation(f"{pos!r} is already occupied")
        tile = Tile(pos, height, node)
        self._tiles[pos] = tile
        col = self._columns[pos.column]
        col.append(pos.y)
        col.sort()
        self._elevations[pos.y] += 1
        return tile

    def stack(self, x: float, z: float, height: TileHeight = TileHeight.FULL, node: Any = None) -> Tile:
        """Place a tile on top of column (x, z); an empty column starts at y = 0."""
        top = self.top_of(x, z)
        y = 0.0 if top is None else top.y + height.rise
        return self.insert(Pos(x, y, z), node, height)

    def get(self, pos: Pos) -> Optional[Tile]:
        return self._tiles.get(pos)

    def remove(self, pos: Pos) -> Optional[Tile]:
        tile = self._tiles.pop(pos, None)
        if tile is None:
            return None
        col = self._columns[pos.column]
        col.remove(pos.y)
        if not col:
            del self._columns[pos.column]
        self._elevations[pos.y] -= 1
        if self._elevations[pos.y] == 0:
            del self._elevations[pos.y]
        return tile

    def __contains__(self, pos: object) -> bool:
        return pos in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Pos]:
        return iter(self._tiles)

    @property
    def tiles(self) -> Mapping[Pos, Tile]:
        return MappingProxyType(self._tiles)

    # --- Columns & elevation ---
    def column(self, x: float, z: float) -> List[Pos]:
        """Positions in column (x, z), lowest first."""
        return [Pos(x, y, z) for y in self._columns.get((float(x), float(z)), ())]

    def top_of(self, x: float, z: float) -> Optional[Pos]:
        ys = self._columns.get((float(x), float(z)))
        return Pos(x, ys[-1], z) if ys else None

    def elevations(self) -> List[float]:
        """Distinct occupied elevations, highest first."""
        return sorted(self._elevations, reverse=True)

    def is_covered(self, pos: Pos) -> bool:
        """Something rests directly on top (half or full step above)."""
        return pos.offset(dy=0.5) in self._tiles or pos.offset(dy=1.0) in self._tiles

    def has_tile_above(self, pos: Pos) -> bool:
        ys = self._columns.get(pos.column)
        return bool(ys) and ys[-1] > pos.y

    # --- Transform ---
    def to_screen(self, pos: Pos) -> Tuple[float, float, float]:
        return coords.to_screen(pos, self.tile_size, self.origin_offset)

    def to_world(self, point: Tuple[float, float]) -> Pos:
        return coords.to_world(point, self.tile_size, self.origin_offset)

    def elevation_offset(self, y: float) -> float:
        return coords.elevation_offset(y, self.tile_size)

    def draw_order(self) -> List[Pos]:
        """Positions back-to-front for a painter."""
        return sorted(self._tiles, key=lambda p: (coords.z_order(p), p))
