import os

# Draw without a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from isotactics.grid import Map
from isotactics.pos import Pos


def make_flat(width: int = 3, depth: int = 3, tile_size: float = 32.0) -> Map:
    grid = Map(tile_size)
    for x in range(width):
        for z in range(depth):
            grid.insert(Pos(x, 0, z), node=f"tile-{x}-{z}")
    return grid


def point(grid: Map, pos: Pos):
    """Screen point at the centre of a tile's top face."""
    sx, sy, _ = grid.to_screen(pos)
    return sx, sy


@pytest.fixture
def flat3() -> Map:
    return make_flat()
