from __future__ import annotations

import logging
from typing import Optional, Tuple

from .grid import Map
from .pos import Pos

logger = logging.getLogger(__name__)


def pick(grid: Map, pointer: Optional[Tuple[float, float]]) -> Optional[Pos]:
    """
    Topmost occupied position under ``pointer`` (world-space point), or None.

    Tile footprints overlap across elevations, so each elevation is tried
    from the highest down: remove that level's lift, invert, and look the
    cell up. The first hit wins. A hit with anything stacked above it in the
    same column is rejected, even if the upper tile's own footprint missed.
    """
    if pointer is None:
        return None
    px, py = pointer

    hit: Optional[Pos] = None
    for y in grid.elevations():
        cell = grid.to_world((px, py - grid.elevation_offset(y)))
        cand = Pos(cell.x, y, cell.z)
        if cand in grid:
            hit = cand
            break

    if hit is None:
        return None
    if grid.has_tile_above(hit):
        logger.debug("pick %r occluded from above", hit)
        return None
    return hit
