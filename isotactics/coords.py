"""
World <-> screen transform for the isometric grid.

Screen space here is the world space of an orthographic camera: x grows
right, y grows up. Tile centres project to ``to_screen``; the inverse
recovers the grid column (x, z) only, elevation is resolved by picking.
"""
from __future__ import annotations

import math
from typing import Tuple

from .constants import Z_WEIGHT_X, Z_WEIGHT_Y, Z_WEIGHT_Z
from .errors import ConfigurationError
from .pos import Pos

Point = Tuple[float, float]
Matrix = Tuple[Tuple[float, float], Tuple[float, float]]


def check_tile_size(tile_size: float) -> float:
    size = float(tile_size)
    if not math.isfinite(size) or size <= 0.0:
        raise ConfigurationError(f"tile_size must be a positive finite number, got {tile_size!r}")
    return size


def basis(tile_size: float) -> Matrix:
    """Linear part of the forward map: columns are the screen images of +x and +z."""
    half = 0.5 * tile_size
    quarter = 0.25 * tile_size
    return ((half, -half), (-quarter, -quarter))


def inverse(m: Matrix) -> Matrix:
    (a, b), (c, d) = m
    det = a * d - b * c
    if det == 0.0:
        raise ConfigurationError("isometric basis is singular (tile_size = 0?)")
    return ((d / det, -b / det), (-c / det, a / det))


def elevation_offset(y: float, tile_size: float) -> float:
    """Vertical lift of a tile at elevation ``y``: half a tile per whole step."""
    return 0.5 * tile_size * y


def z_order(pos: Pos) -> float:
    return pos.x * Z_WEIGHT_X + pos.z * Z_WEIGHT_Z + pos.y * Z_WEIGHT_Y


def to_screen(pos: Pos, tile_size: float, origin: Point = (0.0, 0.0)) -> Tuple[float, float, float]:
    """Returns (screen_x, screen_y, z_order) of the tile centre."""
    (a, b), (c, d) = basis(tile_size)
    sx = a * pos.x + b * pos.z + origin[0]
    sy = c * pos.x + d * pos.z + elevation_offset(pos.y, tile_size) + origin[1]
    return sx, sy, z_order(pos)


def to_world(point: Point, tile_size: float, origin: Point = (0.0, 0.0)) -> Pos:
    """
    Inverse of the flat (y = 0) transform. The caller subtracts any
    elevation lift first. Cell centres sit on integer coordinates, so the
    continuous result is shifted by half a cell before flooring.
    """
    (a, b), (c, d) = inverse(basis(tile_size))
    sx = point[0] - origin[0]
    sy = point[1] - origin[1]
    fx = a * sx + b * sy
    fz = c * sx + d * sy
    return Pos(math.floor(fx + 0.5), 0.0, math.floor(fz + 0.5))
