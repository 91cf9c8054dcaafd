from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

from .constants import ELEVATION_STEP
from .errors import InvalidPosition


def _canonical(value: float, axis: str) -> float:
    v = float(value)
    if math.isnan(v) or math.isinf(v):
        raise InvalidPosition(f"{axis} must be finite, got {value!r}")
    # -0.0 and 0.0 must be the same key
    return v + 0.0


@dataclass(frozen=True, order=True)
class Pos:
    """
    Exact grid coordinate. x/z are the SW–NE and SE–NW grid axes,
    y is elevation in half-steps.

    Components are canonicalised on construction (finite floats, no
    negative zero), so equality, hashing and ordering are exact and total.
    """

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _canonical(self.x, "x"))
        object.__setattr__(self, "y", _canonical(self.y, "y"))
        object.__setattr__(self, "z", _canonical(self.z, "z"))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __repr__(self) -> str:
        return f"Pos({self.x:g}, {self.y:g}, {self.z:g})"

    @property
    def column(self) -> Tuple[float, float]:
        return self.x, self.z

    def offset(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Pos:
        return Pos(self.x + dx, self.y + dy, self.z + dz)

    def is_grid_aligned(self) -> bool:
        return (
            self.x.is_integer()
            and self.z.is_integer()
            and (self.y / ELEVATION_STEP).is_integer()
        )
