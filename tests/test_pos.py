"""Pos: exact, canonical, totally ordered grid keys."""
import math

import pytest

from isotactics.errors import InvalidPosition
from isotactics.pos import Pos


def test_int_and_float_components_are_the_same_key():
    assert Pos(1, 0, 2) == Pos(1.0, 0.0, 2.0)
    assert hash(Pos(1, 0, 2)) == hash(Pos(1.0, 0.0, 2.0))
    assert {Pos(1, 0, 2): "a"}[Pos(1.0, 0.0, 2.0)] == "a"


def test_negative_zero_is_canonicalised():
    p = Pos(-0.0, -0.0, -0.0)
    assert p == Pos(0, 0, 0)
    assert math.copysign(1.0, p.x) == 1.0
    assert hash(p) == hash(Pos(0, 0, 0))


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_components_are_rejected(bad):
    with pytest.raises(InvalidPosition):
        Pos(0, bad, 0)
    with pytest.raises(ValueError):
        Pos(bad, 0, 0)


def test_exact_equality_has_no_tolerance():
    assert Pos(0, 0.5, 0) != Pos(0, 0.5 + 1e-12, 0)


def test_ordering_is_total_and_lexicographic():
    ps = [Pos(1, 0, 0), Pos(0, 1, 0), Pos(0, 0.5, 2), Pos(0, 0.5, 1)]
    assert sorted(ps) == [Pos(0, 0.5, 1), Pos(0, 0.5, 2), Pos(0, 1, 0), Pos(1, 0, 0)]


def test_grid_alignment():
    assert Pos(3, 1.5, -2).is_grid_aligned()
    assert not Pos(0.5, 0, 0).is_grid_aligned()
    assert not Pos(0, 0.25, 0).is_grid_aligned()


def test_helpers():
    p = Pos(1, 0.5, 2)
    assert tuple(p) == (1.0, 0.5, 2.0)
    assert p.column == (1.0, 2.0)
    assert p.offset(dy=0.5) == Pos(1, 1, 2)
    assert repr(p) == "Pos(1, 0.5, 2)"
