import itertools

import pytest

from isotactics import coords
from isotactics.errors import ConfigurationError
from isotactics.grid import Map
from isotactics.pos import Pos

S = 32.0


def test_forward_transform_known_values():
    assert coords.to_screen(Pos(0, 0, 0), S)[:2] == (0.0, 0.0)
    assert coords.to_screen(Pos(1, 0, 0), S)[:2] == (16.0, -8.0)
    assert coords.to_screen(Pos(0, 0, 1), S)[:2] == (-16.0, -8.0)
    # one whole elevation step lifts by half a tile
    assert coords.to_screen(Pos(0, 1, 0), S)[:2] == (0.0, 16.0)
    assert coords.to_screen(Pos(0, 0.5, 0), S)[:2] == (0.0, 8.0)


def test_origin_offset_translates_everything():
    sx, sy, _ = coords.to_screen(Pos(2, 0, 1), S, (100.0, -50.0))
    bx, by, _ = coords.to_screen(Pos(2, 0, 1), S)
    assert (sx, sy) == (bx + 100.0, by - 50.0)


@pytest.mark.parametrize("tile_size", [32.0, 30.0, 17.5])
@pytest.mark.parametrize("origin", [(0.0, 0.0), (640.0, 120.0), (-13.0, 7.5)])
def test_round_trip_after_removing_elevation_lift(tile_size, origin):
    for x, z, y in itertools.product(range(-4, 6), range(-4, 6), (0.0, 0.5, 1.0, 1.5, 3.0)):
        pos = Pos(x, y, z)
        sx, sy, _ = coords.to_screen(pos, tile_size, origin)
        back = coords.to_world((sx, sy - coords.elevation_offset(y, tile_size)), tile_size, origin)
        assert (back.x, back.z) == (pos.x, pos.z)


def test_points_inside_a_footprint_map_to_its_cell():
    sx, sy, _ = coords.to_screen(Pos(3, 0, 2), S)
    for dx, dy in [(7, 0), (-7, 0), (0, 3), (0, -3), (4, 2)]:
        cell = coords.to_world((sx + dx, sy + dy), S)
        assert (cell.x, cell.z) == (3, 2)


def test_neighbouring_footprint():
    sx, sy, _ = coords.to_screen(Pos(3, 0, 2), S)
    # a little beyond the east corner is the next cell along x
    cell = coords.to_world((sx + 12, sy - 6), S)
    assert (cell.x, cell.z) == (4, 2)


@pytest.mark.parametrize("bad", [0, 0.0, -32, float("nan"), float("inf")])
def test_bad_tile_size_fails_fast(bad):
    with pytest.raises(ConfigurationError):
        coords.check_tile_size(bad)
    with pytest.raises(ConfigurationError):
        Map(bad)


def test_singular_basis():
    with pytest.raises(ConfigurationError):
        coords.inverse(coords.basis(0.0))


def test_z_order_paints_near_over_far_and_high_over_low():
    far, near = Pos(0, 0, 0), Pos(1, 0, 0)
    assert coords.z_order(far) < coords.z_order(near)
    assert coords.z_order(Pos(0, 0, 0)) < coords.z_order(Pos(0, 0, 1))
    # stacked in one column: upper drawn last
    assert coords.z_order(Pos(2, 0, 2)) < coords.z_order(Pos(2, 0.5, 2)) < coords.z_order(Pos(2, 1, 2))
    # a raised tile behind a ground tile is still drawn first
    assert coords.z_order(Pos(0, 1, 0)) < coords.z_order(Pos(1, 0, 0))
    assert coords.to_screen(near, S)[2] == coords.z_order(near)
