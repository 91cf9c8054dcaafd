import pytest

from isotactics.components import DEFAULT_FACING
from isotactics.constants import UNIT_START
from isotactics.errors import ConfigurationError, InvariantViolation
from isotactics.grid import TileHeight
from isotactics.pos import Pos
from isotactics.world import Roster, TileSprite, build_demo_map, build_world, centred_origin, spawn_unit

from conftest import make_flat


def test_demo_map_layout():
    grid = build_demo_map(seed=1)
    # 10x10 ground plus half tiles on x % 2 == 0 and z % 3 == 0
    assert len(grid) == 100 + 5 * 4
    assert grid.elevations() == [0.5, 0.0]
    assert grid.get(Pos(4, 0.5, 6)).height is TileHeight.HALF
    assert grid.get(Pos(5, 0.5, 6)) is None
    assert grid.is_covered(Pos(4, 0, 6))


def test_demo_map_is_seeded():
    a = build_demo_map(seed=3)
    b = build_demo_map(seed=3)
    assert [t.node for t in a.tiles.values()] == [t.node for t in b.tiles.values()]
    assert all(isinstance(t.node, TileSprite) for t in a.tiles.values())


def test_origin_centres_the_map():
    grid = build_demo_map()
    assert centred_origin(10, 10, 32.0) == grid.origin_offset
    sx, sy, _ = grid.to_screen(Pos(4.5, 0, 4.5))
    assert (sx, sy) == (0.0, 0.0)


def test_build_world_spawns_the_unit():
    grid, roster = build_world()
    assert len(roster) == 1
    unit = next(iter(roster))
    assert unit.pos == Pos(*UNIT_START)
    assert unit.tile is grid.get(unit.pos)
    assert unit.screen == grid.to_screen(unit.pos)[:2]
    assert unit.facing is DEFAULT_FACING and not unit.moving


def test_build_world_on_a_small_map_stands_on_top():
    grid, roster = build_world(width=3, depth=1)
    # column (2, 0) carries a half tile
    assert next(iter(roster)).pos == Pos(2, 0.5, 0)


def test_spawn_requires_a_free_uncovered_tile():
    grid = make_flat()
    grid.insert(Pos(0, 0.5, 0), height=TileHeight.HALF)
    roster = Roster()
    with pytest.raises(InvariantViolation):
        spawn_unit(grid, roster, Pos(5, 0, 5))
    with pytest.raises(InvariantViolation):
        spawn_unit(grid, roster, Pos(0, 0, 0))
    spawn_unit(grid, roster, Pos(1, 0, 1))
    with pytest.raises(InvariantViolation):
        spawn_unit(grid, roster, Pos(1, 0, 1))
    assert len(roster) == 1


def test_spawn_validates_movement_settings():
    grid, roster = make_flat(), Roster()
    with pytest.raises(ConfigurationError):
        spawn_unit(grid, roster, Pos(0, 0, 0), move_speed=0)
    with pytest.raises(ConfigurationError):
        spawn_unit(grid, roster, Pos(0, 0, 0), move_range=-1)


def test_roster_lookup():
    grid, roster = make_flat(), Roster()
    a = spawn_unit(grid, roster, Pos(0, 0, 0))
    b = spawn_unit(grid, roster, Pos(2, 0, 2))
    assert roster.get(a.uid) is a and roster.get(99) is None
    assert roster.at(Pos(2, 0, 2)) is b and roster.at(Pos(1, 0, 1)) is None
    assert roster.positions() == {a.pos, b.pos}
    assert roster.positions(exclude=a.uid) == {b.pos}
