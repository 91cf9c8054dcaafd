"""Headless checks for the pygame glue (no window is opened)."""
import pygame
import pytest

from isotactics.constants import BACKGROUND, DEBUG
from isotactics.events import Quit, ToggleDebug
from isotactics.grid import Camera
from isotactics.pos import Pos
from isotactics.simulation import Simulation
from isotactics.systems.input import InputSystem
from isotactics.systems.render import RenderSystem

from conftest import point


@pytest.fixture
def sim():
    return Simulation.demo()


def test_render_draws_tiles_overlays_and_units(sim):
    surface = pygame.Surface((400, 300))
    camera = Camera(0.0, 0.0, 400, 300)
    renderer = RenderSystem(sim.grid, sim.roster, sim.controller, camera, surface)

    unit = next(iter(sim.roster))
    sim.tick(point(sim.grid, unit.pos), clicked=True)
    renderer.render(0.5)

    # the map is centred on the camera
    inner = camera.world_to_screen(*point(sim.grid, Pos(4, 0, 4)))
    assert surface.get_at(inner)[:3] != BACKGROUND
    assert surface.get_at((0, 0))[:3] == BACKGROUND
    assert sim.controller.reachable


def test_render_respects_debug_flags(sim, monkeypatch):
    monkeypatch.setattr(DEBUG, "show_reachable", False)
    monkeypatch.setattr(DEBUG, "show_outlines", False)
    surface = pygame.Surface((200, 200))
    renderer = RenderSystem(sim.grid, sim.roster, sim.controller, Camera(0.0, 0.0, 200, 200), surface)
    renderer.render(1.0, fps=60.0)


def test_input_tracks_pointer_and_click_edge(sim):
    camera = Camera(0.0, 0.0, 400, 300)
    inp = InputSystem(camera, sim.bus)
    assert inp.pointer() is None

    inp.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(200, 150), rel=(0, 0), buttons=(0, 0, 0)))
    assert inp.pointer() == (0.0, 0.0)
    camera.x = 10.0
    assert inp.pointer() == (10.0, 0.0)

    assert not inp.consume_click()
    inp.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(100, 50), button=1))
    assert inp.consume_click()
    assert not inp.consume_click()
    inp.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(100, 50), button=3))
    assert not inp.consume_click()

    inp.handle_event(pygame.event.Event(pygame.WINDOWLEAVE))
    assert inp.pointer() is None


def test_input_posts_app_events(sim):
    inp = InputSystem(Camera(), sim.bus)
    inp.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F1))
    inp.handle_event(pygame.event.Event(pygame.QUIT))
    assert sim.bus.pending() == (ToggleDebug(), Quit())


def test_input_keys_come_from_constants(sim, monkeypatch):
    import isotactics.systems.input as input_mod

    monkeypatch.setattr(input_mod, "KEY_TOGGLE_DEBUG", "K_F2")
    inp = InputSystem(Camera(), sim.bus)
    inp.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F1))
    assert sim.bus.pending() == ()
    inp.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F2))
    inp.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert sim.bus.pending() == (ToggleDebug(), Quit())
