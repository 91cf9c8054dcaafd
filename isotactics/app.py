from __future__ import annotations

import argparse
import logging
import sys
from time import perf_counter
from typing import List, Optional

import pygame

from .constants import (
    DEBUG,
    DEFAULT_SEED,
    DT_CLAMP,
    FIXED_DT,
    MAP_D,
    MAP_W,
    MAX_STEPS_PER_FRAME,
    TILE_SIZE,
    WIN_H,
    WIN_W,
)
from .events import Quit, ToggleDebug
from .grid import Camera
from .simulation import Simulation
from .systems.input import InputSystem
from .systems.render import RenderSystem

logger = logging.getLogger(__name__)

CAMERA_PAN_SPEED = 8.0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="isotactics", description="Isometric tile grid with unit movement.")
    p.add_argument("--tile-size", type=float, default=TILE_SIZE, help="tile size in screen units")
    p.add_argument("--width", type=int, default=MAP_W, help="map size along x")
    p.add_argument("--depth", type=int, default=MAP_D, help="map size along z")
    p.add_argument("--seed", type=int, default=DEFAULT_SEED, help="tile sprite RNG seed")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def toggle_debug(_: ToggleDebug) -> None:
    DEBUG.show_fps = not DEBUG.show_fps
    DEBUG.show_outlines = not DEBUG.show_outlines


def pan_camera(camera: Camera) -> None:
    # Not event-driven to keep it responsive
    keys = pygame.key.get_pressed()
    if keys[pygame.K_a] or keys[pygame.K_LEFT]:
        camera.x -= CAMERA_PAN_SPEED
    if keys[pygame.K_d] or keys[pygame.K_RIGHT]:
        camera.x += CAMERA_PAN_SPEED
    if keys[pygame.K_w] or keys[pygame.K_UP]:
        camera.y += CAMERA_PAN_SPEED
    if keys[pygame.K_s] or keys[pygame.K_DOWN]:
        camera.y -= CAMERA_PAN_SPEED


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sim = Simulation.demo(args.tile_size, args.width, args.depth, args.seed)

    pygame.init()
    pygame.display.set_caption("isotactics")
    screen = pygame.display.set_mode((WIN_W, WIN_H))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas,menlo,monaco,dejavu sans mono", 14)

    camera = Camera(0.0, 0.0, WIN_W, WIN_H)
    input_sys = InputSystem(camera, sim.bus)
    renderer = RenderSystem(sim.grid, sim.roster, sim.controller, camera, screen, font)

    running = True

    def stop(_: Quit) -> None:
        nonlocal running
        running = False

    sim.bus.subscribe(Quit, stop)
    sim.bus.subscribe(ToggleDebug, toggle_debug)

    last_time = perf_counter()
    acc = 0.0
    while running:
        for ev in pygame.event.get():
            input_sys.handle_event(ev)

        # Timing
        now = perf_counter()
        dt = now - last_time
        last_time = now
        if dt > DT_CLAMP:
            dt = DT_CLAMP
        acc += dt

        steps = 0
        while acc >= FIXED_DT and steps < MAX_STEPS_PER_FRAME:
            pan_camera(camera)
            sim.tick(input_sys.pointer(), input_sys.consume_click())
            acc -= FIXED_DT
            steps += 1
        if steps >= MAX_STEPS_PER_FRAME:
            acc = min(acc, FIXED_DT)
        alpha = 0.0 if FIXED_DT == 0 else min(1.0, acc / FIXED_DT)

        renderer.render(alpha, clock.get_fps())
        pygame.display.flip()

        clock.tick(144)  # allow >60Hz render; sim is fixed-step 60Hz

    logger.info("quit after %d ticks", sim.ticks)
    pygame.quit()
    sys.exit(0)


if __name__ == "__main__":
    main()
