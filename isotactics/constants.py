from __future__ import annotations

from dataclasses import dataclass

# ---- Display & Timestep ----
WIN_W, WIN_H = 1280, 720
TILE_SIZE = 32.0
MAP_W, MAP_D = 10, 10

# Fixed-step simulation; one movement tick per step
FIXED_DT = 1.0 / 60.0
DT_CLAMP = 0.25  # clamp long frame spikes
MAX_STEPS_PER_FRAME = 5  # avoid death spirals

# ---- Spatial ----
# Elevation is quantised in half-steps
ELEVATION_STEP = 0.5
# Paint order weights: depth along x first, then z, elevation breaks ties
Z_WEIGHT_X = 1.0
Z_WEIGHT_Z = 0.999
Z_WEIGHT_Y = 0.01
# One step moves 1 along x or z and at most 0.5 in y
HEURISTIC_DIVISOR = 1.5

# ---- Movement ----
DEFAULT_MOVE_SPEED = 2.0  # screen units per tick
DEFAULT_MOVE_RANGE = 4  # frontier expansions
# Snap to waypoint when closer than this (screen units)
ARRIVAL_EPS = 0.5

# ---- Demo world ----
UNIT_START = (9.0, 0.0, 9.0)
FULL_TILE_VARIANTS = 5
DEFAULT_SEED = 7

# ---- Colors ----
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
BACKGROUND = (24, 24, 30)
TILE_VARIANT_COLORS = (
    (96, 140, 86),
    (104, 148, 90),
    (88, 132, 80),
    (112, 150, 96),
    (92, 128, 84),
)
HALF_TILE_COLOR = (150, 130, 96)
SIDE_SHADE = 0.65
OUTLINE = (30, 34, 30)
HOVER = (255, 255, 255, 110)
VALID_MOVE = (70, 140, 240, 90)
PATH = (245, 220, 80, 140)
UNIT_FILL = (90, 230, 120)
UNIT_SELECTED = (255, 255, 255)
FACING_MARK = (20, 20, 20)

# Instrumentation toggles (runtime-togglable)
@dataclass
class DebugFlags:
    show_fps: bool = True
    show_hover: bool = True
    show_reachable: bool = True
    show_path_preview: bool = True
    show_outlines: bool = True

DEBUG = DebugFlags()

# Keybinds (names of pygame.K_* constants, resolved by the input system)
KEY_QUIT = "K_ESCAPE"
KEY_TOGGLE_DEBUG = "K_F1"
