from __future__ import annotations

from typing import List, Optional, Tuple

import pygame

from ..components import Facing, Unit
from ..constants import (
    BACKGROUND,
    DEBUG,
    FACING_MARK,
    HALF_TILE_COLOR,
    HOVER,
    OUTLINE,
    PATH,
    SIDE_SHADE,
    TILE_VARIANT_COLORS,
    UNIT_FILL,
    UNIT_SELECTED,
    VALID_MOVE,
    WHITE,
)
from ..grid import Camera, Map, Tile, TileHeight
from ..pos import Pos
from ..world import Roster
from .controller import ControllerSystem

# Device-space direction for each facing (y grows down)
FACING_VECTORS = {
    Facing.NORTH_EAST: (1.0, -0.5),
    Facing.NORTH_WEST: (-1.0, -0.5),
    Facing.SOUTH_EAST: (1.0, 0.5),
    Facing.SOUTH_WEST: (-1.0, 0.5),
}


def _shade(color: Tuple[int, int, int], k: float) -> Tuple[int, int, int]:
    return (int(color[0] * k), int(color[1] * k), int(color[2] * k))


class RenderSystem:
    """
    Painter's-order isometric drawing: tiles back-to-front with their
    overlays, then units, then HUD. Works on any Surface (no display needed).
    """

    def __init__(
        self,
        grid: Map,
        roster: Roster,
        controller: ControllerSystem,
        camera: Camera,
        screen: pygame.Surface,
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        self.grid = grid
        self.roster = roster
        self.controller = controller
        self.camera = camera
        self.screen = screen
        self.font = font
        s = grid.tile_size
        self._overlay = pygame.Surface((int(s) + 1, int(s / 2) + 1), pygame.SRCALPHA)

    # ---- Geometry ----
    def _diamond(self, wx: float, wy: float) -> List[Tuple[int, int]]:
        """Top face centred on world point (wx, wy), in device pixels."""
        hw, hh = self.grid.tile_size / 2, self.grid.tile_size / 4
        cam = self.camera
        return [
            cam.world_to_screen(wx, wy + hh),
            cam.world_to_screen(wx + hw, wy),
            cam.world_to_screen(wx, wy - hh),
            cam.world_to_screen(wx - hw, wy),
        ]

    def _draw_alpha_diamond(self, color: Tuple[int, int, int, int], pos: Pos) -> None:
        wx, wy, _ = self.grid.to_screen(pos)
        poly = self._diamond(wx, wy)
        left = min(x for x, _ in poly)
        top = min(y for _, y in poly)
        self._overlay.fill((0, 0, 0, 0))
        pygame.draw.polygon(self._overlay, color, [(x - left, y - top) for x, y in poly])
        self.screen.blit(self._overlay, (left, top))

    # ---- Tiles ----
    def _tile_color(self, tile: Tile) -> Tuple[int, int, int]:
        if tile.height is TileHeight.HALF:
            return HALF_TILE_COLOR
        variant = getattr(tile.node, "variant", 0)
        return TILE_VARIANT_COLORS[variant % len(TILE_VARIANT_COLORS)]

    def _draw_tile(self, tile: Tile) -> None:
        wx, wy, _ = self.grid.to_screen(tile.pos)
        top = self._diamond(wx, wy)
        # Side faces drop by the tile's own rise
        drop = self.grid.elevation_offset(tile.height.rise)
        n, e, s, w = top
        e_low = self.camera.world_to_screen(wx + self.grid.tile_size / 2, wy - drop)
        s_low = self.camera.world_to_screen(wx, wy - self.grid.tile_size / 4 - drop)
        w_low = self.camera.world_to_screen(wx - self.grid.tile_size / 2, wy - drop)
        color = self._tile_color(tile)
        pygame.draw.polygon(self.screen, _shade(color, SIDE_SHADE), [w, s, s_low, w_low])
        pygame.draw.polygon(self.screen, _shade(color, SIDE_SHADE * 0.8), [s, e, e_low, s_low])
        pygame.draw.polygon(self.screen, color, top)
        if DEBUG.show_outlines:
            pygame.draw.polygon(self.screen, OUTLINE, top, width=1)

    # ---- Units ----
    def _draw_unit(self, unit: Unit, alpha: float, selected: bool) -> None:
        wx = unit.prev_sx + (unit.sx - unit.prev_sx) * alpha
        wy = unit.prev_sy + (unit.sy - unit.prev_sy) * alpha
        cx, cy = self.camera.world_to_screen(wx, wy)
        r = max(4, int(self.grid.tile_size / 5))
        body = (cx, cy - r)
        pygame.draw.circle(self.screen, UNIT_FILL, body, r)
        if selected:
            pygame.draw.circle(self.screen, UNIT_SELECTED, body, r + 2, width=2)
        fx, fy = FACING_VECTORS[unit.facing]
        pygame.draw.line(self.screen, FACING_MARK, body, (int(body[0] + fx * r), int(body[1] + fy * r)), 2)

    # ---- Main ----
    def render(self, alpha: float, fps: Optional[float] = None) -> None:
        self.screen.fill(BACKGROUND)
        ctl = self.controller
        preview = set(ctl.preview) if DEBUG.show_path_preview else set()
        reach = ctl.reachable if DEBUG.show_reachable else frozenset()
        hovered = ctl.hovered if DEBUG.show_hover else None

        tiles = self.grid.tiles
        for pos in self.grid.draw_order():
            self._draw_tile(tiles[pos])
            if pos in reach:
                self._draw_alpha_diamond(VALID_MOVE, pos)
            if pos in preview:
                self._draw_alpha_diamond(PATH, pos)
            if pos == hovered:
                self._draw_alpha_diamond(HOVER, pos)

        selected = ctl.selected_unit()
        for unit in sorted(self.roster, key=lambda u: (-u.sy, u.uid)):
            self._draw_unit(unit, alpha, selected is not None and unit.uid == selected.uid)

        if self.font is not None and DEBUG.show_fps and fps is not None:
            txt = self.font.render(f"{fps:5.1f} fps", True, WHITE)
            self.screen.blit(txt, (8, 6))
