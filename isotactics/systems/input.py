from __future__ import annotations

from typing import Optional, Tuple

import pygame

from ..constants import KEY_QUIT, KEY_TOGGLE_DEBUG
from ..events import EventBus, Quit, ToggleDebug
from ..grid import Camera


class InputSystem:
    """
    Event-driven input. Keeps the latest pointer position (world space,
    None outside the window) and a left-click edge consumed once per tick.
    """

    def __init__(self, camera: Camera, bus: EventBus) -> None:
        self.camera = camera
        self.bus = bus
        self._device_pos: Optional[Tuple[int, int]] = None
        self._clicked = False
        self._key_quit = getattr(pygame, KEY_QUIT)
        self._key_debug = getattr(pygame, KEY_TOGGLE_DEBUG)

    def handle_event(self, ev: pygame.event.Event) -> None:
        if ev.type == pygame.QUIT:
            self.bus.post(Quit())
            return

        if ev.type == pygame.KEYDOWN:
            if ev.key == self._key_quit:
                self.bus.post(Quit())
            elif ev.key == self._key_debug:
                self.bus.post(ToggleDebug())

        if ev.type == pygame.MOUSEMOTION:
            self._device_pos = ev.pos

        if ev.type == pygame.WINDOWLEAVE:
            self._device_pos = None

        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self._device_pos = ev.pos
            self._clicked = True

    def pointer(self) -> Optional[Tuple[float, float]]:
        """Pointer in world space; re-projected every call so camera pans apply."""
        if self._device_pos is None or not self.camera.contains(*self._device_pos):
            return None
        return self.camera.screen_to_world(*self._device_pos)

    def consume_click(self) -> bool:
        clicked, self._clicked = self._clicked, False
        return clicked
