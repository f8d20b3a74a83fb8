#!/usr/bin/env python3
"""
Main view class — combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, ColorRGBA, Camera
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – outlines and alpha drawing utilities
    ├── draw_arena.py      – ArenaRenderer mixin (platform, cones, vehicles)
    ├── hud.py             – HudRenderer mixin  (HUD, legend, pause banner)
    └── pygame_view.py     – PygameArenaView (this file – main loop)

The view never touches the world directly: it reads cached snapshots from
the bridge and sends spawn / bulk-despawn requests over the bridge's bus.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Optional

import pygame

from .constants import ViewConstants
from .draw_arena import ArenaRenderer
from .hud import HudRenderer
from .types import Camera


class PygameArenaView(
    ViewConstants,
    ArenaRenderer,
    HudRenderer,
):
    """Top-down arena visualiser powered by Pygame."""

    def __init__(self, bridge: Any, width: int = 1000, height: int = 700, fps: int = 60):
        self.bridge = bridge
        self.width = width
        self.height = height
        self.fps = fps

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        self.arena = bridge.get_arena()
        self.camera = Camera(width, height)
        self.camera.fit(float(self.arena.get("radius", 30.0)))

        self.time_seconds = 0.0
        self.paused = False
        self.show_sensors = True
        self.show_legend = True
        self._screenshot_flash_until = 0.0

    # ------------------------------------------------------------------ #
    #  Resize                                                              #
    # ------------------------------------------------------------------ #
    def _handle_resize(self, new_w: int, new_h: int) -> None:
        self.width = max(400, new_w)
        self.height = max(300, new_h)
        self.camera = Camera(self.width, self.height)
        self.camera.fit(float(self.arena.get("radius", 30.0)))
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )

    # ------------------------------------------------------------------ #
    #  Screenshot                                                          #
    # ------------------------------------------------------------------ #
    def _take_screenshot(self) -> None:
        if self.screen is None:
            return
        os.makedirs(self.SCREENSHOT_DIR, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.SCREENSHOT_DIR, f"arena_{stamp}.png")
        pygame.image.save(self.screen, path)
        self._screenshot_flash_until = self.time_seconds + 0.35

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        return pygame.font.SysFont("consolas,dejavusansmono,monospace", size, bold=bold)

    # ------------------------------------------------------------------ #
    #  Input                                                               #
    # ------------------------------------------------------------------ #
    def _handle_key(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_s:
            count = 5 if event.mod & pygame.KMOD_SHIFT else 1
            self.bridge.request_spawn(count)
        elif event.key == pygame.K_c:
            self.bridge.request_despawn_all()
        elif event.key == pygame.K_SPACE:
            self.paused = not self.paused
            self.bridge.set_paused(self.paused)
        elif event.key == pygame.K_l:
            self.show_sensors = not self.show_sensors
        elif event.key == pygame.K_h:
            self.show_legend = not self.show_legend
        elif event.key == pygame.K_r:
            self.paused = False
            self.bridge.reset()
            self.bridge.set_paused(False)
        elif event.key == pygame.K_F12:
            self._take_screenshot()
        elif event.key in (pygame.K_EQUALS, pygame.K_PLUS):
            self.camera.zoom = min(40.0, self.camera.zoom * 1.1)
        elif event.key == pygame.K_MINUS:
            self.camera.zoom = max(1.0, self.camera.zoom / 1.1)

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("ARENA")
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.clock = pygame.time.Clock()
        self.font_small = self._load_font(13)
        self.font_tiny = self._load_font(11)
        self.font_title = self._load_font(28, bold=True)

        running = True
        while running:
            delta_time = self.clock.tick(self.fps) / 1000.0
            self.time_seconds += delta_time

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._handle_resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        self._handle_key(event)

            vehicles = self.bridge.get_vehicles()
            stats = self.bridge.get_stats()

            # ---- render ------------------------------------------------- #
            self.screen.fill(self.BG_COLOR)
            self.draw_world(self.screen, vehicles, self.arena)
            self.draw_hud(self.screen, vehicles, stats)
            if self.paused:
                self._draw_pause_banner(self.screen)
            if self.time_seconds < self._screenshot_flash_until:
                flash = pygame.Surface(
                    (self.width, self.height), pygame.SRCALPHA
                )
                flash.fill((255, 255, 255, 40))
                self.screen.blit(flash, (0, 0))

            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_pygame_view(
    bridge: Any, width: int = 1000, height: int = 700, fps: int = 60
) -> None:
    view = PygameArenaView(bridge=bridge, width=width, height=height, fps=fps)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "pygame_view.py needs a bridge object. Run `python main.py` "
        "or call run_pygame_view(your_bridge)."
    )
