"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]
ColorRGBA = Tuple[int, int, int, int]


@dataclass
class Camera:
    """Top-down viewport mapping world (x, z) coordinates to screen pixels."""
    screen_w: int
    screen_h: int
    world_x: float = 0.0
    world_z: float = 0.0
    zoom: float = 8.0

    def world_to_screen(self, wx: float, wz: float) -> Tuple[float, float]:
        cx = self.screen_w / 2
        cy = self.screen_h / 2
        sx = cx + (wx - self.world_x) * self.zoom
        sy = cy - (wz - self.world_z) * self.zoom
        return sx, sy

    def fit(self, radius: float, margin: float = 1.15) -> None:
        """Choose a zoom that shows a disc of *radius* around the origin."""
        span = max(1.0, 2.0 * radius * margin)
        self.zoom = min(self.screen_w, self.screen_h) / span
