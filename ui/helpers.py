"""
ui/helpers.py
=============
Pure utility functions shared across UI modules:
yaw ↔ screen-direction mapping, vehicle / cone outlines, and
alpha-surface drawing.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import pygame

from .types import Camera, ColorRGBA

Point = Tuple[float, float]


def yaw_axes(yaw: float) -> Tuple[Point, Point]:
    """Forward and right unit vectors on the (x, z) plane for *yaw*.

    Yaw 0 faces +Z; positive yaw swings the nose toward +X.
    """
    fwd = (math.sin(yaw), math.cos(yaw))
    right = (math.cos(yaw), -math.sin(yaw))
    return fwd, right


def vehicle_outline(x: float, z: float, yaw: float,
                    length: float, width: float) -> List[Point]:
    """Arrow-shaped outline in world coordinates."""
    (fx, fz), (rx, rz) = yaw_axes(yaw)
    hl = length / 2.0
    hw = width / 2.0
    return [
        (x + fx * hl, z + fz * hl),
        (x - fx * hl + rx * hw, z - fz * hl + rz * hw),
        (x - fx * hl * 0.5, z - fz * hl * 0.5),
        (x - fx * hl - rx * hw, z - fz * hl - rz * hw),
    ]


def cone_outline(x: float, z: float, yaw: float, offset: float,
                 length: float, half_angle: float, segments: int = 8) -> List[Point]:
    """Ground-plane footprint of a sensor cone in world coordinates."""
    (fx, fz), _ = yaw_axes(yaw)
    ax, az = x + fx * offset, z + fz * offset
    points: List[Point] = [(ax, az)]
    slant = length / max(1e-6, math.cos(half_angle))
    for i in range(segments + 1):
        a = yaw - half_angle + 2.0 * half_angle * i / segments
        points.append((ax + math.sin(a) * slant, az + math.cos(a) * slant))
    return points


def to_screen(camera: Camera, points: Sequence[Point]) -> List[Point]:
    return [camera.world_to_screen(px, pz) for px, pz in points]


def draw_alpha_polygon(surface: pygame.Surface, color: ColorRGBA,
                       points: Sequence[Point]) -> None:
    """Draw a translucent filled polygon onto *surface*."""
    if len(points) < 3:
        return
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    pygame.draw.polygon(overlay, color, points)
    surface.blit(overlay, (0, 0))
