#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (15, 15, 15)
    PLATFORM_COLOR: ColorRGB = (58, 58, 62)
    PLATFORM_EDGE_COLOR: ColorRGB = (200, 200, 200)
    BOUNDARY_COLOR: ColorRGB = (255, 136, 0)
    HUD_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BORDER_COLOR: ColorRGB = (42, 42, 42)
    HUD_TEXT_COLOR: ColorRGB = (200, 200, 200)

    STATE_COLORS: Dict[str, ColorRGB] = {
        "CRUISING": (0, 255, 127),
        "YIELDING": (246, 191, 90),
        "BRAKING": (255, 60, 60),
    }

    SENSOR_ALPHA = 48
    SENSOR_CONTACT_ALPHA = 110
    BOUNDARY_ALPHA = 90

    VEHICLE_LENGTH = 2.0
    VEHICLE_WIDTH = 1.0
    SHADOW_MAX_HEIGHT = 6.0

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("CRUISING", (0, 255, 127)),
        ("YIELDING", (246, 191, 90)),
        ("BRAKING", (255, 60, 60)),
    )

    KEY_HELP: Sequence[str] = (
        "S spawn   SHIFT+S spawn 5   C clear",
        "SPACE pause   L cones   H legend   R reset   F12 shot",
    )

    SCREENSHOT_DIR = "screenshots"
