#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via ``ARENA_*`` environment variables and command
line flags (see :mod:`main`).  Control tuning lives in
:class:`sim.control_policy.ControlPolicy`.  This module is a thin,
import-safe leaf; it never imports from other project packages.
"""

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_VEHICLE_COUNT: int = 6
DEFAULT_TICK_RATE_HZ: float = 60.0
DEFAULT_SEED: int = 0
DEFAULT_ARENA_RADIUS: float = 30.0

# ── Headless run defaults ────────────────────────────────────────────────────
DEFAULT_HEADLESS_TICKS: int = 1800
HEADLESS_REPORT_EVERY: int = 300

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1000
WINDOW_HEIGHT: int = 700
TARGET_FPS: int = 60

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "arena.log"
CONTROLLER_DEBUG_LOG_FILE: str = "controller_debug.log"
