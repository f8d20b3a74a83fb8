#!/usr/bin/env python3
"""
sim/control_policy.py
=====================
Tunable arena, steering, reaction, perturbation and lifecycle parameters.
Every constant lives in the frozen :class:`ControlPolicy` dataclass so that
experiments can swap policies without touching code.

Also provides the frozen :class:`Arena` geometry record.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Arena:
    """Static circular platform centred on the world origin."""

    radius: float = 30.0
    """Platform radius (world units)."""

    surface_y: float = 0.1
    """Height of the platform's top face."""

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"arena radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class ControlPolicy:
    """Immutable bag of every tunable control parameter.

    Groups: cruising profile, longitudinal control, turning,
    boundary containment, collision reaction, clearance, perturbation,
    lifecycle, body / sensor geometry.
    """

    # ── Cruising profile ──────────────────────────────────────────────────
    default_cruise_speed: float = 8.0
    """Target speed of a vehicle that is clear to proceed."""

    reduced_cruise_speed: float = 1.0
    """Creep speed while yielding to another vehicle."""

    # ── Longitudinal control ──────────────────────────────────────────────
    accel: float = 6.0
    """Acceleration when below target speed (units / s²)."""

    decel: float = 4.0
    """Deceleration when at or above target speed."""

    brake_decel: float = 16.0
    """Extra deceleration stacked on top of ``decel`` while braking."""

    min_drive_height: float = 0.0
    """Below this height only vertical force is applied (settling / falling)."""

    # ── Turning ───────────────────────────────────────────────────────────
    turn_torque_gain: float = 4.0
    """Torque per unit of target turn rate."""

    turn_damping_gain: float = 2.0
    """Corrective torque per unit of angular velocity above the limit."""

    # ── Boundary containment ──────────────────────────────────────────────
    boundary_margin_frac: float = 0.15
    """Containment starts at ``radius * (1 - boundary_margin_frac)``."""

    boundary_heading_dot: float = -0.5
    """Heading counts as outward when ``dot(heading, outward)`` exceeds this."""

    upright_threshold: float = 0.2
    """Minimum world-Y component of the local up axis to count as upright."""

    boundary_turn_rate: float = 1.5
    """Magnitude of the containment turn rate (rad / s)."""

    # ── Collision reaction ────────────────────────────────────────────────
    collision_turn_gain: float = 1.2
    """Turn rate at fully aligned headings (rad / s)."""

    collision_tie_turn_sign: float = 1.0
    """Turn sign used when the two headings are exactly parallel."""

    # ── Clearance ─────────────────────────────────────────────────────────
    clearance_speed_threshold: float = 1.0
    """Vehicles at or below this target speed are checked for clearance."""

    # ── Periodic perturbation ─────────────────────────────────────────────
    jump_period_s: float = 3.0
    """Interval of the process-wide jump timer."""

    jump_probability: float = 0.2
    """Per-vehicle chance of jumping on each timer expiry."""

    jump_impulse_up: float = 5.0
    """Vertical impulse of a jump (mass · units / s)."""

    jump_impulse_forward: float = 2.0
    """Forward impulse of a jump, along the current heading."""

    # ── Lifecycle ─────────────────────────────────────────────────────────
    spawn_radius_frac: float = 0.8
    """Spawn ring as a fraction of the arena radius."""

    spawn_height: float = 1.0
    """Drop height of freshly spawned vehicles."""

    floor_y: float = -10.0
    """Vehicles below this height have fallen off and are removed."""

    max_vehicles: int = 64
    """Spawn requests beyond this population are refused."""

    # ── Body / sensor geometry ────────────────────────────────────────────
    mass: float = 1.0
    yaw_inertia: float = 1.0

    body_radius: float = 1.0
    """Bounding sphere radius used for overlap tests."""

    sensor_half_angle: float = math.radians(30.0)
    sensor_length: float = 6.0
    sensor_offset: float = 1.0
    """Distance of the cone apex in front of the vehicle origin."""

    def __post_init__(self) -> None:
        if not 0.0 <= self.jump_probability <= 1.0:
            raise ValueError(
                f"jump_probability must be within [0, 1], got {self.jump_probability}"
            )
        if self.jump_period_s <= 0.0:
            raise ValueError(f"jump_period_s must be positive, got {self.jump_period_s}")
        if not 0.0 <= self.boundary_margin_frac < 1.0:
            raise ValueError(
                f"boundary_margin_frac must be within [0, 1), got {self.boundary_margin_frac}"
            )
        if self.default_cruise_speed < 0.0 or self.reduced_cruise_speed < 0.0:
            raise ValueError("cruise speeds must be non-negative")
        if self.mass <= 0.0 or self.yaw_inertia <= 0.0:
            raise ValueError("mass and yaw_inertia must be positive")

    def stopping_distance(self, speed: float) -> float:
        """Distance covered while braking from *speed* to rest."""
        return speed * speed / (2.0 * (self.decel + self.brake_decel))

    def replace(self, **changes) -> "ControlPolicy":
        """Return a copy with *changes* applied (validated again)."""
        return dataclasses.replace(self, **changes)
