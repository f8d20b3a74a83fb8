#!/usr/bin/env python3
"""
sim/vehicle.py
==============
Vehicle and sensor entities.

A :class:`Vehicle` carries its pose and velocities (owned by the physics
layer), the force/torque it wants applied this tick (written by the
controllers), and the only persistent control state: ``target_speed``,
``target_turn_rate`` and ``braking``.  Each vehicle owns exactly one
:class:`Sensor` by value; the world keeps a sensor-id → vehicle-id table
for resolving contact events.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Set

import numpy as np

from sim.geometry import forward_of, horizontal_dir, quat_identity, up_of, yaw_of

# Control-state labels used by the UI and the debug log.
STATE_CRUISING = "CRUISING"
STATE_YIELDING = "YIELDING"
STATE_BRAKING = "BRAKING"


@dataclass
class Sensor:
    """Forward-facing proximity cone rigidly attached to a vehicle.

    Attributes
    ----------
    id : int
        Entity id, distinct from every vehicle id.
    half_angle : float
        Cone half-aperture in radians.
    length : float
        Cone height along the vehicle's heading.
    offset : float
        Distance of the cone apex in front of the vehicle origin.
    has_contact : bool
        True while the cone overlaps any other vehicle body.
    """

    id: int
    half_angle: float
    length: float
    offset: float = 0.0
    has_contact: bool = False
    overlapping: Set[int] = field(default_factory=set, repr=False)
    """Body ids overlapped during the latest contact evaluation."""


def _zeros() -> np.ndarray:
    return np.zeros(3)


@dataclass(eq=False)
class Vehicle:
    """One autonomous agent on the arena."""

    id: int
    sensor: Sensor
    position: np.ndarray = field(default_factory=_zeros)
    orientation: np.ndarray = field(default_factory=quat_identity)
    linear_velocity: np.ndarray = field(default_factory=_zeros)
    angular_velocity: np.ndarray = field(default_factory=_zeros)
    applied_force: np.ndarray = field(default_factory=_zeros)
    applied_torque: np.ndarray = field(default_factory=_zeros)
    target_speed: float = 0.0
    target_turn_rate: float = 0.0
    braking: bool = False
    contained: bool = False
    """Set by the steering controller while the vehicle is held at the edge."""

    # ── derived kinematics ───────────────────────────────────────────────
    def heading(self) -> np.ndarray:
        """Forward axis projected onto the ground plane, unit length."""
        return horizontal_dir(forward_of(self.orientation))

    def up_component(self) -> float:
        """World-Y component of the vehicle's local up axis."""
        return float(up_of(self.orientation)[1])

    def speed(self) -> float:
        return float(np.linalg.norm(self.linear_velocity))

    def yaw(self) -> float:
        return yaw_of(self.orientation)

    def reset_control(self, cruise_speed: float) -> None:
        """Put the vehicle back on the cruising profile."""
        self.target_speed = cruise_speed
        self.target_turn_rate = 0.0
        self.braking = False

    def control_state(self, cruise_speed: float) -> str:
        if self.braking:
            return STATE_BRAKING
        if self.target_speed < cruise_speed:
            return STATE_YIELDING
        return STATE_CRUISING

    # ── serialisation ────────────────────────────────────────────────────
    def as_dict(self) -> Dict[str, Any]:
        """Pose and control flags for the renderer and the event bus."""
        return {
            "id": self.id,
            "x": float(self.position[0]),
            "y": float(self.position[1]),
            "z": float(self.position[2]),
            "yaw": self.yaw(),
            "speed": self.speed(),
            "target_speed": self.target_speed,
            "target_turn_rate": self.target_turn_rate,
            "braking": self.braking,
            "has_contact": self.sensor.has_contact,
            "upright": self.up_component(),
        }

    def sensor_apex(self) -> np.ndarray:
        return self.position + self.heading() * self.sensor.offset

    def sensor_covers(self, point: np.ndarray, radius: float = 0.0) -> bool:
        """True if a sphere at *point* with *radius* touches the sensor cone.

        The cone lies along the plane-projected heading; the test is done on
        the ground plane plus a vertical extent check of ``length``.
        """
        axis = self.heading()
        if not axis.any():
            return False
        rel = point - self.sensor_apex()
        if abs(float(rel[1])) > self.sensor.length:
            return False
        rel_h = np.array([rel[0], 0.0, rel[2]])
        along = float(np.dot(rel_h, axis))
        if along < -radius or along > self.sensor.length + radius:
            return False
        lateral = float(np.linalg.norm(rel_h - axis * along))
        reach = max(0.0, along) * math.tan(self.sensor.half_angle)
        return lateral <= reach + radius
