#!/usr/bin/env python3
"""
sim/physics.py
==============
Minimal rigid-body stand-in for the external physics engine.

The controllers only produce ``applied_force`` / ``applied_torque`` and read
pose and velocity back.  :class:`SimplePhysics` closes that loop well enough
to run the arena headless or under the pygame viewer:

* sensor-cone overlap evaluation and contact-begin event generation;
* semi-implicit Euler integration with gravity, ground support on the
  platform disc, lateral tyre grip and light damping;
* a last-resort push-apart for overlapping bodies;
* zeroing of the applied force / torque after every step.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from sim.collision import ContactEvent
from sim.control_policy import Arena, ControlPolicy
from sim.geometry import UP, horizontal, quat_integrate
from sim.vehicle import Vehicle

log = logging.getLogger("physics")

GRAVITY = np.array([0.0, -9.81, 0.0])


class SimplePhysics:
    """Integrator and contact detector for a list of vehicles.

    Parameters
    ----------
    arena : Arena
        Platform geometry (disc of ``radius`` with top face at ``surface_y``).
    policy : ControlPolicy or None
        Supplies mass, inertia, body radius and sensor geometry.
    linear_damping, angular_damping : float
        Fraction of velocity removed per second.
    lateral_grip : float
        Fraction of sideways ground velocity removed per second.
    """

    def __init__(
        self,
        arena: Arena,
        policy: Optional[ControlPolicy] = None,
        linear_damping: float = 0.1,
        angular_damping: float = 0.5,
        lateral_grip: float = 8.0,
    ) -> None:
        self.arena = arena
        self.policy = policy or ControlPolicy()
        self.linear_damping = linear_damping
        self.angular_damping = angular_damping
        self.lateral_grip = lateral_grip
        self.overlap_resolutions: int = 0

    # ── sensing ──────────────────────────────────────────────────────────
    def detect_contacts(self, vehicles: Sequence[Vehicle]) -> List[ContactEvent]:
        """Refresh every sensor and return the contact-begin events."""
        events: List[ContactEvent] = []
        radius = self.policy.body_radius
        for vehicle in vehicles:
            current = {
                other.id
                for other in vehicles
                if other is not vehicle and vehicle.sensor_covers(other.position, radius)
            }
            for other_id in sorted(current - vehicle.sensor.overlapping):
                events.append(ContactEvent(vehicle.sensor.id, other_id))
            vehicle.sensor.overlapping = current
            vehicle.sensor.has_contact = bool(current)
        return events

    # ── integration ──────────────────────────────────────────────────────
    def on_platform(self, vehicle: Vehicle) -> bool:
        """True if the vehicle rests on (or within a hair of) the deck."""
        dist = float(np.linalg.norm(horizontal(vehicle.position)))
        return dist <= self.arena.radius and vehicle.position[1] <= self.arena.surface_y + 1e-3

    def step(self, vehicles: Sequence[Vehicle], dt: float) -> None:
        p = self.policy
        for vehicle in vehicles:
            was_above_deck = vehicle.position[1] >= self.arena.surface_y - 1e-3

            accel = vehicle.applied_force / p.mass + GRAVITY
            vel = vehicle.linear_velocity + accel * dt
            omega = vehicle.angular_velocity + (vehicle.applied_torque / p.yaw_inertia) * dt

            if self.on_platform(vehicle):
                heading = vehicle.heading()
                side = np.cross(UP, heading)
                lateral = float(np.dot(vel, side))
                vel = vel - side * lateral * min(1.0, self.lateral_grip * dt)

            vel = vel * max(0.0, 1.0 - self.linear_damping * dt)
            omega = omega * max(0.0, 1.0 - self.angular_damping * dt)

            pos = vehicle.position + vel * dt
            dist = float(np.linalg.norm(horizontal(pos)))
            if was_above_deck and dist <= self.arena.radius and pos[1] < self.arena.surface_y:
                pos = np.array([pos[0], self.arena.surface_y, pos[2]])
                if vel[1] < 0.0:
                    vel = np.array([vel[0], 0.0, vel[2]])

            vehicle.position = pos
            vehicle.linear_velocity = vel
            vehicle.angular_velocity = omega
            vehicle.orientation = quat_integrate(vehicle.orientation, omega, dt)

            vehicle.applied_force = np.zeros(3)
            vehicle.applied_torque = np.zeros(3)

        self.overlap_resolutions += self._resolve_overlaps(vehicles)

    def _resolve_overlaps(self, vehicles: Sequence[Vehicle]) -> int:
        """Push apart bodies whose bounding spheres intersect."""
        hard = 2.0 * self.policy.body_radius
        count = 0
        n = len(vehicles)
        for i in range(n):
            a = vehicles[i]
            for j in range(i + 1, n):
                b = vehicles[j]
                delta = horizontal(a.position - b.position)
                dist = float(np.linalg.norm(delta))
                if dist >= hard or abs(a.position[1] - b.position[1]) >= hard:
                    continue
                count += 1
                if dist < 1e-6:
                    b.position = b.position + np.array([0.5 * hard, 0.0, 0.0])
                    continue
                push = delta / dist * ((hard - dist) / 2.0)
                a.position = a.position + push
                b.position = b.position - push
                log.debug("OVERLAP %d & %d dist=%.2f", a.id, b.id, dist)
        return count
