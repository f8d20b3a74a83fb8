#!/usr/bin/env python3
"""
sim/steering.py
===============
Per-tick force / torque controller.

:meth:`SteeringController.update` reads one vehicle's pose, velocities and
persistent control state and writes ``applied_force`` / ``applied_torque``
for the tick.  The only state it mutates besides the outputs is the
containment decision taken near the arena edge, tracked in
``Vehicle.contained`` so each approach to the edge is counted once.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from sim.control_policy import Arena, ControlPolicy
from sim.geometry import UP, cross_y, horizontal, horizontal_dir, normalize_or_zero
from sim.vehicle import Vehicle

log = logging.getLogger("steering")


class SteeringController:
    """Boundary containment, longitudinal force and yaw torque.

    Parameters
    ----------
    arena : Arena
        Platform geometry; the centre is the world origin.
    policy : ControlPolicy or None
        Tunable constants; uses defaults when *None*.
    """

    def __init__(self, arena: Arena, policy: Optional[ControlPolicy] = None) -> None:
        self.arena = arena
        self.policy = policy or ControlPolicy()
        self.containments: int = 0

    def update_all(self, vehicles: Iterable[Vehicle]) -> None:
        for vehicle in vehicles:
            self.update(vehicle)

    def update(self, vehicle: Vehicle) -> None:
        heading = vehicle.heading()

        contain = self._needs_containment(vehicle, heading)
        if contain:
            self._contain(vehicle, heading)
        vehicle.contained = contain

        if vehicle.braking:
            vehicle.target_speed = 0.0

        vehicle.applied_force = self._longitudinal_force(vehicle, heading)
        vehicle.applied_torque = self._turn_torque(vehicle)

    # ── boundary containment ─────────────────────────────────────────────
    def _needs_containment(self, vehicle: Vehicle, heading: np.ndarray) -> bool:
        p = self.policy
        if vehicle.up_component() <= p.upright_threshold:
            # upside down or on its side: uncontrolled
            return False
        radial = horizontal(vehicle.position)
        dist = float(np.linalg.norm(radial))
        if dist <= self.arena.radius * (1.0 - p.boundary_margin_frac):
            return False
        outward = normalize_or_zero(radial)
        return float(np.dot(heading, outward)) > p.boundary_heading_dot

    def _contain(self, vehicle: Vehicle, heading: np.ndarray) -> None:
        outward = horizontal_dir(vehicle.position)
        turn = self.boundary_turn_sign(heading, outward) * self.policy.boundary_turn_rate
        if not vehicle.contained:
            self.containments += 1
            log.debug(
                "CONTAIN %d pos=(%.2f,%.2f) heading=(%.2f,%.2f) turn=%.2f",
                vehicle.id, vehicle.position[0], vehicle.position[2],
                heading[0], heading[2], turn,
            )
        vehicle.braking = True
        vehicle.target_speed = 0.0
        vehicle.target_turn_rate = turn

    @staticmethod
    def boundary_turn_sign(heading: np.ndarray, outward: np.ndarray) -> float:
        """Turn away from the edge: positive cross → −1, otherwise +1.

        Positive yaw rate swings +Z toward +X, so when ``heading × outward``
        points up the outward side is to the vehicle's positive-yaw side.
        """
        return -1.0 if cross_y(heading, outward) > 0.0 else 1.0

    # ── longitudinal ─────────────────────────────────────────────────────
    def _longitudinal_force(self, vehicle: Vehicle, heading: np.ndarray) -> np.ndarray:
        p = self.policy
        accel = p.accel if vehicle.speed() < vehicle.target_speed else -p.decel
        if vehicle.braking:
            accel -= p.brake_decel

        if accel > 0.0:
            direction = heading
        else:
            # decelerate along the actual drift, not the nominal heading
            direction = horizontal_dir(vehicle.linear_velocity)
        force = direction * (accel * p.mass)

        if vehicle.position[1] < p.min_drive_height:
            force = np.array([0.0, force[1], 0.0])
        return force

    # ── yaw ──────────────────────────────────────────────────────────────
    def _turn_torque(self, vehicle: Vehicle) -> np.ndarray:
        p = self.policy
        omega = vehicle.angular_velocity
        limit = abs(vehicle.target_turn_rate)
        if float(np.linalg.norm(omega)) > limit:
            return -omega * (p.turn_damping_gain * p.yaw_inertia)
        return UP * (vehicle.target_turn_rate * p.turn_torque_gain * p.yaw_inertia)
