#!/usr/bin/env python3
"""
sim/lifecycle.py
================
Spawning and despawning of vehicles.

Vehicles spawn on a ring at ``spawn_radius_frac`` of the arena radius,
at a uniformly random angle, facing the centre.  They are removed when
they fall below ``floor_y`` or on a bulk-clear command.  The manager keeps
the world's vehicle table and its sensor-id → vehicle-id index in step.
"""

from __future__ import annotations

import itertools
import logging
import math
import random
from typing import Dict, List, Optional

from sim.collision import ARENA_ENTITY
from sim.control_policy import Arena, ControlPolicy
from sim.geometry import quat_from_yaw, vec3
from sim.vehicle import Sensor, Vehicle

log = logging.getLogger("lifecycle")


class LifecycleManager:
    """Creates and destroys vehicles.

    Parameters
    ----------
    arena : Arena
        Platform geometry.
    vehicles : dict
        Live vehicle table (vehicle id → :class:`Vehicle`), mutated in place.
    sensor_owner : dict
        Sensor id → vehicle id index, mutated in place.
    rng : random.Random
        Injected random source for spawn angles.
    policy : ControlPolicy or None
        Tunable constants; uses defaults when *None*.
    """

    def __init__(
        self,
        arena: Arena,
        vehicles: Dict[int, Vehicle],
        sensor_owner: Dict[int, int],
        rng: random.Random,
        policy: Optional[ControlPolicy] = None,
    ) -> None:
        self.arena = arena
        self.policy = policy or ControlPolicy()
        self._vehicles = vehicles
        self._sensor_owner = sensor_owner
        self._rng = rng
        self._ids = itertools.count(ARENA_ENTITY + 1)
        self.spawned: int = 0
        self.fallen: int = 0

    def spawn(self, angle: Optional[float] = None) -> Optional[Vehicle]:
        """Place a new cruising vehicle on the spawn ring facing inward.

        *angle* overrides the random spawn angle (radians).  Returns *None*
        when the population cap is reached.
        """
        p = self.policy
        if len(self._vehicles) >= p.max_vehicles:
            log.warning("spawn refused: %d vehicles already live", len(self._vehicles))
            return None

        theta = self._rng.uniform(0.0, 2.0 * math.pi) if angle is None else angle
        r = p.spawn_radius_frac * self.arena.radius
        vehicle_id = next(self._ids)
        sensor = Sensor(
            id=next(self._ids),
            half_angle=p.sensor_half_angle,
            length=p.sensor_length,
            offset=p.sensor_offset,
        )
        vehicle = Vehicle(
            id=vehicle_id,
            sensor=sensor,
            position=vec3(r * math.cos(theta), self.arena.surface_y + p.spawn_height,
                          r * math.sin(theta)),
            # yaw -θ - π/2 turns +Z toward (-cos θ, 0, -sin θ), the centre
            orientation=quat_from_yaw(-theta - 0.5 * math.pi),
        )
        vehicle.reset_control(p.default_cruise_speed)

        self._vehicles[vehicle.id] = vehicle
        self._sensor_owner[sensor.id] = vehicle.id
        self.spawned += 1
        log.info("spawned vehicle %d (sensor %d) at theta=%.2f", vehicle.id, sensor.id, theta)
        return vehicle

    def despawn(self, vehicle_id: int) -> bool:
        vehicle = self._vehicles.pop(vehicle_id, None)
        if vehicle is None:
            return False
        self._sensor_owner.pop(vehicle.sensor.id, None)
        return True

    def despawn_out_of_bounds(self) -> List[int]:
        """Remove every vehicle below ``floor_y``; return their ids."""
        fallen = [
            v.id for v in self._vehicles.values()
            if v.position[1] < self.policy.floor_y
        ]
        for vehicle_id in fallen:
            self.despawn(vehicle_id)
            log.info("vehicle %d fell off the arena", vehicle_id)
        self.fallen += len(fallen)
        return fallen

    def despawn_all(self) -> List[int]:
        """Remove every live vehicle; return their ids."""
        removed = list(self._vehicles.keys())
        self._vehicles.clear()
        self._sensor_owner.clear()
        log.info("despawned all %d vehicles", len(removed))
        return removed
