#!/usr/bin/env python3
"""
sim/world.py
============
Entity-based arena world.

:class:`ArenaWorld` owns the vehicle table, the sensor-id → vehicle-id
index and the injected random source, and advances every controller in a
fixed order each tick:

1. sensor-contact evaluation (physics layer)
2. :class:`~sim.collision.CollisionReactor` on contact-begin events
3. :class:`~sim.clearance.ClearanceMonitor`
4. :class:`~sim.steering.SteeringController`
5. :class:`~sim.perturbation.PeriodicPerturbation` (additive force)
6. physics integration
7. :class:`~sim.lifecycle.LifecycleManager` fall-off cleanup

Later stages read control state written by earlier ones, so the order is
part of the contract.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from bus.event_bus import TOPIC_LIFECYCLE, EventBus
from sim.clearance import ClearanceMonitor
from sim.collision import CollisionReactor
from sim.control_policy import Arena, ControlPolicy
from sim.lifecycle import LifecycleManager
from sim.perturbation import PeriodicPerturbation
from sim.physics import SimplePhysics
from sim.steering import SteeringController
from sim.vehicle import Vehicle

log = logging.getLogger("world")


class ArenaWorld:
    """Vehicles driving on a circular platform.

    Parameters
    ----------
    num_vehicles : int
        Vehicles spawned at construction (and on :meth:`reset`).
    seed : int or None
        Seed for the world's random source (spawn angles, jump trials).
    policy : ControlPolicy or None
        Tunable constants; uses defaults when *None*.
    arena : Arena or None
        Platform geometry; uses defaults when *None*.
    physics : SimplePhysics or None
        Physics backend; a :class:`SimplePhysics` is created when *None*.
    bus : EventBus or None
        Receives ``arena.lifecycle`` notifications when given.
    """

    def __init__(
        self,
        num_vehicles: int = 0,
        seed: Optional[int] = None,
        policy: Optional[ControlPolicy] = None,
        arena: Optional[Arena] = None,
        physics: Optional[SimplePhysics] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.policy = policy or ControlPolicy()
        self.arena = arena or Arena()
        self.num_vehicles = max(0, int(num_vehicles))
        self._rng = random.Random(seed)
        self._bus = bus

        self.vehicles: Dict[int, Vehicle] = {}
        self.sensor_owner: Dict[int, int] = {}

        self.physics = physics or SimplePhysics(self.arena, self.policy)
        self.reactor = CollisionReactor(self.vehicles, self.sensor_owner, self.policy)
        self.clearance = ClearanceMonitor(self.policy)
        self.steering = SteeringController(self.arena, self.policy)
        self.perturbation = PeriodicPerturbation(self._rng, self.policy)
        self.lifecycle = LifecycleManager(
            self.arena, self.vehicles, self.sensor_owner, self._rng, self.policy,
        )

        self.tick_count: int = 0
        self.sim_time: float = 0.0
        self._init_vehicles()

    # ── initialisation / reset ────────────────────────────────────────────

    def _init_vehicles(self) -> None:
        for _ in range(self.num_vehicles):
            self.spawn()

    def reset(self) -> None:
        """Clear the arena and spawn the initial population again."""
        self.despawn_all()
        self.perturbation.reset()
        self.tick_count = 0
        self.sim_time = 0.0
        self._init_vehicles()

    # ── queries ───────────────────────────────────────────────────────────

    def all_vehicles(self) -> List[Vehicle]:
        return list(self.vehicles.values())

    def vehicle_for_sensor(self, sensor_id: int) -> Optional[Vehicle]:
        owner = self.sensor_owner.get(sensor_id)
        return self.vehicles.get(owner) if owner is not None else None

    def snapshot(self) -> List[Dict[str, Any]]:
        """Pose and control flags of every live vehicle."""
        cruise = self.policy.default_cruise_speed
        out = []
        for vehicle in self.vehicles.values():
            d = vehicle.as_dict()
            d["state"] = vehicle.control_state(cruise)
            out.append(d)
        return out

    def stats(self) -> Dict[str, Any]:
        return {
            "tick": self.tick_count,
            "time_s": self.sim_time,
            "vehicles": len(self.vehicles),
            "spawned": self.lifecycle.spawned,
            "fallen": self.lifecycle.fallen,
            "reactions": self.reactor.reactions,
            "containments": self.steering.containments,
            "jumps": self.perturbation.jumps,
            "next_jump_s": self.perturbation.time_to_next,
            "overlaps": self.physics.overlap_resolutions,
        }

    # ── commands ──────────────────────────────────────────────────────────

    def spawn(self, angle: Optional[float] = None) -> Optional[Vehicle]:
        vehicle = self.lifecycle.spawn(angle)
        if vehicle is not None:
            self._notify("spawned", [vehicle.id])
        return vehicle

    def despawn_all(self) -> List[int]:
        removed = self.lifecycle.despawn_all()
        if removed:
            self._notify("despawned", removed)
        return removed

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(self, dt: float) -> None:
        """Advance the whole arena by *dt* seconds."""
        self.tick_count += 1
        self.sim_time += dt
        vehicles = self.all_vehicles()

        events = self.physics.detect_contacts(vehicles)
        self.reactor.handle_all(events)
        self.clearance.apply(vehicles)
        self.steering.update_all(vehicles)
        jumped = self.perturbation.update(vehicles, dt)
        self.physics.step(vehicles, dt)
        fallen = self.lifecycle.despawn_out_of_bounds()

        if jumped:
            self._notify("jumped", jumped)
        if fallen:
            self._notify("despawned", fallen)

        if self.tick_count % 60 == 1:
            log.debug("=== TICK %d  t=%.2f  vehicles=%d  contacts=%d ===",
                      self.tick_count, self.sim_time, len(vehicles), len(events))
            for v in vehicles:
                log.debug(
                    "  %d pos=(%.1f,%.1f,%.1f) spd=%.2f target=%.2f turn=%.2f "
                    "brake=%s contact=%s",
                    v.id, v.position[0], v.position[1], v.position[2], v.speed(),
                    v.target_speed, v.target_turn_rate, v.braking, v.sensor.has_contact,
                )

    def _notify(self, event: str, vehicle_ids: List[int]) -> None:
        if self._bus is None:
            return
        self._bus.publish(
            topic=TOPIC_LIFECYCLE,
            sender="world",
            payload={"event": event, "vehicle_ids": list(vehicle_ids), "tick": self.tick_count},
        )
