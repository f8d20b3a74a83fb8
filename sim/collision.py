#!/usr/bin/env python3
"""
sim/collision.py
================
Yield response to sensor contact-begin events.

When a vehicle's sensor cone starts overlapping another vehicle, the owner
slows to the creep speed and turns away with a strength proportional to
how aligned the two headings are.  This is a *yield*, not a stop:
``braking`` is left untouched (boundary containment is the only response
that brakes).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from sim.control_policy import ControlPolicy
from sim.geometry import cross_y, sign_or
from sim.vehicle import Vehicle

log = logging.getLogger("collision")

ARENA_ENTITY: int = 0
"""Entity id of the static platform body."""


@dataclass(frozen=True)
class ContactEvent:
    """Contact-begin between two entities; at least one side is a sensor."""

    a: int
    b: int


class CollisionReactor:
    """Turns contact-begin events into yield decisions.

    Parameters
    ----------
    vehicles : Mapping[int, Vehicle]
        Live vehicles keyed by vehicle id (shared with the world).
    sensor_owner : Mapping[int, int]
        Sensor id → owning vehicle id (shared with the world).
    policy : ControlPolicy or None
        Tunable constants; uses defaults when *None*.
    """

    def __init__(
        self,
        vehicles: Mapping[int, Vehicle],
        sensor_owner: Mapping[int, int],
        policy: Optional[ControlPolicy] = None,
    ) -> None:
        self._vehicles = vehicles
        self._sensor_owner = sensor_owner
        self.policy = policy or ControlPolicy()
        self.reactions: int = 0
        self.skipped: int = 0

    def handle_all(self, events: Iterable[ContactEvent]) -> int:
        """Process *events* in order (last write wins); return reactions made."""
        count = 0
        for event in events:
            count += self.handle(event)
        return count

    def handle(self, event: ContactEvent) -> int:
        """React to one event from both sides; return reactions made (0–2)."""
        count = 0
        for sensor_id, other_id in ((event.a, event.b), (event.b, event.a)):
            if sensor_id not in self._sensor_owner:
                continue
            pair = self._resolve(sensor_id, other_id)
            if pair is None:
                self.skipped += 1
                continue
            own, other = pair
            self.react(own, other)
            count += 1
        self.reactions += count
        return count

    def _resolve(self, sensor_id: int, other_id: int) -> Optional[Tuple[Vehicle, Vehicle]]:
        owner_id = self._sensor_owner[sensor_id]
        own = self._vehicles.get(owner_id)
        if own is None:
            log.warning("sensor %d has no live owner (vehicle %d); event skipped",
                        sensor_id, owner_id)
            return None
        other = self._vehicles.get(other_id)
        if other is None:
            # arena, another sensor volume, or an already despawned body
            log.debug("sensor %d touched non-vehicle entity %d", sensor_id, other_id)
            return None
        if other is own:
            return None
        return own, other

    def react(self, own: Vehicle, other: Vehicle) -> None:
        """Commit *own* to yielding against *other*."""
        p = self.policy
        d = own.heading()
        d2 = other.heading()
        multiplier = abs(float(np.dot(d2, d)))
        turn_sign = sign_or(cross_y(d2, d), p.collision_tie_turn_sign)
        own.target_turn_rate = turn_sign * multiplier * p.collision_turn_gain
        own.target_speed = p.reduced_cruise_speed
        log.debug("YIELD %d -> %d mult=%.2f sign=%+.0f turn=%.2f",
                  own.id, other.id, multiplier, turn_sign, own.target_turn_rate)


def build_sensor_index(vehicles: Iterable[Vehicle]) -> Dict[int, int]:
    """Sensor id → vehicle id table for *vehicles*."""
    return {v.sensor.id: v.id for v in vehicles}
