#!/usr/bin/env python3
"""
sim/clearance.py
================
Returns yielding / braking vehicles to the cruising profile once their
sensor reports nothing ahead.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sim.control_policy import ControlPolicy
from sim.vehicle import Vehicle

log = logging.getLogger("clearance")


class ClearanceMonitor:
    """Resets non-cruising vehicles whose sensor is clear.

    A vehicle counts as non-cruising while ``target_speed`` is at or below
    ``policy.clearance_speed_threshold``.  Applying the monitor to an
    already-cruising vehicle changes nothing.
    """

    def __init__(self, policy: Optional[ControlPolicy] = None) -> None:
        self.policy = policy or ControlPolicy()

    def is_clear(self, vehicle: Vehicle) -> bool:
        return (
            vehicle.target_speed <= self.policy.clearance_speed_threshold
            and not vehicle.sensor.has_contact
        )

    def apply(self, vehicles: Iterable[Vehicle]) -> List[int]:
        """Reset every clear vehicle; return their ids."""
        reset: List[int] = []
        for vehicle in vehicles:
            if not self.is_clear(vehicle):
                continue
            vehicle.reset_control(self.policy.default_cruise_speed)
            reset.append(vehicle.id)
        if reset:
            log.debug("clear -> cruising: %s", reset)
        return reset
