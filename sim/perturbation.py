#!/usr/bin/env python3
"""
sim/perturbation.py
===================
Process-wide repeating "jump" timer.

Every ``jump_period_s`` seconds each live vehicle independently jumps with
probability ``jump_probability``.  A jump adds a one-tick force to
``applied_force`` that delivers the configured upward + forward impulse.
It runs after :class:`~sim.steering.SteeringController` and adds to, never
replaces, the steering force.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from sim.control_policy import ControlPolicy
from sim.geometry import UP
from sim.vehicle import Vehicle

log = logging.getLogger("perturbation")

# absorbs float drift from summing fixed ticks
_TIMER_SLACK = 1e-9


class PeriodicPerturbation:
    """Fixed-interval Bernoulli jump injector.

    Parameters
    ----------
    rng : random.Random
        Injected random source; the only source of randomness used.
    policy : ControlPolicy or None
        Tunable constants; uses defaults when *None*.
    """

    def __init__(self, rng: random.Random, policy: Optional[ControlPolicy] = None) -> None:
        self.policy = policy or ControlPolicy()
        self._rng = rng
        self._elapsed: float = 0.0
        self.expirations: int = 0
        self.jumps: int = 0

    @property
    def time_to_next(self) -> float:
        return self.policy.jump_period_s - self._elapsed

    def reset(self) -> None:
        self._elapsed = 0.0

    def update(self, vehicles: Sequence[Vehicle], dt: float) -> List[int]:
        """Advance the timer by *dt*; fire once per elapsed period."""
        self._elapsed += dt
        jumped: List[int] = []
        while self._elapsed >= self.policy.jump_period_s - _TIMER_SLACK:
            self._elapsed = max(0.0, self._elapsed - self.policy.jump_period_s)
            jumped.extend(self.fire(vehicles, dt))
        return jumped

    def fire(self, vehicles: Sequence[Vehicle], dt: float) -> List[int]:
        """Run one timer expiry; return the ids of vehicles that jumped."""
        p = self.policy
        self.expirations += 1
        jumped: List[int] = []
        for vehicle in vehicles:
            if self._rng.random() >= p.jump_probability:
                continue
            impulse = UP * p.jump_impulse_up + vehicle.heading() * p.jump_impulse_forward
            vehicle.applied_force = vehicle.applied_force + impulse / max(dt, 1e-6)
            jumped.append(vehicle.id)
        self.jumps += len(jumped)
        if jumped:
            log.debug("jump expiry %d: %s", self.expirations, jumped)
        return jumped
