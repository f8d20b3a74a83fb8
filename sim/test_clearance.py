#!/usr/bin/env python3
"""
Tests for the return-to-cruising monitor.
"""

from __future__ import annotations

import unittest

from sim.clearance import ClearanceMonitor
from sim.control_policy import ControlPolicy
from sim.vehicle import Sensor, Vehicle


def _vehicle(target_speed: float, turn: float = 0.0, braking: bool = False,
             contact: bool = False) -> Vehicle:
    car = Vehicle(id=1, sensor=Sensor(id=2, half_angle=0.5, length=6.0))
    car.target_speed = target_speed
    car.target_turn_rate = turn
    car.braking = braking
    car.sensor.has_contact = contact
    return car


def _control(car: Vehicle):
    return (car.target_speed, car.target_turn_rate, car.braking)


class ClearanceMonitorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = ControlPolicy()
        self.monitor = ClearanceMonitor(self.policy)
        self.cruising = (self.policy.default_cruise_speed, 0.0, False)

    def test_clear_yielding_vehicle_returns_to_cruising(self) -> None:
        car = _vehicle(self.policy.reduced_cruise_speed, turn=0.7)
        reset = self.monitor.apply([car])
        self.assertEqual(reset, [car.id])
        self.assertEqual(_control(car), self.cruising)

    def test_clear_braking_vehicle_returns_to_cruising(self) -> None:
        car = _vehicle(0.0, turn=-1.5, braking=True)
        self.monitor.apply([car])
        self.assertEqual(_control(car), self.cruising)

    def test_contact_keeps_vehicle_yielding(self) -> None:
        car = _vehicle(self.policy.reduced_cruise_speed, turn=0.7, contact=True)
        self.assertEqual(self.monitor.apply([car]), [])
        self.assertEqual(_control(car), (self.policy.reduced_cruise_speed, 0.7, False))

    def test_cruising_vehicle_is_untouched(self) -> None:
        car = _vehicle(5.0, turn=0.3)
        self.assertEqual(self.monitor.apply([car]), [])
        self.assertEqual(_control(car), (5.0, 0.3, False))

    def test_repeated_application_is_idempotent(self) -> None:
        car = _vehicle(0.0, braking=True)
        self.monitor.apply([car])
        after_first = _control(car)
        self.assertEqual(self.monitor.apply([car]), [])
        self.assertEqual(_control(car), after_first)
        self.assertEqual(after_first, self.cruising)


if __name__ == "__main__":
    unittest.main()
