#!/usr/bin/env python3
"""
Tests for spawning and despawning.
"""

from __future__ import annotations

import math
import random
import unittest
from typing import Dict

import numpy as np

from sim.control_policy import Arena, ControlPolicy
from sim.geometry import horizontal
from sim.lifecycle import LifecycleManager
from sim.vehicle import Vehicle


class LifecycleManagerTests(unittest.TestCase):
    def _manager(self, seed: int = 5, policy: ControlPolicy = None) -> LifecycleManager:
        self.vehicles: Dict[int, Vehicle] = {}
        self.sensor_owner: Dict[int, int] = {}
        return LifecycleManager(
            Arena(radius=30.0), self.vehicles, self.sensor_owner,
            random.Random(seed), policy or ControlPolicy(),
        )

    def test_spawn_five_then_despawn_all_leaves_none(self) -> None:
        mgr = self._manager()
        for _ in range(5):
            self.assertIsNotNone(mgr.spawn())
        self.assertEqual(len(self.vehicles), 5)
        removed = mgr.despawn_all()
        self.assertEqual(len(removed), 5)
        self.assertEqual(len(self.vehicles), 0)
        self.assertEqual(len(self.sensor_owner), 0)

    def test_spawn_faces_the_centre_on_the_ring(self) -> None:
        mgr = self._manager()
        car = mgr.spawn(angle=0.0)
        np.testing.assert_allclose(car.position, [24.0, 1.1, 0.0], atol=1e-9)
        np.testing.assert_allclose(car.heading(), [-1.0, 0.0, 0.0], atol=1e-9)

        for _ in range(20):
            car = mgr.spawn()
            radial = horizontal(car.position)
            self.assertAlmostEqual(float(np.linalg.norm(radial)), 24.0)
            inward = -radial / np.linalg.norm(radial)
            self.assertAlmostEqual(float(np.dot(car.heading(), inward)), 1.0, places=9)

    def test_spawn_starts_cruising_with_registered_sensor(self) -> None:
        mgr = self._manager()
        car = mgr.spawn()
        self.assertEqual(car.target_speed, ControlPolicy().default_cruise_speed)
        self.assertEqual(car.target_turn_rate, 0.0)
        self.assertFalse(car.braking)
        self.assertEqual(self.sensor_owner[car.sensor.id], car.id)
        self.assertNotEqual(car.sensor.id, car.id)

    def test_ids_are_unique(self) -> None:
        mgr = self._manager()
        ids = set()
        for _ in range(10):
            car = mgr.spawn()
            ids.update((car.id, car.sensor.id))
        self.assertEqual(len(ids), 20)

    def test_fallen_vehicles_are_removed(self) -> None:
        mgr = self._manager()
        keep = mgr.spawn()
        gone = mgr.spawn()
        gone.position = np.array([40.0, -10.5, 0.0])
        self.assertEqual(mgr.despawn_out_of_bounds(), [gone.id])
        self.assertIn(keep.id, self.vehicles)
        self.assertNotIn(gone.id, self.vehicles)
        self.assertNotIn(gone.sensor.id, self.sensor_owner)
        self.assertEqual(mgr.fallen, 1)

    def test_population_cap_refuses_spawn(self) -> None:
        mgr = self._manager(policy=ControlPolicy(max_vehicles=2))
        mgr.spawn()
        mgr.spawn()
        with self.assertLogs("lifecycle", level="WARNING"):
            self.assertIsNone(mgr.spawn())
        self.assertEqual(len(self.vehicles), 2)

    def test_same_seed_same_spawns(self) -> None:
        mgr_a = self._manager(seed=9)
        a = [mgr_a.spawn().position.copy() for _ in range(4)]
        mgr_b = self._manager(seed=9)
        b = [mgr_b.spawn().position.copy() for _ in range(4)]
        np.testing.assert_allclose(a, b)
        angles = {round(math.atan2(p[2], p[0]), 6) for p in a}
        self.assertEqual(len(angles), 4)


if __name__ == "__main__":
    unittest.main()
