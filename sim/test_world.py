#!/usr/bin/env python3
"""
End-to-end tests for the fixed-order tick pipeline and the bridge.
"""

from __future__ import annotations

import math
import unittest

import numpy as np

from bus.event_bus import TOPIC_COMMAND, TOPIC_LIFECYCLE, EventBus
from sim.control_policy import ControlPolicy
from sim.geometry import horizontal, quat_from_yaw, vec3
from sim.sim_bridge import SimBridge
from sim.world import ArenaWorld

DT = 1.0 / 60.0


class WorldPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = ControlPolicy(jump_probability=0.0)
        self.world = ArenaWorld(num_vehicles=0, seed=1, policy=self.policy)

    def _place(self, x: float, z: float, yaw: float):
        car = self.world.spawn()
        car.position = vec3(x, self.world.arena.surface_y, z)
        car.orientation = quat_from_yaw(yaw)
        car.linear_velocity = vec3()
        return car

    def test_contact_yields_within_the_same_tick(self) -> None:
        a = self._place(0.0, 0.0, 0.0)           # heading +Z
        b = self._place(0.0, 4.0, math.pi / 2)   # in front of a, heading +X
        self.world.tick(DT)
        self.assertTrue(a.sensor.has_contact)
        self.assertEqual(a.target_speed, self.policy.reduced_cruise_speed)
        self.assertFalse(a.braking)
        self.assertAlmostEqual(a.target_turn_rate, 0.0, places=9)
        self.assertFalse(b.sensor.has_contact)
        self.assertEqual(b.target_speed, self.policy.default_cruise_speed)

    def test_cleared_vehicle_resumes_cruising(self) -> None:
        a = self._place(0.0, 0.0, 0.0)
        b = self._place(0.0, 4.0, math.pi / 2)
        self.world.tick(DT)
        b.position = vec3(-15.0, self.world.arena.surface_y, -15.0)
        self.world.tick(DT)
        self.assertFalse(a.sensor.has_contact)
        self.assertEqual(a.target_speed, self.policy.default_cruise_speed)
        self.assertEqual(a.target_turn_rate, 0.0)

    def test_edge_vehicle_keeps_braking_while_heading_out(self) -> None:
        car = self._place(0.96 * self.world.arena.radius, 0.0, 0.0)
        self.world.tick(DT)
        self.assertTrue(car.braking)
        self.assertEqual(car.target_speed, 0.0)
        for _ in range(5):
            self.world.tick(DT)
        self.assertTrue(car.braking)
        self.assertLess(car.target_turn_rate, 0.0)

    def test_vehicle_driving_outward_stops_on_the_platform(self) -> None:
        car = self._place(20.0, 0.0, math.pi / 2)   # heading +X
        car.linear_velocity = vec3(self.policy.default_cruise_speed, 0.0, 0.0)
        furthest = 0.0
        for _ in range(240):
            self.world.tick(DT)
            self.assertIn(car.id, self.world.vehicles)
            furthest = max(furthest, float(np.linalg.norm(horizontal(car.position))))
        self.assertLess(furthest, self.world.arena.radius)
        self.assertEqual(self.world.lifecycle.fallen, 0)
        self.assertEqual(self.world.steering.containments, 1)
        outward = horizontal(car.position) / np.linalg.norm(horizontal(car.position))
        self.assertLessEqual(float(np.dot(car.heading(), outward)),
                             self.policy.boundary_heading_dot)

    def test_edge_hold_counts_one_containment(self) -> None:
        self._place(0.96 * self.world.arena.radius, 0.0, 0.0)
        for _ in range(10):
            self.world.tick(DT)
        self.assertEqual(self.world.steering.containments, 1)
        self.assertEqual(self.world.stats()["containments"], 1)

    def test_default_population_stays_on_the_platform(self) -> None:
        world = ArenaWorld(num_vehicles=6, seed=0)
        for _ in range(1800):
            world.tick(DT)
        stats = world.stats()
        self.assertEqual(stats["fallen"], 0)
        self.assertEqual(stats["vehicles"], 6)
        self.assertGreater(stats["containments"], 0)

    def test_vehicle_off_the_platform_falls_and_is_removed(self) -> None:
        bus = EventBus()
        world = ArenaWorld(num_vehicles=0, seed=1, policy=self.policy, bus=bus)
        car = world.spawn()
        car.position = vec3(40.0, 0.1, 0.0)
        for _ in range(200):
            world.tick(0.05)
            if car.id not in world.vehicles:
                break
        self.assertNotIn(car.id, world.vehicles)
        self.assertEqual(world.lifecycle.fallen, 1)
        events = [m.payload for m in bus.poll(TOPIC_LIFECYCLE)]
        self.assertIn({"event": "despawned", "vehicle_ids": [car.id], "tick": world.tick_count},
                      events)

    def test_spawned_vehicle_settles_and_drives_inward(self) -> None:
        car = self.world.spawn(angle=0.0)
        for _ in range(120):
            self.world.tick(DT)
        self.assertAlmostEqual(car.position[1], self.world.arena.surface_y)
        self.assertGreater(car.speed(), 1.0)
        self.assertLess(float(np.linalg.norm(horizontal(car.position))), 24.0)

    def test_bulk_despawn_publishes_notification(self) -> None:
        bus = EventBus()
        world = ArenaWorld(num_vehicles=5, seed=2, bus=bus)
        self.assertEqual(len(world.vehicles), 5)
        world.despawn_all()
        self.assertEqual(len(world.vehicles), 0)
        self.assertEqual(len(world.sensor_owner), 0)
        events = [m.payload["event"] for m in bus.poll(TOPIC_LIFECYCLE)]
        self.assertEqual(events.count("spawned"), 5)
        self.assertEqual(events[-1], "despawned")

    def test_long_run_keeps_control_invariants(self) -> None:
        world = ArenaWorld(num_vehicles=8, seed=3)
        for _ in range(890):
            world.tick(DT)
            for car in world.all_vehicles():
                self.assertTrue(np.all(np.isfinite(car.position)))
                self.assertTrue(np.all(np.isfinite(car.linear_velocity)))
                self.assertGreaterEqual(car.target_speed, 0.0)
                if car.braking:
                    self.assertEqual(car.target_speed, 0.0)
                self.assertEqual(world.sensor_owner[car.sensor.id], car.id)
        self.assertEqual(len(world.sensor_owner), len(world.vehicles))
        self.assertEqual(world.perturbation.expirations, 4)

    def test_snapshot_exposes_pose_and_state(self) -> None:
        car = self.world.spawn(angle=0.0)
        (snap,) = self.world.snapshot()
        self.assertEqual(snap["id"], car.id)
        self.assertAlmostEqual(snap["x"], 24.0)
        self.assertAlmostEqual(snap["yaw"], -math.pi / 2)
        self.assertEqual(snap["state"], "CRUISING")


class SimBridgeCommandTests(unittest.TestCase):
    def test_spawn_and_bulk_despawn_commands(self) -> None:
        bridge = SimBridge(vehicle_count=2, random_seed=1)
        bridge.request_spawn(3)
        bridge._tick(DT)
        self.assertEqual(len(bridge.world.vehicles), 5)
        self.assertEqual(len(bridge.get_vehicles()), 5)

        bridge.request_despawn_all()
        bridge._tick(DT)
        self.assertEqual(len(bridge.world.vehicles), 0)
        self.assertEqual(bridge.get_vehicles(), [])
        self.assertEqual(bridge.get_stats()["vehicles"], 0)

    def test_unknown_command_is_logged_and_ignored(self) -> None:
        bridge = SimBridge(vehicle_count=1, random_seed=1)
        bridge.bus.publish(TOPIC_COMMAND, "test", {"command": "explode"})
        with self.assertLogs("sim_bridge", level="WARNING"):
            bridge._tick(DT)
        self.assertEqual(len(bridge.world.vehicles), 1)

    def test_lifecycle_events_reach_the_cache(self) -> None:
        bridge = SimBridge(vehicle_count=0, random_seed=1)
        bridge.request_spawn(2)
        bridge._tick(DT)
        events = bridge.get_recent_events()
        self.assertEqual([e["event"] for e in events], ["spawned", "spawned"])


if __name__ == "__main__":
    unittest.main()
