#!/usr/bin/env python3
"""
Sanity checks for the frame conventions shared by the controllers.
"""

import math
import unittest

import numpy as np

from sim.geometry import (
    UP,
    cross_y,
    forward_of,
    normalize_or_zero,
    quat_from_axis_angle,
    quat_from_yaw,
    quat_integrate,
    sign_or,
    up_of,
    vec3,
    yaw_of,
)


class FrameConventionTests(unittest.TestCase):
    def test_yaw_maps_forward_axis(self) -> None:
        np.testing.assert_allclose(forward_of(quat_from_yaw(0.0)), [0, 0, 1], atol=1e-12)
        np.testing.assert_allclose(forward_of(quat_from_yaw(math.pi / 2)), [1, 0, 0], atol=1e-12)
        self.assertAlmostEqual(yaw_of(quat_from_yaw(-1.2)), -1.2)

    def test_positive_yaw_rate_turns_toward_plus_x(self) -> None:
        q = quat_integrate(quat_from_yaw(0.0), UP * 0.5, 0.1)
        self.assertGreater(forward_of(q)[0], 0.0)
        self.assertAlmostEqual(yaw_of(q), 0.05)

    def test_roll_tilts_up_vector(self) -> None:
        q = quat_from_axis_angle(vec3(0.0, 0.0, 1.0), math.pi)
        self.assertAlmostEqual(float(np.dot(up_of(q), UP)), -1.0)

    def test_cross_y_sign(self) -> None:
        self.assertGreater(cross_y(vec3(0, 0, 1), vec3(1, 0, 0)), 0.0)
        self.assertLess(cross_y(vec3(1, 0, 0), vec3(0, 0, 1)), 0.0)
        self.assertEqual(cross_y(vec3(0, 0, 1), vec3(0, 0, 2)), 0.0)

    def test_sign_or_and_normalize(self) -> None:
        self.assertEqual(sign_or(0.0, -1.0), -1.0)
        self.assertEqual(sign_or(-3.0, 1.0), -1.0)
        np.testing.assert_allclose(normalize_or_zero(vec3()), [0, 0, 0])
        np.testing.assert_allclose(normalize_or_zero(vec3(3, 0, 4)), [0.6, 0, 0.8])


if __name__ == "__main__":
    unittest.main()
