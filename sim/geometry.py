#!/usr/bin/env python3
"""
sim/geometry.py
===============
Low-level vector and quaternion helpers used by every controller module
and by :mod:`sim.physics`.

Vectors are ``numpy`` arrays of shape ``(3,)`` with +Y up.  Quaternions are
``[w, x, y, z]`` arrays.  A vehicle's local forward axis is +Z.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math

import numpy as np

EPS: float = 1e-6

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    return np.array([float(x), float(y), float(z)])


def normalize_or_zero(v: np.ndarray, eps: float = EPS) -> np.ndarray:
    """Unit vector along *v*, or the zero vector when *v* is degenerate."""
    n = float(np.linalg.norm(v))
    if n < eps or not math.isfinite(n):
        return np.zeros(3)
    return v / n


def horizontal(v: np.ndarray) -> np.ndarray:
    """Drop the up-axis component of *v*."""
    return np.array([v[0], 0.0, v[2]])


def horizontal_dir(v: np.ndarray) -> np.ndarray:
    """Plane-projected, renormalised direction of *v* (zero if degenerate)."""
    return normalize_or_zero(horizontal(v))


def cross_y(a: np.ndarray, b: np.ndarray) -> float:
    """Vertical component of ``a × b``."""
    return float(a[2] * b[0] - a[0] * b[2])


def sign_or(value: float, fallback: float) -> float:
    """``sign(value)`` with *fallback* returned for an exact zero."""
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return fallback


# ── Quaternions ──────────────────────────────────────────────────────────────

def quat_identity() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    axis = normalize_or_zero(np.asarray(axis, dtype=float))
    if not axis.any():
        return quat_identity()
    half = 0.5 * angle
    s = math.sin(half)
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s])


def quat_from_yaw(yaw: float) -> np.ndarray:
    """Rotation of *yaw* radians about +Y; forward (+Z) maps to ``(sin, 0, cos)``."""
    return quat_from_axis_angle(UP, yaw)


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array([
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    ])


def quat_normalize(q: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(q))
    if n < EPS or not math.isfinite(n):
        return quat_identity()
    return q / n


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector *v* by unit quaternion *q*."""
    w = q[0]
    u = q[1:]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def quat_integrate(q: np.ndarray, omega: np.ndarray, dt: float) -> np.ndarray:
    """Advance orientation *q* by world-frame angular velocity *omega* over *dt*."""
    speed = float(np.linalg.norm(omega))
    if speed < EPS:
        return q
    dq = quat_from_axis_angle(omega / speed, speed * dt)
    return quat_normalize(quat_multiply(dq, q))


def forward_of(q: np.ndarray) -> np.ndarray:
    return quat_rotate(q, FORWARD)


def up_of(q: np.ndarray) -> np.ndarray:
    return quat_rotate(q, UP)


def yaw_of(q: np.ndarray) -> float:
    """Heading angle about +Y of the plane-projected forward axis."""
    f = forward_of(q)
    return math.atan2(f[0], f[2])
