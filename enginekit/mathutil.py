"""Quaternion, rotation and frustum helpers.

Quaternions are numpy arrays laid out as ``(x, y, z, w)``. Matrices are
row-major 4x4 arrays that act on column vectors (``M @ v``).
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

__all__ = [
    "calc_frustum_planes",
    "angle_axis",
    "quat_mul",
    "quat_normalize",
    "quat_conjugate",
    "quat_rotate",
    "quat_to_mat4",
    "compose_quat",
    "decompose_quat",
    "normalize_180",
]

_EPSILON = float(np.finfo(np.float32).eps)
_AXIS_X = np.array([1.0, 0.0, 0.0])
_AXIS_Y = np.array([0.0, 1.0, 0.0])
_AXIS_Z = np.array([0.0, 0.0, 1.0])


def _quat(q: Sequence[float]) -> np.ndarray:
    arr = np.asarray(q, dtype=np.float64)
    if arr.shape != (4,):
        raise ValueError(f"quaternion must have 4 components, got shape {arr.shape}")
    return arr


def calc_frustum_planes(view_proj: Sequence[Sequence[float]]) -> np.ndarray:
    """Extract the six frustum planes of a view-projection matrix.

    Returns a 6x4 array ordered left, right, bottom, top, near, far. Each plane
    has a unit normal in ``xyz`` and ``w`` set so that a point ``p`` lies on the
    inner side when ``dot(xyz, p) >= w``.
    """
    m = np.asarray(view_proj, dtype=np.float64)
    if m.shape != (4, 4):
        raise ValueError(f"matrix must be 4x4, got shape {m.shape}")
    r0, r1, r2, r3 = m
    planes = np.array([r3 + r0, r3 - r0, r3 + r1, r3 - r1, r3 + r2, r3 - r2])
    planes /= np.linalg.norm(planes[:, :3], axis=1, keepdims=True)
    planes[:, 3] = -planes[:, 3]
    return planes


def angle_axis(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Quaternion rotating by ``angle`` radians around a unit ``axis``."""
    half = angle * 0.5
    s = math.sin(half)
    ax = np.asarray(axis, dtype=np.float64)
    return np.array([ax[0] * s, ax[1] * s, ax[2] * s, math.cos(half)])


def quat_mul(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Hamilton product ``a * b`` (apply ``b`` first, then ``a``)."""
    ax, ay, az, aw = _quat(a)
    bx, by, bz, bw = _quat(b)
    return np.array(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by + ay * bw + az * bx - ax * bz,
            aw * bz + az * bw + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        ]
    )


def quat_normalize(q: Sequence[float]) -> np.ndarray:
    """Unit quaternion in the direction of ``q``; identity when ``q`` is zero."""
    arr = _quat(q)
    length = float(np.linalg.norm(arr))
    if length <= 0.0:
        return np.array([0.0, 0.0, 0.0, 1.0])
    return arr / length


def quat_conjugate(q: Sequence[float]) -> np.ndarray:
    x, y, z, w = _quat(q)
    return np.array([-x, -y, -z, w])


def quat_rotate(q: Sequence[float], v: Sequence[float]) -> np.ndarray:
    """Rotate the 3-vector ``v`` by quaternion ``q``."""
    arr = _quat(q)
    u, w = arr[:3], arr[3]
    vec = np.asarray(v, dtype=np.float64)
    uv = np.cross(u, vec)
    uuv = np.cross(u, uv)
    return vec + (uv * w + uuv) * 2.0


def quat_to_mat4(q: Sequence[float]) -> np.ndarray:
    """4x4 rotation matrix equivalent to ``q``."""
    x, y, z, w = _quat(q)
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy), 0.0],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx), 0.0],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def compose_quat(rotation: Sequence[float]) -> np.ndarray:
    """Orientation from ``rotation`` radians: x about Y, then y about X, then z about Z."""
    rx, ry, rz = (float(c) for c in rotation)
    orientation = angle_axis(rx, _AXIS_Y)
    orientation = quat_mul(angle_axis(ry, _AXIS_X), orientation)
    orientation = quat_mul(angle_axis(rz, _AXIS_Z), orientation)
    return quat_normalize(orientation)


def _pitch(x: float, y: float, z: float, w: float) -> float:
    num = 2.0 * (y * z + w * x)
    den = w * w - x * x - y * y + z * z
    if abs(num) <= _EPSILON and abs(den) <= _EPSILON:
        return 2.0 * math.atan2(x, w)
    return math.atan2(num, den)


def _yaw(x: float, y: float, z: float, w: float) -> float:
    return math.asin(min(1.0, max(-1.0, -2.0 * (x * z - w * y))))


def _roll(x: float, y: float, z: float, w: float) -> float:
    num = 2.0 * (x * y + w * z)
    den = w * w + x * x - y * y - z * z
    if abs(num) <= _EPSILON and abs(den) <= _EPSILON:
        return 0.0
    return math.atan2(num, den)


def decompose_quat(q: Sequence[float]) -> np.ndarray:
    """Euler angles ``(pitch, yaw, roll)`` in radians of ``q``."""
    x, y, z, w = (float(c) for c in _quat(q))
    return np.array([_pitch(x, y, z, w), _yaw(x, y, z, w), _roll(x, y, z, w)])


def normalize_180(rotation: Sequence[float]) -> np.ndarray:
    """Wrap angles in degrees into ``[-180, 180)``."""
    rot = np.asarray(rotation, dtype=np.float64)
    return np.mod(rot + 180.0, 360.0) - 180.0