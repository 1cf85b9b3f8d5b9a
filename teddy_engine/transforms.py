"""4x4 transform helpers and matrix decomposition.

Matrices are numpy arrays indexed ``[row, column]`` acting on column
vectors. Quaternions are arrays ``(w, x, y, z)``. Angles are in radians.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

_EPSILON = float(np.finfo(np.float32).eps)


def _vec3(vector: Sequence[float]) -> np.ndarray:
    arr = np.asarray(vector, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr


def translate(vector: Sequence[float]) -> np.ndarray:
    """Return a translation matrix."""
    m = np.identity(4)
    m[:3, 3] = _vec3(vector)
    return m


def rotate(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Return a rotation of ``angle`` about ``axis``."""
    a = _vec3(axis)
    a = a / np.linalg.norm(a)
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array(
        [
            [0.0, -a[2], a[1]],
            [a[2], 0.0, -a[0]],
            [-a[1], a[0], 0.0],
        ]
    )
    m = np.identity(4)
    m[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(a, a)
    return m


def scale(vector: Sequence[float]) -> np.ndarray:
    """Return a scaling matrix."""
    return np.diag(np.append(_vec3(vector), 1.0))


def ortho(left: float, right: float, bottom: float, top: float,
          near: float, far: float) -> np.ndarray:
    """Right-handed orthographic projection with depth mapped to [-1, 1]."""
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with depth mapped to [-1, 1]."""
    tan_half = math.tan(fov / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[3, 2] = -1.0
    m[2, 3] = -(2.0 * far * near) / (far - near)
    return m


def quat_from_euler(euler: Sequence[float]) -> np.ndarray:
    """Quaternion for Euler angles (pitch, yaw, roll), applied X then Y then Z."""
    half = _vec3(euler) * 0.5
    cx, cy, cz = np.cos(half)
    sx, sy, sz = np.sin(half)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def quat_to_mat4(quat: Sequence[float]) -> np.ndarray:
    """Rotation matrix of a unit quaternion."""
    w, x, y, z = np.asarray(quat, dtype=float)
    m = np.identity(4)
    m[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return m


def quat_rotate(quat: Sequence[float], vector: Sequence[float]) -> np.ndarray:
    """Rotate a 3-vector by a unit quaternion."""
    q = np.asarray(quat, dtype=float)
    v = _vec3(vector)
    qv = q[1:]
    t = 2.0 * np.cross(qv, v)
    return v + q[0] * t + np.cross(qv, t)


def decompose_transform(
    transform: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split a transform into translation, Euler rotation and scale.

    Raises ValueError when the homogeneous weight is zero.
    """
    m = np.array(transform, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    if abs(m[3, 3]) <= _EPSILON:
        raise ValueError("transform cannot be decomposed: zero homogeneous weight")

    if any(abs(m[3, i]) > _EPSILON for i in range(3)):
        m[3, :3] = 0.0
        m[3, 3] = 1.0

    translation = m[:3, 3].copy()

    columns = [m[:3, i].copy() for i in range(3)]
    scale_out = np.array([np.linalg.norm(col) for col in columns])
    rows = [col / length for col, length in zip(columns, scale_out)]

    rotation = np.zeros(3)
    rotation[1] = math.asin(-rows[0][2])
    if math.cos(rotation[1]) != 0:
        rotation[0] = math.atan2(rows[1][2], rows[2][2])
        rotation[2] = math.atan2(rows[0][1], rows[0][0])
    else:
        rotation[0] = math.atan2(-rows[2][0], rows[1][1])
        rotation[2] = 0.0
    return translation, rotation, scale_out