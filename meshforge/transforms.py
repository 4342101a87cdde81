"""4x4 transformation matrices for column vectors (M @ v)."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

_X_AXIS = (1.0, 0.0, 0.0)
_Y_AXIS = (0.0, 1.0, 0.0)
_Z_AXIS = (0.0, 0.0, 1.0)


def _vec3(value: Sequence[float] | float, allow_scalar: bool = False) -> np.ndarray:
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        if not allow_scalar:
            raise ValueError("expected a 3-component vector, got a scalar")
        return np.full(3, float(arr))
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {arr.shape}")
    return arr


def _normalized(v: np.ndarray, what: str) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        raise ValueError(f"{what} must not be a zero vector")
    return v / length


def translation(offset: Sequence[float]) -> np.ndarray:
    """Matrix that moves points by `offset`."""
    m = np.eye(4)
    m[:3, 3] = _vec3(offset)
    return m


def scaling(scale: Sequence[float] | float) -> np.ndarray:
    """Matrix that scales along each axis; a scalar scales uniformly."""
    return np.diag([*_vec3(scale, allow_scalar=True), 1.0])


def rotation(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Right-handed rotation by `angle` radians about `axis` (need not be unit length)."""
    x, y, z = _normalized(_vec3(axis), "rotation axis")
    c, s = math.cos(angle), math.sin(angle)
    a = np.array([x, y, z])
    cross = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    m = np.eye(4)
    m[:3, :3] = c * np.eye(3) + (1.0 - c) * np.outer(a, a) + s * cross
    return m


def euler_to_matrix(euler_degrees: Sequence[float]) -> np.ndarray:
    """Rotation from Euler angles in degrees, applied about x, then y, then z."""
    rx, ry, rz = (math.radians(a) for a in _vec3(euler_degrees))
    return rotation(rz, _Z_AXIS) @ rotation(ry, _Y_AXIS) @ rotation(rx, _X_AXIS)


def look_at(
    eye: Sequence[float],
    target: Sequence[float],
    up: Sequence[float] = _Y_AXIS,
) -> np.ndarray:
    """Right-handed view matrix looking from `eye` towards `target`."""
    eye_v = _vec3(eye)
    forward = _normalized(_vec3(target) - eye_v, "view direction")
    side = _normalized(np.cross(forward, _vec3(up)), "up vector crossed with view direction")
    true_up = np.cross(side, forward)

    m = np.eye(4)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[0, 3] = -float(side @ eye_v)
    m[1, 3] = -float(true_up @ eye_v)
    m[2, 3] = float(forward @ eye_v)
    return m


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection to clip space with depth in [-1, 1]."""
    if aspect == 0.0:
        raise ValueError("aspect ratio must not be zero")
    if far == near:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0.0:
        raise ValueError("field of view must not be zero")

    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m