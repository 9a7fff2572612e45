"""Quaternion algebra for rigid-body rotations."""

from __future__ import annotations

import math
import sys
from typing import Any, Sequence

import numpy as np

from glowdock.constants import LINEAR_THRESHOLD


def _float_equals(a: float, b: float) -> bool:
    return abs(a - b) < sys.float_info.epsilon


def _hamilton(a: Sequence[Any], b: Sequence[Any]) -> tuple[Any, Any, Any, Any]:
    """Hamilton product on (w, x, y, z) components (floats or numpy arrays)."""

    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return (
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    )


class Quaternion:
    """Quaternion ``w + xi + yj + zk``.

    Arithmetic never renormalizes: call :meth:`normalize` explicitly when a
    unit quaternion is required. Equality is component-wise within machine
    epsilon.
    """

    __slots__ = ("w", "x", "y", "z")

    def __init__(self, w: float = 1.0, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.w = float(w)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def from_components(cls, values: Sequence[float]) -> "Quaternion":
        w, x, y, z = values
        return cls(w, x, y, z)

    def components(self) -> tuple[float, float, float, float]:
        return (self.w, self.x, self.y, self.z)

    def copy(self) -> "Quaternion":
        return Quaternion(self.w, self.x, self.y, self.z)

    def conjugate(self) -> "Quaternion":
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def dot(self, other: "Quaternion") -> float:
        return self.w * other.w + self.x * other.x + self.y * other.y + self.z * other.z

    def norm2(self) -> float:
        return self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z

    def norm(self) -> float:
        return math.sqrt(self.norm2())

    def normalize(self) -> "Quaternion":
        """Return a unit copy of this quaternion."""

        norm = self.norm()
        return Quaternion(self.w / norm, self.x / norm, self.y / norm, self.z / norm)

    def inverse(self) -> "Quaternion":
        return self.conjugate() / self.norm2()

    def distance(self, other: "Quaternion") -> float:
        """Rotation distance ``1 - dot^2``, blind to the q/-q ambiguity."""

        dot = self.dot(other)
        return 1.0 - dot * dot

    def rotate(self, vector: Sequence[float]) -> list[float]:
        """Rotate a 3-vector as ``q * v * q^-1``."""

        pure = (0.0, float(vector[0]), float(vector[1]), float(vector[2]))
        _, x, y, z = _hamilton(_hamilton(self.components(), pure), self.inverse().components())
        return [x, y, z]

    def rotate_coordinates(self, coords: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`rotate` over an ``(N, 3)`` coordinate array."""

        coords = np.asarray(coords, dtype=float)
        zeros = np.zeros(coords.shape[0], dtype=float)
        pure = (zeros, coords[:, 0], coords[:, 1], coords[:, 2])
        _, x, y, z = _hamilton(_hamilton(self.components(), pure), self.inverse().components())
        return np.column_stack((x, y, z))

    def lerp(self, other: "Quaternion", t: float) -> "Quaternion":
        return self * (1.0 - t) + other * t

    def slerp(self, other: "Quaternion", t: float) -> "Quaternion":
        """Spherical linear interpolation along the shortest arc.

        Inputs are left untouched. Near-parallel quaternions use a
        normalized linear interpolation instead.
        """

        q1 = self.normalize()
        q2 = other.normalize()
        q_dot = q1.dot(q2)

        # Shortest path
        if q_dot < 0.0:
            q1 = -q1
            q_dot = -q_dot

        if q_dot > LINEAR_THRESHOLD:
            return (q1 + (q2 - q1) * t).normalize()

        q_dot = max(-1.0, min(1.0, q_dot))
        omega = math.acos(q_dot)
        so = math.sin(omega)
        return q1 * (math.sin((1.0 - t) * omega) / so) + q2 * (math.sin(t * omega) / so)

    @classmethod
    def random(cls, rng: np.random.Generator) -> "Quaternion":
        """Uniform random unit quaternion (Shoemake).

        Component order is (w, x, y, z) = (sqrt(1-u1)·sin, sqrt(1-u1)·cos,
        sqrt(u1)·sin, sqrt(u1)·cos).
        """

        u1 = float(rng.random())
        u2 = float(rng.random())
        u3 = float(rng.random())
        return cls(
            math.sqrt(1.0 - u1) * math.sin(2.0 * math.pi * u2),
            math.sqrt(1.0 - u1) * math.cos(2.0 * math.pi * u2),
            math.sqrt(u1) * math.sin(2.0 * math.pi * u3),
            math.sqrt(u1) * math.cos(2.0 * math.pi * u3),
        )

    def __add__(self, other: "Quaternion") -> "Quaternion":
        return Quaternion(self.w + other.w, self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Quaternion") -> "Quaternion":
        return Quaternion(self.w - other.w, self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Quaternion":
        return Quaternion(-self.w, -self.x, -self.y, -self.z)

    def __mul__(self, other: Any) -> "Quaternion":
        if isinstance(other, Quaternion):
            return Quaternion(*_hamilton(self.components(), other.components()))
        if isinstance(other, (int, float)):
            scalar = float(other)
            return Quaternion(scalar * self.w, scalar * self.x, scalar * self.y, scalar * self.z)
        return NotImplemented

    def __rmul__(self, other: Any) -> "Quaternion":
        if isinstance(other, (int, float)):
            return self * other
        return NotImplemented

    def __truediv__(self, scalar: float) -> "Quaternion":
        return Quaternion(self.w / scalar, self.x / scalar, self.y / scalar, self.z / scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return (
            _float_equals(self.w, other.w)
            and _float_equals(self.x, other.x)
            and _float_equals(self.y, other.y)
            and _float_equals(self.z, other.z)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Quaternion(w={self.w!r}, x={self.x!r}, y={self.y!r}, z={self.z!r})"
