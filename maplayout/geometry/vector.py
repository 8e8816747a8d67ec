"""Vector3 and rotation helpers shared by the compiler and the scene graph."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, Sequence


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clean(value: float) -> float:
    """Normalise ``-0.0`` to ``0.0`` so equal geometry compares and prints equal."""
    return 0.0 if value == 0 else float(value)


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector.  Y is up; X and Z span the footprint plane."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Any) -> Vector3 | None:
        """Build a vector from a 2- or 3-element numeric sequence.

        A 2-element ``[x, z]`` sits on the footprint plane (y = 0).  Anything
        else returns ``None``.
        """
        if isinstance(values, Vector3):
            return values
        if not isinstance(values, (list, tuple)) or not all(is_number(v) for v in values):
            return None
        if len(values) == 2:
            return cls(float(values[0]), 0.0, float(values[1]))
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))
        return None

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> Vector3:
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vector3:
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    @property
    def unit(self) -> Vector3:
        mag = self.magnitude
        if mag == 0:
            return Vector3()
        return self / mag

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def distance_to(self, other: Vector3) -> float:
        return (self - other).magnitude

    def horizontal(self) -> Vector3:
        """Project onto the footprint plane."""
        return Vector3(self.x, 0.0, self.z)

    def cleaned(self) -> Vector3:
        return Vector3(clean(self.x), clean(self.y), clean(self.z))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]


ZERO = Vector3()

Matrix3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]


def _matmul(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix3:
    return tuple(  # type: ignore[return-value]
        tuple(sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )


def rotation_matrix(rotation: Vector3) -> Matrix3:
    """Return Rx * Ry * Rz for Euler angles given in degrees."""
    rx, ry, rz = (math.radians(a) for a in rotation)
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)

    mx = ((1.0, 0.0, 0.0), (0.0, cx, -sx), (0.0, sx, cx))
    my = ((cy, 0.0, sy), (0.0, 1.0, 0.0), (-sy, 0.0, cy))
    mz = ((cz, -sz, 0.0), (sz, cz, 0.0), (0.0, 0.0, 1.0))
    return _matmul(_matmul(mx, my), mz)


def axis_vectors(rotation: Vector3) -> tuple[Vector3, Vector3, Vector3]:
    """Return the rotated local X, Y and Z axes (right, up, back)."""
    m = rotation_matrix(rotation)
    right = Vector3(m[0][0], m[1][0], m[2][0])
    up = Vector3(m[0][1], m[1][1], m[2][1])
    back = Vector3(m[0][2], m[1][2], m[2][2])
    return right, up, back


def yaw_for_direction(direction: Vector3) -> float:
    """Rotation about Y (degrees) that aligns local +X with ``direction``."""
    return clean(-math.degrees(math.atan2(direction.z, direction.x)))


_HEADINGS = {
    "+x": (1.0, 0.0),
    "x": (1.0, 0.0),
    "-x": (-1.0, 0.0),
    "+z": (0.0, 1.0),
    "z": (0.0, 1.0),
    "-z": (0.0, -1.0),
}


def heading(direction: str | None = None, angle: float | None = None) -> Vector3 | None:
    """Unit footprint vector from an axis name (+x/-x/+z/-z) or an angle in degrees.

    The angle is measured in the XZ plane from +X towards +Z.
    """
    if direction is not None:
        axis = _HEADINGS.get(direction.strip().lower())
        return Vector3(axis[0], 0.0, axis[1]) if axis else None
    if angle is not None:
        radians = math.radians(angle)
        return Vector3(clean(round(math.cos(radians), 12)), 0.0, clean(round(math.sin(radians), 12)))
    return None
