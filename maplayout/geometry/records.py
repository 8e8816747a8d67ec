"""Resolved geometry records owned by the registry for one build."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from maplayout.geometry.vector import ZERO, Vector3


@dataclass
class BoundingBox:
    """Axis-aligned bounding box."""

    min_x: float = 0.0
    min_y: float = 0.0
    min_z: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0

    @classmethod
    def from_points(cls, points: Iterable[Vector3]) -> BoundingBox:
        pts = list(points)
        if not pts:
            return cls()
        return cls(
            min_x=min(p.x for p in pts),
            min_y=min(p.y for p in pts),
            min_z=min(p.z for p in pts),
            max_x=max(p.x for p in pts),
            max_y=max(p.y for p in pts),
            max_z=max(p.z for p in pts),
        )

    @classmethod
    def from_center(cls, center: Vector3, size: Vector3) -> BoundingBox:
        half = size / 2
        return cls.from_points([center - half, center + half])

    @property
    def size(self) -> Vector3:
        return Vector3(self.max_x - self.min_x, self.max_y - self.min_y, self.max_z - self.min_z)

    @property
    def center(self) -> Vector3:
        return Vector3(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2,
            (self.min_z + self.max_z) / 2,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "min_x": self.min_x, "min_y": self.min_y, "min_z": self.min_z,
            "max_x": self.max_x, "max_y": self.max_y, "max_z": self.max_z,
        }


@dataclass
class GeometryRecord:
    """Concrete geometry of one compiled element.

    Linear elements (walls) carry ``start``/``end``/``direction``/``length``;
    volumetric elements only ``position`` (the centre) and ``size``.
    """

    kind: str
    position: Vector3
    size: Vector3
    rotation: Vector3 = ZERO
    start: Vector3 | None = None
    end: Vector3 | None = None
    direction: Vector3 | None = None
    length: float | None = None
    height: float | None = None
    thickness: float | None = None
    radius: float | None = None
    bounding_box: BoundingBox = field(default_factory=BoundingBox)

    @property
    def is_linear(self) -> bool:
        return self.start is not None and self.end is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind,
            "position": self.position.to_list(),
            "size": self.size.to_list(),
            "rotation": self.rotation.to_list(),
            "bounding_box": self.bounding_box.to_dict(),
        }
        if self.is_linear:
            data["start"] = self.start.to_list()
            data["end"] = self.end.to_list()
            data["direction"] = self.direction.to_list() if self.direction else None
            data["length"] = self.length
        for key in ("height", "thickness", "radius"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
