"""FloorBuilder: a thin slab sized by its footprint."""

from __future__ import annotations

from typing import Any

from maplayout.config import FLOOR_DEFAULT_SIZE, FLOOR_DEFAULT_THICKNESS
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement
from maplayout.geometry.records import GeometryRecord
from maplayout.geometry.vector import Vector3, is_number
from maplayout.scene.graph import SHAPE_BLOCK, Part


class FloorBuilder(PrimitiveBuilder):
    """Builder for floors.

    ``size`` is ``[x, z]`` (thickness comes from the element or its style),
    ``[x, y, z]``, or a single number for a square footprint.  A floor without
    a position is centred on the origin with its top face at y = 0.
    """

    @property
    def kind(self) -> str:
        return "floor"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        thickness = self._dimension(element, props, "thickness", FLOOR_DEFAULT_THICKNESS)
        size = self._floor_size(element.definition.size, thickness)
        center = element.position
        if center is None:
            center = element.frame_origin + Vector3(0.0, -size.y / 2, 0.0)

        part = self._new_part(element, SHAPE_BLOCK)
        part.size = size
        part.position = center
        return part, self._box_geometry(self.kind, center, size, thickness=size.y)

    @staticmethod
    def _floor_size(value: Any, thickness: float) -> Vector3:
        if is_number(value):
            return Vector3(float(value), thickness, float(value))
        if isinstance(value, (list, tuple)) and all(is_number(v) for v in value):
            if len(value) == 2:
                return Vector3(float(value[0]), thickness, float(value[1]))
            if len(value) == 3:
                return Vector3(float(value[0]), float(value[1]), float(value[2]))
        return Vector3(FLOOR_DEFAULT_SIZE[0], thickness, FLOOR_DEFAULT_SIZE[1])
