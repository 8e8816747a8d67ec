"""CylinderBuilder: an upright cylinder."""

from __future__ import annotations

from typing import Any

from maplayout.config import CYLINDER_DEFAULT_HEIGHT, CYLINDER_DEFAULT_RADIUS
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement
from maplayout.geometry.records import GeometryRecord
from maplayout.geometry.vector import Vector3
from maplayout.scene.graph import SHAPE_CYLINDER, Part

# Host cylinders run along their local X axis; roll them upright.
UPRIGHT = Vector3(0.0, 0.0, 90.0)


class CylinderBuilder(PrimitiveBuilder):

    @property
    def kind(self) -> str:
        return "cylinder"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        center = element.center()
        height = self._dimension(element, props, "height", CYLINDER_DEFAULT_HEIGHT)
        radius = self._dimension(element, props, "radius", CYLINDER_DEFAULT_RADIUS)

        part = self._new_part(element, SHAPE_CYLINDER)
        part.size = Vector3(height, radius * 2, radius * 2)
        part.position = center
        part.rotation = UPRIGHT

        geometry = self._box_geometry(
            self.kind,
            center,
            Vector3(radius * 2, height, radius * 2),
            height=height,
            radius=radius,
        )
        return part, geometry
