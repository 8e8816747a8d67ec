"""SphereBuilder: a ball of a given radius."""

from __future__ import annotations

from typing import Any

from maplayout.config import SPHERE_DEFAULT_RADIUS
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement
from maplayout.geometry.records import GeometryRecord
from maplayout.geometry.vector import Vector3
from maplayout.scene.graph import SHAPE_BALL, Part


class SphereBuilder(PrimitiveBuilder):

    @property
    def kind(self) -> str:
        return "sphere"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        center = element.center()
        radius = self._dimension(element, props, "radius", SPHERE_DEFAULT_RADIUS)
        diameter = radius * 2

        part = self._new_part(element, SHAPE_BALL)
        part.size = Vector3(diameter, diameter, diameter)
        part.position = center
        return part, self._box_geometry(self.kind, center, part.size, radius=radius)
