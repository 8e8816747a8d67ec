"""WallBuilder: a block stretched between two endpoints."""

from __future__ import annotations

from typing import Any

from maplayout.config import WALL_DEFAULT_HEIGHT, WALL_DEFAULT_THICKNESS
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement, SkipElement
from maplayout.geometry.records import BoundingBox, GeometryRecord
from maplayout.geometry.vector import Vector3, yaw_for_direction
from maplayout.scene.graph import SHAPE_BLOCK, Part


class WallBuilder(PrimitiveBuilder):
    """Builder for wall elements.

    The part's local X axis runs from ``start`` to ``end``; its base sits at
    the lower endpoint's height.
    """

    @property
    def kind(self) -> str:
        return "wall"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        start, end = element.start, element.end
        if start is None or end is None:
            raise SkipElement("wall needs both 'from' and 'to'")

        height = self._dimension(element, props, "height", WALL_DEFAULT_HEIGHT)
        thickness = self._dimension(element, props, "thickness", WALL_DEFAULT_THICKNESS)

        span = (end - start).horizontal()
        length = span.magnitude
        if length == 0:
            raise SkipElement("wall has zero length")
        direction = span.unit

        base_y = min(start.y, end.y)
        mid = (start + end) / 2
        center = Vector3(mid.x, base_y + height / 2, mid.z).cleaned()
        rotation = Vector3(0.0, yaw_for_direction(direction), 0.0)
        size = Vector3(length, height, thickness)

        part = self._new_part(element, SHAPE_BLOCK)
        part.size = size
        part.position = center
        part.rotation = rotation

        # Footprint rectangle, extruded from base to top
        side = Vector3(-direction.z, 0.0, direction.x) * (thickness / 2)
        corners = []
        for point in (start, end):
            for offset in (side, -side):
                footprint = point + offset
                corners.append(Vector3(footprint.x, base_y, footprint.z))
                corners.append(Vector3(footprint.x, base_y + height, footprint.z))

        geometry = GeometryRecord(
            kind=self.kind,
            position=center,
            size=size,
            rotation=rotation,
            start=start,
            end=end,
            direction=direction,
            length=length,
            height=height,
            thickness=thickness,
            bounding_box=BoundingBox.from_points(corners),
        )
        return part, geometry
