"""WedgeBuilder: a ramp-shaped block with optional rotation."""

from __future__ import annotations

from typing import Any

from maplayout.config import WEDGE_DEFAULT_SIZE
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement
from maplayout.geometry.records import GeometryRecord
from maplayout.scene.graph import SHAPE_WEDGE, Part


class WedgeBuilder(PrimitiveBuilder):

    @property
    def kind(self) -> str:
        return "wedge"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        center = element.center()
        size = self._size(element.definition.size, WEDGE_DEFAULT_SIZE)
        rotation = self._rotation(element.definition.rotation)

        part = self._new_part(element, SHAPE_WEDGE)
        part.size = size
        part.position = center
        part.rotation = rotation
        return part, self._box_geometry(self.kind, center, size, rotation)
