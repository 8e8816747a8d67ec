"""PlatformBuilder: an axis-aligned (optionally rotated) block; also serves ``box``."""

from __future__ import annotations

from typing import Any

from maplayout.config import PLATFORM_DEFAULT_SIZE
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement
from maplayout.geometry.records import GeometryRecord
from maplayout.scene.graph import SHAPE_BLOCK, Part


class PlatformBuilder(PrimitiveBuilder):

    @property
    def kind(self) -> str:
        return "platform"

    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        center = element.center()
        size = self._size(element.definition.size, PLATFORM_DEFAULT_SIZE)
        rotation = self._rotation(element.definition.rotation)

        part = self._new_part(element, SHAPE_BLOCK)
        part.size = size
        part.position = center
        part.rotation = rotation
        return part, self._box_geometry(self.kind, center, size, rotation)
