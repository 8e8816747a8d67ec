"""Abstract PrimitiveBuilder interface.

Every builder turns one resolved element (kind + resolved positions) and its
resolved style properties into a host part and a geometry record.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any

from maplayout.geometry.records import BoundingBox, GeometryRecord
from maplayout.geometry.vector import ZERO, Vector3, axis_vectors, is_number
from maplayout.models.definition import ElementDefinition
from maplayout.scene.graph import Part


class SkipElement(Exception):
    """Raised by a builder when an element cannot produce a primitive."""


@dataclass
class ResolvedElement:
    """An element whose references have been resolved to world positions."""

    definition: ElementDefinition
    kind: str
    label: str
    qualified_id: str | None = None
    start: Vector3 | None = None
    end: Vector3 | None = None
    position: Vector3 | None = None
    frame_origin: Vector3 = ZERO
    """World position of the enclosing region's local origin."""

    scale: float = 1.0

    def center(self) -> Vector3:
        """Resolved position, or the frame origin when none was given."""
        return self.position if self.position is not None else self.frame_origin


class PrimitiveBuilder(abc.ABC):
    """Base class for all primitive builders."""

    @property
    @abc.abstractmethod
    def kind(self) -> str:
        """The element kind this builder produces."""

    @abc.abstractmethod
    def build(self, element: ResolvedElement, props: dict[str, Any]) -> tuple[Part, GeometryRecord]:
        """Return the part and its geometry record.  Raise SkipElement to skip."""

    # Helpers shared by all builders

    def _new_part(self, element: ResolvedElement, shape: str) -> Part:
        return Part(name=element.definition.id or self.kind.capitalize(), shape=shape)

    @staticmethod
    def _default_prop(props: dict[str, Any], key: str, default: float) -> float:
        """Get a numeric property, falling back to default."""
        val = props.get(key)
        if val is not None:
            try:
                return float(val)
            except (TypeError, ValueError):
                pass
        return default

    def _dimension(self, element: ResolvedElement, props: dict[str, Any], key: str, default: float) -> float:
        """Inline structural value, then the style cascade, then the default."""
        value = getattr(element.definition, key, None)
        if value is not None:
            return float(value)
        return self._default_prop(props, key, default)

    @staticmethod
    def _size(value: Any, default: tuple[float, float, float]) -> Vector3:
        if is_number(value):
            return Vector3(float(value), float(value), float(value))
        if isinstance(value, (list, tuple)) and len(value) == 3 and all(is_number(v) for v in value):
            return Vector3(float(value[0]), float(value[1]), float(value[2]))
        return Vector3(*default)

    @staticmethod
    def _rotation(value: Any) -> Vector3:
        if is_number(value):
            return Vector3(0.0, float(value), 0.0)
        vector = Vector3.from_sequence(value) if isinstance(value, (list, tuple)) and len(value) == 3 else None
        return vector if vector is not None else ZERO

    @staticmethod
    def _box_geometry(
        kind: str,
        center: Vector3,
        size: Vector3,
        rotation: Vector3 = ZERO,
        **extra: Any,
    ) -> GeometryRecord:
        """Geometry record for a (possibly rotated) box-shaped primitive."""
        right, up, back = axis_vectors(rotation)
        half = size / 2
        corners = [
            center + right * (sx * half.x) + up * (sy * half.y) + back * (sz * half.z)
            for sx in (-1, 1)
            for sy in (-1, 1)
            for sz in (-1, 1)
        ]
        return GeometryRecord(
            kind=kind,
            position=center,
            size=size,
            rotation=rotation,
            bounding_box=BoundingBox.from_points(corners),
            **extra,
        )
