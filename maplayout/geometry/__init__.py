"""Vector math and resolved geometry records."""

from maplayout.geometry.records import BoundingBox, GeometryRecord
from maplayout.geometry.vector import ZERO, Vector3, axis_vectors, is_number, rotation_matrix

__all__ = [
    "BoundingBox",
    "GeometryRecord",
    "Vector3",
    "ZERO",
    "axis_vectors",
    "is_number",
    "rotation_matrix",
]
