"""Kind inference and geometry extraction for scanned parts."""

from __future__ import annotations

from maplayout.config import ATTR_KIND, FLOOR_ASPECT_RATIO, FLOOR_MAX_HEIGHT, WALL_ASPECT_RATIO
from maplayout.geometry.vector import Vector3
from maplayout.scene.graph import SHAPE_BALL, SHAPE_CYLINDER, SHAPE_WEDGE, Part

_SHAPE_KINDS = {
    SHAPE_WEDGE: "wedge",
    SHAPE_BALL: "sphere",
    SHAPE_CYLINDER: "cylinder",
}


def infer_kind(part: Part) -> str:
    """Guess the element kind from shape and proportions.

    An explicit ``layout_kind`` annotation always wins.  Flat and wide parts
    are floors, tall parts that are thin in one horizontal axis are walls,
    and everything else is a platform.
    """
    override = part.get_attribute(ATTR_KIND)
    if override:
        return str(override).lower()

    if part.shape in _SHAPE_KINDS:
        return _SHAPE_KINDS[part.shape]

    x, y, z = part.size
    if 0 < y <= FLOOR_MAX_HEIGHT and (x / y >= FLOOR_ASPECT_RATIO or z / y >= FLOOR_ASPECT_RATIO):
        return "floor"

    thin, wide = min(x, z), max(x, z)
    if thin > 0 and y / thin >= WALL_ASPECT_RATIO and wide > thin * 2:
        return "wall"

    return "platform"


def wall_endpoints(part: Part) -> tuple[Vector3, Vector3, float, float]:
    """Return ``(start, end, height, thickness)`` of a wall-shaped part.

    The endpoints lie on the part's long horizontal axis at its base height.
    """
    size = part.size
    if size.x >= size.z:
        axis, length, thickness = part.right_vector, size.x, size.z
    else:
        axis, length, thickness = part.back_vector, size.z, size.x

    half = axis * (length / 2)
    base_y = part.position.y - size.y / 2
    start = part.position - half
    end = part.position + half
    return (
        Vector3(start.x, base_y, start.z),
        Vector3(end.x, base_y, end.z),
        size.y,
        thickness,
    )


def cylinder_dimensions(part: Part) -> tuple[float, float]:
    """``(height, radius)`` of an upright host cylinder (axis along local X)."""
    return part.size.x, part.size.y / 2


def sphere_radius(part: Part) -> float:
    return part.size.x / 2
