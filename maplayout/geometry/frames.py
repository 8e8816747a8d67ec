"""Region coordinate frames: where local (0, 0, 0) sits inside a bounding volume."""

from __future__ import annotations

from typing import Any, Sequence

from maplayout.config import ORIGIN_CENTER, ORIGIN_CORNER, ORIGIN_FLOOR_CENTER, VALID_ORIGINS
from maplayout.errors import TemplateError
from maplayout.geometry.vector import Vector3, is_number


def valid_bounds(bounds: Any) -> bool:
    return (
        isinstance(bounds, (list, tuple))
        and len(bounds) == 3
        and all(is_number(v) and v > 0 for v in bounds)
    )


def origin_offset(origin: str | None, bounds: Sequence[float]) -> Vector3:
    """Offset from the region's minimum corner to its local origin."""
    width, height, depth = (float(v) for v in bounds)
    origin = origin or ORIGIN_CORNER
    if origin == ORIGIN_CORNER:
        return Vector3(0.0, 0.0, 0.0)
    if origin == ORIGIN_CENTER:
        return Vector3(width / 2, height / 2, depth / 2)
    if origin == ORIGIN_FLOOR_CENTER:
        return Vector3(width / 2, 0.0, depth / 2)
    raise TemplateError(f"Invalid origin '{origin}', expected one of: {', '.join(VALID_ORIGINS)}")
