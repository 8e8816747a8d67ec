"""BoundsValidator: checks literal geometry of a region against its volume.

Only literal positions are checked.  References, and positions of anchored
elements (which are offsets from their anchor), are left to the build.
"""

from __future__ import annotations

import logging
from typing import Any

from maplayout.config import (
    CYLINDER_DEFAULT_HEIGHT,
    CYLINDER_DEFAULT_RADIUS,
    FLOOR_DEFAULT_SIZE,
    FLOOR_DEFAULT_THICKNESS,
    NAMESPACE_SEPARATOR,
    PLATFORM_DEFAULT_SIZE,
    SPHERE_DEFAULT_RADIUS,
    WALL_DEFAULT_HEIGHT,
    WEDGE_DEFAULT_SIZE,
)
from maplayout.errors import BoundsViolationError
from maplayout.geometry.frames import origin_offset, valid_bounds
from maplayout.geometry.vector import Vector3, heading, is_number
from maplayout.models.definition import AreaDefinition, ElementDefinition
from maplayout.references.syntax import is_reference
from maplayout.validation.report import BoundsViolation, ValidationResult

logger = logging.getLogger(__name__)

_EPSILON = 1e-6
_AXES = ("x", "y", "z")


def _literal(value: Any) -> Vector3 | None:
    if value is None or is_reference(value):
        return None
    return Vector3.from_sequence(value)


def _box_size(value: Any, default: tuple[float, float, float]) -> Vector3:
    if is_number(value):
        return Vector3(float(value), float(value), float(value))
    vector = Vector3.from_sequence(value) if isinstance(value, (list, tuple)) and len(value) == 3 else None
    return vector or Vector3(*default)


class BoundsValidator:
    """Accumulate every bounds violation in a region and its nested regions."""

    def validate(
        self,
        area_id: str,
        area: AreaDefinition,
        offset: Vector3 | None = None,
    ) -> ValidationResult:
        """Validate ``area`` whose local origin sits ``offset`` from its minimum corner.

        When ``offset`` is omitted it is derived from the area's origin convention.
        """
        result = ValidationResult(area_id)
        if not valid_bounds(area.bounds):
            result.add_error(BoundsViolation(
                element_kind="area",
                element_id=area_id,
                problem="Missing bounds definition",
                suggestion="Add bounds = [width, height, depth] with positive values",
            ))
            return result

        if offset is None:
            offset = origin_offset(area.origin, area.bounds)
        low = (-offset).cleaned()
        high = Vector3(*area.bounds) - offset

        for index, element in enumerate(area.iter_elements(), start=1):
            self._check_element(result, element, element.label(index), low, high)

        for index, nested in enumerate(area.areas, start=1):
            label = nested.id or f"area#{index}"
            if nested.template and not valid_bounds(nested.bounds):
                result.add_warning(f"Template area '{label}' ({nested.template}) is validated when instantiated")
                continue
            self._check_placement(result, nested, label, low, high)
            inner = self.validate(f"{area_id}{NAMESPACE_SEPARATOR}{label}", nested)
            for error in inner.errors:
                error.element_id = f"{label}{NAMESPACE_SEPARATOR}{error.element_id}"
            result.merge(inner)

        logger.debug("Validated area %s: %d error(s)", area_id, len(result.errors))
        return result

    def validate_or_raise(
        self,
        area_id: str,
        area: AreaDefinition,
        offset: Vector3 | None = None,
    ) -> ValidationResult:
        result = self.validate(area_id, area, offset)
        if not result.is_valid:
            raise BoundsViolationError(result)
        return result

    # -- per-kind checks ------------------------------------------------------

    def _check_element(
        self,
        result: ValidationResult,
        element: ElementDefinition,
        label: str,
        low: Vector3,
        high: Vector3,
    ) -> None:
        kind = (element.kind or "").lower()
        if element.anchor is not None:
            return

        if kind == "wall":
            self._check_wall(result, element, label, low, high)
        elif kind in ("platform", "box", "wedge"):
            default = WEDGE_DEFAULT_SIZE if kind == "wedge" else PLATFORM_DEFAULT_SIZE
            center = _literal(element.position)
            if center is not None:
                half = _box_size(element.size, default) / 2
                self._check_box(result, kind, label, center - half, center + half, low, high, _AXES)
        elif kind == "floor":
            self._check_floor(result, element, label, low, high)
        elif kind == "cylinder":
            center = _literal(element.position)
            if center is not None:
                radius = element.radius if element.radius is not None else CYLINDER_DEFAULT_RADIUS
                height = element.height if element.height is not None else CYLINDER_DEFAULT_HEIGHT
                half = Vector3(radius, height / 2, radius)
                self._check_box(result, kind, label, center - half, center + half, low, high, _AXES)
        elif kind in ("sphere", "ball"):
            center = _literal(element.position)
            if center is not None:
                radius = element.radius if element.radius is not None else SPHERE_DEFAULT_RADIUS
                half = Vector3(radius, radius, radius)
                self._check_box(result, kind, label, center - half, center + half, low, high, _AXES)
        else:
            result.add_warning(f"Unknown element kind '{element.kind}' on '{label}' was not validated")

    def _check_wall(
        self,
        result: ValidationResult,
        element: ElementDefinition,
        label: str,
        low: Vector3,
        high: Vector3,
    ) -> None:
        start = _literal(element.from_)
        end = _literal(element.to)
        if start is not None and end is None and element.length is not None:
            unit = heading(element.direction, element.angle)
            if unit is not None:
                end = start + unit * element.length

        points = [(name, p) for name, p in (("from", start), ("to", end)) if p is not None]
        for name, point in points:
            for axis in ("x", "z"):
                self._check_axis(result, "wall", label, f"{name}.{axis.upper()}", axis, getattr(point, axis), low, high)

        if points:
            height = element.height if element.height is not None else WALL_DEFAULT_HEIGHT
            base = min(point.y for _, point in points)
            self._check_axis(result, "wall", label, "base", "y", base, low, high)
            self._check_axis(result, "wall", label, "top (base + height)", "y", base + height, low, high)

    def _check_floor(
        self,
        result: ValidationResult,
        element: ElementDefinition,
        label: str,
        low: Vector3,
        high: Vector3,
    ) -> None:
        thickness = element.thickness if element.thickness is not None else FLOOR_DEFAULT_THICKNESS
        size = element.size
        if is_number(size):
            footprint = (float(size), float(size))
        elif isinstance(size, (list, tuple)) and len(size) in (2, 3) and all(is_number(v) for v in size):
            footprint = (float(size[0]), float(size[-1]))
        else:
            footprint = FLOOR_DEFAULT_SIZE

        if element.position is None:
            center = Vector3(0.0, -thickness / 2, 0.0)
        else:
            center = _literal(element.position)
            if center is None:
                return
        half = Vector3(footprint[0] / 2, 0.0, footprint[1] / 2)
        self._check_box(result, "floor", label, center - half, center + half, low, high, ("x", "z"))

    def _check_placement(
        self,
        result: ValidationResult,
        nested: AreaDefinition,
        label: str,
        low: Vector3,
        high: Vector3,
    ) -> None:
        """Does the nested region, at its chosen position, fit inside this one."""
        corner = _literal(nested.position)
        if corner is None or nested.anchor is not None:
            return
        far = corner + Vector3(*nested.bounds)
        self._check_box(result, "area", label, corner, far, low, high, _AXES)

    # -- primitives -----------------------------------------------------------

    def _check_box(
        self,
        result: ValidationResult,
        kind: str,
        label: str,
        minimum: Vector3,
        maximum: Vector3,
        low: Vector3,
        high: Vector3,
        axes: tuple[str, ...],
    ) -> None:
        for axis in axes:
            self._check_axis(result, kind, label, f"min {axis.upper()}", axis, getattr(minimum, axis), low, high)
            self._check_axis(result, kind, label, f"max {axis.upper()}", axis, getattr(maximum, axis), low, high)

    @staticmethod
    def _check_axis(
        result: ValidationResult,
        kind: str,
        label: str,
        what: str,
        axis: str,
        value: float,
        low: Vector3,
        high: Vector3,
    ) -> None:
        lo, hi = getattr(low, axis), getattr(high, axis)
        if value < lo - _EPSILON:
            direction = "below minimum"
        elif value > hi + _EPSILON:
            direction = "exceeds maximum"
        else:
            return
        result.add_error(BoundsViolation(
            element_kind=kind,
            element_id=label,
            problem=f"{what} {direction} on {axis.upper()} axis",
            axis=axis.upper(),
            direction=direction,
            value=value,
            valid_range=(lo, hi),
            suggestion=(
                f"Keep {axis.upper()} within [{lo:g}, {hi:g}]: move or shrink the {kind}, "
                f"or enlarge the area bounds"
            ),
        ))
