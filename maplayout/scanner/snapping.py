"""Snapping: pull near-miss coordinates onto region boundaries and known points."""

from __future__ import annotations

from typing import Iterable

from maplayout.geometry.vector import Vector3


def snap_value(value: float, targets: Iterable[float], threshold: float) -> float:
    """Return the closest target within ``threshold`` of ``value``, else ``value``."""
    best = value
    best_distance = threshold
    for target in targets:
        distance = abs(value - target)
        if distance <= best_distance:
            best, best_distance = target, distance
    return best


def snap_point(
    point: Vector3,
    bounds: Vector3,
    references: Iterable[Vector3],
    threshold: float,
    axes: tuple[str, ...] = ("x", "z"),
) -> Vector3:
    """Snap each axis to the region boundaries, then the whole point to a reference.

    Coordinates are region-local with the minimum corner at the origin, so
    the boundaries on each axis are 0 and the bound's extent.
    """
    coords = {"x": point.x, "y": point.y, "z": point.z}
    for axis in axes:
        coords[axis] = snap_value(coords[axis], (0.0, getattr(bounds, axis)), threshold)
    snapped = Vector3(coords["x"], coords["y"], coords["z"])

    closest, closest_distance = None, threshold
    for ref in references:
        if axes == ("x", "z"):
            distance = (snapped - ref).horizontal().magnitude
        else:
            distance = snapped.distance_to(ref)
        if distance <= closest_distance:
            closest, closest_distance = ref, distance
    if closest is None:
        return snapped
    if axes == ("x", "z"):
        return Vector3(closest.x, snapped.y, closest.z)
    return closest


def snap_edges(
    minimum: Vector3,
    maximum: Vector3,
    bounds: Vector3,
    threshold: float,
) -> tuple[Vector3, Vector3]:
    """Snap box edges (not centres) to the region boundaries on every axis."""
    low = []
    high = []
    for axis in ("x", "y", "z"):
        extent = getattr(bounds, axis)
        low.append(snap_value(getattr(minimum, axis), (0.0, extent), threshold))
        high.append(snap_value(getattr(maximum, axis), (0.0, extent), threshold))
    return Vector3(*low), Vector3(*high)


def box_from_edges(minimum: Vector3, maximum: Vector3) -> tuple[Vector3, Vector3]:
    """``(position, size)`` of the box spanning two corners."""
    return (minimum + maximum) / 2, maximum - minimum
