"""Unit scaling: source units in definitions to output units in the scene."""

from __future__ import annotations

import logging
from typing import Any, Callable

from maplayout.geometry.vector import Vector3, is_number
from maplayout.models.definition import AreaDefinition, ElementDefinition
from maplayout.references.syntax import is_reference

logger = logging.getLogger(__name__)

_LITERAL_FIELDS = ("from_", "to", "position")
_LENGTH_FIELDS = ("height", "thickness", "radius", "length")


def parse_scale(value: Any, warn: Callable[..., None] | None = None) -> float:
    """Parse ``"4:1"`` (output units per source unit), ``"2.5"`` or ``2.5``.

    Invalid values fall back to 1 with a warning.
    """
    if value is None:
        return 1.0
    factor: float | None = None
    if is_number(value):
        factor = float(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            if ":" in text:
                output, source = text.split(":", 1)
                factor = float(output) / float(source)
            else:
                factor = float(text)
        except (ValueError, ZeroDivisionError):
            factor = None
    if factor is None or factor <= 0:
        message = f"Invalid scale {value!r}, using 1:1"
        if warn is not None:
            warn(message)
        else:
            logger.warning("%s", message)
        return 1.0
    return factor


def scale_value(value: Any, factor: float) -> Any:
    """Scale a number or a numeric sequence; anything else is returned unchanged."""
    if is_number(value):
        return value * factor
    if isinstance(value, Vector3):
        return value * factor
    if isinstance(value, (list, tuple)) and all(is_number(v) for v in value):
        return [v * factor for v in value]
    return value


def _scale_offset_record(value: Any, factor: float) -> Any:
    if isinstance(value, dict) and "offset" in value:
        return {**value, "offset": scale_value(value["offset"], factor)}
    return value


def scale_element(element: ElementDefinition, factor: float) -> ElementDefinition:
    """Return a copy with literal geometry scaled.  References are left alone."""
    if factor == 1:
        return element
    update: dict[str, Any] = {}
    for name in _LITERAL_FIELDS:
        value = getattr(element, name)
        if value is not None and not is_reference(value):
            update[name] = scale_value(value, factor)
    for name in _LENGTH_FIELDS:
        value = getattr(element, name)
        if value is not None:
            update[name] = value * factor
    if element.size is not None:
        update["size"] = scale_value(element.size, factor)
    if isinstance(element.anchor, dict) and "target" in element.anchor:
        update["anchor"] = _scale_offset_record(element.anchor, factor)
    return element.model_copy(update=update)


def scale_placement(area: AreaDefinition, factor: float) -> AreaDefinition:
    """Scale a region's own placement and bounding volume, not its interior."""
    if factor == 1:
        return area
    update: dict[str, Any] = {}
    if area.position is not None and not is_reference(area.position):
        update["position"] = scale_value(area.position, factor)
    if area.bounds is not None:
        update["bounds"] = scale_value(area.bounds, factor)
    if area.offset is not None:
        update["offset"] = scale_value(area.offset, factor)
    if isinstance(area.anchor, dict) and "target" in area.anchor:
        update["anchor"] = _scale_offset_record(area.anchor, factor)
    return area.model_copy(update=update)


def element_factor(element: ElementDefinition, default: float, warn: Callable[..., None] | None = None) -> float:
    """The element's own scale override, or the scale of its container."""
    if element.scale is None:
        return default
    return parse_scale(element.scale, warn)
