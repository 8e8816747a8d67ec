"""Common part properties applied by every builder: color, material, flags."""

from __future__ import annotations

import logging
from typing import Any, Callable

from maplayout.config import FALLBACK_MATERIAL, KNOWN_MATERIALS, NAMED_COLORS
from maplayout.geometry.vector import is_number
from maplayout.scene.graph import Part

logger = logging.getLogger(__name__)

_MATERIALS = {name.lower(): name for name in KNOWN_MATERIALS}

BOOLEAN_PROPERTIES = ("anchored", "can_collide", "can_touch", "can_query", "cast_shadow", "massless")
FRACTION_PROPERTIES = ("transparency", "reflectance")


def to_color(value: Any) -> tuple[int, int, int] | None:
    """Convert an RGB list (0-255, or 0-1 when every channel <= 1), hex or name."""
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(is_number(v) for v in value):
        if all(0 <= v <= 1 for v in value):
            return tuple(round(v * 255) for v in value)  # type: ignore[return-value]
        return tuple(max(0, min(255, round(v))) for v in value)  # type: ignore[return-value]

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("#") and len(text) == 7:
            try:
                return (int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16))
            except ValueError:
                return None
        return NAMED_COLORS.get(text.lower())

    return None


def _log_warning(message: str) -> None:
    logger.warning("%s", message)


def to_material(value: Any, warn: Callable[[str], None] | None = None) -> str:
    name = _MATERIALS.get(str(value).strip().lower())
    if name is None:
        (warn or _log_warning)(f"Unknown material {value!r}, using {FALLBACK_MATERIAL}")
        return FALLBACK_MATERIAL
    return name


def apply_properties(part: Part, props: dict[str, Any], warn: Callable[[str], None] | None = None) -> None:
    """Apply the resolved style properties shared by every primitive kind.

    Unknown materials and unrecognised colors are reported through ``warn``
    (a one-argument callable) and otherwise logged.
    """
    warn = warn or _log_warning
    if props.get("color") is not None:
        color = to_color(props["color"])
        if color is None:
            warn(f"Unrecognised color {props['color']!r} on {part.name}")
        else:
            part.color = color

    if props.get("material") is not None:
        part.material = to_material(props["material"], warn)

    for key in BOOLEAN_PROPERTIES:
        if key in props:
            setattr(part, key, bool(props[key]))

    for key in FRACTION_PROPERTIES:
        if key in props and is_number(props[key]):
            setattr(part, key, max(0.0, min(1.0, float(props[key]))))
