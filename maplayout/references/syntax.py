"""Reference syntax: a small AST for positions that point at other elements.

Accepted forms::

    [x, z] / [x, y, z]                              literal
    "#id"  "#id:point"  "#id:point + {x, z}"        by id (".tag" selects by class)
    {"ref": "#id", "point": "end", "offset": [..]}  by id, record form
    {"along": "#id", "at": "50%", "surface": "+z"}  along a linear element
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from maplayout.geometry.vector import Vector3, is_number

_SELECTOR_RE = re.compile(
    r"^\s*(?P<selector>[#.][^:\s+]+)"
    r"(?::(?P<point>[+-]?[^\s+]+))?"
    r"\s*(?:\+\s*(?P<offset>[\[{][^\]}]*[\]}]))?\s*$"
)
_PERCENT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%\s*$")

# Fields of an element definition that may hold a reference
REFERENCE_FIELDS = ("from_", "to", "position", "anchor", "weld")


@dataclass(frozen=True)
class LiteralRef:
    vector: Vector3


@dataclass(frozen=True)
class PointRef:
    """A named point on an element selected by id or class."""

    selector: str
    point: str = "center"
    offset: Vector3 | None = None


@dataclass(frozen=True)
class AlongRef:
    """A point part-way along a linear element, optionally pushed to a surface."""

    selector: str
    at: float | str = 0.0
    surface: str | None = None
    offset: Vector3 | None = None


Reference = Union[LiteralRef, PointRef, AlongRef]


def parse_offset(value: Any) -> Vector3 | None:
    """Parse an offset: a 2/3-element sequence or ``"{x, z}"`` / ``"[x, y, z]"`` text."""
    if value is None:
        return None
    if isinstance(value, str):
        body = value.strip().strip("{}[]")
        try:
            value = [float(part) for part in body.split(",") if part.strip()]
        except ValueError:
            return None
    return Vector3.from_sequence(value)


def parse_at(value: Any) -> float | str | None:
    """Normalise an ``at`` value: a distance, ``"N%"`` or ``"center"``."""
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "center":
            return "50%"
        if _PERCENT_RE.match(text):
            return text.replace(" ", "")
        try:
            return float(text)
        except ValueError:
            return None
    return None


def normalise_selector(selector: Any) -> str | None:
    if not isinstance(selector, str) or not selector.strip():
        return None
    selector = selector.strip()
    if selector[0] in "#.":
        return selector
    return f"#{selector}"


def parse_reference(value: Any) -> Reference | None:
    """Parse ``value`` into a reference node, or ``None`` when malformed."""
    if isinstance(value, Vector3):
        return LiteralRef(value)

    if isinstance(value, (list, tuple)):
        vector = Vector3.from_sequence(value)
        return LiteralRef(vector) if vector is not None else None

    if isinstance(value, str):
        match = _SELECTOR_RE.match(value)
        if match is None:
            return None
        offset = None
        if match.group("offset"):
            offset = parse_offset(match.group("offset"))
            if offset is None:
                return None
        return PointRef(match.group("selector"), match.group("point") or "center", offset)

    if isinstance(value, dict):
        offset = parse_offset(value.get("offset"))
        if value.get("offset") is not None and offset is None:
            return None
        if "along" in value:
            selector = normalise_selector(value["along"])
            at = parse_at(value.get("at", 0))
            if selector is None or at is None:
                return None
            return AlongRef(selector, at, value.get("surface"), offset)
        if "ref" in value:
            parsed = parse_reference(normalise_selector(value["ref"]))
            if not isinstance(parsed, PointRef):
                return None
            point = value.get("point", parsed.point)
            total = parsed.offset
            if offset is not None:
                total = offset if total is None else total + offset
            return PointRef(parsed.selector, point, total)

    return None


def is_reference(value: Any) -> bool:
    """True for selector strings and ``ref``/``along`` records; literals are not references."""
    if isinstance(value, str):
        return value.lstrip().startswith(("#", "."))
    if isinstance(value, dict):
        return "ref" in value or "along" in value
    return False


def _selectors_in(value: Any) -> list[str]:
    if isinstance(value, str) and is_reference(value):
        match = _SELECTOR_RE.match(value)
        return [match.group("selector")] if match else []
    if isinstance(value, dict):
        found: list[str] = []
        for key in ("ref", "along", "target"):
            selector = normalise_selector(value.get(key))
            if selector is not None:
                found.extend(_selectors_in(selector))
        return found
    return []


def selector_key(selector: str) -> str:
    """Strip the ``#`` from an id selector; class selectors keep their ``.``."""
    return selector[1:] if selector.startswith("#") else selector


def get_dependencies(definition: Any) -> set[str]:
    """Return the ids (and ``.tag`` class selectors) an element refers to.

    Looks at from/to/position/anchor/weld, including ``ref``/``along``/``target``
    inside record values.
    """
    deps: set[str] = set()
    for field_name in REFERENCE_FIELDS:
        value = getattr(definition, field_name, None)
        for selector in _selectors_in(value):
            deps.add(selector_key(selector))
    return deps
