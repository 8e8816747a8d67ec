"""Registry: per-build store of compiled elements keyed by qualified id.

Entries are append-only within one build: an id, once registered, cannot be
redefined.  While a region is being built its namespace is pushed with
:meth:`Registry.scope`, so short local ids resolve to ``region/local`` first.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from maplayout.config import NAMESPACE_SEPARATOR
from maplayout.errors import DuplicateIdentifierError
from maplayout.geometry.records import GeometryRecord
from maplayout.geometry.vector import Vector3

logger = logging.getLogger(__name__)

SURFACE_NORMALS: dict[str, Vector3] = {
    "+x": Vector3(1, 0, 0),
    "right": Vector3(1, 0, 0),
    "-x": Vector3(-1, 0, 0),
    "left": Vector3(-1, 0, 0),
    "+y": Vector3(0, 1, 0),
    "top": Vector3(0, 1, 0),
    "up": Vector3(0, 1, 0),
    "-y": Vector3(0, -1, 0),
    "bottom": Vector3(0, -1, 0),
    "down": Vector3(0, -1, 0),
    "+z": Vector3(0, 0, 1),
    "front": Vector3(0, 0, 1),
    "-z": Vector3(0, 0, -1),
    "back": Vector3(0, 0, -1),
}


class RegistryEntry:
    """One compiled element: host node, source definition and resolved geometry."""

    __slots__ = ("id", "node", "definition", "geometry")

    def __init__(self, id: str, node: Any, definition: Any, geometry: GeometryRecord) -> None:
        self.id = id
        self.node = node
        self.definition = definition
        self.geometry = geometry

    @property
    def classes(self) -> list[str]:
        return list(getattr(self.definition, "classes", []))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "classes": self.classes,
            "geometry": self.geometry.to_dict(),
        }


class Registry:
    """Lookup service used by the reference resolver."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._by_class: dict[str, list[RegistryEntry]] = {}
        self._scopes: list[str] = []

    # -- mutation -------------------------------------------------------------

    def register(self, identifier: str, entry: RegistryEntry) -> RegistryEntry:
        if identifier in self._entries:
            raise DuplicateIdentifierError(identifier)
        self._entries[identifier] = entry
        for tag in entry.classes:
            self._by_class.setdefault(tag, []).append(entry)
        logger.debug("Registered %s", identifier)
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self._by_class.clear()
        self._scopes.clear()

    @contextmanager
    def scope(self, namespace: str) -> Iterator[None]:
        """Resolve short ids against ``namespace`` for the duration of the block."""
        self._scopes.append(namespace)
        try:
            yield
        finally:
            self._scopes.pop()

    # -- lookup ---------------------------------------------------------------

    def _candidates(self, key: str) -> list[str]:
        names = [f"{scope}{NAMESPACE_SEPARATOR}{key}" for scope in reversed(self._scopes)]
        names.append(key)
        return names

    def get(self, selector: str) -> RegistryEntry | None:
        """Look up ``#id``, a bare id, or ``.tag`` (first match, current region first)."""
        if not selector:
            return None
        if selector.startswith("."):
            return self._first_by_class(selector[1:])
        key = selector[1:] if selector.startswith("#") else selector
        for name in self._candidates(key):
            entry = self._entries.get(name)
            if entry is not None:
                return entry
        return None

    def _first_by_class(self, tag: str) -> RegistryEntry | None:
        entries = self._by_class.get(tag, [])
        for scope in reversed(self._scopes):
            prefix = scope + NAMESPACE_SEPARATOR
            for entry in entries:
                if entry.id.startswith(prefix):
                    return entry
        return entries[0] if entries else None

    def get_by_class(self, tag: str) -> list[RegistryEntry]:
        return list(self._by_class.get(tag.lstrip("."), []))

    def get_geometry(self, selector: str) -> GeometryRecord | None:
        entry = self.get(selector)
        return entry.geometry if entry is not None else None

    def get_node(self, selector: str) -> Any:
        entry = self.get(selector)
        return entry.node if entry is not None else None

    def get_point(self, selector: str, point_name: str = "center") -> Vector3 | None:
        """Return a named point on the selected element.

        Linear elements: start/from, end/to, center, farX, nearX, farZ, nearZ.
        Volumetric elements: center, top, bottom, +x/right, -x/left,
        +z/front, -z/back.
        """
        geometry = self.get_geometry(selector)
        if geometry is None:
            return None
        name = (point_name or "center").strip().lower()

        if geometry.is_linear:
            start, end = geometry.start, geometry.end
            linear_points = {
                "start": start,
                "from": start,
                "end": end,
                "to": end,
                "center": (start + end) / 2,
                "farx": start if start.x >= end.x else end,
                "nearx": start if start.x < end.x else end,
                "farz": start if start.z >= end.z else end,
                "nearz": start if start.z < end.z else end,
            }
            return linear_points.get(name)

        center, half = geometry.position, geometry.size / 2
        volume_points = {
            "center": center,
            "top": center + Vector3(0, half.y, 0),
            "bottom": center - Vector3(0, half.y, 0),
            "+x": center + Vector3(half.x, 0, 0),
            "right": center + Vector3(half.x, 0, 0),
            "-x": center - Vector3(half.x, 0, 0),
            "left": center - Vector3(half.x, 0, 0),
            "+z": center + Vector3(0, 0, half.z),
            "front": center + Vector3(0, 0, half.z),
            "-z": center - Vector3(0, 0, half.z),
            "back": center - Vector3(0, 0, half.z),
        }
        return volume_points.get(name)

    def get_surface_normal(self, selector: str, surface_name: str) -> Vector3 | None:
        if self.get(selector) is None or not surface_name:
            return None
        return SURFACE_NORMALS.get(surface_name.strip().lower())

    # -- introspection --------------------------------------------------------

    def exists(self, selector: str) -> bool:
        return self.get(selector) is not None

    def ids(self) -> list[str]:
        return list(self._entries)

    def entries(self) -> list[RegistryEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._entries
