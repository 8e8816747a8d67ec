"""ReferenceResolver: turns reference nodes into world positions via the registry."""

from __future__ import annotations

import logging
from typing import Any

from maplayout.geometry.vector import Vector3
from maplayout.references.syntax import (
    AlongRef,
    LiteralRef,
    PointRef,
    Reference,
    parse_offset,
    parse_reference,
)
from maplayout.registry import Registry

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """Resolve literals and references against the elements built so far.

    Every method returns ``None`` when the value cannot be resolved; callers
    decide whether that is fatal.
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def resolve(self, value: Any) -> Vector3 | None:
        node = value if isinstance(value, (LiteralRef, PointRef, AlongRef)) else parse_reference(value)
        if node is None:
            logger.debug("Malformed position value %r", value)
            return None
        return self.resolve_node(node)

    def resolve_node(self, node: Reference) -> Vector3 | None:
        if isinstance(node, LiteralRef):
            return node.vector
        if isinstance(node, PointRef):
            point = self.registry.get_point(node.selector, node.point)
            if point is None:
                logger.debug("No point %r on %s", node.point, node.selector)
                return None
            return point + node.offset if node.offset is not None else point
        return self._resolve_along(node)

    def _resolve_along(self, node: AlongRef) -> Vector3 | None:
        geometry = self.registry.get_geometry(node.selector)
        if geometry is None or not geometry.is_linear:
            logger.debug("Cannot place along %s: not a linear element", node.selector)
            return None

        span = geometry.end - geometry.start
        length = span.magnitude
        if isinstance(node.at, str):
            distance = length * float(node.at.rstrip("%")) / 100.0
        else:
            distance = node.at
        distance = max(0.0, min(distance, length))

        point = geometry.start
        if length > 0:
            point = geometry.start + span * (distance / length)

        if node.surface:
            normal = self.registry.get_surface_normal(node.selector, node.surface)
            if normal is None:
                logger.debug("Unknown surface %r on %s", node.surface, node.selector)
                return None
            if geometry.thickness:
                point = point + normal * (geometry.thickness / 2)

        if node.offset is not None:
            point = point + node.offset
        return point

    def resolve_anchor(self, anchor: Any) -> Vector3 | None:
        """Resolve an anchor: a selector, a reference record, or ``{target, offset}``."""
        if isinstance(anchor, dict) and "target" in anchor:
            base = self.resolve(anchor["target"])
            if base is None:
                return None
            offset = parse_offset(anchor.get("offset"))
            if anchor.get("offset") is not None and offset is None:
                return None
            return base + offset if offset is not None else base
        return self.resolve(anchor)
