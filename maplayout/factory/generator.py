"""GeometryFactory: dispatches resolved elements to the builder for their kind."""

from __future__ import annotations

import logging
from typing import Any, Callable

from maplayout.config import ATTR_CLASS, ATTR_ID, ATTR_SCALE
from maplayout.factory.base import PrimitiveBuilder, ResolvedElement, SkipElement
from maplayout.factory.cylinder import CylinderBuilder
from maplayout.factory.floor import FloorBuilder
from maplayout.factory.platform import PlatformBuilder
from maplayout.factory.properties import apply_properties
from maplayout.factory.sphere import SphereBuilder
from maplayout.factory.wall import WallBuilder
from maplayout.factory.wedge import WedgeBuilder
from maplayout.geometry.records import GeometryRecord
from maplayout.scene.graph import Part

logger = logging.getLogger(__name__)

BUILDER_REGISTRY: dict[str, type[PrimitiveBuilder]] = {
    "wall": WallBuilder,
    "platform": PlatformBuilder,
    "box": PlatformBuilder,
    "floor": FloorBuilder,
    "cylinder": CylinderBuilder,
    "sphere": SphereBuilder,
    "ball": SphereBuilder,
    "wedge": WedgeBuilder,
}


def get_builder(kind: str | None) -> PrimitiveBuilder | None:
    """Return a builder instance for ``kind``, or None for unknown kinds."""
    builder_cls = BUILDER_REGISTRY.get((kind or "").lower())
    return builder_cls() if builder_cls is not None else None


Warn = Callable[..., None]


class GeometryFactory:
    """Create host parts from resolved elements.

    Parameters
    ----------
    warn:
        Called with ``(message, element_label)`` for recoverable problems
        (unknown kind, degenerate geometry).  Defaults to logging a warning.
    """

    def __init__(self, warn: Warn | None = None) -> None:
        self._warn = warn or self._log_warning

    @staticmethod
    def _log_warning(message: str, element_id: str | None = None) -> None:
        logger.warning("%s (%s)", message, element_id or "anonymous")

    def create(
        self,
        element: ResolvedElement,
        props: dict[str, Any],
    ) -> tuple[Part, GeometryRecord] | None:
        builder = get_builder(element.kind)
        if builder is None:
            self._warn(f"Unknown element kind '{element.kind}', skipped", element.label)
            return None

        try:
            part, geometry = builder.build(element, props)
        except SkipElement as exc:
            self._warn(f"{element.kind} skipped: {exc}", element.label)
            return None

        apply_properties(part, props, lambda message: self._warn(message, element.label))
        if element.qualified_id:
            part.set_attribute(ATTR_ID, element.qualified_id)
        if element.definition.class_:
            part.set_attribute(ATTR_CLASS, element.definition.class_)
        if element.scale != 1:
            part.set_attribute(ATTR_SCALE, element.scale)

        logger.debug("Created %s %s", element.kind, element.label)
        return part, geometry
