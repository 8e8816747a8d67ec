"""AreaBuilder: nested regions with their own origin, scale and id namespace.

A region's ``position`` is the local position of its minimum corner in the
enclosing frame.  Its interior is expressed relative to its own local origin,
which the origin convention places at an offset from that corner::

    corner_world = parent_origin_world + position
    origin_world = corner_world + origin_offset(origin, bounds)
    element_world = origin_world + element_local
"""

from __future__ import annotations

import logging
from typing import Any

from maplayout.build.elements import ElementCompiler, qualify
from maplayout.build.scale import element_factor, parse_scale, scale_element, scale_placement
from maplayout.build.session import BuildSession
from maplayout.build.templates import AreaTemplates
from maplayout.config import (
    ATTR_AREA,
    ATTR_BOUNDS,
    ATTR_CLASS,
    ATTR_CORNER,
    ATTR_ID,
    ATTR_ORIGIN,
    COLLECTION_KINDS,
)
from maplayout.errors import MissingBoundsError, ReferenceResolutionError
from maplayout.geometry.frames import origin_offset, valid_bounds
from maplayout.geometry.records import BoundingBox, GeometryRecord
from maplayout.geometry.vector import ZERO, Vector3
from maplayout.models.definition import AreaDefinition, as_area_definition
from maplayout.references.syntax import is_reference, parse_offset
from maplayout.registry import RegistryEntry
from maplayout.scene.graph import Model, SceneNode

logger = logging.getLogger(__name__)


def area_label(area: AreaDefinition, index: int) -> str:
    return area.id or f"area#{index}"


class AreaBuilder:
    """Prepare, validate and build regions into the scene."""

    def __init__(
        self,
        session: BuildSession,
        templates: AreaTemplates,
        elements: ElementCompiler | None = None,
    ) -> None:
        self.session = session
        self.templates = templates
        self.elements = elements or ElementCompiler(session)

    # -- preparation ----------------------------------------------------------

    def prepare(
        self,
        area: AreaDefinition | dict[str, Any],
        outer_scale: float = 1.0,
        index: int = 1,
    ) -> AreaDefinition:
        """Expand templates and scale placement and bounds, recursively.

        The enclosing scale applies to the region's placement and bounds; the
        region's own ``scale`` then applies to the placement and bounds of its
        nested regions.  Interior elements are scaled when they are built.
        """
        area = as_area_definition(area)
        if area.template:
            area = self.templates.create_instance(area.template, area)
        if not valid_bounds(area.bounds):
            raise MissingBoundsError(area_label(area, index))

        area = scale_placement(area, outer_scale)
        own = parse_scale(area.scale, self.session.warn)
        nested = [self.prepare(child, own, i) for i, child in enumerate(area.areas, start=1)]
        return area.model_copy(update={"areas": nested})

    def scaled_view(self, area: AreaDefinition) -> AreaDefinition:
        """The prepared region with interior literals in output units, for validation."""
        own = parse_scale(area.scale, self.session.warn)
        update: dict[str, Any] = {
            collection: [
                scale_element(e, element_factor(e, own, self.session.warn))
                for e in getattr(area, collection)
            ]
            for collection in COLLECTION_KINDS
        }
        update["areas"] = [self.scaled_view(child) for child in area.areas]
        return area.model_copy(update=update)

    def validate(self, area: AreaDefinition, area_id: str | None = None) -> Any:
        """Validate a prepared region and everything nested in it; raise on violations.

        Validator warnings are recorded as build diagnostics.
        """
        offset = origin_offset(area.origin, area.bounds)
        label = area_id or area_label(area, 1)
        result = self.session.validator.validate_or_raise(label, self.scaled_view(area), offset)
        for message in result.warnings:
            self.session.warn(message, label)
        return result

    # -- building -------------------------------------------------------------

    def build(
        self,
        area: AreaDefinition,
        parent: SceneNode,
        parent_origin: Vector3 = ZERO,
        namespace: str | None = None,
        index: int = 1,
        depth: int = 0,
    ) -> Model:
        """Build a prepared region.  Top-level regions are validated first."""
        label = area_label(area, index)
        qualified = qualify(namespace, label)
        if depth == 0:
            self.validate(area, qualified)

        offset = origin_offset(area.origin, area.bounds)
        bounds = Vector3(*area.bounds)
        corner = self._corner(area, label, parent_origin)
        world_origin = corner + offset

        model = Model(name=label)
        model.set_attribute(ATTR_AREA, True)
        model.set_attribute(ATTR_ID, qualified)
        model.set_attribute(ATTR_BOUNDS, bounds.to_list())
        model.set_attribute(ATTR_ORIGIN, area.origin)
        model.set_attribute(ATTR_CORNER, corner.to_list())
        if area.class_:
            model.set_attribute(ATTR_CLASS, area.class_)

        geometry = GeometryRecord(
            kind="area",
            position=corner + bounds / 2,
            size=bounds,
            bounding_box=BoundingBox.from_points([corner, corner + bounds]),
        )
        self.session.registry.register(qualified, RegistryEntry(qualified, model, area, geometry))

        own = parse_scale(area.scale, self.session.warn)
        with self.session.registry.scope(qualified):
            self.elements.build_all(
                area.iter_elements(),
                model,
                scale=own,
                namespace=qualified,
                origin=world_origin,
            )
            for child_index, child in enumerate(area.areas, start=1):
                self.build(child, model, world_origin, qualified, child_index, depth + 1)

        parent.add_child(model)
        logger.debug("Built area %s at %s", qualified, corner.to_list())
        return model

    def _corner(self, area: AreaDefinition, label: str, parent_origin: Vector3) -> Vector3:
        """World position of the region's minimum corner."""
        resolver = self.session.resolver
        local = Vector3.from_sequence(area.position) if area.position is not None and not is_reference(area.position) else None
        if area.position is not None and not is_reference(area.position) and local is None:
            raise ReferenceResolutionError(label, "position", area.position, "expected [x, z] or [x, y, z]")

        if area.anchor is not None:
            anchor = area.anchor
            if area.surface and isinstance(anchor, str) and ":" not in anchor:
                anchor = f"{anchor}:{area.surface}"
            base = resolver.resolve_anchor(anchor)
            if base is None:
                raise ReferenceResolutionError(label, "anchor", area.anchor)
            corner = base + (local or ZERO)
        elif area.position is not None and is_reference(area.position):
            corner = resolver.resolve(area.position)
            if corner is None:
                raise ReferenceResolutionError(label, "position", area.position)
        else:
            corner = parent_origin + (local or ZERO)

        offset = parse_offset(area.offset)
        return corner + offset if offset is not None else corner
