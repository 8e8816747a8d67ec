"""Area templates: named, reusable region definitions (prefabs)."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from maplayout.config import COLLECTION_KINDS
from maplayout.errors import TemplateError, UnknownTemplateError
from maplayout.geometry.frames import origin_offset, valid_bounds
from maplayout.geometry.vector import Vector3
from maplayout.models.definition import AreaDefinition, as_area_definition

logger = logging.getLogger(__name__)

# Placement comes from the instance, never from the template
_PLACEMENT_FIELDS = ("position", "anchor", "surface", "offset", "rotation")


class AreaTemplates:
    """In-memory library of area templates."""

    def __init__(self) -> None:
        self._templates: dict[str, AreaDefinition] = {}

    def define(self, name: str, definition: AreaDefinition | dict[str, Any]) -> AreaDefinition:
        """Register a template; bounds and origin are checked up front."""
        area = as_area_definition(definition)
        if not valid_bounds(area.bounds):
            raise TemplateError(
                f"Area template '{name}' must have bounds = [width, height, depth] with positive numbers"
            )
        origin_offset(area.origin, area.bounds)

        if name in self._templates:
            logger.warning("Redefining area template %s", name)
        self._templates[name] = area
        logger.info("Defined area template %s (%s)", name, "x".join(f"{v:g}" for v in area.bounds))
        return area

    def get(self, name: str) -> AreaDefinition | None:
        return self._templates.get(name)

    def exists(self, name: str) -> bool:
        return name in self._templates

    def list(self) -> list[str]:
        return sorted(self._templates)

    def clear(self) -> None:
        self._templates.clear()

    @staticmethod
    def get_origin_offset(origin: str | None, bounds: Sequence[float]) -> Vector3:
        return origin_offset(origin, bounds)

    def create_instance(self, name: str, instance: AreaDefinition | dict[str, Any]) -> AreaDefinition:
        """Merge an instance's overrides onto the named template.

        The instance supplies id and placement; class tags are appended to
        the template's; origin, scale and bounds fall back to the template.
        Elements listed on the instance are added after the template's own.
        """
        template = self.get(name)
        if template is None:
            raise UnknownTemplateError(name)
        inst = as_area_definition(instance)
        if not inst.id:
            raise TemplateError(f"Instance of area template '{name}' must have an 'id'")

        tags: list[str] = []
        for tag in template.classes + inst.classes:
            if tag not in tags:
                tags.append(tag)

        update: dict[str, Any] = {
            "id": inst.id,
            "class_": " ".join(tags) or None,
            "template": None,
            "origin": inst.origin if "origin" in inst.model_fields_set else template.origin,
            "scale": inst.scale if inst.scale is not None else template.scale,
            "bounds": inst.bounds if inst.bounds is not None else template.bounds,
            "style": {**template.style, **inst.style},
        }
        for field_name in _PLACEMENT_FIELDS:
            update[field_name] = getattr(inst, field_name)
        for collection in (*COLLECTION_KINDS, "areas"):
            extra = getattr(inst, collection)
            if extra:
                inherited = [item.model_copy(deep=True) for item in getattr(template, collection)]
                update[collection] = [*inherited, *extra]

        merged = template.model_copy(update=update, deep=True)
        logger.debug("Instantiated template %s as %s", name, inst.id)
        return merged
