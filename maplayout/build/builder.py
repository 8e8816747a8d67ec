"""MapBuilder: the top-level build orchestrator.

Usage::

    builder = MapBuilder()
    model = builder.build({
        "scale": "4:1",
        "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}],
        "platforms": [{"id": "p", "position": "#w:end + {0, 2}"}],
    })
"""

from __future__ import annotations

import logging
from typing import Any

from maplayout.build.areas import AreaBuilder
from maplayout.build.elements import ElementCompiler
from maplayout.build.scale import parse_scale, scale_value
from maplayout.build.session import BuildSession
from maplayout.build.templates import AreaTemplates
from maplayout.config import ATTR_SCALE
from maplayout.errors import MapLayoutError, MissingBoundsError
from maplayout.models.definition import (
    AreaDefinition,
    ElementDefinition,
    MapDefinition,
    as_area_definition,
    as_element_definition,
    as_map_definition,
)
from maplayout.models.stylesheet import StyleSheet, as_stylesheet
from maplayout.registry import Registry
from maplayout.scene.graph import Model, Part, SceneNode
from maplayout.validation.report import ValidationResult

logger = logging.getLogger(__name__)


class MapBuilder:
    """Compile map definitions into host scene models.

    Parameters
    ----------
    templates:
        Area template library shared across builds.
    root:
        Default container new maps are attached to.
    strict_cycles:
        Raise DependencyCycleError on circular references.  When False the
        cycle is reported as a warning and the build continues in authored
        order (and then fails on the first unresolvable reference).
    """

    def __init__(
        self,
        templates: AreaTemplates | None = None,
        root: SceneNode | None = None,
        strict_cycles: bool = True,
    ) -> None:
        self.templates = templates if templates is not None else AreaTemplates()
        self.root = root if root is not None else Model(name="Workspace")
        self.strict_cycles = strict_cycles
        self.registry = Registry()
        self.session: BuildSession | None = None
        self.model: Model | None = None

    def build(
        self,
        definition: MapDefinition | dict[str, Any],
        styles: StyleSheet | dict[str, Any] | None = None,
        parent: SceneNode | None = None,
    ) -> Model:
        """Build ``definition`` and attach the resulting model to ``parent``.

        Nothing is attached when the build fails.
        """
        definition = as_map_definition(definition)
        self.registry.clear()
        session = BuildSession(self.registry, as_stylesheet(styles), strict_cycles=self.strict_cycles)
        session.scale = parse_scale(definition.scale, session.warn)
        self.session = session

        for name, template in definition.templates.items():
            self.templates.define(name, template)

        model = Model(name=definition.name)
        if session.scale != 1:
            model.set_attribute(ATTR_SCALE, session.scale)

        compiler = ElementCompiler(session)
        compiler.build_all(definition.iter_elements(), model, scale=session.scale)

        areas = AreaBuilder(session, self.templates, compiler)
        for index, area in enumerate(definition.areas, start=1):
            prepared = areas.prepare(area, session.scale, index)
            areas.build(prepared, model, index=index)

        (parent if parent is not None else self.root).add_child(model)
        self.model = model
        logger.info(
            "Built map %s: %d registered, %d warning(s)",
            definition.name,
            len(self.registry),
            len(session.warnings),
        )
        return model

    def rebuild(
        self,
        definition: MapDefinition | dict[str, Any],
        styles: StyleSheet | dict[str, Any] | None = None,
        parent: SceneNode | None = None,
    ) -> Model:
        """Destroy the existing model with the definition's name, then build."""
        definition = as_map_definition(definition)
        target = parent if parent is not None else self.root
        existing = target.find_first_child(definition.name)
        if existing is not None:
            logger.info("Destroying previous build of %s", definition.name)
            existing.destroy()
        return self.build(definition, styles, target)

    def add_element(
        self,
        element: ElementDefinition | dict[str, Any],
        parent: SceneNode | None = None,
        scale: float | None = None,
    ) -> Part | None:
        """Build one more element into the last compiled map.

        References may point at anything registered by that build.
        """
        if self.session is None or self.model is None:
            raise MapLayoutError("No map has been built yet; call build() first")
        element = as_element_definition(element)
        compiler = ElementCompiler(self.session)
        return compiler.build_one(
            element,
            parent if parent is not None else self.model,
            scale=scale if scale is not None else self.session.scale,
            label=element.label(len(self.registry) + 1),
        )

    def validate_area(self, area: AreaDefinition | dict[str, Any], area_id: str | None = None) -> ValidationResult:
        """Validate a region without building it."""
        area = as_area_definition(area)
        session = BuildSession(strict_cycles=self.strict_cycles)
        areas = AreaBuilder(session, self.templates)
        try:
            prepared = areas.prepare(area)
        except MissingBoundsError:
            return session.validator.validate(area_id or area.id or "area#1", area)
        return session.validator.validate(area_id or prepared.id or "area#1", areas.scaled_view(prepared))

    # -- units ----------------------------------------------------------------

    def get_scale(self) -> float:
        return self.session.scale if self.session is not None else 1.0

    @staticmethod
    def parse_scale(value: Any) -> float:
        return parse_scale(value)

    def to_units(self, value: Any) -> Any:
        """Convert source units to output units using the current build scale."""
        return scale_value(value, self.get_scale())

    def from_units(self, value: Any) -> Any:
        """Convert output units back to source units."""
        return scale_value(value, 1.0 / self.get_scale())
