"""Declarative definitions: the authored input of the layout compiler.

Element definitions are typed: structural keys (id, class, kind and the
geometry fields) are model fields, and everything else lives in an explicit
``style`` map.  Raw dict input may still put style keys inline; they are
moved into ``style`` when the definition is validated.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from maplayout.config import COLLECTION_KINDS, DEFAULT_ELEMENT_KIND, ORIGIN_CORNER

_KEY_ALIASES = {"type": "kind"}


class ElementDefinition(BaseModel):
    """One piece of geometry: a wall, floor, platform, cylinder, sphere or wedge."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str | None = None
    """Element type.  Collections supply a default when omitted."""

    id: str | None = None
    class_: str | None = Field(default=None, alias="class")
    """Space-separated class tags, applied in listed order."""

    # Linear geometry
    from_: Any = Field(default=None, alias="from")
    to: Any = None
    length: float | None = None
    direction: str | None = None
    angle: float | None = None

    # Volumetric geometry
    position: Any = None
    size: Any = None
    radius: float | None = None
    height: float | None = None
    thickness: float | None = None
    rotation: Any = None

    # Placement relative to other elements
    anchor: Any = None
    weld: Any = None

    scale: float | str | None = None
    """Per-element unit scale override."""

    style: dict[str, Any] = Field(default_factory=dict)
    """Inline style overrides; the highest-priority cascade layer."""

    @model_validator(mode="before")
    @classmethod
    def _split_inline_style(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = cls.known_keys()
        structural: dict[str, Any] = {}
        style = dict(data.get("style") or {})
        for key, value in data.items():
            if key == "style":
                continue
            key = _KEY_ALIASES.get(key, key)
            if key in known:
                structural[key] = value
            else:
                style[key] = value
        structural["style"] = style
        return structural

    @classmethod
    def known_keys(cls) -> set[str]:
        keys = set(cls.model_fields)
        keys.update(f.alias for f in cls.model_fields.values() if f.alias)
        return keys

    @property
    def classes(self) -> list[str]:
        return self.class_.split() if self.class_ else []

    def label(self, index: int) -> str:
        """Identifier for diagnostics: the id, or ``kind#index`` when anonymous."""
        return self.id or f"{self.kind or DEFAULT_ELEMENT_KIND}#{index}"

    def to_source(self) -> dict[str, Any]:
        """Return the authored-dict form (aliased keys, unset fields dropped)."""
        data = self.model_dump(by_alias=True, exclude_none=True, exclude=self._source_excludes())
        data.update(self.style)
        return data

    def _source_excludes(self) -> set[str]:
        return {"style"}


class ElementCollections(BaseModel):
    """Named element collections shared by maps and regions."""

    model_config = ConfigDict(populate_by_name=True)

    walls: list[ElementDefinition] = Field(default_factory=list)
    floors: list[ElementDefinition] = Field(default_factory=list)
    platforms: list[ElementDefinition] = Field(default_factory=list)
    boxes: list[ElementDefinition] = Field(default_factory=list)
    cylinders: list[ElementDefinition] = Field(default_factory=list)
    spheres: list[ElementDefinition] = Field(default_factory=list)
    wedges: list[ElementDefinition] = Field(default_factory=list)
    elements: list[ElementDefinition] = Field(default_factory=list)
    areas: list[AreaDefinition] = Field(default_factory=list)

    def iter_elements(self) -> list[ElementDefinition]:
        """Flatten every collection, tagging each element with its default kind."""
        flattened: list[ElementDefinition] = []
        for collection, default_kind in COLLECTION_KINDS.items():
            for element in getattr(self, collection):
                if element.kind is None:
                    element = element.model_copy(update={"kind": default_kind or DEFAULT_ELEMENT_KIND})
                flattened.append(element)
        return flattened

    def collections_source(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for collection in COLLECTION_KINDS:
            items = getattr(self, collection)
            if items:
                data[collection] = [item.to_source() for item in items]
        if self.areas:
            data["areas"] = [area.to_source() for area in self.areas]
        return data


class AreaDefinition(ElementDefinition, ElementCollections):
    """A bounded region with its own origin and id namespace."""

    bounds: list[float] | None = None
    """Bounding volume ``[width, height, depth]``."""

    origin: str = ORIGIN_CORNER
    """Where local (0, 0, 0) sits: corner, center or floor-center."""

    template: str | None = None
    surface: str | None = None
    offset: Any = None

    def _source_excludes(self) -> set[str]:
        return {"style", *COLLECTION_KINDS, "areas"}

    def to_source(self) -> dict[str, Any]:
        data = super().to_source()
        data.update(self.collections_source())
        return data


class MapDefinition(ElementCollections):
    """Top-level definition handed to the build orchestrator."""

    name: str = "Map"
    scale: float | str | None = None
    templates: dict[str, AreaDefinition] = Field(default_factory=dict)
    """Region templates defined before any area is built."""

    def to_source(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.scale is not None:
            data["scale"] = self.scale
        if self.templates:
            data["templates"] = {k: v.to_source() for k, v in self.templates.items()}
        data.update(self.collections_source())
        return data


ElementCollections.model_rebuild()
AreaDefinition.model_rebuild()
MapDefinition.model_rebuild()


def as_map_definition(definition: MapDefinition | dict[str, Any]) -> MapDefinition:
    if isinstance(definition, MapDefinition):
        return definition
    return MapDefinition.model_validate(definition)


def as_area_definition(definition: AreaDefinition | dict[str, Any]) -> AreaDefinition:
    if isinstance(definition, AreaDefinition):
        return definition
    return AreaDefinition.model_validate(definition)


def as_element_definition(definition: ElementDefinition | dict[str, Any]) -> ElementDefinition:
    if isinstance(definition, ElementDefinition):
        return definition
    return ElementDefinition.model_validate(definition)
