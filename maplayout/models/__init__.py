"""Pydantic models for definitions, style sheets and options."""

from maplayout.models.definition import (
    AreaDefinition,
    ElementCollections,
    ElementDefinition,
    MapDefinition,
    as_area_definition,
    as_element_definition,
    as_map_definition,
)
from maplayout.models.options import CodeOptions, MirrorOptions, ScanOptions
from maplayout.models.stylesheet import StyleSheet, as_stylesheet

__all__ = [
    "AreaDefinition",
    "CodeOptions",
    "ElementCollections",
    "ElementDefinition",
    "MapDefinition",
    "MirrorOptions",
    "ScanOptions",
    "StyleSheet",
    "as_area_definition",
    "as_element_definition",
    "as_map_definition",
    "as_stylesheet",
]
