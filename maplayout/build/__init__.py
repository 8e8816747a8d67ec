"""Build orchestration: ordering, scaling, regions and the map builder."""

from maplayout.build.areas import AreaBuilder
from maplayout.build.builder import MapBuilder
from maplayout.build.elements import ElementCompiler
from maplayout.build.ordering import dependency_order
from maplayout.build.scale import parse_scale, scale_element
from maplayout.build.session import BuildSession, Diagnostic
from maplayout.build.templates import AreaTemplates

__all__ = [
    "AreaBuilder",
    "AreaTemplates",
    "BuildSession",
    "Diagnostic",
    "ElementCompiler",
    "MapBuilder",
    "dependency_order",
    "parse_scale",
    "scale_element",
]
