"""Primitive builders: one per element kind."""

from maplayout.factory.base import PrimitiveBuilder, ResolvedElement, SkipElement
from maplayout.factory.cylinder import CylinderBuilder
from maplayout.factory.floor import FloorBuilder
from maplayout.factory.generator import BUILDER_REGISTRY, GeometryFactory, get_builder
from maplayout.factory.platform import PlatformBuilder
from maplayout.factory.properties import apply_properties, to_color, to_material
from maplayout.factory.sphere import SphereBuilder
from maplayout.factory.wall import WallBuilder
from maplayout.factory.wedge import WedgeBuilder

__all__ = [
    "BUILDER_REGISTRY",
    "CylinderBuilder",
    "FloorBuilder",
    "GeometryFactory",
    "PlatformBuilder",
    "PrimitiveBuilder",
    "ResolvedElement",
    "SkipElement",
    "SphereBuilder",
    "WallBuilder",
    "WedgeBuilder",
    "apply_properties",
    "get_builder",
    "to_color",
    "to_material",
]
