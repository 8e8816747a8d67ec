"""Host scene graph used as the compiler's output and the scanner's input."""

from maplayout.scene.graph import (
    SHAPE_BALL,
    SHAPE_BLOCK,
    SHAPE_CYLINDER,
    SHAPE_WEDGE,
    SHAPES,
    Model,
    Part,
    SceneNode,
)

__all__ = [
    "Model",
    "Part",
    "SHAPES",
    "SHAPE_BALL",
    "SHAPE_BLOCK",
    "SHAPE_CYLINDER",
    "SHAPE_WEDGE",
    "SceneNode",
]
