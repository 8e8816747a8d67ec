"""In-memory host scene graph: containers and primitives the compiler creates and scans.

Positions are world coordinates; parenting only groups nodes, it does not
transform them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator

from maplayout.config import DEFAULT_MATERIAL, DEFAULT_PART_COLOR
from maplayout.geometry.vector import ZERO, Vector3, axis_vectors

SHAPE_BLOCK = "block"
SHAPE_CYLINDER = "cylinder"
SHAPE_BALL = "ball"
SHAPE_WEDGE = "wedge"
SHAPES = (SHAPE_BLOCK, SHAPE_CYLINDER, SHAPE_BALL, SHAPE_WEDGE)


@dataclass(eq=False)
class SceneNode:
    """A named node with key/value annotations and ordered children."""

    name: str = "Node"
    attributes: dict[str, Any] = field(default_factory=dict)
    children: list[SceneNode] = field(default_factory=list, repr=False)
    parent: SceneNode | None = field(default=None, repr=False)
    destroyed: bool = field(default=False, repr=False)

    node_type = "Node"

    # -- annotations ----------------------------------------------------------

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    # -- hierarchy ------------------------------------------------------------

    def add_child(self, child: SceneNode) -> SceneNode:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def get_children(self) -> list[SceneNode]:
        return list(self.children)

    def iter_descendants(self) -> Iterator[SceneNode]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def get_descendants(self) -> list[SceneNode]:
        return list(self.iter_descendants())

    def find_first_child(self, name: str, recursive: bool = False) -> SceneNode | None:
        nodes = self.iter_descendants() if recursive else iter(self.children)
        for node in nodes:
            if node.name == name:
                return node
        return None

    def destroy(self) -> None:
        """Detach this node and everything beneath it."""
        for child in list(self.children):
            child.destroy()
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None
        self.destroyed = True

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.node_type,
            "name": self.name,
            "attributes": dict(self.attributes),
            "children": [c.to_dict() for c in self.children],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=list)


@dataclass(eq=False)
class Model(SceneNode):
    """Grouping container (a compiled map, a region, a mirror preview)."""

    node_type = "Model"


@dataclass(eq=False)
class Part(SceneNode):
    """A single primitive with transform, size and surface properties."""

    shape: str = SHAPE_BLOCK
    size: Vector3 = field(default_factory=lambda: Vector3(4.0, 1.0, 2.0))
    position: Vector3 = ZERO
    rotation: Vector3 = ZERO
    material: str = DEFAULT_MATERIAL
    color: tuple[int, int, int] = DEFAULT_PART_COLOR
    transparency: float = 0.0
    reflectance: float = 0.0
    anchored: bool = True
    can_collide: bool = True
    can_touch: bool = True
    can_query: bool = True
    cast_shadow: bool = True
    massless: bool = False

    node_type = "Part"

    @property
    def right_vector(self) -> Vector3:
        return axis_vectors(self.rotation)[0]

    @property
    def up_vector(self) -> Vector3:
        return axis_vectors(self.rotation)[1]

    @property
    def back_vector(self) -> Vector3:
        return axis_vectors(self.rotation)[2]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "shape": self.shape,
            "size": self.size.to_list(),
            "position": self.position.to_list(),
            "rotation": self.rotation.to_list(),
            "material": self.material,
            "color": list(self.color),
            "transparency": self.transparency,
            "reflectance": self.reflectance,
            "anchored": self.anchored,
            "can_collide": self.can_collide,
            "can_touch": self.can_touch,
            "can_query": self.can_query,
            "cast_shadow": self.cast_shadow,
            "massless": self.massless,
        })
        return data
