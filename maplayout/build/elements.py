"""ElementCompiler: scale, resolve, style, create and register elements in order."""

from __future__ import annotations

import logging
from typing import Any

from maplayout.build.ordering import dependency_order
from maplayout.build.scale import element_factor, scale_element
from maplayout.build.session import BuildSession
from maplayout.config import NAMESPACE_SEPARATOR
from maplayout.errors import ReferenceResolutionError
from maplayout.factory.base import ResolvedElement
from maplayout.geometry.vector import ZERO, Vector3, heading
from maplayout.models.definition import ElementDefinition
from maplayout.references.syntax import is_reference, normalise_selector
from maplayout.registry import RegistryEntry
from maplayout.scene.graph import Part, SceneNode
from maplayout.styles import resolve_style

logger = logging.getLogger(__name__)


def qualify(namespace: str | None, identifier: str | None) -> str | None:
    if identifier is None:
        return None
    return f"{namespace}{NAMESPACE_SEPARATOR}{identifier}" if namespace else identifier


class ElementCompiler:
    """Build one list of elements into a parent node.

    Literal positions are local to ``origin`` (the world position of the
    enclosing region's local origin), or offsets from the anchor point when
    the element is anchored.  References resolve straight to world positions.
    """

    def __init__(self, session: BuildSession) -> None:
        self.session = session

    def build_all(
        self,
        elements: list[ElementDefinition],
        parent: SceneNode,
        scale: float = 1.0,
        namespace: str | None = None,
        origin: Vector3 | None = None,
    ) -> list[Part]:
        order = dependency_order(
            elements,
            strict=self.session.strict_cycles,
            warn=self.session.warn,
            namespace=namespace,
        )
        parts: list[Part] = []
        for index in order:
            part = self.build_one(
                elements[index],
                parent,
                scale=scale,
                namespace=namespace,
                origin=origin,
                label=elements[index].label(index + 1),
            )
            if part is not None:
                parts.append(part)
        return parts

    def build_one(
        self,
        element: ElementDefinition,
        parent: SceneNode,
        scale: float = 1.0,
        namespace: str | None = None,
        origin: Vector3 | None = None,
        label: str | None = None,
    ) -> Part | None:
        label = label or element.label(1)
        factor = element_factor(element, scale, self.session.warn)
        scaled = scale_element(element, factor)
        qualified = qualify(namespace, scaled.id)

        resolved = self._resolve(scaled, label, qualified, origin, factor)
        props = resolve_style(scaled, self.session.styles, qualified)

        created = self.session.factory.create(resolved, props)
        if created is None:
            return None
        part, geometry = created
        parent.add_child(part)
        if qualified:
            self.session.registry.register(qualified, RegistryEntry(qualified, part, scaled, geometry))
        return part

    # -- resolution -----------------------------------------------------------

    def _resolve(
        self,
        element: ElementDefinition,
        label: str,
        qualified: str | None,
        origin: Vector3 | None,
        factor: float,
    ) -> ResolvedElement:
        anchor_point = None
        if element.anchor is not None:
            anchor_point = self.session.resolver.resolve_anchor(element.anchor)
            if anchor_point is None:
                raise ReferenceResolutionError(label, "anchor", element.anchor)

        if element.weld is not None:
            weld = element.weld
            if isinstance(weld, dict):
                weld = weld.get("target") or weld.get("ref")
            target = normalise_selector(weld)
            if target is None or not self.session.registry.exists(target.split(":", 1)[0]):
                raise ReferenceResolutionError(label, "weld", element.weld, "weld target is not built")

        base = anchor_point if anchor_point is not None else origin

        def position(field: str, value: Any) -> Vector3 | None:
            if value is None:
                return None
            if is_reference(value):
                point = self.session.resolver.resolve(value)
                if point is None:
                    raise ReferenceResolutionError(label, field, value, "unknown element or point")
                return point
            vector = Vector3.from_sequence(value)
            if vector is None:
                raise ReferenceResolutionError(label, field, value, "expected [x, z] or [x, y, z]")
            return base + vector if base is not None else vector

        resolved = ResolvedElement(
            definition=element,
            kind=(element.kind or "").lower(),
            label=label,
            qualified_id=qualified,
            frame_origin=base if base is not None else ZERO,
            scale=factor,
        )

        if resolved.kind == "wall":
            start = position("from", element.from_)
            if start is None and anchor_point is not None:
                start = anchor_point
            end = position("to", element.to)
            if end is None and start is not None and element.length is not None:
                unit = heading(element.direction, element.angle)
                if unit is not None:
                    end = start + unit * element.length
            resolved.start, resolved.end = start, end
        else:
            point = position("position", element.position)
            if point is None and anchor_point is not None:
                point = anchor_point
            resolved.position = point

        return resolved
