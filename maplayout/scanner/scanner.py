"""Scanner: the reverse compiler from host parts back to definitions.

Two modes:

* :meth:`Scanner.scan` walks any container and reports world coordinates,
  grouping parts that belong to built regions into ``areas``.
* :meth:`Scanner.scan_area` uses a part annotated ``layout_tag = "area"`` as
  the bounding volume, reports its children in region-local coordinates
  (corner origin), snaps near-miss values and expresses parts nested under
  other parts relative to their parent.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from maplayout.config import (
    AREA_TAG,
    ATTR_AREA,
    ATTR_BOUNDS,
    ATTR_CLASS,
    ATTR_CORNER,
    ATTR_ID,
    ATTR_IGNORE,
    ATTR_NAME,
    ATTR_TAG,
    CODE_PRECISION,
    DEFAULT_MATERIAL,
    DEFAULT_PART_COLOR,
    GENERIC_PART_NAMES,
    NAMESPACE_SEPARATOR,
    ORIGIN_CORNER,
)
from maplayout.geometry.records import BoundingBox
from maplayout.geometry.vector import ZERO, Vector3, axis_vectors, clean
from maplayout.models.options import CodeOptions, MirrorOptions, ScanOptions, as_options
from maplayout.scanner.codegen import format_number, generate_code
from maplayout.scanner.inference import cylinder_dimensions, infer_kind, sphere_radius, wall_endpoints
from maplayout.scanner.snapping import box_from_edges, snap_edges, snap_point, snap_value
from maplayout.scene.graph import Part, SceneNode

logger = logging.getLogger(__name__)

COLLECTION_FOR_KIND = {
    "wall": "walls",
    "floor": "floors",
    "platform": "platforms",
    "cylinder": "cylinders",
    "sphere": "spheres",
    "wedge": "wedges",
}

_AXIS_EPSILON = 1e-6


def _round(value: float) -> float:
    return clean(round(value, CODE_PRECISION))


def _point(vector: Vector3) -> list[float]:
    """``[x, z]`` on the footprint plane, ``[x, y, z]`` otherwise."""
    x, y, z = _round(vector.x), _round(vector.y), _round(vector.z)
    return [x, z] if y == 0 else [x, y, z]


def _vector(vector: Vector3) -> list[float]:
    return [_round(vector.x), _round(vector.y), _round(vector.z)]


def _is_rotated(part: Part) -> bool:
    return any(abs(a) > _AXIS_EPSILON for a in part.rotation)


def _part_box(part: Part) -> BoundingBox:
    right, up, back = axis_vectors(part.rotation)
    half = part.size / 2
    corners = [
        part.position + right * (sx * half.x) + up * (sy * half.y) + back * (sz * half.z)
        for sx in (-1, 1)
        for sy in (-1, 1)
        for sz in (-1, 1)
    ]
    return BoundingBox.from_points(corners)


class _ParentInfo:
    """What a nested part needs to know about the part it sits under."""

    __slots__ = ("id", "kind", "start", "end", "anchor")

    def __init__(
        self,
        id: str | None,
        kind: str,
        anchor: Vector3,
        start: Vector3 | None = None,
        end: Vector3 | None = None,
    ) -> None:
        self.id = id
        self.kind = kind
        self.anchor = anchor
        self.start = start
        self.end = end


class _AreaScan:
    __slots__ = ("name", "bounds", "corner", "options", "references", "collections")

    def __init__(self, name: str, bounds: Vector3, corner: Vector3, options: ScanOptions) -> None:
        self.name = name
        self.bounds = bounds
        self.corner = corner
        self.options = options
        self.references: list[Vector3] = []
        self.collections: dict[str, list[dict[str, Any]]] = {}


class Scanner:
    """Inspect host geometry and produce declarative definitions."""

    def __init__(self, options: ScanOptions | dict[str, Any] | None = None) -> None:
        self.options = as_options(ScanOptions, options)

    # -- general scan ---------------------------------------------------------

    def scan(self, container: SceneNode, options: ScanOptions | dict[str, Any] | None = None) -> dict[str, Any]:
        """Describe every part under ``container`` in world coordinates."""
        opts = as_options(ScanOptions, options) if options is not None else self.options
        nodes = container.get_descendants() if opts.recursive else container.get_children()

        top: dict[str, list[dict[str, Any]]] = {}
        grouped: dict[str, list[Part]] = {}
        area_models: dict[str, SceneNode | None] = {}

        for node in nodes:
            if not isinstance(node, Part) or node.get_attribute(ATTR_IGNORE):
                continue
            if node.get_attribute(ATTR_TAG) == AREA_TAG:
                continue
            area_id, area_model = self._area_of(node, container)
            if area_id is None:
                kind = infer_kind(node) if opts.infer_types else "platform"
                self._add(top, kind, self._describe(node, kind, ZERO, None))
            else:
                grouped.setdefault(area_id, []).append(node)
                area_models.setdefault(area_id, area_model)

        result: dict[str, Any] = {"name": container.name}
        result.update(top)

        areas = []
        for area_id, parts in grouped.items():
            areas.append(self._describe_area(area_id, area_models[area_id], parts, opts))
        if areas:
            result["areas"] = areas

        logger.info("Scanned %s: %d part(s), %d area(s)", container.name, len(nodes), len(areas))
        return result

    def _area_of(self, part: Part, container: SceneNode) -> tuple[str | None, SceneNode | None]:
        tagged = part.get_attribute(ATTR_AREA)
        if isinstance(tagged, str) and tagged:
            return tagged, None
        node = part.parent
        while node is not None and node is not container:
            if node.get_attribute(ATTR_AREA) is True:
                return node.get_attribute(ATTR_ID) or node.name, node
            node = node.parent
        return None, None

    def _describe_area(
        self,
        area_id: str,
        model: SceneNode | None,
        parts: list[Part],
        opts: ScanOptions,
    ) -> dict[str, Any]:
        corner = Vector3.from_sequence(model.get_attribute(ATTR_CORNER)) if model is not None else None
        bounds = Vector3.from_sequence(model.get_attribute(ATTR_BOUNDS)) if model is not None else None
        if corner is None or bounds is None:
            boxes = [_part_box(part) for part in parts]
            box = BoundingBox.from_points(
                [Vector3(b.min_x, b.min_y, b.min_z) for b in boxes]
                + [Vector3(b.max_x, b.max_y, b.max_z) for b in boxes]
            )
            corner = Vector3(box.min_x, box.min_y, box.min_z)
            bounds = box.size

        area: dict[str, Any] = {
            "id": area_id,
            "bounds": _vector(bounds),
            "origin": ORIGIN_CORNER,
            "position": _vector(corner),
        }
        collections: dict[str, list[dict[str, Any]]] = {}
        for part in parts:
            kind = infer_kind(part) if opts.infer_types else "platform"
            self._add(collections, kind, self._describe(part, kind, corner, area_id))
        area.update(collections)
        return area

    # -- area scan ------------------------------------------------------------

    def find_areas(self, container: SceneNode) -> list[Part]:
        """Every part under ``container`` annotated as an area bounding volume."""
        return [
            node for node in container.iter_descendants()
            if isinstance(node, Part) and node.get_attribute(ATTR_TAG) == AREA_TAG
        ]

    @staticmethod
    def area_name(part: Part) -> str:
        return part.get_attribute(ATTR_NAME) or part.name

    def find_area(self, area_name: str, container: SceneNode) -> Part | None:
        for part in self.find_areas(container):
            if self.area_name(part) == area_name:
                return part
        return None

    def scan_area(
        self,
        area_name: str,
        container: SceneNode,
        options: ScanOptions | dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Scan the children of the named area part in area-local coordinates.

        Returns None (with a warning) when no such area exists.
        """
        opts = as_options(ScanOptions, options) if options is not None else self.options
        area_part = self.find_area(area_name, container)
        if area_part is None:
            logger.warning(
                "No area named %s under %s (annotate a part with %s=%r)",
                area_name, container.name, ATTR_TAG, AREA_TAG,
            )
            return None

        bounds = area_part.size
        ctx = _AreaScan(area_name, bounds, area_part.position - bounds / 2, opts)
        for child in area_part.get_children():
            self._scan_area_node(child, None, ctx)

        config: dict[str, Any] = {
            "id": area_name,
            "bounds": _vector(bounds),
            "origin": ORIGIN_CORNER,
        }
        config.update(ctx.collections)
        logger.info(
            "Scanned area %s: %d element(s)",
            area_name, sum(len(items) for items in ctx.collections.values()),
        )
        return config

    def _scan_area_node(self, node: SceneNode, parent: _ParentInfo | None, ctx: _AreaScan) -> None:
        if not isinstance(node, Part):
            for child in node.get_children():
                self._scan_area_node(child, parent, ctx)
            return
        if node.get_attribute(ATTR_IGNORE):
            return

        opts = ctx.options
        kind = infer_kind(node) if opts.infer_types else "platform"
        entry = self._identity(node, ctx.name)
        relative_to = parent if opts.relative and parent is not None and parent.id else None

        if kind == "wall":
            info = self._scan_wall(node, entry, relative_to, ctx)
        else:
            info = self._scan_volume(node, kind, entry, relative_to, ctx)

        entry.update(self._properties(node))
        self._add(ctx.collections, kind, entry)

        for child in node.get_children():
            self._scan_area_node(child, info, ctx)

    def _scan_wall(
        self,
        part: Part,
        entry: dict[str, Any],
        parent: _ParentInfo | None,
        ctx: _AreaScan,
    ) -> _ParentInfo:
        start, end, height, thickness = wall_endpoints(part)
        start, end = start - ctx.corner, end - ctx.corner

        if ctx.options.snap:
            threshold = ctx.options.snap_threshold
            start = snap_point(start, ctx.bounds, ctx.references, threshold)
            end = snap_point(end, ctx.bounds, ctx.references, threshold)
            base = snap_value(min(start.y, end.y), (0.0, ctx.bounds.y), threshold)
            start = Vector3(start.x, base, start.z)
            end = Vector3(end.x, base, end.z)
            height = snap_value(height, (ctx.bounds.y,), threshold)
        ctx.references.extend([start, end])

        if parent is not None and parent.kind == "wall":
            candidates = {"start": parent.start, "end": parent.end, "center": parent.anchor}
            name = min(candidates, key=lambda key: candidates[key].distance_to(start))
            delta = start - candidates[name]
            entry["from"] = self._offset_reference(f"#{parent.id}:{name}", delta)
            self._heading(entry, end - start)
        elif parent is not None:
            entry["anchor"] = f"#{parent.id}"
            entry["from"] = _point(start - parent.anchor)
            entry["to"] = _point(end - parent.anchor)
        else:
            entry["from"] = _point(start)
            entry["to"] = _point(end)

        entry["height"] = _round(height)
        entry["thickness"] = _round(thickness)
        return _ParentInfo(entry.get("id"), "wall", (start + end) / 2, start, end)

    def _scan_volume(
        self,
        part: Part,
        kind: str,
        entry: dict[str, Any],
        parent: _ParentInfo | None,
        ctx: _AreaScan,
    ) -> _ParentInfo:
        threshold = ctx.options.snap_threshold
        center = part.position - ctx.corner
        size = part.size

        if kind in ("cylinder", "sphere"):
            if ctx.options.snap:
                center = snap_point(center, ctx.bounds, ctx.references, threshold, axes=("x", "y", "z"))
        elif not _is_rotated(part) and ctx.options.snap:
            low, high = snap_edges(center - size / 2, center + size / 2, ctx.bounds, threshold)
            center, size = box_from_edges(low, high)

        if parent is not None:
            entry["anchor"] = f"#{parent.id}"
            entry["position"] = _vector(center - parent.anchor)
        else:
            entry["position"] = _vector(center)
        self._shape_fields(part, kind, size, entry)
        return _ParentInfo(entry.get("id"), kind, center)

    @staticmethod
    def _offset_reference(reference: str, delta: Vector3) -> str:
        dx, dy, dz = _round(delta.x), _round(delta.y), _round(delta.z)
        if dx == 0 and dy == 0 and dz == 0:
            return reference
        parts = [dx, dz] if dy == 0 else [dx, dy, dz]
        return f"{reference} + {{{', '.join(format_number(v) for v in parts)}}}"

    @staticmethod
    def _heading(entry: dict[str, Any], span: Vector3) -> None:
        """Record length plus an axis direction, or an angle for diagonal walls."""
        entry["length"] = _round(span.horizontal().magnitude)
        if abs(span.z) < _AXIS_EPSILON:
            entry["direction"] = "+x" if span.x >= 0 else "-x"
        elif abs(span.x) < _AXIS_EPSILON:
            entry["direction"] = "+z" if span.z > 0 else "-z"
        else:
            entry["angle"] = _round(math.degrees(math.atan2(span.z, span.x)))

    # -- shared extraction ----------------------------------------------------

    def _describe(self, part: Part, kind: str, origin: Vector3, area_id: str | None) -> dict[str, Any]:
        """Element entry in coordinates relative to ``origin``, without snapping."""
        entry = self._identity(part, area_id)
        if kind == "wall":
            start, end, height, thickness = wall_endpoints(part)
            entry["from"] = _point(start - origin)
            entry["to"] = _point(end - origin)
            entry["height"] = _round(height)
            entry["thickness"] = _round(thickness)
        else:
            entry["position"] = _vector(part.position - origin)
            self._shape_fields(part, kind, part.size, entry)
        entry.update(self._properties(part))
        return entry

    @staticmethod
    def _shape_fields(part: Part, kind: str, size: Vector3, entry: dict[str, Any]) -> None:
        if kind == "floor":
            entry["size"] = [_round(size.x), _round(size.z)]
            entry["thickness"] = _round(size.y)
        elif kind == "cylinder":
            height, radius = cylinder_dimensions(part)
            entry["height"] = _round(height)
            entry["radius"] = _round(radius)
        elif kind == "sphere":
            entry["radius"] = _round(sphere_radius(part))
        else:
            entry["size"] = _vector(size)
            if _is_rotated(part):
                entry["rotation"] = _vector(part.rotation)
        if kind not in COLLECTION_FOR_KIND:
            entry["kind"] = kind

    @staticmethod
    def _identity(part: Part, area_id: str | None) -> dict[str, Any]:
        entry: dict[str, Any] = {}
        ident = part.get_attribute(ATTR_ID) or part.get_attribute(ATTR_NAME)
        if not ident and part.name not in GENERIC_PART_NAMES:
            ident = part.name
        if ident and area_id and ident.startswith(area_id + NAMESPACE_SEPARATOR):
            ident = ident[len(area_id) + 1:]
        if ident:
            entry["id"] = ident
        tags = part.get_attribute(ATTR_CLASS)
        if tags:
            entry["class"] = tags
        return entry

    @staticmethod
    def _properties(part: Part) -> dict[str, Any]:
        """Style fields that differ from host defaults."""
        props: dict[str, Any] = {}
        if part.material != DEFAULT_MATERIAL:
            props["material"] = part.material
        if tuple(part.color) != DEFAULT_PART_COLOR:
            props["color"] = list(part.color)
        if part.transparency > 0:
            props["transparency"] = _round(part.transparency)
        if not part.anchored:
            props["anchored"] = False
        if not part.can_collide:
            props["can_collide"] = False
        return props

    @staticmethod
    def _add(collections: dict[str, list[dict[str, Any]]], kind: str, entry: dict[str, Any]) -> None:
        collections.setdefault(COLLECTION_FOR_KIND.get(kind, "elements"), []).append(entry)

    # -- source output --------------------------------------------------------

    def generate_code(self, definition: Any, options: CodeOptions | dict[str, Any] | None = None) -> str:
        return generate_code(definition, options)

    def scan_to_code(
        self,
        container: SceneNode,
        options: ScanOptions | dict[str, Any] | None = None,
        code_options: CodeOptions | dict[str, Any] | None = None,
    ) -> str:
        opts = as_options(CodeOptions, code_options)
        if opts.source_name is None:
            opts = opts.model_copy(update={"source_name": container.name})
        return generate_code(self.scan(container, options), opts)

    def scan_area_to_code(
        self,
        area_name: str,
        container: SceneNode,
        options: ScanOptions | dict[str, Any] | None = None,
        code_options: CodeOptions | dict[str, Any] | None = None,
    ) -> str | None:
        config = self.scan_area(area_name, container, options)
        if config is None:
            return None
        opts = as_options(CodeOptions, code_options)
        if opts.source_name is None:
            opts = opts.model_copy(update={"source_name": f"area {area_name}"})
        return generate_code(config, opts)

    def mirror_area(
        self,
        area_name: str,
        container: SceneNode,
        options: MirrorOptions | dict[str, Any] | None = None,
    ) -> Any:
        from maplayout.scanner.mirror import mirror_area

        return mirror_area(self, area_name, container, options)
