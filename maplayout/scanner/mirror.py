"""Mirror previews: rebuild a scanned area next to the original.

The preview round-trips the area through :meth:`Scanner.scan_area` and the
map builder, so it shows exactly what the generated definition would build.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from maplayout.build.builder import MapBuilder
from maplayout.config import MIRROR_SUFFIX
from maplayout.geometry.vector import Vector3
from maplayout.models.options import MirrorOptions, as_options
from maplayout.scene.graph import Model, Part, SceneNode

if TYPE_CHECKING:
    from maplayout.scanner.scanner import Scanner

logger = logging.getLogger(__name__)

_OFFSET_AXES = {
    "x": Vector3(1, 0, 0),
    "+x": Vector3(1, 0, 0),
    "-x": Vector3(-1, 0, 0),
    "z": Vector3(0, 0, 1),
    "+z": Vector3(0, 0, 1),
    "-z": Vector3(0, 0, -1),
}


class MirrorHandle:
    """A live mirror preview with cleanup and refresh."""

    def __init__(
        self,
        scanner: Scanner,
        area_name: str,
        container: SceneNode,
        options: MirrorOptions,
        model: Model,
        config: dict[str, Any],
    ) -> None:
        self.scanner = scanner
        self.area_name = area_name
        self.container = container
        self.options = options
        self.model = model
        self.config = config

    def cleanup(self) -> None:
        """Remove the preview from the scene."""
        if not self.model.destroyed:
            self.model.destroy()

    def refresh(self) -> MirrorHandle | None:
        """Rescan the original and rebuild the preview in place."""
        fresh = mirror_area(self.scanner, self.area_name, self.container, self.options)
        if fresh is not None:
            self.model, self.config = fresh.model, fresh.config
        return fresh


def mirror_corner(area: Part, offset: str, gap: float) -> Vector3:
    """Minimum corner of the preview placed beside ``area`` on the ``offset`` side."""
    axis = _OFFSET_AXES.get(offset.strip().lower())
    if axis is None:
        logger.warning("Invalid mirror offset %r, using 'x'", offset)
        axis = _OFFSET_AXES["x"]
    size = area.size
    corner = area.position - size / 2
    shift = Vector3(axis.x * (size.x + gap), 0.0, axis.z * (size.z + gap))
    return corner + shift


def mirror_area(
    scanner: Scanner,
    area_name: str,
    container: SceneNode,
    options: MirrorOptions | dict[str, Any] | None = None,
) -> MirrorHandle | None:
    """Scan ``area_name`` and build the result beside it as ``<name>_Mirror``.

    Any previous preview of the same area is replaced.  Returns None when
    the area does not exist.
    """
    opts = as_options(MirrorOptions, options)
    area = scanner.find_area(area_name, container)
    if area is None:
        logger.warning("Cannot mirror %s: area not found", area_name)
        return None
    config = scanner.scan_area(area_name, container, opts.scan)
    if config is None:
        return None

    mirror_name = area_name + MIRROR_SUFFIX
    existing = container.find_first_child(mirror_name)
    if existing is not None:
        existing.destroy()

    corner = mirror_corner(area, opts.offset, opts.gap)
    placed = dict(config, position=corner.cleaned().to_list())
    builder = MapBuilder(root=container)
    model = builder.build({"name": mirror_name, "areas": [placed]}, opts.styles)

    if opts.show_bounds:
        bounds = Part(
            name="Bounds",
            size=area.size,
            position=corner + area.size / 2,
            transparency=0.8,
            can_collide=False,
        )
        model.add_child(bounds)

    logger.info("Mirrored area %s as %s", area_name, mirror_name)
    return MirrorHandle(scanner, area_name, container, opts, model, config)
