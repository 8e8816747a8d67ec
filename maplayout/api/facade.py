"""MapLayout: the single entry point for building and scanning maps.

Usage::

    from maplayout import MapLayout

    layout = MapLayout()
    layout.define_area("room", {"bounds": [20, 10, 20], "walls": [...]})
    layout.build("maps/level1.json")
    layout.get("#hall1/north")
    layout.get_instance("#hall1/north")
    layout.validate_area({"id": "shed", "bounds": [10, 8, 10], ...})
    layout.scan(container)
    layout.list_areas(container)
    layout.scan_area("Kitchen", container)
    preview = layout.mirror_area("Kitchen", container)
    preview.cleanup()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from maplayout.build.builder import MapBuilder
from maplayout.build.session import Diagnostic
from maplayout.build.templates import AreaTemplates
from maplayout.geometry.records import GeometryRecord
from maplayout.loader import load_definition
from maplayout.models.definition import AreaDefinition, MapDefinition, as_map_definition
from maplayout.models.options import CodeOptions, MirrorOptions, ScanOptions, as_options
from maplayout.models.stylesheet import StyleSheet
from maplayout.scanner.mirror import MirrorHandle
from maplayout.scanner.scanner import Scanner
from maplayout.scene.graph import Model, SceneNode
from maplayout.settings import CompilerSettings, load_settings
from maplayout.validation.report import ValidationResult

logger = logging.getLogger(__name__)


class MapLayout:
    """The public interface for map compilation.

    Wraps one :class:`MapBuilder`, its template library and a
    :class:`Scanner`, all configured from :class:`CompilerSettings`.

    Parameters
    ----------
    root:
        Container compiled maps attach to by default.  A fresh
        ``Workspace`` model when omitted.
    settings:
        Explicit settings.  Loaded from defaults, profile, the project's
        ``.maplayout/config.json`` and the environment when omitted.
    project_root:
        Directory searched for ``.maplayout/config.json``.
    """

    def __init__(
        self,
        root: SceneNode | None = None,
        settings: CompilerSettings | None = None,
        project_root: str | Path | None = None,
    ) -> None:
        self.settings = settings if settings is not None else load_settings(project_root)
        self.root = root if root is not None else Model(name="Workspace")
        self.templates = AreaTemplates()
        self.builder = MapBuilder(self.templates, self.root, strict_cycles=self.settings.strict_cycles)
        self.scanner = Scanner(ScanOptions(snap_threshold=self.settings.snap_threshold))

    # -- building -------------------------------------------------------------

    def _definition(self, definition: MapDefinition | dict[str, Any] | str | Path) -> MapDefinition:
        if isinstance(definition, (str, Path)):
            definition = load_definition(definition)
        definition = as_map_definition(definition)
        if definition.scale is None and self.settings.default_scale not in ("", "1"):
            definition = definition.model_copy(update={"scale": self.settings.default_scale})
        return definition

    def build(
        self,
        definition: MapDefinition | dict[str, Any] | str | Path,
        styles: StyleSheet | dict[str, Any] | None = None,
        parent: SceneNode | None = None,
    ) -> Model:
        """Compile a definition (or a definition file) into the scene."""
        return self.builder.build(self._definition(definition), styles, parent)

    def rebuild(
        self,
        definition: MapDefinition | dict[str, Any] | str | Path,
        styles: StyleSheet | dict[str, Any] | None = None,
        parent: SceneNode | None = None,
    ) -> Model:
        return self.builder.rebuild(self._definition(definition), styles, parent)

    def get(self, selector: str) -> GeometryRecord | None:
        """Resolved geometry of a compiled element or region."""
        return self.builder.registry.get_geometry(selector)

    def get_instance(self, selector: str) -> SceneNode | None:
        """The scene node created for a compiled element or region."""
        return self.builder.registry.get_node(selector)

    def clear(self) -> None:
        """Destroy the last compiled map and forget its registry."""
        if self.builder.model is not None:
            self.builder.model.destroy()
            self.builder.model = None
        self.builder.registry.clear()
        self.builder.session = None

    @property
    def warnings(self) -> list[Diagnostic]:
        session = self.builder.session
        return session.warnings if session is not None else []

    # -- units ----------------------------------------------------------------

    def get_scale(self) -> float:
        return self.builder.get_scale()

    @staticmethod
    def parse_scale(value: Any) -> float:
        return MapBuilder.parse_scale(value)

    def to_units(self, value: Any) -> Any:
        return self.builder.to_units(value)

    def from_units(self, value: Any) -> Any:
        return self.builder.from_units(value)

    # -- areas ----------------------------------------------------------------

    def define_area(self, name: str, definition: AreaDefinition | dict[str, Any]) -> AreaDefinition:
        return self.templates.define(name, definition)

    def has_area(self, name: str) -> bool:
        return self.templates.exists(name)

    def list_templates(self) -> list[str]:
        return self.templates.list()

    def clear_areas(self) -> None:
        self.templates.clear()

    def validate_area(self, area: AreaDefinition | dict[str, Any], area_id: str | None = None) -> ValidationResult:
        return self.builder.validate_area(area, area_id)

    # -- scanning -------------------------------------------------------------

    def _code_options(self, options: CodeOptions | dict[str, Any] | None) -> CodeOptions:
        if options is None:
            return CodeOptions(precision=self.settings.code_precision)
        return as_options(CodeOptions, options)

    def scan(
        self,
        container: SceneNode | None = None,
        options: ScanOptions | dict[str, Any] | None = None,
        code_options: CodeOptions | dict[str, Any] | None = None,
    ) -> str:
        """Scan ``container`` (the root by default) into generated source."""
        target = container if container is not None else self.root
        return self.scanner.scan_to_code(target, options, self._code_options(code_options))

    def scan_to_table(
        self,
        container: SceneNode | None = None,
        options: ScanOptions | dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Scan ``container`` into a definition dict."""
        return self.scanner.scan(container if container is not None else self.root, options)

    def scan_area(
        self,
        area_name: str,
        container: SceneNode | None = None,
        options: ScanOptions | dict[str, Any] | None = None,
        code_options: CodeOptions | dict[str, Any] | None = None,
    ) -> str | None:
        """Scan one tagged area into generated source, or None if it is missing."""
        target = container if container is not None else self.root
        return self.scanner.scan_area_to_code(area_name, target, options, self._code_options(code_options))

    def mirror_area(
        self,
        area_name: str,
        container: SceneNode | None = None,
        options: MirrorOptions | dict[str, Any] | None = None,
    ) -> MirrorHandle | None:
        target = container if container is not None else self.root
        return self.scanner.mirror_area(area_name, target, options)

    def list_areas(self, container: SceneNode | None = None) -> list[str]:
        """Names of the tagged area parts under ``container`` (the root by default)."""
        target = container if container is not None else self.root
        return [self.scanner.area_name(part) for part in self.scanner.find_areas(target)]
