"""maplayout: a declarative spatial-layout compiler for 3-D scenes."""

__version__ = "1.0.0"

from maplayout.api.facade import MapLayout
from maplayout.build.builder import MapBuilder
from maplayout.build.session import BuildSession, Diagnostic
from maplayout.build.templates import AreaTemplates
from maplayout.errors import (
    BoundsViolationError,
    DependencyCycleError,
    DuplicateIdentifierError,
    MapLayoutError,
    MissingBoundsError,
    ReferenceResolutionError,
    TemplateError,
    UnknownTemplateError,
)
from maplayout.loader import load_definition
from maplayout.models.definition import AreaDefinition, ElementDefinition, MapDefinition
from maplayout.models.options import CodeOptions, MirrorOptions, ScanOptions
from maplayout.models.stylesheet import StyleSheet
from maplayout.registry import Registry
from maplayout.scanner.codegen import generate_code
from maplayout.scanner.mirror import MirrorHandle
from maplayout.scanner.scanner import Scanner
from maplayout.scene.graph import Model, Part, SceneNode
from maplayout.settings import CompilerSettings, configure_logging, load_settings
from maplayout.validation.bounds import BoundsValidator
from maplayout.validation.report import ValidationResult

__all__ = [
    "__version__",
    # Facade
    "MapLayout",
    # Compiler
    "AreaTemplates",
    "BuildSession",
    "Diagnostic",
    "MapBuilder",
    "Registry",
    # Definitions
    "AreaDefinition",
    "CodeOptions",
    "ElementDefinition",
    "MapDefinition",
    "MirrorOptions",
    "ScanOptions",
    "StyleSheet",
    "load_definition",
    # Validation
    "BoundsValidator",
    "ValidationResult",
    # Scanner
    "MirrorHandle",
    "Scanner",
    "generate_code",
    # Scene
    "Model",
    "Part",
    "SceneNode",
    # Settings
    "CompilerSettings",
    "configure_logging",
    "load_settings",
    # Errors
    "BoundsViolationError",
    "DependencyCycleError",
    "DuplicateIdentifierError",
    "MapLayoutError",
    "MissingBoundsError",
    "ReferenceResolutionError",
    "TemplateError",
    "UnknownTemplateError",
]
