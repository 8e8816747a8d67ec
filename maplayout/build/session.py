"""BuildSession: everything one build owns: registry, resolver, factory, diagnostics."""

from __future__ import annotations

import logging
from typing import Any

from maplayout.factory.generator import GeometryFactory
from maplayout.models.stylesheet import StyleSheet
from maplayout.references.resolver import ReferenceResolver
from maplayout.registry import Registry
from maplayout.validation.bounds import BoundsValidator

logger = logging.getLogger(__name__)


class Diagnostic:
    """A recoverable problem noticed during a build."""

    def __init__(self, severity: str, message: str, element_id: str = "") -> None:
        self.severity = severity  # "warning" or "info"
        self.message = message
        self.element_id = element_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "message": self.message,
            "element_id": self.element_id,
        }


class BuildSession:
    """State scoped to exactly one build invocation.

    The orchestrator creates one per build and passes it down; the resolver
    and factory only read the registry, the orchestrator is its sole writer.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        styles: StyleSheet | None = None,
        scale: float = 1.0,
        strict_cycles: bool = True,
    ) -> None:
        self.registry = registry if registry is not None else Registry()
        self.styles = styles
        self.scale = scale
        self.strict_cycles = strict_cycles
        self.diagnostics: list[Diagnostic] = []
        self.resolver = ReferenceResolver(self.registry)
        self.factory = GeometryFactory(warn=self.warn)
        self.validator = BoundsValidator()

    def warn(self, message: str, element_id: str | None = None) -> None:
        logger.warning("%s (%s)", message, element_id or "map")
        self.diagnostics.append(Diagnostic("warning", message, element_id or ""))

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]
