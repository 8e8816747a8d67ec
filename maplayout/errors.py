"""Exception hierarchy for the layout compiler."""

from __future__ import annotations

from typing import Any


class MapLayoutError(Exception):
    """Base class for every error raised by the compiler."""


class ReferenceResolutionError(MapLayoutError):
    """A reference could not be resolved while building an element."""

    def __init__(self, element_id: str, field: str, value: Any, reason: str = "") -> None:
        self.element_id = element_id
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Could not resolve {field} {value!r} on element '{element_id}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class BoundsViolationError(MapLayoutError):
    """Raised once per region when any contained geometry exceeds its bounds."""

    def __init__(self, result: Any) -> None:
        self.result = result
        super().__init__(result.format())


class MissingBoundsError(MapLayoutError):
    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"Area '{area_id}' must have 'bounds' defined (or use a template)")


class UnknownTemplateError(MapLayoutError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown area template '{name}'")


class TemplateError(MapLayoutError, ValueError):
    """An area template or template instance is malformed."""


class DuplicateIdentifierError(MapLayoutError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Identifier '{identifier}' is already registered in this build")


class DependencyCycleError(MapLayoutError):
    """Elements reference each other in a cycle and cannot be ordered."""

    def __init__(self, ids: list[str]) -> None:
        self.ids = ids
        super().__init__(f"Circular references between elements: {', '.join(ids)}")
