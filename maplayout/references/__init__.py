"""Reference parsing and resolution."""

from maplayout.references.resolver import ReferenceResolver
from maplayout.references.syntax import (
    AlongRef,
    LiteralRef,
    PointRef,
    Reference,
    get_dependencies,
    is_reference,
    parse_reference,
)

__all__ = [
    "AlongRef",
    "LiteralRef",
    "PointRef",
    "Reference",
    "ReferenceResolver",
    "get_dependencies",
    "is_reference",
    "parse_reference",
]
