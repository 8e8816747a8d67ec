"""Options records for the scanner, the code generator and mirror previews."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from maplayout import config
from maplayout.models.stylesheet import StyleSheet


class ScanOptions(BaseModel):
    recursive: bool = True
    """Scan all descendants instead of direct children only."""

    infer_types: bool = True
    """Infer kinds from proportions; otherwise everything is a platform."""

    snap: bool = True
    snap_threshold: float = config.SNAP_THRESHOLD
    relative: bool = True
    """Express parts nested under other parts relative to their parent."""


class CodeOptions(BaseModel):
    var_name: str = config.DEFAULT_VAR_NAME
    include_header: bool = True
    include_styles: bool = False
    """Append an empty style sheet template after the definition."""

    precision: int = config.CODE_PRECISION
    source_name: str | None = None


class MirrorOptions(BaseModel):
    offset: str = "x"
    """Side of the original to place the preview on: x, -x, z or -z."""

    gap: float = config.MIRROR_DEFAULT_GAP
    styles: StyleSheet | None = None
    show_bounds: bool = True
    scan: ScanOptions = Field(default_factory=ScanOptions)


def as_options(model: type[BaseModel], options: BaseModel | dict[str, Any] | None) -> Any:
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    return model.model_validate(options)
