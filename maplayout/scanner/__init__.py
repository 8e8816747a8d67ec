"""Reverse compilation: scan host parts into definitions and generated source."""

from maplayout.scanner.codegen import generate_code, load_source
from maplayout.scanner.inference import infer_kind
from maplayout.scanner.mirror import MirrorHandle, mirror_area
from maplayout.scanner.scanner import Scanner
from maplayout.scanner.snapping import snap_point, snap_value

__all__ = [
    "MirrorHandle",
    "Scanner",
    "generate_code",
    "infer_kind",
    "load_source",
    "mirror_area",
    "snap_point",
    "snap_value",
]
