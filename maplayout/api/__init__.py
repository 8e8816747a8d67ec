"""Public entry point."""

from maplayout.api.facade import MapLayout

__all__ = ["MapLayout"]
