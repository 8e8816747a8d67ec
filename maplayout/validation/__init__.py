"""Bounds validation for regions."""

from maplayout.validation.bounds import BoundsValidator
from maplayout.validation.report import BoundsViolation, ValidationResult

__all__ = ["BoundsValidator", "BoundsViolation", "ValidationResult"]
