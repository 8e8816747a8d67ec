"""ValidationResult model and human-readable bounds reports."""

from __future__ import annotations

import json
from typing import Any


class BoundsViolation:
    """A single element (or region) that leaves its container's volume."""

    def __init__(
        self,
        element_kind: str,
        element_id: str,
        problem: str,
        axis: str | None = None,
        direction: str | None = None,
        value: float | None = None,
        valid_range: tuple[float, float] | None = None,
        suggestion: str = "",
    ) -> None:
        self.element_kind = element_kind
        self.element_id = element_id
        self.problem = problem
        self.axis = axis
        self.direction = direction  # "below minimum" or "exceeds maximum"
        self.value = value
        self.valid_range = valid_range
        self.suggestion = suggestion

    @property
    def message(self) -> str:
        return f"{self.element_kind} '{self.element_id}': {self.problem}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_kind": self.element_kind,
            "element_id": self.element_id,
            "problem": self.problem,
            "axis": self.axis,
            "direction": self.direction,
            "value": self.value,
            "valid_range": list(self.valid_range) if self.valid_range else None,
            "suggestion": self.suggestion,
        }


def _num(value: float) -> str:
    return f"{value:g}"


class ValidationResult:
    """All violations found in one region (and, merged in, its nested regions)."""

    def __init__(self, area_id: str = "", errors: list[BoundsViolation] | None = None) -> None:
        self.area_id = area_id
        self.errors: list[BoundsViolation] = errors or []
        self.warnings: list[str] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, violation: BoundsViolation) -> None:
        self.errors.append(violation)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: ValidationResult) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def format(self) -> str:
        """Plain-text report used as the message of BoundsViolationError."""
        if self.is_valid:
            return f"Area '{self.area_id}' passed bounds validation"

        lines = [
            f"BOUNDS VALIDATION FAILED for area '{self.area_id}'",
            f"Found {len(self.errors)} error(s):",
            "",
        ]
        for number, error in enumerate(self.errors, start=1):
            lines.append(f"  [{number}] Element: {error.element_kind} '{error.element_id}'")
            lines.append(f"      Problem: {error.problem}")
            if error.value is not None:
                lines.append(f"      Value:   {_num(error.value)}")
            if error.valid_range is not None:
                low, high = error.valid_range
                lines.append(f"      Bounds:  [{_num(low)}, {_num(high)}]")
            if error.suggestion:
                lines.append(f"      Fix:     {error.suggestion}")
            lines.append("")
        for warning in self.warnings:
            lines.append(f"  Warning: {warning}")
        return "\n".join(lines).rstrip()

    def to_markdown(self) -> str:
        lines: list[str] = []

        lines.append(f"# Bounds Report - {self.area_id or 'Unknown'}")
        lines.append("")
        lines.append(f"**Status:** {'PASSED' if self.is_valid else 'FAILED'}")
        lines.append(f"**Summary:** {len(self.errors)} errors, {len(self.warnings)} warnings")
        lines.append("")

        if self.errors:
            lines.append("## Violations")
            lines.append("")
            lines.append("| Element | Problem | Value | Bounds | Suggestion |")
            lines.append("|---------|---------|-------|--------|------------|")
            for error in self.errors:
                value = _num(error.value) if error.value is not None else ""
                bounds = (
                    f"[{_num(error.valid_range[0])}, {_num(error.valid_range[1])}]"
                    if error.valid_range else ""
                )
                sug = error.suggestion.replace("|", "\\|")
                lines.append(
                    f"| {error.element_kind} '{error.element_id}' | {error.problem} | {value} | {bounds} | {sug} |"
                )
            lines.append("")

        if self.warnings:
            lines.append("## Warnings")
            lines.append("")
            for warning in self.warnings:
                lines.append(f"- {warning}")
            lines.append("")

        if self.is_valid and not self.warnings:
            lines.append("All geometry fits inside the area bounds.")
            lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_dict(self) -> dict[str, Any]:
        return {
            "area_id": self.area_id,
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }
