"""StyleSheet: the four cascade layers applied to every element."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StyleSheet(BaseModel):
    """Pure data; read by the style resolver, never mutated."""

    defaults: dict[str, Any] = Field(default_factory=dict)
    """Applied to every element."""

    types: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """Keyed by element kind (wall, floor, platform, ...)."""

    classes: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """Keyed by class tag, applied in the order tags appear on the element."""

    ids: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """Keyed by element id."""


def as_stylesheet(styles: StyleSheet | dict[str, Any] | None) -> StyleSheet | None:
    if styles is None or isinstance(styles, StyleSheet):
        return styles
    return StyleSheet.model_validate(styles)
