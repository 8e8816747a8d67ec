"""Generated source: deterministic Python text for scanned or resolved definitions.

Numbers are rounded to a fixed precision; short numeric sequences print on
one line and everything else prints one item per line.  Keys are sorted with
``id`` and ``class`` first so the output diffs cleanly.
"""

from __future__ import annotations

import ast
from typing import Any

from pydantic import BaseModel

from maplayout.config import DEFAULT_VAR_NAME, INLINE_SEQUENCE_MAX
from maplayout.geometry.vector import Vector3, clean, is_number
from maplayout.models.options import CodeOptions, as_options

_INDENT = "    "
_LEADING_KEYS = {"id": 0, "class": 1}

STYLE_TEMPLATE: dict[str, Any] = {
    "defaults": {},
    "types": {
        "wall": {"height": 10, "thickness": 1},
        "floor": {"thickness": 1},
    },
    "classes": {},
    "ids": {},
}


def format_number(value: float, precision: int = 2) -> str:
    rounded = clean(round(float(value), precision))
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.{precision}f}"


def _key_order(key: Any) -> tuple[int, str]:
    return (_LEADING_KEYS.get(key, 2), str(key))


def format_value(value: Any, depth: int = 0, precision: int = 2) -> str:
    """Render one value as Python literal source."""
    if value is None or isinstance(value, bool):
        return repr(value)
    if is_number(value):
        return format_number(value, precision)
    if isinstance(value, str):
        return repr(value)
    if isinstance(value, Vector3):
        value = value.to_list()

    pad = _INDENT * depth
    inner = _INDENT * (depth + 1)

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if len(value) <= INLINE_SEQUENCE_MAX and all(is_number(v) and not isinstance(v, bool) for v in value):
            return "[" + ", ".join(format_number(v, precision) for v in value) + "]"
        items = [f"{inner}{format_value(v, depth + 1, precision)}," for v in value]
        return "[\n" + "\n".join(items) + f"\n{pad}]"

    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{inner}{key!r}: {format_value(value[key], depth + 1, precision)},"
            for key in sorted(value, key=_key_order)
        ]
        return "{\n" + "\n".join(items) + f"\n{pad}}}"

    raise TypeError(f"Cannot serialise {type(value).__name__} into generated source")


def generate_code(
    definition: BaseModel | dict[str, Any],
    options: CodeOptions | dict[str, Any] | None = None,
) -> str:
    """Return Python source assigning ``definition`` to ``options.var_name``."""
    opts = as_options(CodeOptions, options)
    data = definition.to_source() if isinstance(definition, BaseModel) else definition

    lines: list[str] = []
    if opts.include_header:
        lines.append("# Generated by the maplayout scanner")
        if opts.source_name:
            lines.append(f"# Source: {opts.source_name}")
        lines.append("# Review ids, classes and structure before committing")
        lines.append("")
    lines.append(f"{opts.var_name} = {format_value(data, 0, opts.precision)}")
    if opts.include_styles:
        lines.append("")
        lines.append(f"styles = {format_value(STYLE_TEMPLATE, 0, opts.precision)}")
    return "\n".join(lines) + "\n"


def load_source(text: str, var_name: str | None = DEFAULT_VAR_NAME) -> dict[str, Any]:
    """Read a definition back out of generated source without executing it.

    Returns the literal assigned to ``var_name`` (or the first assignment
    when ``var_name`` is None).
    """
    tree = ast.parse(text)
    for node in tree.body:
        if not isinstance(node, ast.Assign):
            continue
        names = [t.id for t in node.targets if isinstance(t, ast.Name)]
        if var_name is None or var_name in names:
            value = ast.literal_eval(node.value)
            if not isinstance(value, dict):
                raise ValueError(f"'{names[0]}' is not a definition dict")
            return value
    raise ValueError(f"No assignment to '{var_name}' found in source")
