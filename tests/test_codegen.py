"""Tests for generated source: number formatting, layout and reading it back."""

from __future__ import annotations

import json

import pytest

from maplayout.geometry.vector import Vector3
from maplayout.loader import load_definition
from maplayout.models.definition import MapDefinition
from maplayout.scanner import generate_code, load_source
from maplayout.scanner.codegen import format_number, format_value


def _make_definition() -> dict:
    return {
        "name": "Arena",
        "walls": [{"id": "north", "class": "stone", "from": [0, 0], "to": [20, 0], "height": 12}],
        "platforms": [{"position": [5.125, 1.5, 5], "size": [4, 1, 4], "material": "Wood"}],
        "areas": [{"id": "pit", "bounds": [10, 5, 10], "position": [30, 0, 0], "origin": "corner"}],
    }


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatting:
    @pytest.mark.parametrize("value, expected", [
        (3.0, "3"),
        (10, "10"),
        (2.456, "2.46"),
        (-1.5, "-1.50"),
        (-0.001, "0"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_precision(self):
        assert format_number(1.23456, 3) == "1.235"

    def test_short_numeric_sequences_inline(self):
        assert format_value([1, 2.5, 3]) == "[1, 2.50, 3]"
        assert format_value(Vector3(1, 0, 2)) == "[1, 0, 2]"

    def test_long_sequences_multiline(self):
        text = format_value([1, 2, 3, 4, 5])
        assert text.startswith("[\n    1,")
        assert text.endswith("\n]")

    def test_mixed_sequences_multiline(self):
        assert format_value(["a", 1]) == "[\n    'a',\n    1,\n]"

    def test_dict_key_order(self):
        text = format_value({"size": [1, 1, 1], "class": "c", "anchor": "#a", "id": "x"})
        keys = [line.split(":")[0].strip() for line in text.splitlines()[1:-1]]
        assert keys == ["'id'", "'class'", "'anchor'", "'size'"]

    def test_literals(self):
        assert format_value(None) == "None"
        assert format_value(True) == "True"
        assert format_value("#w:end") == "'#w:end'"
        assert format_value({}) == "{}"
        assert format_value([]) == "[]"

    def test_unsupported_value(self):
        with pytest.raises(TypeError, match="Cannot serialise"):
            format_value(object())


# ---------------------------------------------------------------------------
# generate_code
# ---------------------------------------------------------------------------

class TestGenerateCode:
    def test_header_and_assignment(self):
        code = generate_code(_make_definition(), {"source_name": "Workspace"})
        lines = code.splitlines()
        assert lines[0] == "# Generated by the maplayout scanner"
        assert lines[1] == "# Source: Workspace"
        assert "map_definition = {" in code
        assert code.endswith("}\n")

    def test_without_header(self):
        code = generate_code(_make_definition(), {"include_header": False, "var_name": "arena"})
        assert code.startswith("arena = {")

    def test_style_template(self):
        code = generate_code(_make_definition(), {"include_styles": True})
        assert "\nstyles = {" in code
        styles = load_source(code, "styles")
        assert styles["types"]["wall"] == {"height": 10, "thickness": 1}

    def test_numbers_are_rounded(self):
        code = generate_code(_make_definition())
        assert "[5.12, 1.50, 5]" in code

    def test_deterministic(self):
        assert generate_code(_make_definition()) == generate_code(_make_definition())

    def test_from_model(self):
        definition = MapDefinition.model_validate(_make_definition())
        data = load_source(generate_code(definition))
        assert data["name"] == "Arena"
        assert data["walls"][0]["class"] == "stone"
        assert data["platforms"][0]["material"] == "Wood"
        assert data["areas"][0]["id"] == "pit"


# ---------------------------------------------------------------------------
# Reading generated source
# ---------------------------------------------------------------------------

class TestLoadSource:
    def test_reads_back_definition(self):
        definition = {"name": "Box", "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}]}
        assert load_source(generate_code(definition)) == definition

    def test_first_assignment_when_no_name(self):
        assert load_source("a = {'name': 'x'}\nb = {'name': 'y'}\n", None) == {"name": "x"}

    def test_missing_variable(self):
        with pytest.raises(ValueError, match="No assignment"):
            load_source("other = {}\n")

    def test_not_a_dict(self):
        with pytest.raises(ValueError, match="not a definition dict"):
            load_source("map_definition = [1, 2]\n")

    def test_never_executes(self):
        with pytest.raises(ValueError):
            load_source("map_definition = __import__('os').getcwd()\n")


class TestLoadDefinition:
    def test_json_file(self, tmp_path):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps(_make_definition()), encoding="utf-8")
        definition = load_definition(path)
        assert definition.name == "Arena"
        assert definition.walls[0].id == "north"
        assert definition.platforms[0].style == {"material": "Wood"}

    def test_generated_source_file(self, tmp_path):
        path = tmp_path / "arena.py"
        path.write_text(generate_code(_make_definition(), {"var_name": "layout"}), encoding="utf-8")
        definition = load_definition(str(path), var_name="layout")
        assert definition.name == "Arena"
        assert definition.areas[0].bounds == [10, 5, 10]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_definition(tmp_path / "nope.json")
