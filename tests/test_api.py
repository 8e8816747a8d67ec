"""Tests for the MapLayout facade.

Covers building from dicts and files, lookups, the area template library,
unit conversion, scanning and mirror previews through the single entry
point.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from maplayout import MapLayout
from maplayout.errors import BoundsViolationError
from maplayout.geometry.vector import Vector3
from maplayout.scene.graph import Model, Part
from maplayout.settings import CompilerSettings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_layout(**settings) -> MapLayout:
    return MapLayout(settings=CompilerSettings(**settings))


def _make_definition() -> dict:
    return {
        "name": "Level",
        "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}],
        "platforms": [{"id": "p", "position": "#w:end + {0, 2, 0}", "size": [4, 3, 4]}],
        "areas": [{
            "id": "hall",
            "position": [20, 0, 0],
            "bounds": [10, 10, 10],
            "walls": [{"id": "north", "from": [0, 0], "to": [10, 0]}],
        }],
    }


def _make_tagged_area(root: Model) -> Part:
    area = root.add_child(Part(name="Studio", size=Vector3(20, 10, 20), position=Vector3(10, 5, 10)))
    area.set_attribute("layout_tag", "area")
    area.add_child(Part(name="back", size=Vector3(18, 10, 1), position=Vector3(10, 5, 2)))
    return area


# ---------------------------------------------------------------------------
# Building and lookups
# ---------------------------------------------------------------------------


class TestBuild:
    def test_build_and_get(self):
        layout = _make_layout()
        model = layout.build(_make_definition())
        assert model.parent is layout.root
        assert layout.get("#w").length == 10
        assert layout.get("#p").position == Vector3(10, 2, 0)
        assert layout.get("#hall/north").start == Vector3(20, 0, 0)

    def test_get_instance(self):
        layout = _make_layout()
        layout.build(_make_definition())
        part = layout.get_instance("#w")
        assert isinstance(part, Part)
        assert part.get_attribute("layout_id") == "w"
        assert layout.get_instance("#hall").get_attribute("layout_area") is True
        assert layout.get_instance("#missing") is None

    def test_build_from_json_file(self, tmp_path: Path):
        path = tmp_path / "level.json"
        path.write_text(json.dumps(_make_definition()), encoding="utf-8")
        layout = _make_layout()
        model = layout.build(path)
        assert model.name == "Level"
        assert layout.get("#w") is not None

    def test_build_from_generated_source(self, tmp_path: Path):
        layout = _make_layout()
        layout.build(_make_definition())
        path = tmp_path / "level.py"
        path.write_text(layout.scan(), encoding="utf-8")

        other = _make_layout()
        other.build(str(path))
        assert other.get("#w").end == Vector3(10, 0, 0)

    def test_rebuild_replaces_model(self):
        layout = _make_layout()
        first = layout.build(_make_definition())
        second = layout.rebuild(_make_definition())
        assert first.destroyed
        assert layout.root.get_children() == [second]

    def test_clear(self):
        layout = _make_layout()
        layout.build(_make_definition())
        layout.clear()
        assert layout.root.get_children() == []
        assert layout.get("#w") is None
        assert layout.warnings == []

    def test_warnings(self):
        layout = _make_layout()
        layout.build({"walls": [{"id": "dot", "from": [1, 1], "to": [1, 1]}]})
        assert len(layout.warnings) == 1
        assert "zero length" in layout.warnings[0].message

    def test_property_warnings_are_diagnostics(self):
        layout = _make_layout()
        layout.build({"platforms": [
            {"id": "crate", "position": [0, 0, 0], "style": {"material": "Unobtainium", "color": "mauve"}},
        ]})
        messages = [d.message for d in layout.warnings]
        assert any("Unobtainium" in m for m in messages)
        assert any("mauve" in m for m in messages)
        assert {d.element_id for d in layout.warnings} == {"crate"}
        assert layout.get_instance("#crate").material == "SmoothPlastic"

    def test_failed_build_attaches_nothing(self):
        layout = _make_layout()
        definition = _make_definition()
        definition["areas"][0]["walls"][0]["to"] = [12, 0]
        with pytest.raises(BoundsViolationError):
            layout.build(definition)
        assert layout.root.get_children() == []


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:
    def test_default_scale_setting(self):
        layout = _make_layout(default_scale="2")
        layout.build({"walls": [{"id": "w", "from": [0, 0], "to": [5, 0]}]})
        assert layout.get_scale() == 2
        assert layout.get("#w").length == 10

    def test_definition_scale_wins(self):
        layout = _make_layout(default_scale="2")
        layout.build({"scale": "4:1", "walls": [{"id": "w", "from": [0, 0], "to": [5, 0]}]})
        assert layout.get_scale() == 4

    def test_conversions(self):
        layout = _make_layout()
        layout.build({"scale": 4, "walls": []})
        assert layout.to_units(2.5) == 10
        assert layout.to_units([1, 2]) == [4, 8]
        assert layout.from_units(10) == 2.5
        assert MapLayout.parse_scale("3:2") == 1.5

    def test_scale_before_build(self):
        assert _make_layout().get_scale() == 1


# ---------------------------------------------------------------------------
# Area templates and validation
# ---------------------------------------------------------------------------


class TestAreas:
    def test_template_library(self):
        layout = _make_layout()
        layout.define_area("room", {"bounds": [10, 10, 10]})
        layout.define_area("closet", {"bounds": [4, 10, 4]})
        assert layout.has_area("room")
        assert layout.list_templates() == ["closet", "room"]
        layout.clear_areas()
        assert not layout.has_area("room")

    def test_template_instances(self):
        layout = _make_layout()
        layout.define_area("room", {
            "bounds": [10, 10, 10],
            "walls": [{"id": "back", "from": [0, 10], "to": [10, 10]}],
        })
        layout.build({"areas": [
            {"id": "a", "template": "room", "position": [0, 0, 0]},
            {"id": "b", "template": "room", "position": [20, 0, 0]},
        ]})
        assert layout.get("#a/back").start == Vector3(0, 0, 10)
        assert layout.get("#b/back").start == Vector3(20, 0, 10)

    def test_validate_area(self):
        layout = _make_layout()
        result = layout.validate_area({
            "id": "shed",
            "bounds": [10, 8, 10],
            "walls": [{"id": "w", "from": [0, 0], "to": [12, 0]}],
        })
        assert not result.is_valid
        assert result.errors[0].element_id == "w"

    def test_validate_valid_area(self):
        layout = _make_layout()
        result = layout.validate_area({"bounds": [10, 8, 10], "platforms": [{"position": [5, 1, 5]}]})
        assert result.is_valid


# ---------------------------------------------------------------------------
# Scanning and mirrors
# ---------------------------------------------------------------------------


class TestScanning:
    def test_scan_root(self):
        layout = _make_layout()
        layout.build(_make_definition())
        code = layout.scan()
        assert code.startswith("# Generated by the maplayout scanner")
        assert "# Source: Workspace" in code
        assert "'id': 'w'" in code

    def test_scan_to_table(self):
        layout = _make_layout()
        model = layout.build(_make_definition())
        table = layout.scan_to_table(model)
        assert table["name"] == "Level"
        assert table["walls"][0]["id"] == "w"
        assert table["areas"][0]["id"] == "hall"

    def test_code_precision_setting(self):
        layout = _make_layout(code_precision=3)
        root = Model(name="Loose")
        root.add_child(Part(name="step", size=Vector3(4, 3, 4), position=Vector3(1.25, 1.5, 0)))
        assert "[1.250, 1.500, 0]" in layout.scan(root)

    def test_list_areas(self):
        layout = _make_layout()
        _make_tagged_area(layout.root)
        layout.define_area("room", {"bounds": [10, 10, 10]})
        shelf = Model(name="Shelf")
        layout.root.add_child(shelf)
        booth = shelf.add_child(Part(name="Part", size=Vector3(4, 4, 4), position=Vector3(2, 2, 2)))
        booth.set_attribute("layout_tag", "area")
        booth.set_attribute("layout_name", "Booth")
        assert layout.list_areas() == ["Studio", "Booth"]
        assert layout.list_areas(shelf) == ["Booth"]
        assert layout.list_areas(Model(name="Empty")) == []

    def test_scan_area(self):
        layout = _make_layout()
        _make_tagged_area(layout.root)
        code = layout.scan_area("Studio")
        assert "# Source: area Studio" in code
        assert "'id': 'back'" in code
        assert layout.scan_area("Garage") is None

    def test_snap_threshold_setting(self):
        layout = _make_layout(snap_threshold=0.1)
        area = _make_tagged_area(layout.root)
        area.add_child(Part(name="edge", size=Vector3(19, 10, 1), position=Vector3(9.75, 5, 8)))
        code = layout.scan_area("Studio")
        assert "[0.25, 8]" in code

    def test_mirror_area(self):
        layout = _make_layout()
        _make_tagged_area(layout.root)
        handle = layout.mirror_area("Studio")
        assert layout.root.find_first_child("Studio_Mirror") is handle.model
        handle.cleanup()
        assert layout.root.find_first_child("Studio_Mirror") is None
