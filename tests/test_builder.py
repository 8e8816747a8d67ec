"""Tests for the build orchestrator: ordering, regions, scale and failure handling."""

from __future__ import annotations

import pytest

from maplayout.build import MapBuilder, dependency_order
from maplayout.errors import (
    BoundsViolationError,
    DependencyCycleError,
    DuplicateIdentifierError,
    MapLayoutError,
    MissingBoundsError,
    ReferenceResolutionError,
)
from maplayout.geometry.vector import Vector3
from maplayout.models.definition import ElementDefinition
from maplayout.scene.graph import Model


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_builder(**kwargs) -> MapBuilder:
    return MapBuilder(root=Model(name="Workspace"), **kwargs)


def _make_building() -> dict:
    return {
        "name": "Campus",
        "areas": [{
            "id": "building1",
            "bounds": [100, 20, 100],
            "areas": [{
                "id": "hall1",
                "position": [10, 0, 10],
                "bounds": [40, 10, 40],
                "walls": [{"id": "north", "from": [0, 0], "to": [40, 0]}],
            }],
        }],
    }


def _position(builder: MapBuilder, selector: str) -> list[float]:
    return list(builder.registry.get_node(selector).position)


# ---------------------------------------------------------------------------
# Elements and references
# ---------------------------------------------------------------------------

class TestElements:
    def test_reference_to_earlier_element(self):
        builder = _make_builder()
        model = builder.build({
            "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}],
            "platforms": [{"id": "p", "position": "#w:end + {0, 2}"}],
        })
        assert model.name == "Map"
        assert model.parent is builder.root
        assert _position(builder, "#p") == [10, 0, 2]
        assert [c.name for c in model.get_children()] == ["w", "p"]

    def test_dependency_order_builds_referenced_first(self):
        builder = _make_builder()
        model = builder.build({"platforms": [
            {"id": "C", "position": "#B:top"},
            {"id": "B", "position": "#A:top"},
            {"id": "A", "position": [0, 0, 0]},
        ]})
        assert [c.name for c in model.get_children()] == ["A", "B", "C"]
        assert _position(builder, "#C") == [0, 1, 0]

    def test_references_across_collections(self):
        builder = _make_builder()
        builder.build({
            "walls": [{"id": "w", "from": "#p:top", "to": "#p:top + {10, 0}"}],
            "platforms": [{"id": "p", "position": [0, 0, 0], "size": [2, 2, 2]}],
        })
        geometry = builder.registry.get_geometry("#w")
        assert geometry.start == Vector3(0, 1, 0)
        assert geometry.end == Vector3(10, 1, 0)
        assert _position(builder, "#w") == [5, 6, 0]

    def test_wall_from_length_and_angle(self):
        builder = _make_builder()
        builder.build({"walls": [
            {"id": "a", "from": [0, 0], "length": 5, "direction": "+z"},
            {"id": "b", "from": "#a:end", "length": 4, "angle": 180},
        ]})
        assert builder.registry.get_geometry("#a").end == Vector3(0, 0, 5)
        assert builder.registry.get_geometry("#b").end == Vector3(-4, 0, 5)

    def test_along_and_surface(self):
        builder = _make_builder()
        builder.build({
            "walls": [{"id": "w", "from": [0, 0], "to": [20, 0], "thickness": 2}],
            "platforms": [{"id": "shelf", "position": {"along": "#w", "at": "50%", "surface": "+z"}}],
        })
        assert _position(builder, "#shelf") == [10, 0, 1]

    def test_anchor_offsets_literal_position(self):
        builder = _make_builder()
        builder.build({
            "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}],
            "platforms": [{"id": "sign", "anchor": "#w:end", "position": [0, 3, 1]}],
        })
        assert _position(builder, "#sign") == [10, 3, 1]

    def test_anchor_without_position_sits_on_anchor(self):
        builder = _make_builder()
        builder.build({
            "platforms": [{"id": "base", "position": [5, 0, 5]}],
            "spheres": [{"id": "ball", "anchor": {"target": "#base:top", "offset": [0, 2, 0]}}],
        })
        assert _position(builder, "#ball") == [5, 2.5, 5]

    def test_weld_requires_built_target(self):
        builder = _make_builder()
        builder.build({"platforms": [
            {"id": "a", "position": [0, 0, 0]},
            {"id": "b", "position": [4, 0, 0], "weld": "a"},
        ]})
        assert "b" in builder.registry
        with pytest.raises(ReferenceResolutionError, match="weld"):
            _make_builder().build({"platforms": [{"id": "b", "position": [0, 0, 0], "weld": "#ghost"}]})

    def test_styles_apply(self):
        builder = _make_builder()
        builder.build(
            {"walls": [{"id": "w", "from": [0, 0], "to": [10, 0], "class": "brick"}]},
            styles={
                "types": {"wall": {"height": 6}},
                "classes": {"brick": {"material": "Brick", "color": [1, 0, 0]}},
            },
        )
        part = builder.registry.get_node("#w")
        assert part.material == "Brick"
        assert part.color == (255, 0, 0)
        assert part.size.y == 6

    def test_unknown_kind_warns_and_continues(self):
        builder = _make_builder()
        builder.build({
            "elements": [{"kind": "staircase", "id": "s"}],
            "platforms": [{"id": "p", "position": [0, 0, 0]}],
        })
        assert "s" not in builder.registry
        assert "p" in builder.registry
        assert any("staircase" in d.message for d in builder.session.warnings)

    def test_elements_default_kind_is_platform(self):
        builder = _make_builder()
        builder.build({"elements": [{"id": "x", "position": [0, 0, 0]}]})
        assert builder.registry.get_geometry("#x").kind == "platform"

    def test_signed_axis_point_on_reference(self):
        builder = _make_builder()
        builder.build({"platforms": [
            {"id": "crate", "position": [5, 2, 5], "size": [4, 4, 4]},
            {"id": "lid", "position": "#crate:+x"},
            {"id": "rear", "position": "#crate:-z + {0, 1}"},
        ]})
        assert _position(builder, "#lid") == [7, 2, 5]
        assert _position(builder, "#rear") == [5, 2, 4]

    def test_shared_class_reference_is_not_a_cycle(self):
        builder = _make_builder()
        builder.build({"platforms": [
            {"id": "a", "class": "post", "position": [0, 0, 0]},
            {"id": "b", "class": "post", "position": ".post:top"},
        ]})
        assert _position(builder, "#b") == [0, 0.5, 0]
        assert not any("Circular" in d.message for d in builder.session.warnings)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_unresolvable_reference_attaches_nothing(self):
        builder = _make_builder()
        with pytest.raises(ReferenceResolutionError, match="ghost"):
            builder.build({"platforms": [{"id": "p", "position": "#ghost:top"}]})
        assert builder.root.get_children() == []

    def test_malformed_literal(self):
        with pytest.raises(ReferenceResolutionError, match="expected"):
            _make_builder().build({"platforms": [{"id": "p", "position": [1, 2, 3, 4]}]})

    def test_duplicate_ids(self):
        with pytest.raises(DuplicateIdentifierError):
            _make_builder().build({"platforms": [
                {"id": "p", "position": [0, 0, 0]},
                {"id": "p", "position": [5, 0, 0]},
            ]})

    def test_cycle_strict(self):
        definition = {"walls": [
            {"id": "a", "from": "#b:end", "to": [0, 0]},
            {"id": "b", "from": "#a:end", "to": [5, 0]},
        ]}
        with pytest.raises(DependencyCycleError) as exc_info:
            _make_builder().build(definition)
        assert exc_info.value.ids == ["a", "b"]

    def test_cycle_lenient_fails_at_resolution(self):
        builder = _make_builder(strict_cycles=False)
        with pytest.raises(ReferenceResolutionError):
            builder.build({"walls": [
                {"id": "a", "from": "#b:end", "to": [0, 0]},
                {"id": "b", "from": "#a:end", "to": [5, 0]},
            ]})
        assert any("Circular" in d.message for d in builder.session.warnings)

    def test_missing_bounds(self):
        with pytest.raises(MissingBoundsError, match="must have 'bounds' defined"):
            _make_builder().build({"areas": [{"id": "room"}]})

    def test_bounds_violation_gates_build(self):
        builder = _make_builder()
        with pytest.raises(BoundsViolationError) as exc_info:
            builder.build({"areas": [{
                "id": "room",
                "bounds": [20, 10, 20],
                "walls": [
                    {"id": "a", "from": [0, 0], "to": [25, 0]},
                    {"id": "b", "from": [0, 0], "to": [0, 30]},
                ],
            }]})
        assert len(exc_info.value.result.errors) == 2
        assert "area 'room'" in str(exc_info.value)
        assert builder.root.get_children() == []

    def test_add_element_before_build(self):
        with pytest.raises(MapLayoutError):
            _make_builder().add_element({"kind": "platform", "position": [0, 0, 0]})


# ---------------------------------------------------------------------------
# Regions
# ---------------------------------------------------------------------------

class TestRegions:
    def test_namespaced_ids(self):
        builder = _make_builder()
        builder.build(_make_building())
        assert "building1" in builder.registry
        assert "building1/hall1" in builder.registry
        assert "building1/hall1/north" in builder.registry
        part = builder.registry.get_node("#building1/hall1/north")
        assert part.get_attribute("layout_id") == "building1/hall1/north"
        geometry = builder.registry.get_geometry("#building1/hall1/north")
        assert geometry.start == Vector3(10, 0, 10)
        assert geometry.end == Vector3(50, 0, 10)

    def test_region_models_carry_annotations(self):
        builder = _make_builder()
        model = builder.build(_make_building())
        building = model.find_first_child("building1")
        hall = building.find_first_child("hall1")
        assert building.get_attribute("layout_area") is True
        assert hall.get_attribute("layout_id") == "building1/hall1"
        assert hall.get_attribute("layout_bounds") == [40, 10, 40]
        assert hall.get_attribute("layout_origin") == "corner"
        assert hall.get_attribute("layout_corner") == [10, 0, 10]

    def test_same_local_id_in_two_regions(self):
        room = {"bounds": [10, 10, 10], "platforms": [{"id": "door", "position": [5, 0.5, 5]}]}
        builder = _make_builder()
        builder.build({"areas": [
            {"id": "a", **room},
            {"id": "b", "position": [20, 0, 0], **room},
        ]})
        assert _position(builder, "#a/door") == [5, 0.5, 5]
        assert _position(builder, "#b/door") == [25, 0.5, 5]

    def test_short_ids_resolve_inside_region(self):
        builder = _make_builder()
        builder.build({
            "platforms": [{"id": "door", "position": [100, 0, 100]}],
            "areas": [{
                "id": "room",
                "position": [20, 0, 0],
                "bounds": [10, 10, 10],
                "platforms": [
                    {"id": "door", "position": [5, 0.5, 5]},
                    {"id": "mat", "position": "#door:top"},
                ],
            }],
        })
        assert _position(builder, "#room/mat") == [25, 1, 5]

    def test_later_region_references_earlier_by_qualified_id(self):
        builder = _make_builder()
        builder.build({"areas": [
            {"id": "a", "bounds": [10, 10, 10], "walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}]},
            {
                "id": "b",
                "position": [0, 0, 20],
                "bounds": [10, 10, 10],
                "platforms": [{"id": "p", "position": "#a/w:end"}],
            },
        ]})
        assert _position(builder, "#b/p") == [10, 0, 0]

    def test_center_origin(self):
        builder = _make_builder()
        builder.build({"areas": [{
            "id": "room",
            "origin": "center",
            "position": [0, 0, 0],
            "bounds": [20, 10, 20],
            "platforms": [{"id": "p", "position": [0, 0, 0]}],
        }]})
        assert _position(builder, "#room/p") == [10, 5, 10]

    def test_floor_center_origin_and_default_floor(self):
        builder = _make_builder()
        builder.build({"areas": [{
            "id": "room",
            "origin": "floor-center",
            "position": [0, 1, 0],
            "bounds": [20, 10, 20],
            "floors": [{"id": "f", "size": [20, 20]}],
        }]})
        assert _position(builder, "#room/f") == [10, 0.5, 10]

    def test_region_positioned_by_reference(self):
        builder = _make_builder()
        builder.build({
            "walls": [{"id": "w", "from": [0, 0], "to": [30, 0]}],
            "areas": [{"id": "annex", "position": "#w:end", "bounds": [10, 10, 10]}],
        })
        annex = builder.registry.get_node("#annex")
        assert annex.get_attribute("layout_corner") == [30, 0, 0]

    def test_region_anchor_with_surface(self):
        builder = _make_builder()
        builder.build({
            "walls": [{"id": "w", "from": [0, 0], "to": [30, 0]}],
            "areas": [{"id": "annex", "anchor": "#w", "surface": "end", "position": [0, 0, 5], "bounds": [10, 10, 10]}],
        })
        assert builder.registry.get_node("#annex").get_attribute("layout_corner") == [30, 0, 5]

    def test_region_anchor_with_signed_axis_surface(self):
        builder = _make_builder()
        builder.build({
            "platforms": [{"id": "crate", "position": [5, 2, 5], "size": [4, 4, 4]}],
            "areas": [{"id": "lean", "anchor": "#crate", "surface": "+x", "bounds": [10, 10, 10]}],
        })
        assert builder.registry.get_node("#lean").get_attribute("layout_corner") == [7, 2, 5]

    def test_qualified_sibling_reference_is_built_first(self):
        builder = _make_builder()
        builder.build({"areas": [{
            "id": "r",
            "position": [20, 0, 0],
            "bounds": [10, 10, 10],
            "platforms": [
                {"id": "a", "position": "#r/b:top"},
                {"id": "b", "position": [5, 1, 5]},
            ],
        }]})
        assert _position(builder, "#r/a") == [25, 1.5, 5]

    def test_region_geometry_supports_point_names(self):
        builder = _make_builder()
        builder.build({"areas": [{"id": "room", "position": [10, 0, 0], "bounds": [10, 4, 10]}]})
        assert builder.registry.get_point("#room", "top") == Vector3(15, 4, 5)

    def test_validator_warnings_become_diagnostics(self):
        builder = _make_builder()
        builder.build({"areas": [{
            "id": "shed",
            "bounds": [10, 10, 10],
            "elements": [{"kind": "staircase", "id": "s"}],
        }]})
        unvalidated = [d for d in builder.session.warnings if "was not validated" in d.message]
        assert len(unvalidated) == 1
        assert "staircase" in unvalidated[0].message
        assert unvalidated[0].element_id == "shed"

    def test_nested_region_violation_reported_from_top(self):
        definition = _make_building()
        definition["areas"][0]["areas"][0]["walls"][0]["to"] = [45, 0]
        with pytest.raises(BoundsViolationError, match="hall1/north"):
            _make_builder().build(definition)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TestTemplates:
    def test_instances_of_shared_template(self):
        builder = _make_builder()
        builder.templates.define("room", {
            "bounds": [20, 10, 20],
            "walls": [{"id": "north", "from": [0, 0], "to": [20, 0]}],
        })
        builder.build({"areas": [
            {"template": "room", "id": "r1", "position": [0, 0, 0]},
            {"template": "room", "id": "r2", "position": [30, 0, 0]},
        ]})
        assert builder.registry.get_geometry("#r1/north").start == Vector3(0, 0, 0)
        assert builder.registry.get_geometry("#r2/north").start == Vector3(30, 0, 0)

    def test_inline_templates(self):
        builder = _make_builder()
        builder.build({
            "templates": {"kiosk": {"bounds": [4, 4, 4], "platforms": [{"id": "counter", "position": [2, 0.5, 2]}]}},
            "areas": [{"template": "kiosk", "id": "k1", "position": [8, 0, 8]}],
        })
        assert builder.templates.exists("kiosk")
        assert _position(builder, "#k1/counter") == [10, 0.5, 10]

    def test_nested_template_instance(self):
        builder = _make_builder()
        builder.templates.define("closet", {"bounds": [4, 4, 4], "platforms": [{"id": "shelf", "position": [2, 2, 2]}]})
        builder.build({"areas": [{
            "id": "house",
            "bounds": [20, 10, 20],
            "areas": [{"template": "closet", "id": "c", "position": [10, 0, 10]}],
        }]})
        assert _position(builder, "#house/c/shelf") == [12, 2, 12]


# ---------------------------------------------------------------------------
# Scale and units
# ---------------------------------------------------------------------------

class TestScale:
    def test_map_scale(self):
        builder = _make_builder()
        model = builder.build({
            "scale": "4:1",
            "walls": [{"id": "w", "from": [0, 0], "to": [5, 0], "height": 2}],
        })
        geometry = builder.registry.get_geometry("#w")
        assert geometry.end == Vector3(20, 0, 0)
        assert geometry.height == 8
        assert model.get_attribute("layout_scale") == 4
        assert builder.registry.get_node("#w").get_attribute("layout_scale") == 4

    def test_element_scale_override(self):
        builder = _make_builder()
        builder.build({"scale": 4, "platforms": [{"id": "p", "position": [1, 0, 1], "scale": 1}]})
        assert _position(builder, "#p") == [1, 0, 1]

    def test_references_are_not_rescaled(self):
        builder = _make_builder()
        builder.build({
            "scale": 2,
            "walls": [{"id": "w", "from": [0, 0], "to": [5, 0]}],
            "platforms": [{"id": "p", "position": "#w:end + {0, 1}"}],
        })
        assert _position(builder, "#p") == [10, 0, 1]

    def test_map_scale_places_regions_but_not_interiors(self):
        builder = _make_builder()
        builder.build({
            "scale": 2,
            "areas": [{
                "id": "room",
                "position": [5, 0, 0],
                "bounds": [10, 5, 10],
                "platforms": [{"id": "p", "position": [3, 0.5, 3]}],
            }],
        })
        room = builder.registry.get_node("#room")
        assert room.get_attribute("layout_corner") == [10, 0, 0]
        assert room.get_attribute("layout_bounds") == [20, 10, 20]
        assert _position(builder, "#room/p") == [13, 0.5, 3]

    def test_region_own_scale(self):
        builder = _make_builder()
        builder.build({"areas": [{
            "id": "room",
            "scale": 2,
            "bounds": [20, 10, 20],
            "walls": [{"id": "w", "from": [0, 0], "to": [5, 0]}],
        }]})
        assert builder.registry.get_geometry("#room/w").end == Vector3(10, 0, 0)

    def test_invalid_scale_warns(self):
        builder = _make_builder()
        builder.build({"scale": "abc", "platforms": [{"id": "p", "position": [1, 0, 1]}]})
        assert builder.get_scale() == 1
        assert any("Invalid scale" in d.message for d in builder.session.warnings)

    def test_unit_conversion(self):
        builder = _make_builder()
        assert builder.get_scale() == 1
        builder.build({"scale": "4:1"})
        assert builder.to_units(5) == 20
        assert builder.from_units([20, 8]) == [5, 2]
        assert MapBuilder.parse_scale("1:2") == 0.5


# ---------------------------------------------------------------------------
# Rebuilds and incremental additions
# ---------------------------------------------------------------------------

class TestRebuild:
    def test_builds_are_independent(self):
        builder = _make_builder()
        definition = {"platforms": [{"id": "p", "position": [1, 0, 1]}]}
        first = builder.build(definition)
        second = builder.build(definition)
        assert len(builder.registry) == 1
        assert [c.position for c in first.get_children()] == [c.position for c in second.get_children()]

    def test_rebuild_replaces_previous_model(self):
        builder = _make_builder()
        definition = {"name": "Level", "platforms": [{"id": "p", "position": [1, 0, 1]}]}
        old = builder.build(definition)
        new = builder.rebuild(definition)
        assert old.destroyed
        assert builder.root.get_children() == [new]

    def test_add_element(self):
        builder = _make_builder()
        model = builder.build({"walls": [{"id": "w", "from": [0, 0], "to": [10, 0]}]})
        part = builder.add_element({"kind": "platform", "id": "extra", "position": "#w:end"})
        assert part.parent is model
        assert builder.registry.get_node("#extra") is part
        assert list(part.position) == [10, 0, 0]

    def test_validate_area(self):
        builder = _make_builder()
        result = builder.validate_area({"id": "shed", "bounds": [10, 8, 10], "walls": [{"from": [0, 0], "to": [12, 0], "height": 8}]})
        assert not result.is_valid
        assert result.errors[0].direction == "exceeds maximum"
        missing = builder.validate_area({"id": "shed"})
        assert missing.errors[0].problem == "Missing bounds definition"


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestOrdering:
    def _elements(self, *items) -> list[ElementDefinition]:
        return [ElementDefinition.model_validate(item) for item in items]

    def test_authored_order_without_references(self):
        elements = self._elements({"id": "a"}, {"id": "b"}, {"id": "c"})
        assert dependency_order(elements) == [0, 1, 2]

    def test_class_dependencies(self):
        elements = self._elements(
            {"id": "roof", "position": ".pillar:top"},
            {"id": "p1", "class": "pillar"},
            {"id": "p2", "class": "pillar"},
        )
        assert dependency_order(elements) == [1, 2, 0]

    def test_external_references_are_not_edges(self):
        elements = self._elements({"id": "a", "position": "#elsewhere"}, {"id": "b"})
        assert dependency_order(elements) == [0, 1]

    def test_lenient_cycle_appends_in_authored_order(self):
        warnings: list[str] = []
        elements = self._elements(
            {"id": "a", "position": "#b"},
            {"id": "free"},
            {"id": "b", "position": "#a"},
        )
        assert dependency_order(elements, strict=False, warn=warnings.append) == [1, 0, 2]
        assert warnings

    def test_shared_class_has_no_self_edge(self):
        elements = self._elements(
            {"id": "a", "class": "post"},
            {"id": "b", "class": "post", "position": ".post:top"},
        )
        assert dependency_order(elements) == [0, 1]

    def test_qualified_ids_within_namespace(self):
        elements = self._elements(
            {"id": "a", "position": "#r/b:top"},
            {"id": "c", "position": "#outer/r/b"},
            {"id": "b"},
        )
        assert dependency_order(elements, namespace="outer/r") == [2, 0, 1]
        assert dependency_order(elements) == [0, 1, 2]
