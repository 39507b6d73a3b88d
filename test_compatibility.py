"""
Tests for payload validation, legacy conversion and vertex welding.
"""

import pytest

from holeforge.compatibility import HoleConfigValidator, LegacyAdapter, weld_shared_vertices
from holeforge.engine import HoleInstance
from holeforge.geometry import CircleSurface, EllipseSurface, HoleLayout, PolygonSurface, Vertex
from holeforge.registry import SURFACES, get_surface, is_penalty_surface


def test_minimal_payload_is_valid():
    validator = HoleConfigValidator()
    data = validator.create_minimal_valid_data()

    is_valid, errors = validator.validate_payload(data)
    assert is_valid, errors


def test_validator_reports_errors():
    validator = HoleConfigValidator()
    is_valid, errors = validator.validate_payload({
        "distanceMeters": 5000,
        "holePositionX": "left",
        "shapeSeed": True,
        "waterHazard": {"position": "under", "centerX": 0, "radiusX": -2, "radiusZ": 4},
        "obstacles": [{"type": "rock", "size": "small", "x": 0, "z": 1}, "tree"],
    })

    assert not is_valid
    joined = "\n".join(errors)
    assert "distanceMeters" in joined
    assert "holePositionX must be numeric" in joined
    assert "shapeSeed" in joined
    assert "waterHazard.position" in joined
    assert "waterHazard missing field: centerZ" in joined
    assert "radiusX" in joined
    assert "obstacles[0].type" in joined
    assert "obstacles[1] must be an object" in joined


def test_validator_rejects_non_object():
    is_valid, errors = HoleConfigValidator().validate_payload([1, 2])
    assert not is_valid
    assert errors


def test_sanitize_clamps_and_fills():
    validator = HoleConfigValidator()
    data = validator.sanitize_data({
        "distanceMeters": 5000,
        "holePositionY": -3,
        "shapeSeed": "abc",
        "obstacles": [
            {"type": "tree", "size": "large", "x": 1, "z": 2},
            {"type": "rock", "size": "small", "x": 0, "z": 0},
        ],
        "waterHazard": {"position": "nowhere"},
    })

    assert data["distanceMeters"] == 1000.0
    assert data["holePositionY"] == -1.0
    assert data["greenWidth"] == 18.0
    assert data["shapeSeed"] == 0
    assert len(data["obstacles"]) == 1
    assert "waterHazard" not in data
    assert validator.validate_payload(data)[0]


def test_legacy_payload_to_config():
    adapter = LegacyAdapter()
    config = adapter.payload_to_config({
        "distanceMeters": 160,
        "greenOffsetMeters": 7.5,
        "greenWidthMeters": 20,
        "greenDepthMeters": 15,
        "holePositionX": 0.2,
        "holePositionY": -0.4,
        "shapeSeed": 0.25,
        "waterHazard": {
            "type": "ellipse",
            "center": {"x": 7.5, "z": 175},
            "radiusX": 14,
            "radiusZ": 7,
            "position": "behind",
            "surface": {"name": "Water", "color": "#4682B4", "height": 0.005},
            "fairwayAdjustments": {"approachDistance": 40, "extension": 12},
        },
    })

    assert config.green_offset == 7.5
    assert config.green_width == 20
    assert config.water_hazard.center_z == 175
    assert config.water_hazard.fairway_adjustments.extension == 12

    payload = adapter.config_to_payload(config)
    assert payload["greenOffset"] == 7.5
    assert payload["waterHazard"]["centerX"] == 7.5
    assert adapter.payload_to_config(payload) == config


def test_editor_layout():
    adapter = LegacyAdapter()
    layout = adapter.layout_from_dict({
        "background": {"vertices": [{"x": -50, "z": -20}, {"x": 50, "z": -20},
                                    {"x": 50, "z": 200}, {"x": -50, "z": 200}],
                       "surface": "OUT_OF_BOUNDS"},
        "tee": {"center": {"x": 0, "z": 0, "y": 0.5}, "width": 4, "depth": 3, "surface": "TEE"},
        "green": {"controlPoints": [{"x": -8, "z": 140}, {"x": 8, "z": 140},
                                    {"x": 8, "z": 155}, {"x": -8, "z": 155}],
                  "surface": "GREEN"},
        "waterHazards": [{"type": "ellipse", "center": {"x": 20, "z": 120},
                          "radiusX": 6, "radiusZ": 9, "surface": "WATER"}],
        "bunkers": [{"type": "circle", "center": {"x": -14, "z": 150}, "radius": 3, "surface": "Bunker"}],
        "flagPositions": [{"x": 1, "z": 150}],
        "obstacles": [{"type": "tree", "size": "large", "x": 30, "z": 60}],
    })

    assert layout.tee.vertices[0] == Vertex(-2.0, -1.5, 0.5)
    assert isinstance(layout.greens[0], PolygonSurface)
    assert isinstance(layout.water_hazards[0], EllipseSurface)
    assert isinstance(layout.bunkers[0], CircleSurface)
    assert layout.bunkers[0].surface is SURFACES["BUNKER"]
    assert layout.flag_position == Vertex(1.0, 150.0)
    assert layout.target_distance == pytest.approx(147.5)

    hole = HoleInstance().load(layout)
    assert hole.get_flag_position().x == 1.0
    assert len(hole.get_obstacles()) == 1
    assert hole.skipped_surfaces == []


def test_unknown_surface_falls_back_to_category_default():
    surface = LegacyAdapter().surface_from_dict(
        {"vertices": [(0, 0), (1, 0), (0, 1)], "surface": "LAVA"}, "FAIRWAY"
    )
    assert surface.surface is SURFACES["FAIRWAY"]


def test_weld_shared_vertices():
    fairway = PolygonSurface(
        (Vertex(0, 0, 0.0), Vertex(10, 0, 0.0), Vertex(10, 10, 1.0), Vertex(0, 10, 1.0)),
        SURFACES["FAIRWAY"]
    )
    green = PolygonSurface(
        (Vertex(10.05, 10.0, 2.0), Vertex(20, 10, 2.0), Vertex(20, 20, 2.0), Vertex(10, 20, 2.0)),
        SURFACES["GREEN"]
    )
    layout = HoleLayout(target_distance=15.0, fairways=[fairway], greens=[green])

    welded, merged = weld_shared_vertices(layout)

    assert merged == 1
    shared_a = welded.fairways[0].vertices[2]
    shared_b = welded.greens[0].vertices[0]
    assert shared_a == shared_b
    assert shared_a.x == pytest.approx(10.025)
    assert shared_a.y == pytest.approx(1.5)

    # Input layout is untouched
    assert layout.greens[0].vertices[0].x == 10.05
    # Far vertices stay put
    assert welded.greens[0].vertices[2] == Vertex(20, 20, 2.0)


def test_weld_leaves_distant_vertices():
    layout = HoleLayout(
        target_distance=10.0,
        greens=[PolygonSurface((Vertex(0, 0), Vertex(5, 0), Vertex(0, 5)), SURFACES["GREEN"])]
    )
    welded, merged = weld_shared_vertices(layout)
    assert merged == 0
    assert welded is layout


def test_weld_ignores_height_matches_across_z():
    """Flat corners share x and height but are metres apart in z."""
    square = PolygonSurface(
        (Vertex(0, 0), Vertex(10, 0), Vertex(10, 10), Vertex(0, 10)), SURFACES["GREEN"]
    )
    layout = HoleLayout(target_distance=5.0, greens=[square])

    welded, merged = weld_shared_vertices(layout)
    assert merged == 0
    assert welded is layout


def test_editor_layout_keeps_flat_corners():
    layout = LegacyAdapter().layout_from_dict({
        "tee": {"center": {"x": 0, "z": 0}, "width": 4, "depth": 3},
        "green": {"controlPoints": [{"x": -8, "z": 140}, {"x": 8, "z": 140},
                                    {"x": 8, "z": 155}, {"x": -8, "z": 155}]},
    })

    corners = {(v.x, v.z) for v in layout.greens[0].vertices}
    assert corners == {(-8.0, 140.0), (8.0, 140.0), (8.0, 155.0), (-8.0, 155.0)}
    assert {v.z for v in layout.tee.vertices} == {-1.5, 1.5}


def test_surface_registry_lookup():
    assert get_surface("Light Rough") is SURFACES["LIGHT_ROUGH"]
    assert get_surface("light_rough") is SURFACES["LIGHT_ROUGH"]
    assert get_surface("unknown") is None
    assert is_penalty_surface("WATER")
    assert is_penalty_surface("Out of Bounds")
    assert not is_penalty_surface("GREEN")
    assert SURFACES["GREEN"].friction == pytest.approx(0.2)
    assert SURFACES["WATER"].friction == pytest.approx(4.0)


def test_surface_layer_heights():
    heights = [SURFACES[k].height for k in
               ("OUT_OF_BOUNDS", "LIGHT_ROUGH", "WATER", "FAIRWAY", "GREEN", "TEE", "BUNKER")]
    assert heights == sorted(heights)
    assert SURFACES["WATER"].height == 0.005
