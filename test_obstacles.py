"""
Tests for the obstacle registry and placement engine.
"""

import math
import random

import pytest

from holeforge.engine.obstacle_placement import ObstaclePlacementEngine
from holeforge.geometry import Vertex
from holeforge.procgen import SeededStream
from holeforge.registry import (
    DEFAULT_OBSTACLE_KEY, OBSTACLE_PROPERTIES, apply_obstacle_effect,
    check_obstacle_collision, create_obstacle, lookup_obstacle_properties
)


def test_lookup_is_total():
    default = OBSTACLE_PROPERTIES[DEFAULT_OBSTACLE_KEY]
    assert lookup_obstacle_properties("cactus", "huge") is default
    assert lookup_obstacle_properties("tree", "large").height == 20


def test_create_obstacle_hydrates_properties():
    obstacle = create_obstacle("tree", "medium", 3, -4)
    assert obstacle.radius == 0.6
    assert obstacle.properties.slowdown_factor == 0.4
    data = obstacle.to_dict()
    assert data["x"] == 3.0 and data["z"] == -4.0
    assert data["trunk_height"] == 5


def test_authoritative_placement_is_verbatim():
    engine = ObstaclePlacementEngine()
    placements = [
        {"type": "tree", "size": "large", "x": 0.0, "z": 150.0},
        {"type": "bush", "size": "small", "x": -20.0, "z": 80.0},
    ]
    obstacles = engine.place_authoritative(placements)

    assert [(o.type, o.size, o.x, o.z) for o in obstacles] == [
        ("tree", "large", 0.0, 150.0),
        ("bush", "small", -20.0, 80.0),
    ]


@pytest.mark.parametrize("seed", range(10))
def test_generated_obstacles_respect_exclusion(seed):
    engine = ObstaclePlacementEngine()
    center = Vertex(10.0, 150.0)
    radius = 8.0

    obstacles = engine.place_generative(150.0, center, radius, random.Random(seed), green_offset=10.0)

    assert len(obstacles) <= engine.count_range[1]
    for o in obstacles:
        assert math.hypot(o.x - center.x, o.z - center.z) >= radius + engine.safety_margin


def test_generated_obstacles_stay_off_the_fairway_line():
    engine = ObstaclePlacementEngine()
    obstacles = engine.place_generative(150.0, Vertex(0.0, 150.0), 8.0, random.Random(3))
    assert all(abs(o.x) >= engine.fairway_half_width for o in obstacles)


def test_exhausted_attempts_skip_instead_of_raising():
    engine = ObstaclePlacementEngine(count_range=(5, 5), max_attempts=3)
    obstacles = engine.place_generative(150.0, Vertex(0.0, 100.0), 1000.0, random.Random(1))
    assert obstacles == []


def test_seeded_scatter_is_reproducible():
    engine = ObstaclePlacementEngine()
    a = engine.place_generative(160.0, Vertex(0.0, 160.0), 8.0, SeededStream(0.25))
    b = engine.place_generative(160.0, Vertex(0.0, 160.0), 8.0, SeededStream(0.25))
    assert a == b


def test_invalid_count_range():
    with pytest.raises(ValueError):
        ObstaclePlacementEngine(count_range=(5, 2))


def test_collision_and_effect():
    tree = create_obstacle("tree", "large", 0.0, 0.0)
    assert check_obstacle_collision(5.0, 5.0, 0.02, [tree]) is None

    collision = check_obstacle_collision(0.5, 0.0, 0.02, [tree])
    assert collision["obstacle"] is tree

    vx, vz = apply_obstacle_effect((0.0, 10.0), collision, random.Random(0))
    assert math.hypot(vx, vz) == pytest.approx(10.0 * tree.properties.slowdown_factor)

    heading = math.atan2(vz, vx)
    assert abs(heading - math.pi / 2) <= tree.properties.max_deflection_angle + 1e-9

    assert apply_obstacle_effect((1.0, 2.0), None) == (1.0, 2.0)
