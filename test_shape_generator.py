"""
Tests for seeded organic shapes and the deterministic random stream.
"""

import math

import pytest

from holeforge.errors import InvalidGeometryError
from holeforge.procgen import (
    CHANNELS, SHAPE_PROFILES, SeededStream, generate_shape, hash_unit,
    organic_corridor, organic_ellipse, seed_to_int, tilt_ring
)


def test_green_ring_is_reproducible():
    """Seed 42 with an 18x14 green gives identical 17-vertex rings."""
    first = generate_shape("green", 0.0, 150.0, 9.0, 7.0, seed=42)
    second = generate_shape("green", 0.0, 150.0, 9.0, 7.0, seed=42)

    assert len(first) == 17
    assert first == second
    assert first[0] == first[-1]


def test_different_seeds_differ():
    a = generate_shape("green", 0.0, 150.0, 9.0, 7.0, seed=42)
    b = generate_shape("green", 0.0, 150.0, 9.0, 7.0, seed=43)
    assert a != b


def test_channels_are_independent():
    green = organic_ellipse(0, 0, 10, 10, 7, CHANNELS["green"], 16, 0.1)
    water = organic_ellipse(0, 0, 10, 10, 7, CHANNELS["water"], 16, 0.1)
    assert green != water


def test_radial_perturbation_is_bounded():
    variation = SHAPE_PROFILES["water"]["variation"]
    ring = generate_shape("water", 5.0, 20.0, 12.0, 8.0, seed=1234)

    assert len(ring) == SHAPE_PROFILES["water"]["segments"] + 1
    for v in ring[:-1]:
        # Normalized elliptical radius equals the perturbation factor
        factor = math.hypot((v.x - 5.0) / 12.0, (v.z - 20.0) / 8.0)
        assert 1 - variation - 1e-9 <= factor <= 1 + variation + 1e-9


def test_fractional_seed():
    assert seed_to_int(0.5) == 2 ** 31
    assert seed_to_int(7.0) == 7
    assert seed_to_int(-1) == 0xFFFFFFFF

    a = generate_shape("tee", 0, 0, 3, 2.5, seed=0.123456)
    b = generate_shape("tee", 0, 0, 3, 2.5, seed=0.123456)
    assert a == b


def test_hash_range():
    values = [hash_unit(99, CHANNELS["bunker"], i) for i in range(500)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert len(set(values)) > 490


def test_invalid_ring_parameters():
    with pytest.raises(InvalidGeometryError):
        organic_ellipse(0, 0, 10, 10, 1, CHANNELS["green"], 2, 0.1)
    with pytest.raises(InvalidGeometryError):
        organic_ellipse(0, 0, 0, 10, 1, CHANNELS["green"], 8, 0.1)


def test_corridor_shape():
    ring = organic_corridor(40.0, 140.0, 0.0, 12.0, 12.5, seed=5, stations=10)

    assert len(ring) == 2 * 11 + 1
    assert ring[0] == ring[-1]

    left, right = ring[:11], ring[11:22][::-1]
    for l, r in zip(left, right):
        assert l.z == r.z
        assert l.x < r.x

    # Centerline ends on the green offset
    assert (left[-1].x + right[-1].x) / 2 == pytest.approx(12.0, abs=12.5 * 0.2)


def test_corridor_multipliers_narrow_one_side():
    wide = organic_corridor(40.0, 140.0, 0.0, 0.0, 12.5, seed=5)
    narrow = organic_corridor(40.0, 140.0, 0.0, 0.0, 12.5, seed=5, left_multiplier=0.65)

    n = len(wide) // 2
    for a, b in zip(wide[:n], narrow[:n]):
        assert b.x == pytest.approx(a.x * 0.65)


def test_corridor_rejects_reversed_range():
    with pytest.raises(InvalidGeometryError):
        organic_corridor(100.0, 50.0, 0.0, 0.0, 10.0, seed=1)


def test_tilt_ring():
    ring = generate_shape("green", 0.0, 100.0, 9.0, 7.0, seed=3)
    tilted = tilt_ring(ring, 100.0, 7.0, 0.2)

    for flat, sloped in zip(ring, tilted):
        assert sloped.y == pytest.approx(0.2 * (flat.z - 100.0) / 7.0)


def test_seeded_stream():
    a = SeededStream(42)
    b = SeededStream(42)
    assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    stream = SeededStream(7)
    draws = [stream.randint(8, 16) for _ in range(300)]
    assert min(draws) == 8
    assert max(draws) == 16

    assert stream.choice(("tree", "bush")) in ("tree", "bush")
    with pytest.raises(IndexError):
        stream.choice(())
