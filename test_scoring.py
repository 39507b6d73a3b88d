"""
Tests for closest-to-flag scoring and unit conversion.
"""

import math

import pytest

from holeforge.geometry import Vertex
from holeforge.scoring import ClosestToFlagScorer, ScoringState
from holeforge.units import (
    feet_to_meters, format_distance, meters_to_feet, meters_to_yards, yards_to_meters
)


def test_shot_distance_to_flag():
    """Flag at (0, 150), shot at (2, 151): about 2.236 m after one shot."""
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)

    result = scorer.record_shot((2.0, 151.0), surface_name="GREEN")

    assert result.distance == pytest.approx(math.sqrt(5), abs=1e-3)
    assert result.is_penalty is False
    assert result.shot_number == 1
    assert scorer.shots_taken == 1
    assert scorer.best_distance == pytest.approx(2.236, abs=1e-3)
    assert scorer.state is ScoringState.SCORED


def test_idle_scorer_ignores_shots():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))

    assert scorer.record_shot((2.0, 151.0)) is None
    assert scorer.shots_taken == 0
    assert scorer.best_distance == math.inf


def test_terminate_returns_to_idle():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)
    scorer.record_shot((0.0, 140.0))
    scorer.terminate()

    assert scorer.state is ScoringState.IDLE
    assert scorer.record_shot((0.0, 150.0)) is None
    assert scorer.best_distance == pytest.approx(10.0)


def test_best_distance_keeps_minimum():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)

    for landing in [(0.0, 130.0), (3.0, 146.0), (0.0, 170.0)]:
        scorer.record_shot(landing)

    assert scorer.shots_taken == 3
    assert scorer.best_distance == pytest.approx(5.0)


def test_malformed_landing_leaves_count_unchanged():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)
    scorer.record_shot((0.0, 149.0))

    with pytest.raises(ValueError):
        scorer.record_shot((1.0, 2.0, 3.0, 4.0))

    assert scorer.shots_taken == 1
    assert scorer.best_distance == pytest.approx(1.0)


def test_initialize_resets_round():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)
    scorer.record_shot((0.0, 149.0))
    scorer.initialize(120)

    assert scorer.state is ScoringState.ACTIVE
    assert scorer.shots_taken == 0
    assert scorer.best_distance == math.inf


def test_penalty_surfaces():
    scorer = ClosestToFlagScorer(lambda: Vertex(0.0, 150.0))
    scorer.initialize(150)

    assert scorer.record_shot((0.0, 140.0), surface_name="Water").is_penalty
    assert scorer.record_shot((0.0, 140.0), surface_name="OUT_OF_BOUNDS").is_penalty
    assert not scorer.record_shot((0.0, 140.0), surface_name="Light Rough").is_penalty
    assert not scorer.record_shot((0.0, 140.0), surface_name="lava").is_penalty


def test_fallback_without_flag():
    """Without a flag anchor, distance comes from target, travel and side offset."""
    scorer = ClosestToFlagScorer(lambda: None)
    scorer.initialize(150)

    result = scorer.record_shot((0.0, 0.0), traveled_distance=146.0, lateral_offset=3.0)
    assert result.distance == pytest.approx(5.0)

    result = scorer.record_shot(Vertex(-4.0, 153.0))
    assert result.distance == pytest.approx(5.0)


def test_unit_round_trip():
    for meters in (0.5, 1.0, 137.2, 10000.0):
        assert yards_to_meters(meters_to_yards(meters)) == pytest.approx(meters, rel=1e-6)
        assert feet_to_meters(meters_to_feet(meters)) == pytest.approx(meters, rel=1e-6)

    assert meters_to_yards(100) == pytest.approx(109.361)
    assert meters_to_feet(1) == pytest.approx(3.28084)


def test_format_distance():
    assert format_distance(100.0) == "109.4 yd"
    assert format_distance(2.0, unit="feet") == "6.6 ft"
    assert format_distance(12.346, unit="meters", decimals=2) == "12.35 m"
