"""
Shot scoring against hole anchors.
"""

from .closest_to_flag import ClosestToFlagScorer, ScoringState, ShotResult

__all__ = ["ClosestToFlagScorer", "ScoringState", "ShotResult"]
