"""
Obstacle scatter over the rough.

Two sources of truth:
- Authoritative: explicit placements from a trusted peer, hydrated with
  registry properties, no randomness and no exclusion check
- Generative: count, type, size and position drawn from a random source,
  biased toward the sides of the fairway and kept out of the green
  exclusion zone
"""

import logging
import math
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import ExclusionRetryExhausted
from ..geometry import Vertex
from ..registry.obstacles import OBSTACLE_SIZES, OBSTACLE_TYPES, Obstacle, create_obstacle


logger = logging.getLogger(__name__)


PLACEMENT_DEFAULTS = {
    "count_range": (8, 16),
    "safety_margin": 5.0,
    "max_attempts": 25,
    "fairway_half_width": 12.5,
    "side_clearance": 3.0,
    "min_spread": 10.0,
    "max_spread": 35.0,
    "start_z": 15.0,
    "overshoot": 30.0,
}


class ObstaclePlacementEngine:
    """
    Places trees and bushes for one hole.

    ``rng`` objects only need ``random``, ``uniform``, ``randint`` and
    ``choice``; both ``random.Random`` and ``SeededStream`` qualify.
    """

    def __init__(
        self,
        count_range: Tuple[int, int] = PLACEMENT_DEFAULTS["count_range"],
        safety_margin: float = PLACEMENT_DEFAULTS["safety_margin"],
        max_attempts: int = PLACEMENT_DEFAULTS["max_attempts"],
        fairway_half_width: float = PLACEMENT_DEFAULTS["fairway_half_width"]
    ):
        low, high = count_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid obstacle count range {count_range}")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.count_range = (int(low), int(high))
        self.safety_margin = safety_margin
        self.max_attempts = max_attempts
        self.fairway_half_width = fairway_half_width

    def place_authoritative(self, placements: Iterable[Dict[str, Any]]) -> List[Obstacle]:
        """Hydrate explicit placements. Exclusion is not checked; the authority is trusted."""

        obstacles = [
            create_obstacle(p["type"], p["size"], p["x"], p["z"])
            for p in placements
        ]
        logger.info("Hydrated %d authoritative obstacles", len(obstacles))
        return obstacles

    def place_generative(
        self,
        target_distance: float,
        green_center: Optional[Vertex],
        green_radius: Optional[float],
        rng: Any = None,
        green_offset: float = 0.0
    ) -> List[Obstacle]:
        """
        Scatter a random number of obstacles.

        Args:
            target_distance: Tee-to-green distance (m)
            green_center: Exclusion zone center, or None when there is no green
            green_radius: Mean green radius (m)
            rng: Random source; a fresh ``random.Random`` when omitted
            green_offset: Lateral offset of the green from the tee line (m)

        Returns:
            Placed obstacles; instances that exhausted their attempts are skipped
        """

        rng = rng or random.Random()
        count = rng.randint(*self.count_range)

        if green_center is None:
            logger.warning("No green anchor; placing obstacles without an exclusion zone")

        obstacles = []
        skipped = 0
        for _ in range(count):
            try:
                obstacles.append(self._place_one(
                    rng, target_distance, green_center, green_radius, green_offset
                ))
            except ExclusionRetryExhausted as exc:
                skipped += 1
                logger.warning("Skipping obstacle: %s", exc)

        logger.info("Placed %d of %d generated obstacles (%d skipped)", len(obstacles), count, skipped)
        return obstacles

    def is_excluded(
        self,
        x: float,
        z: float,
        green_center: Optional[Vertex],
        green_radius: Optional[float]
    ) -> bool:
        """Whether (x, z) falls inside the green exclusion zone."""

        if green_center is None:
            return False

        limit = (green_radius or 0.0) + self.safety_margin
        return math.hypot(x - green_center.x, z - green_center.z) < limit

    def _place_one(
        self,
        rng: Any,
        target_distance: float,
        green_center: Optional[Vertex],
        green_radius: Optional[float],
        green_offset: float
    ) -> Obstacle:
        obstacle_type = rng.choice(OBSTACLE_TYPES)
        size = rng.choice(OBSTACLE_SIZES)

        for _ in range(self.max_attempts):
            x, z = self._sample_position(rng, target_distance, green_offset)
            if not self.is_excluded(x, z, green_center, green_radius):
                return create_obstacle(obstacle_type, size, x, z)

        raise ExclusionRetryExhausted(self.max_attempts)

    def _sample_position(self, rng: Any, target_distance: float, green_offset: float) -> Tuple[float, float]:
        """Sample a point beside the fairway; lateral spread grows toward the target."""

        start_z = PLACEMENT_DEFAULTS["start_z"]
        end_z = target_distance + PLACEMENT_DEFAULTS["overshoot"]
        z = rng.uniform(start_z, end_z)

        progress = min(1.0, max(0.0, z / target_distance)) if target_distance > 0 else 1.0
        spread = PLACEMENT_DEFAULTS["min_spread"] + (
            PLACEMENT_DEFAULTS["max_spread"] - PLACEMENT_DEFAULTS["min_spread"]
        ) * progress

        side = -1.0 if rng.random() < 0.5 else 1.0
        lateral = self.fairway_half_width + PLACEMENT_DEFAULTS["side_clearance"] + rng.uniform(0.0, spread)
        center_x = green_offset * progress

        return center_x + side * lateral, z
