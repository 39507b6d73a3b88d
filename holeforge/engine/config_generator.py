"""
Self-generated hole configurations.

Used when no authoritative payload is supplied: picks a target distance,
green offset, cup position, an occasional water hazard and a fresh shape seed.
"""

import logging
import random
from typing import Any, Optional

from ..config import FairwayAdjustments, HoleConfiguration, WaterHazardConfig, WATER_POSITIONS


logger = logging.getLogger(__name__)


GENERATOR_DEFAULTS = {
    "min_distance": 110,
    "max_distance": 183,
    "hole_spread_x": 0.8,
    "hole_spread_y": 0.6,
    "offset_fraction": 0.15,
    "max_offset": 30.0,
    "green_width": 18.0,
    "green_depth": 14.0,
    "water_chance": 0.25,
    "water_overlap": 1.0,
}

# Fairway reshaping per water position
WATER_FAIRWAY_ADJUSTMENTS = {
    "front": {"approach_distance": 30.0, "extension": 0.0},
    "behind": {"approach_distance": 40.0, "extension": 12.0},
    "left": {"approach_distance": 40.0, "extension": 10.0, "left_width_multiplier": 0.65},
    "right": {"approach_distance": 40.0, "extension": 10.0, "right_width_multiplier": 0.65},
}


class HoleConfigGenerator:
    """
    Random hole configurations.

    Args:
        rng: Random source with ``random``, ``randint`` and ``choice``
    """

    def __init__(self, rng: Optional[Any] = None):
        self.rng = rng or random.Random()

    def generate(self, target_distance: Optional[float] = None) -> HoleConfiguration:
        rng = self.rng
        distance = target_distance or rng.randint(
            GENERATOR_DEFAULTS["min_distance"], GENERATOR_DEFAULTS["max_distance"]
        )

        hole_x = (rng.random() * 2 - 1) * GENERATOR_DEFAULTS["hole_spread_x"]
        hole_y = (rng.random() * 2 - 1) * GENERATOR_DEFAULTS["hole_spread_y"]

        max_offset = min(distance * GENERATOR_DEFAULTS["offset_fraction"], GENERATOR_DEFAULTS["max_offset"])
        green_offset = (rng.random() * 2 - 1) * max_offset

        water = None
        if rng.random() < GENERATOR_DEFAULTS["water_chance"]:
            water = self.generate_water_hazard(
                distance, green_offset,
                GENERATOR_DEFAULTS["green_width"], GENERATOR_DEFAULTS["green_depth"]
            )

        config = HoleConfiguration(
            distance_meters=distance,
            green_width=GENERATOR_DEFAULTS["green_width"],
            green_depth=GENERATOR_DEFAULTS["green_depth"],
            green_offset=green_offset,
            hole_position_x=hole_x,
            hole_position_y=hole_y,
            shape_seed=rng.random(),
            water_hazard=water
        )

        logger.info(
            "Generated hole: %.0fm, offset %.1fm, water %s",
            distance, green_offset, water.position if water else "none"
        )
        return config

    def generate_water_hazard(
        self,
        distance: float,
        green_offset: float,
        green_width: float,
        green_depth: float
    ) -> WaterHazardConfig:
        """
        Elliptical water beside the green, overlapping it slightly.

        Front/behind bodies are wide and shallow, left/right bodies long and narrow.
        "front" lies between the tee and the green.
        """

        rng = self.rng
        position = rng.choice(WATER_POSITIONS)
        base_size = 8 + rng.random() * 4

        if position in ("front", "behind"):
            radius_x = base_size * (1.2 + rng.random() * 0.4)
            radius_z = base_size * (0.6 + rng.random() * 0.3)
        else:
            radius_x = base_size * (0.6 + rng.random() * 0.3)
            radius_z = base_size * (1.2 + rng.random() * 0.4)

        overlap = GENERATOR_DEFAULTS["water_overlap"]
        center_x, center_z = green_offset, distance
        if position == "front":
            center_z = distance - green_depth / 2 - radius_z + overlap
        elif position == "behind":
            center_z = distance + green_depth / 2 + radius_z - overlap
        elif position == "left":
            center_x = green_offset - green_width / 2 - radius_x + overlap
        else:
            center_x = green_offset + green_width / 2 + radius_x - overlap

        return WaterHazardConfig(
            position=position,
            center_x=center_x,
            center_z=center_z,
            radius_x=radius_x,
            radius_z=radius_z,
            fairway_adjustments=FairwayAdjustments(**WATER_FAIRWAY_ADJUSTMENTS[position])
        )
