"""
JSON payload validator for hole configurations.

Checks authoritative payloads before they reach the layout builder and
repairs common issues (missing fields, out-of-range values) for callers
that prefer a playable hole over a rejection.
"""

import logging
import math
from typing import Any, Dict, List, Tuple

from ..config import WATER_POSITIONS
from ..procgen.params import ParameterSpec
from ..registry.obstacles import OBSTACLE_SIZES, OBSTACLE_TYPES


logger = logging.getLogger(__name__)


# Wire field -> (min, max, default)
PAYLOAD_PARAMETERS = ParameterSpec({
    "distanceMeters": (1.0, 1000.0, 150.0),
    "greenWidth": (1.0, 100.0, 18.0),
    "greenDepth": (1.0, 100.0, 14.0),
    "greenOffset": (-100.0, 100.0, 0.0),
    "holePositionX": (-1.0, 1.0, 0.0),
    "holePositionY": (-1.0, 1.0, 0.0),
})

WATER_PARAMETERS = ParameterSpec({
    "radiusX": (0.5, 100.0, 10.0),
    "radiusZ": (0.5, 100.0, 10.0),
})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class HoleConfigValidator:
    """
    Validates hole configuration payloads (camelCase wire format).

    Only ``distanceMeters`` and ``shapeSeed`` are required; every other
    field has a default.
    """

    def __init__(self):
        self.required_fields = ["distanceMeters", "shapeSeed"]
        self.parameters = PAYLOAD_PARAMETERS

    def validate_payload(self, data: Any) -> Tuple[bool, List[str]]:
        """
        Validate a configuration payload.

        Args:
            data: Decoded JSON payload

        Returns:
            Tuple of (is_valid, error_messages)
        """

        if not isinstance(data, dict):
            return False, [f"Payload must be an object, got {type(data).__name__}"]

        errors = []
        for field in self.required_fields:
            if field not in data:
                errors.append(f"Missing required field: {field}")

        errors.extend(self.parameters.validate(data))

        if "shapeSeed" in data and not _is_number(data["shapeSeed"]):
            errors.append("shapeSeed must be a finite number")

        if data.get("waterHazard") is not None:
            errors.extend(self._validate_water(data["waterHazard"]))

        if data.get("obstacles") is not None:
            errors.extend(self._validate_obstacles(data["obstacles"]))

        return len(errors) == 0, errors

    def _validate_water(self, water: Any) -> List[str]:
        if not isinstance(water, dict):
            return ["waterHazard must be an object"]

        errors = []
        if water.get("position", "front") not in WATER_POSITIONS:
            errors.append(f"waterHazard.position must be one of {', '.join(WATER_POSITIONS)}")

        for field in ("centerX", "centerZ", "radiusX", "radiusZ"):
            if field not in water:
                errors.append(f"waterHazard missing field: {field}")
            elif not _is_number(water[field]):
                errors.append(f"waterHazard.{field} must be a finite number")

        errors.extend(f"waterHazard: {e}" for e in WATER_PARAMETERS.validate(water))
        return errors

    def _validate_obstacles(self, obstacles: Any) -> List[str]:
        if not isinstance(obstacles, list):
            return ["obstacles must be a list"]

        errors = []
        for i, obstacle in enumerate(obstacles):
            if not isinstance(obstacle, dict):
                errors.append(f"obstacles[{i}] must be an object")
                continue
            if obstacle.get("type") not in OBSTACLE_TYPES:
                errors.append(f"obstacles[{i}].type must be one of {', '.join(OBSTACLE_TYPES)}")
            if obstacle.get("size") not in OBSTACLE_SIZES:
                errors.append(f"obstacles[{i}].size must be one of {', '.join(OBSTACLE_SIZES)}")
            for field in ("x", "z"):
                if not _is_number(obstacle.get(field)):
                    errors.append(f"obstacles[{i}].{field} must be a finite number")

        return errors

    def sanitize_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sanitize and fix common data issues.

        Numeric fields are clamped or defaulted, an invalid seed becomes 0,
        and malformed water hazards or obstacles are dropped.

        Args:
            data: Input data to sanitize

        Returns:
            Sanitized data
        """

        result = dict(data)
        result.update(self.parameters.extract_params(data))

        if not _is_number(result.get("shapeSeed")):
            logger.warning("Replacing invalid shapeSeed %r with 0", result.get("shapeSeed"))
            result["shapeSeed"] = 0

        water = result.get("waterHazard")
        if water is not None:
            if self._validate_water(water):
                logger.warning("Dropping malformed waterHazard")
                result.pop("waterHazard")
            else:
                result["waterHazard"] = {**water, **WATER_PARAMETERS.extract_params(water)}

        obstacles = result.get("obstacles")
        if obstacles is not None:
            if not isinstance(obstacles, list):
                logger.warning("Dropping non-list obstacles field")
                result.pop("obstacles")
            else:
                kept = [o for o in obstacles if not self._validate_obstacles([o])]
                if len(kept) != len(obstacles):
                    logger.warning("Dropped %d malformed obstacles", len(obstacles) - len(kept))
                result["obstacles"] = kept

        return result

    def create_minimal_valid_data(self, distance_meters: float = 150.0, shape_seed: float = 42) -> Dict[str, Any]:
        """Create minimal valid payload for testing."""

        data = {"distanceMeters": distance_meters, "shapeSeed": shape_seed}
        data.update({
            name: default
            for name, (_, _, default) in self.parameters.params.items()
            if name != "distanceMeters"
        })
        return data
