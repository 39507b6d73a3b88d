"""
Static property registries.

- Obstacle properties keyed by (type, size) with a single default entry
- Surface properties keyed by surface name, including the penalty flag
"""

from .obstacles import (
    OBSTACLE_TYPES, OBSTACLE_SIZES, OBSTACLE_PROPERTIES, DEFAULT_OBSTACLE_KEY,
    Obstacle, ObstacleProperties, lookup_obstacle_properties, create_obstacle,
    check_obstacle_collision, apply_obstacle_effect
)
from .surfaces import (
    SURFACES, SurfaceProperties, get_surface, is_penalty_surface, hex_to_rgb
)

__all__ = [
    "OBSTACLE_TYPES", "OBSTACLE_SIZES", "OBSTACLE_PROPERTIES", "DEFAULT_OBSTACLE_KEY",
    "Obstacle", "ObstacleProperties", "lookup_obstacle_properties", "create_obstacle",
    "check_obstacle_collision", "apply_obstacle_effect",
    "SURFACES", "SurfaceProperties", "get_surface", "is_penalty_surface", "hex_to_rgb"
]
