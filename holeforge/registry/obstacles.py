"""
Obstacle property table and the collision contract for the ball-flight simulator.

Lookup is total: any unknown (type, size) pair resolves to the bush/small
entry. The simulator applies ``slowdown_factor`` multiplicatively to the
post-impact speed, rolls ``deflection_chance`` and, on a hit, turns the
heading by an angle drawn uniformly from [0, max_deflection_angle].
"""

import math
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple


OBSTACLE_TYPES = ("tree", "bush")
OBSTACLE_SIZES = ("small", "medium", "large")

TREE_COLOR = "#2d5016"
BUSH_COLOR = "#3a6b1f"
TRUNK_COLOR = "#4a3728"


@dataclass(frozen=True)
class ObstacleProperties:
    radius: float
    height: float
    slowdown_factor: float
    deflection_chance: float
    max_deflection_angle: float
    color: str
    trunk_radius: Optional[float] = None
    trunk_height: Optional[float] = None
    foliage_radius: Optional[float] = None


OBSTACLE_PROPERTIES: Dict[Tuple[str, str], ObstacleProperties] = {
    ("tree", "small"): ObstacleProperties(
        radius=0.4, height=9, slowdown_factor=0.5, deflection_chance=0.7,
        max_deflection_angle=math.pi / 3, color=TREE_COLOR,
        trunk_radius=0.15, trunk_height=3, foliage_radius=1.2
    ),
    ("tree", "medium"): ObstacleProperties(
        radius=0.6, height=14, slowdown_factor=0.4, deflection_chance=0.8,
        max_deflection_angle=math.pi / 2.5, color=TREE_COLOR,
        trunk_radius=0.3, trunk_height=5, foliage_radius=1.8
    ),
    ("tree", "large"): ObstacleProperties(
        radius=1.0, height=20, slowdown_factor=0.3, deflection_chance=0.9,
        max_deflection_angle=math.pi / 2, color=TREE_COLOR,
        trunk_radius=0.5, trunk_height=7, foliage_radius=2.5
    ),
    ("bush", "small"): ObstacleProperties(
        radius=0.4, height=1, slowdown_factor=0.6, deflection_chance=0.4,
        max_deflection_angle=math.pi / 4, color=BUSH_COLOR
    ),
    ("bush", "medium"): ObstacleProperties(
        radius=0.7, height=1.5, slowdown_factor=0.5, deflection_chance=0.5,
        max_deflection_angle=math.pi / 3, color=BUSH_COLOR
    ),
    ("bush", "large"): ObstacleProperties(
        radius=1.0, height=2, slowdown_factor=0.4, deflection_chance=0.6,
        max_deflection_angle=math.pi / 2.5, color=BUSH_COLOR
    ),
}

DEFAULT_OBSTACLE_KEY = ("bush", "small")


def lookup_obstacle_properties(obstacle_type: str, size: str) -> ObstacleProperties:
    """Properties for (type, size); unrecognized pairs get the bush/small entry."""
    return OBSTACLE_PROPERTIES.get(
        (obstacle_type, size), OBSTACLE_PROPERTIES[DEFAULT_OBSTACLE_KEY]
    )


@dataclass(frozen=True)
class Obstacle:
    """A placed obstacle instance. Positions are meters in the hole frame."""

    type: str
    size: str
    x: float
    z: float
    properties: ObstacleProperties

    @property
    def radius(self) -> float:
        return self.properties.radius

    @property
    def height(self) -> float:
        return self.properties.height

    def to_dict(self) -> Dict[str, Any]:
        props = self.properties
        data = {
            "type": self.type,
            "size": self.size,
            "x": self.x,
            "z": self.z,
            "radius": props.radius,
            "height": props.height,
            "slowdown_factor": props.slowdown_factor,
            "deflection_chance": props.deflection_chance,
            "max_deflection_angle": props.max_deflection_angle,
            "color": props.color,
        }
        if props.trunk_height is not None:
            data["trunk_radius"] = props.trunk_radius
            data["trunk_height"] = props.trunk_height
            data["foliage_radius"] = props.foliage_radius
        return data


def create_obstacle(obstacle_type: str, size: str, x: float, z: float) -> Obstacle:
    return Obstacle(
        type=obstacle_type,
        size=size,
        x=float(x),
        z=float(z),
        properties=lookup_obstacle_properties(obstacle_type, size)
    )


def check_obstacle_collision(
    ball_x: float,
    ball_z: float,
    ball_radius: float,
    obstacles: Sequence[Obstacle]
) -> Optional[Dict[str, Any]]:
    """
    Find the first obstacle the ball overlaps in the (x, z) plane.

    Returns:
        Dict with the obstacle and the offset from it, or None
    """

    for obstacle in obstacles:
        dx = ball_x - obstacle.x
        dz = ball_z - obstacle.z
        distance = math.hypot(dx, dz)

        if distance < ball_radius + obstacle.radius:
            return {"obstacle": obstacle, "distance": distance, "dx": dx, "dz": dz}

    return None


def apply_obstacle_effect(
    velocity: Tuple[float, float],
    collision: Optional[Dict[str, Any]],
    rng: Optional[random.Random] = None
) -> Tuple[float, float]:
    """
    Apply an obstacle hit to a planar (vx, vz) velocity.

    Speed is scaled by the slowdown factor. With probability
    ``deflection_chance`` the heading is rotated by an angle drawn uniformly
    from [0, max_deflection_angle] to a random side; otherwise the ball keeps
    its heading.
    """

    if collision is None:
        return velocity

    rng = rng or random.Random()
    props = collision["obstacle"].properties

    vx, vz = velocity
    speed = math.hypot(vx, vz) * props.slowdown_factor
    heading = math.atan2(vz, vx)

    if rng.random() < props.deflection_chance:
        angle = rng.uniform(0.0, props.max_deflection_angle)
        if rng.random() < 0.5:
            angle = -angle
        heading += angle

    return (math.cos(heading) * speed, math.sin(heading) * speed)
