"""
Hole configuration -> concrete surface layout.

Coordinate frame: the tee sits at the origin and the green center at
(green_offset, distance_meters). Left is -X. "Front" of the green faces
the tee.
"""

import logging
import math
from typing import List, Optional, Tuple

from ..config import FairwayAdjustments, HoleConfiguration
from ..geometry import HoleLayout, PolygonSurface, Vertex
from ..procgen.noise import CHANNELS, hash_signed, hash_unit
from ..procgen.shapes import SHAPE_PROFILES, generate_shape, organic_corridor, tilt_ring
from ..registry.surfaces import SURFACES


logger = logging.getLogger(__name__)


LAYOUT_DEFAULTS = {
    "fairway_half_width": 12.5,
    "fairway_start_fraction": 0.3,
    "fairway_min_length": 10.0,
    "water_gap": 2.0,
    "tee_radius_x": 3.0,
    "tee_radius_z": 2.5,
    "green_max_tilt": 0.25,
    "light_rough_half_width": 30.0,
    "medium_rough_half_width": 45.0,
    "thick_rough_half_width": 70.0,
    "rough_back": 20.0,
    "rough_front": 40.0,
    "rough_stations": 8,
    "background_margin": 300.0,
    "background_back": 100.0,
    "background_front": 200.0,
    "bunker_max": 2,
    "bunker_min_radius": 2.5,
    "bunker_radius_range": 1.5,
    "bunker_gap": 1.0,
}

# Hash indices reserved for per-hole scalars (outside per-vertex ranges)
GREEN_TILT_INDEX = 4096
BUNKER_COUNT_INDEX = 4096

# Greenside bunker slots as angles in the (x, z) plane, and the water sides they clash with
BUNKER_SLOTS = (
    ("left", math.pi, ("left",)),
    ("right", 0.0, ("right",)),
    ("front_left", -0.75 * math.pi, ("front", "left")),
    ("front_right", -0.25 * math.pi, ("front", "right")),
    ("behind", 0.5 * math.pi, ("behind",)),
)


def flag_offset(hole_x: float, hole_y: float, segments: int, variation: float) -> Tuple[float, float]:
    """
    Map a (-1..1, -1..1) cup position to fractions of the green half-extents.

    The result stays inside the smallest ring an organic green can produce,
    so the cup never lands off the putting surface.
    """

    length = math.hypot(hole_x, hole_y)
    if length > 1.0:
        hole_x /= length
        hole_y /= length

    # Inner bound: minimum radial factor times chord sag of the polygon
    scale = (1.0 - variation) * math.cos(math.pi / segments)
    return hole_x * scale, hole_y * scale


class LayoutBuilder:
    """Builds a HoleLayout from a HoleConfiguration using the shape seed."""

    def __init__(self, **overrides):
        self.settings = {**LAYOUT_DEFAULTS, **overrides}

    def build(self, config: HoleConfiguration) -> HoleLayout:
        s = self.settings
        seed = config.shape_seed
        distance = config.distance_meters
        offset = config.green_offset
        water = config.water_hazard
        adjustments = water.fairway_adjustments if water else FairwayAdjustments()

        layout = HoleLayout(
            target_distance=distance,
            green_offset=offset,
            shape_seed=seed,
            obstacles=[o.model_dump() for o in config.obstacles] if config.obstacles is not None else None
        )

        layout.background = self._background(distance)
        layout.light_rough = self._rough_tier("LIGHT_ROUGH", distance, offset, 0.0, s["light_rough_half_width"])
        layout.medium_rough = self._rough_tier(
            "MEDIUM_ROUGH", distance, offset, s["light_rough_half_width"], s["medium_rough_half_width"]
        )
        layout.thick_rough = self._rough_tier(
            "THICK_ROUGH", distance, offset, s["medium_rough_half_width"], s["thick_rough_half_width"]
        )

        if water:
            ring = generate_shape("water", water.center_x, water.center_z, water.radius_x, water.radius_z, seed)
            layout.water_hazards = [PolygonSurface(ring, SURFACES["WATER"])]

        layout.bunkers = self._bunkers(config)

        fairway = self._fairway(config, adjustments)
        if fairway is not None:
            layout.fairways = [fairway]

        half_depth = config.green_depth / 2
        rise = s["green_max_tilt"] * hash_signed(seed, CHANNELS["green"], GREEN_TILT_INDEX)
        green_ring = generate_shape("green", offset, distance, config.green_width / 2, half_depth, seed)
        green_ring = tilt_ring(green_ring, distance, half_depth, rise)
        layout.greens = [PolygonSurface(green_ring, SURFACES["GREEN"])]

        profile = SHAPE_PROFILES["green"]
        fx, fz = flag_offset(config.hole_position_x, config.hole_position_y,
                             int(profile["segments"]), profile["variation"])
        flag_z = distance + fz * half_depth
        layout.flag_position = Vertex(
            offset + fx * config.green_width / 2,
            flag_z,
            rise * (flag_z - distance) / half_depth
        )

        tee_ring = generate_shape("tee", 0.0, 0.0, s["tee_radius_x"], s["tee_radius_z"], seed)
        layout.tee = PolygonSurface(tee_ring, SURFACES["TEE"])

        logger.debug(
            "Built layout: %.0fm, %d water, %d bunkers, %d fairways",
            distance, len(layout.water_hazards), len(layout.bunkers), len(layout.fairways)
        )
        return layout

    def _background(self, distance: float) -> PolygonSurface:
        s = self.settings
        margin = s["background_margin"]
        back = -s["background_back"]
        front = distance + s["background_front"]
        vertices = (
            Vertex(-margin, back), Vertex(margin, back),
            Vertex(margin, front), Vertex(-margin, front),
        )
        return PolygonSurface(vertices, SURFACES["OUT_OF_BOUNDS"])

    def _rough_tier(
        self,
        key: str,
        distance: float,
        offset: float,
        inner: float,
        outer: float
    ) -> List[PolygonSurface]:
        """
        Band of rough following the tee-to-green line.

        ``inner == 0`` yields one band centered on the line; otherwise two
        side bands spanning ``inner..outer`` from it.
        """

        s = self.settings
        stations = s["rough_stations"]
        start_z = -s["rough_back"]
        end_z = distance + s["rough_front"]

        def center_x(z: float) -> float:
            return offset * min(1.0, max(0.0, z / distance))

        zs = [start_z + (end_z - start_z) * i / stations for i in range(stations + 1)]

        def band(near: float, far: float) -> Tuple[Vertex, ...]:
            near_edge = [Vertex(center_x(z) + near, z) for z in zs]
            far_edge = [Vertex(center_x(z) + far, z) for z in reversed(zs)]
            return tuple(near_edge + far_edge)

        surface = SURFACES[key]
        if inner <= 0:
            return [PolygonSurface(band(-outer, outer), surface)]

        return [
            PolygonSurface(band(-outer, -inner), surface),
            PolygonSurface(band(inner, outer), surface),
        ]

    def _fairway(self, config: HoleConfiguration, adjustments: FairwayAdjustments) -> Optional[PolygonSurface]:
        s = self.settings
        distance = config.distance_meters
        green_front = distance - config.green_depth / 2
        end_z = green_front + adjustments.extension

        water = config.water_hazard
        if water and water.position == "front":
            end_z = min(end_z, water.center_z - water.radius_z * (1 + SHAPE_PROFILES["water"]["variation"])
                        - s["water_gap"])

        start_z = min(distance * s["fairway_start_fraction"], end_z - s["fairway_min_length"])
        if start_z < s["tee_radius_z"] * 2:
            logger.info("No room for a fairway on a %.0fm hole", distance)
            return None

        ring = organic_corridor(
            start_z=start_z,
            end_z=end_z,
            start_x=0.0,
            end_x=config.green_offset,
            half_width=s["fairway_half_width"],
            seed=config.shape_seed,
            left_multiplier=adjustments.left_width_multiplier,
            right_multiplier=adjustments.right_width_multiplier,
            bend_start_z=green_front - adjustments.approach_distance
        )
        return PolygonSurface(ring, SURFACES["FAIRWAY"])

    def _bunkers(self, config: HoleConfiguration) -> List[PolygonSurface]:
        """Zero to two greenside bunkers, kept clear of the green and the water side."""

        s = self.settings
        seed = config.shape_seed
        channel = CHANNELS["bunker"]
        count = min(s["bunker_max"], int(hash_unit(seed, channel, BUNKER_COUNT_INDEX) * (s["bunker_max"] + 1)))

        water_side = config.water_hazard.position if config.water_hazard else None
        slots = [slot for slot in BUNKER_SLOTS if water_side not in slot[2]]

        green_variation = SHAPE_PROFILES["green"]["variation"]
        bunker_variation = SHAPE_PROFILES["bunker"]["variation"]
        green_reach = max(config.green_width, config.green_depth) / 2 * (1 + green_variation)

        bunkers = []
        for i in range(count):
            if not slots:
                break
            pick = int(hash_unit(seed, channel, BUNKER_COUNT_INDEX + 1 + i) * len(slots))
            _, angle, _ = slots.pop(min(pick, len(slots) - 1))

            radius = s["bunker_min_radius"] + s["bunker_radius_range"] * hash_unit(
                seed, channel, BUNKER_COUNT_INDEX + 8 + i
            )
            reach = green_reach + radius * (1 + bunker_variation) + s["bunker_gap"]
            cx = config.green_offset + reach * math.cos(angle)
            cz = config.distance_meters + reach * math.sin(angle)

            ring = generate_shape("bunker", cx, cz, radius, radius * 0.8, seed, instance=i)
            bunkers.append(PolygonSurface(ring, SURFACES["BUNKER"]))

        return bunkers
