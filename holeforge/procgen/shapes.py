"""
Seeded organic shape generation.

Produces irregular closed rings (greens, water, tees, bunkers) and fairway
corridors whose perturbations are pure functions of (seed, channel, index).
Peers only need to exchange the seed and base dimensions to rebuild the
exact same boundaries.
"""

import math
from typing import Dict, Optional, Tuple

from ..errors import InvalidGeometryError
from ..geometry import Vertex
from .noise import CHANNELS, Seed, hash_signed


# Segment counts and radial variation per surface type
SHAPE_PROFILES: Dict[str, Dict[str, float]] = {
    "green": {"segments": 16, "variation": 0.12},
    "water": {"segments": 24, "variation": 0.18},
    "bunker": {"segments": 12, "variation": 0.20},
    "tee": {"segments": 8, "variation": 0.04},
    "fairway": {"segments": 12, "variation": 0.10},
}

# Index stride between instances of the same shape kind (e.g. bunker #0, #1)
INSTANCE_STRIDE = 1024


def organic_ellipse(
    center_x: float,
    center_z: float,
    radius_x: float,
    radius_z: float,
    seed: Seed,
    channel: int,
    segments: int,
    variation: float,
    rotation: float = 0.0,
    index_offset: int = 0,
    height: float = 0.0
) -> Tuple[Vertex, ...]:
    """
    Generate a closed organic ring around an ellipse.

    Vertex ``i`` sits at angle ``2*pi*i/segments + rotation`` with its radius
    scaled by ``1 + variation * h`` where ``h`` in [-1, 1) is the hash of
    (seed, channel, index_offset + i).

    Args:
        center_x: Ellipse center X (m)
        center_z: Ellipse center Z (m)
        radius_x: Semi-axis along X (m)
        radius_z: Semi-axis along Z (m)
        seed: Shape seed
        channel: Hash channel for this shape kind
        segments: Number of distinct vertices
        variation: Fractional radial perturbation (0.1 = +/-10%)
        rotation: Angular offset in radians
        index_offset: First hash index used by this ring
        height: Elevation assigned to every vertex

    Returns:
        ``segments + 1`` vertices; the last repeats the first
    """

    if segments < 3:
        raise InvalidGeometryError(f"Organic ring needs at least 3 segments, got {segments}")
    if radius_x <= 0 or radius_z <= 0:
        raise InvalidGeometryError(f"Ring radii must be positive, got ({radius_x}, {radius_z})")

    vertices = []
    for i in range(segments):
        angle = 2.0 * math.pi * i / segments + rotation
        factor = 1.0 + variation * hash_signed(seed, channel, index_offset + i)
        vertices.append(Vertex(
            center_x + radius_x * factor * math.cos(angle),
            center_z + radius_z * factor * math.sin(angle),
            height
        ))

    vertices.append(vertices[0])
    return tuple(vertices)


def generate_shape(
    kind: str,
    center_x: float,
    center_z: float,
    radius_x: float,
    radius_z: float,
    seed: Seed,
    instance: int = 0,
    rotation: float = 0.0,
    height: float = 0.0
) -> Tuple[Vertex, ...]:
    """Organic ring using the segment count, variation and channel of ``kind``."""

    profile = SHAPE_PROFILES[kind]
    return organic_ellipse(
        center_x, center_z, radius_x, radius_z,
        seed=seed,
        channel=CHANNELS[kind],
        segments=int(profile["segments"]),
        variation=profile["variation"],
        rotation=rotation,
        index_offset=instance * INSTANCE_STRIDE,
        height=height
    )


def _smoothstep(t: float) -> float:
    t = min(1.0, max(0.0, t))
    return t * t * (3 - 2 * t)


def organic_corridor(
    start_z: float,
    end_z: float,
    start_x: float,
    end_x: float,
    half_width: float,
    seed: Seed,
    stations: Optional[int] = None,
    variation: Optional[float] = None,
    left_multiplier: float = 1.0,
    right_multiplier: float = 1.0,
    bend_start_z: Optional[float] = None,
    taper: float = 0.35
) -> Tuple[Vertex, ...]:
    """
    Generate a closed fairway-style corridor from ``start_z`` to ``end_z``.

    The centerline stays at ``start_x`` until ``bend_start_z`` and then eases
    to ``end_x``. Half-widths taper toward both ends and are perturbed per
    station and per side from the fairway hash channel. Left is the -X side.

    Returns:
        Left edge (start to end), right edge (end to start), closing vertex
    """

    if end_z - start_z <= 0:
        raise InvalidGeometryError(f"Corridor end ({end_z}) must lie beyond its start ({start_z})")

    profile = SHAPE_PROFILES["fairway"]
    stations = int(stations or profile["segments"])
    variation = profile["variation"] if variation is None else variation
    if stations < 1:
        raise InvalidGeometryError("Corridor needs at least one station interval")

    bend_start_z = start_z if bend_start_z is None else min(max(bend_start_z, start_z), end_z)
    bend_length = end_z - bend_start_z
    channel = CHANNELS["fairway"]

    left_edge = []
    right_edge = []
    for i in range(stations + 1):
        t = i / stations
        z = start_z + (end_z - start_z) * t

        if bend_length > 0:
            bend = _smoothstep((z - bend_start_z) / bend_length)
        else:
            bend = 1.0
        center_x = start_x + (end_x - start_x) * bend

        width = half_width * (1.0 - taper * (1.0 - math.sin(math.pi * t)))
        left = width * left_multiplier * (1.0 + variation * hash_signed(seed, channel, i))
        right = width * right_multiplier * (
            1.0 + variation * hash_signed(seed, channel, INSTANCE_STRIDE + i)
        )

        left_edge.append(Vertex(center_x - left, z))
        right_edge.append(Vertex(center_x + right, z))

    vertices = left_edge + right_edge[::-1]
    vertices.append(vertices[0])
    return tuple(vertices)


def tilt_ring(
    vertices: Tuple[Vertex, ...],
    center_z: float,
    half_depth: float,
    rise: float
) -> Tuple[Vertex, ...]:
    """Add a front-to-back slope: ``rise`` meters at ``center_z + half_depth``."""

    if half_depth <= 0:
        return vertices

    return tuple(
        Vertex(v.x, v.z, v.y + rise * (v.z - center_z) / half_depth)
        for v in vertices
    )
