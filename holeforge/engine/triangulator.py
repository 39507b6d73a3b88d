"""
Polygon triangulation with per-vertex heights.

Topology is decided by ear clipping in the (x, z) projection; heights only
move the resulting vertices along Y, so a flat 2D outline can describe a
non-planar, terrain-like surface.
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidGeometryError
from ..geometry import Mesh, Vertex, as_vertices, is_closed_ring
from ..procgen.noise import value_noise_2d
from ..registry.surfaces import hex_to_rgb


UINT16_MAX_VERTICES = 65535
_EPS = 1e-12


def _cross2(a, b, c) -> float:
    """Z of (b - a) x (c - a) in the (x, z) plane."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def _point_in_triangle(p, a, b, c) -> bool:
    d1 = _cross2(a, b, p)
    d2 = _cross2(b, c, p)
    d3 = _cross2(c, a, p)
    has_neg = d1 < -_EPS or d2 < -_EPS or d3 < -_EPS
    has_pos = d1 > _EPS or d2 > _EPS or d3 > _EPS
    return not (has_neg and has_pos)


def signed_area(points: Sequence[Tuple[float, float]]) -> float:
    """Shoelace signed area; positive for counter-clockwise (x, z) rings."""

    total = 0.0
    n = len(points)
    for i in range(n):
        x0, z0 = points[i]
        x1, z1 = points[(i + 1) % n]
        total += x0 * z1 - x1 * z0
    return total / 2.0


def ear_clip(points: Sequence[Tuple[float, float]], ring: Sequence[int]) -> List[Tuple[int, int, int]]:
    """
    Triangulate a simple polygon by ear clipping.

    Args:
        points: (x, z) coordinates indexed by vertex id
        ring: Vertex ids forming the polygon boundary, without closing repeat

    Returns:
        Triangles as vertex-id triples
    """

    ring = list(ring)
    if len(ring) < 3:
        return []

    ccw = signed_area([points[i] for i in ring]) > 0
    triangles = []

    while len(ring) > 3:
        n = len(ring)
        ear_found = False

        for k in range(n):
            prev_i, curr_i, next_i = ring[(k - 1) % n], ring[k], ring[(k + 1) % n]
            a, b, c = points[prev_i], points[curr_i], points[next_i]

            # Ear tip must be convex with respect to the ring winding
            cross = _cross2(a, b, c)
            if (ccw and cross <= _EPS) or (not ccw and cross >= -_EPS):
                continue

            if any(
                _point_in_triangle(points[j], a, b, c)
                for j in ring
                if j not in (prev_i, curr_i, next_i)
            ):
                continue

            triangles.append((prev_i, curr_i, next_i))
            ring.pop(k)
            ear_found = True
            break

        if not ear_found:
            # Self-intersecting or fully collinear remainder: fan it
            for k in range(1, len(ring) - 1):
                triangles.append((ring[0], ring[k], ring[k + 1]))
            return triangles

    triangles.append((ring[0], ring[1], ring[2]))
    return triangles


def _orient_up(points: Sequence[Tuple[float, float]], triangles: List[Tuple[int, int, int]]) -> np.ndarray:
    """Order each triangle so its face normal points to +Y."""

    oriented = []
    for a, b, c in triangles:
        # (b - a) x (c - a) has Y = -cross2 in the (x, z) plane
        if _cross2(points[a], points[b], points[c]) > 0:
            oriented.append((a, c, b))
        else:
            oriented.append((a, b, c))
    return np.asarray(oriented, dtype=np.int64).reshape(-1, 3)


def compute_vertex_normals(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Area-weighted vertex normals.

    Unreferenced vertices get +Y.
    """

    normals = np.zeros_like(points, dtype=np.float64)
    if len(triangles):
        p0 = points[triangles[:, 0]]
        p1 = points[triangles[:, 1]]
        p2 = points[triangles[:, 2]]
        # Unnormalized cross product length is twice the triangle area
        face_normals = np.cross(p1 - p0, p2 - p0)
        for corner in range(3):
            np.add.at(normals, triangles[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1)
    missing = lengths <= _EPS
    normals[missing] = (0.0, 1.0, 0.0)
    lengths[missing] = 1.0

    return normals / lengths[:, None]


def compute_planar_uvs(points: np.ndarray) -> np.ndarray:
    """Project onto the (x, z) bounding box; a degenerate box yields zeros."""

    uvs = np.zeros((len(points), 2), dtype=np.float64)
    if len(points) == 0:
        return uvs

    min_x, max_x = points[:, 0].min(), points[:, 0].max()
    min_z, max_z = points[:, 2].min(), points[:, 2].max()
    size_x = max_x - min_x
    size_z = max_z - min_z

    if size_x > 0 and size_z > 0:
        uvs[:, 0] = (points[:, 0] - min_x) / size_x
        uvs[:, 1] = (points[:, 2] - min_z) / size_z

    return uvs


def compute_color_variation(
    points: np.ndarray,
    base_color: str,
    noise_scale: float = 0.001,
    variation_strength: float = 0.4,
    seed: int = 0
) -> np.ndarray:
    """Per-vertex colors: base color scaled by ``1 + noise * strength``, clamped at 0."""

    rgb = np.asarray(hex_to_rgb(base_color), dtype=np.float64)
    noise = value_noise_2d(points[:, 0] * noise_scale, points[:, 2] * noise_scale, seed)
    factor = np.maximum(0.0, 1.0 + noise * variation_strength)
    return factor[:, None] * rgb[None, :]


def triangulate(
    vertices: Sequence[Any],
    base_color: Optional[str] = None,
    noise_scale: float = 0.001,
    variation_strength: float = 0.4,
    noise_seed: int = 0
) -> Mesh:
    """
    Triangulate a polygon whose vertices may carry heights.

    Args:
        vertices: Vertex-like values ({x, z, y?}, Vertex, or tuples)
        base_color: When given, add per-vertex color variation around it
        noise_scale: Spatial frequency of the color noise
        variation_strength: Amplitude of the color noise
        noise_seed: Seed for the color noise

    Returns:
        Mesh with one position per input vertex

    Raises:
        InvalidGeometryError: Fewer than 3 vertices remain
    """

    verts = as_vertices(vertices)
    if len(verts) < 3:
        raise InvalidGeometryError(f"Need at least 3 vertices to triangulate, got {len(verts)}")

    # A repeated closing vertex stays in the buffers but not in the ring
    closed = is_closed_ring(verts) and len(verts) > 3
    ring_size = len(verts) - 1 if closed else len(verts)
    if ring_size < 3:
        raise InvalidGeometryError("Closed ring has fewer than 3 distinct vertices")

    points_xz = [(v.x, v.z) for v in verts]
    for v in verts:
        if not (math.isfinite(v.x) and math.isfinite(v.z) and math.isfinite(v.y)):
            raise InvalidGeometryError(f"Non-finite vertex {v}")

    triangles = _orient_up(points_xz, ear_clip(points_xz, range(ring_size)))

    points = np.array([(v.x, v.y, v.z) for v in verts], dtype=np.float64)
    normals = compute_vertex_normals(points, triangles)
    if closed:
        normals[-1] = normals[0]
    uvs = compute_planar_uvs(points)

    colors = None
    if base_color is not None:
        colors = compute_color_variation(
            points, base_color, noise_scale, variation_strength, noise_seed
        ).astype(np.float32).ravel()

    index_dtype = np.uint16 if len(verts) <= UINT16_MAX_VERTICES else np.uint32

    return Mesh(
        positions=points.astype(np.float32).ravel(),
        indices=triangles.astype(index_dtype).ravel(),
        normals=normals.astype(np.float32).ravel(),
        uvs=uvs.astype(np.float32).ravel(),
        colors=colors
    )


def build_disc(
    center: Vertex,
    radius_x: float,
    radius_z: Optional[float] = None,
    segments: int = 32
) -> Mesh:
    """
    Build a flat elliptical disc directly, without ear clipping.

    Used for legacy circle/ellipse surfaces. Vertex 0 is the center,
    followed by ``segments`` rim vertices.
    """

    radius_z = radius_x if radius_z is None else radius_z
    if radius_x <= 0 or radius_z <= 0 or segments < 3:
        raise InvalidGeometryError(
            f"Disc needs positive radii and >= 3 segments, got ({radius_x}, {radius_z}, {segments})"
        )

    angles = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    points = np.empty((segments + 1, 3), dtype=np.float64)
    points[0] = (center.x, center.y, center.z)
    points[1:, 0] = center.x + radius_x * np.cos(angles)
    points[1:, 1] = center.y
    points[1:, 2] = center.z + radius_z * np.sin(angles)

    rim = np.arange(1, segments + 1)
    # Rim runs counter-clockwise in (x, z); (0, next, current) faces +Y
    triangles = np.stack([np.zeros(segments, dtype=np.int64), np.roll(rim, -1), rim], axis=1)

    normals = np.tile((0.0, 1.0, 0.0), (segments + 1, 1))
    uvs = compute_planar_uvs(points)
    index_dtype = np.uint16 if len(points) <= UINT16_MAX_VERTICES else np.uint32

    return Mesh(
        positions=points.astype(np.float32).ravel(),
        indices=triangles.astype(index_dtype).ravel(),
        normals=normals.astype(np.float32).ravel(),
        uvs=uvs.astype(np.float32).ravel()
    )
