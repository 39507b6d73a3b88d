"""
Height and lie lookups over triangulated hole surfaces.
"""

import logging
from typing import Dict, List, NamedTuple, Optional

import numpy as np

from ..geometry import Mesh
from ..registry.surfaces import SurfaceProperties


logger = logging.getLogger(__name__)


# Highest priority first: where surfaces overlap, the first hit wins
LIE_PRIORITY = (
    "tee", "greens", "fairways", "bunkers", "water_hazards",
    "thick_rough", "medium_rough", "light_rough", "background",
)

BARYCENTRIC_TOLERANCE = 1e-4


class TerrainInfo(NamedTuple):
    height: float
    surface: Optional[SurfaceProperties]
    category: Optional[str]


class _IndexedSurface(NamedTuple):
    category: str
    surface: SurfaceProperties
    v1: np.ndarray
    v2: np.ndarray
    v3: np.ndarray


def _barycentric(x: float, z: float, v1: np.ndarray, v2: np.ndarray, v3: np.ndarray):
    """
    Barycentric weights of (x, z) for every triangle at once.

    Vertex arrays are (n, 3) as (x, y, z). Returns (weights (n, 3), inside mask).
    """

    denom = (v2[:, 2] - v3[:, 2]) * (v1[:, 0] - v3[:, 0]) + (v3[:, 0] - v2[:, 0]) * (v1[:, 2] - v3[:, 2])
    valid = np.abs(denom) >= 1e-6
    safe = np.where(valid, denom, 1.0)

    w1 = ((v2[:, 2] - v3[:, 2]) * (x - v3[:, 0]) + (v3[:, 0] - v2[:, 0]) * (z - v3[:, 2])) / safe
    w2 = ((v3[:, 2] - v1[:, 2]) * (x - v3[:, 0]) + (v1[:, 0] - v3[:, 0]) * (z - v3[:, 2])) / safe
    w3 = 1.0 - w1 - w2

    weights = np.stack([w1, w2, w3], axis=1)
    inside = valid & np.all(
        (weights >= -BARYCENTRIC_TOLERANCE) & (weights <= 1.0 + BARYCENTRIC_TOLERANCE), axis=1
    )
    return weights, inside


class TerrainHeightField:
    """
    Triangulated surfaces indexed for point queries.

    Heights are interpolated vertex elevations; rendering-layer offsets are
    not included. Points off every surface report height 0.0 and no surface.
    """

    def __init__(self):
        self._surfaces: Dict[str, List[_IndexedSurface]] = {}

    def add_mesh(self, category: str, surface: SurfaceProperties, mesh: Mesh) -> None:
        points = np.asarray(mesh.points(), dtype=np.float64)
        triangles = mesh.triangles()
        if len(triangles) == 0:
            logger.debug("Ignoring %s mesh without triangles", category)
            return

        self._surfaces.setdefault(category, []).append(_IndexedSurface(
            category=category,
            surface=surface,
            v1=points[triangles[:, 0]],
            v2=points[triangles[:, 1]],
            v3=points[triangles[:, 2]],
        ))

    def clear(self) -> None:
        self._surfaces.clear()

    @property
    def surface_count(self) -> int:
        return sum(len(entries) for entries in self._surfaces.values())

    def _ordered(self):
        for category in LIE_PRIORITY:
            yield from self._surfaces.get(category, ())
        for category, entries in self._surfaces.items():
            if category not in LIE_PRIORITY:
                yield from entries

    def terrain_at(self, x: float, z: float) -> TerrainInfo:
        for entry in self._ordered():
            weights, inside = _barycentric(x, z, entry.v1, entry.v2, entry.v3)
            hits = np.flatnonzero(inside)
            if len(hits) == 0:
                continue

            i = hits[0]
            heights = np.array([entry.v1[i, 1], entry.v2[i, 1], entry.v3[i, 1]])
            return TerrainInfo(float(weights[i] @ heights), entry.surface, entry.category)

        return TerrainInfo(0.0, None, None)

    def query_height(self, x: float, z: float) -> float:
        return self.terrain_at(x, z).height

    def surface_at(self, x: float, z: float) -> Optional[SurfaceProperties]:
        return self.terrain_at(x, z).surface
