"""
Geometry types shared by the triangulator, shape generator and assembly.

Surfaces are a tagged variant: every surface carries a ``kind`` discriminant
("polygon", "circle" or "ellipse") and the renderer switches on it.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

import numpy as np

from .registry.surfaces import SurfaceProperties


class Vertex(NamedTuple):
    """Planar position (x, z) with optional elevation y, all in meters."""

    x: float
    z: float
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "z": self.z, "y": self.y}


def as_vertex(value: Any) -> Vertex:
    """
    Coerce a vertex-like value into a Vertex.

    Accepts Vertex instances, dicts with ``x``/``z`` and optional ``y``,
    and (x, z) or (x, z, y) sequences.
    """

    if isinstance(value, Vertex):
        return value

    if isinstance(value, dict):
        y = value.get("y")
        return Vertex(float(value["x"]), float(value["z"]), float(y) if y is not None else 0.0)

    if len(value) == 2:
        return Vertex(float(value[0]), float(value[1]))
    if len(value) == 3:
        return Vertex(float(value[0]), float(value[1]), float(value[2]))

    raise ValueError(f"Cannot interpret {value!r} as a vertex")


def as_vertices(values: Iterable[Any]) -> Tuple[Vertex, ...]:
    return tuple(as_vertex(v) for v in values)


def is_closed_ring(vertices: Tuple[Vertex, ...]) -> bool:
    """True when the last vertex repeats the first in the (x, z) plane."""

    if len(vertices) < 2:
        return False
    first, last = vertices[0], vertices[-1]
    return first.x == last.x and first.z == last.z


def open_ring(vertices: Tuple[Vertex, ...]) -> Tuple[Vertex, ...]:
    """Drop an explicit closing vertex, if present."""
    return vertices[:-1] if is_closed_ring(vertices) and len(vertices) > 3 else vertices


@dataclass(frozen=True, eq=False)
class Mesh:
    """
    Immutable render geometry for one surface.

    ``positions`` and ``normals`` are flat (x, y, z) triples, ``uvs`` flat
    (u, v) pairs, ``indices`` flat triangle triples. ``colors`` holds optional
    per-vertex (r, g, b) triples.
    """

    positions: np.ndarray
    indices: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    colors: Optional[np.ndarray] = None

    def __post_init__(self):
        for array in (self.positions, self.indices, self.normals, self.uvs, self.colors):
            if array is not None:
                array.setflags(write=False)

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def triangles(self) -> np.ndarray:
        """Indices reshaped to (triangle_count, 3)."""
        return self.indices.reshape(-1, 3).astype(np.int64)

    def points(self) -> np.ndarray:
        """Positions reshaped to (vertex_count, 3)."""
        return self.positions.reshape(-1, 3)


@dataclass(frozen=True)
class PolygonSurface:
    vertices: Tuple[Vertex, ...]
    surface: SurfaceProperties
    kind: ClassVar[str] = "polygon"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "surface": self.surface.key,
            "vertices": [v.to_dict() for v in self.vertices],
        }


@dataclass(frozen=True)
class CircleSurface:
    center: Vertex
    radius: float
    surface: SurfaceProperties
    kind: ClassVar[str] = "circle"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "surface": self.surface.key,
            "center": self.center.to_dict(),
            "radius": self.radius,
        }


@dataclass(frozen=True)
class EllipseSurface:
    center: Vertex
    radius_x: float
    radius_z: float
    surface: SurfaceProperties
    kind: ClassVar[str] = "ellipse"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "surface": self.surface.key,
            "center": self.center.to_dict(),
            "radius_x": self.radius_x,
            "radius_z": self.radius_z,
        }


Surface = Union[PolygonSurface, CircleSurface, EllipseSurface]


@dataclass
class HoleLayout:
    """
    Concrete surfaces for one hole, grouped by render category.

    ``obstacles`` holds authoritative placements (dicts with type, size, x, z)
    or None when obstacles should be generated locally.
    """

    target_distance: float
    background: Optional[Surface] = None
    light_rough: List[Surface] = field(default_factory=list)
    medium_rough: List[Surface] = field(default_factory=list)
    thick_rough: List[Surface] = field(default_factory=list)
    water_hazards: List[Surface] = field(default_factory=list)
    bunkers: List[Surface] = field(default_factory=list)
    fairways: List[Surface] = field(default_factory=list)
    greens: List[Surface] = field(default_factory=list)
    tee: Optional[Surface] = None
    flag_position: Optional[Vertex] = None
    green_offset: float = 0.0
    shape_seed: Optional[Union[int, float]] = None
    obstacles: Optional[List[Dict[str, Any]]] = None

    def surfaces(self, category: str) -> List[Surface]:
        """Surfaces of one render category as a list."""

        value = getattr(self, category)
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "target_distance": self.target_distance,
            "green_offset": self.green_offset,
            "shape_seed": self.shape_seed,
            "flag_position": self.flag_position.to_dict() if self.flag_position else None,
            "obstacles": self.obstacles,
        }
        for category in ("background", "tee"):
            value = getattr(self, category)
            data[category] = value.to_dict() if value is not None else None
        for category in ("light_rough", "medium_rough", "thick_rough",
                         "water_hazards", "bunkers", "fairways", "greens"):
            data[category] = [s.to_dict() for s in getattr(self, category)]
        return data
