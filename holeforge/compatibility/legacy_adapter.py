"""
Legacy format adapter.

Converts between wire payloads and HoleConfiguration, and loads hand-made
hole layouts (hole editor JSON) into HoleLayout, welding vertices that
adjacent polygons share.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ..config import HoleConfiguration
from ..geometry import CircleSurface, EllipseSurface, HoleLayout, PolygonSurface, Surface, Vertex, as_vertex, as_vertices
from ..registry.surfaces import SURFACES, SurfaceProperties, get_surface


logger = logging.getLogger(__name__)


WELD_THRESHOLD = 0.1

# Older payload field names -> current ones
LEGACY_FIELD_MAP = {
    "greenOffsetMeters": "greenOffset",
    "greenWidthMeters": "greenWidth",
    "greenDepthMeters": "greenDepth",
}

# Editor JSON category -> (HoleLayout attribute, default surface)
LAYOUT_CATEGORY_MAP = {
    "lightRough": ("light_rough", "LIGHT_ROUGH"),
    "mediumRough": ("medium_rough", "MEDIUM_ROUGH"),
    "thickRough": ("thick_rough", "THICK_ROUGH"),
    "waterHazards": ("water_hazards", "WATER"),
    "bunkers": ("bunkers", "BUNKER"),
    "fairways": ("fairways", "FAIRWAY"),
    "greens": ("greens", "GREEN"),
}


class LegacyAdapter:
    """
    Converts between payload dicts, configurations and layouts.
    """

    def normalize_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Rename legacy fields and flatten a nested water center."""

        result = {LEGACY_FIELD_MAP.get(k, k): v for k, v in data.items()}

        water = result.get("waterHazard")
        if isinstance(water, dict):
            water = dict(water)
            center = water.pop("center", None)
            if isinstance(center, dict):
                water.setdefault("centerX", center.get("x"))
                water.setdefault("centerZ", center.get("z"))
            # Render hints only; the registry owns water properties
            water.pop("surface", None)
            result["waterHazard"] = water

        return result

    def payload_to_config(self, data: Dict[str, Any]) -> HoleConfiguration:
        return HoleConfiguration.model_validate(self.normalize_payload(data))

    def config_to_payload(self, config: HoleConfiguration) -> Dict[str, Any]:
        return config.to_payload()

    def _surface_props(self, value: Any, default_key: str) -> SurfaceProperties:
        if isinstance(value, dict):
            value = value.get("key") or value.get("name")
        props = get_surface(value) if isinstance(value, str) else None
        if props is None:
            if value is not None:
                logger.warning("Unknown surface %r, using %s", value, default_key)
            props = SURFACES[default_key]
        return props

    def surface_from_dict(self, data: Dict[str, Any], default_key: str) -> Surface:
        """
        Convert one editor surface entry into a tagged surface.

        Polygons may list ``vertices`` or ``controlPoints``; circles carry
        ``center`` and ``radius``; ellipses ``center``, ``radiusX`` and ``radiusZ``.
        """

        props = self._surface_props(data.get("surface"), default_key)
        kind = data.get("type", "polygon")

        if kind == "circle":
            return CircleSurface(as_vertex(data["center"]), float(data["radius"]), props)

        if kind == "ellipse":
            return EllipseSurface(
                as_vertex(data["center"]), float(data["radiusX"]), float(data["radiusZ"]), props
            )

        points = data.get("vertices", data.get("controlPoints", []))
        return PolygonSurface(as_vertices(points), props)

    def _tee_from_dict(self, data: Dict[str, Any]) -> Surface:
        """Editor tees are a center with width and depth."""

        if "vertices" in data or "controlPoints" in data:
            return self.surface_from_dict(data, "TEE")

        c = as_vertex(data["center"])
        hw = float(data["width"]) / 2
        hd = float(data["depth"]) / 2
        vertices = (
            Vertex(c.x - hw, c.z - hd, c.y),
            Vertex(c.x + hw, c.z - hd, c.y),
            Vertex(c.x + hw, c.z + hd, c.y),
            Vertex(c.x - hw, c.z + hd, c.y),
        )
        return PolygonSurface(vertices, self._surface_props(data.get("surface"), "TEE"))

    def layout_from_dict(self, data: Dict[str, Any], weld: bool = True) -> HoleLayout:
        """
        Load an editor hole layout.

        Args:
            data: Editor JSON (camelCase categories, optional single
                ``green``/``fairway`` entries, ``flagPositions``)
            weld: Merge shared vertices across surfaces

        Returns:
            HoleLayout ready for assembly
        """

        layout = HoleLayout(
            target_distance=float(data.get("targetDistance", data.get("distanceMeters", 0.0))),
            green_offset=float(data.get("greenOffset", 0.0)),
            shape_seed=data.get("shapeSeed"),
            obstacles=data.get("obstacles")
        )

        if data.get("background"):
            layout.background = self.surface_from_dict(data["background"], "OUT_OF_BOUNDS")
        if data.get("tee"):
            layout.tee = self._tee_from_dict(data["tee"])

        for source, (attribute, default_key) in LAYOUT_CATEGORY_MAP.items():
            entries = data.get(source)
            if entries is None:
                # Single-entry form: "green", "fairway"
                single = data.get(source[:-1])
                entries = [single] if single else []
            setattr(layout, attribute, [self.surface_from_dict(e, default_key) for e in entries])

        flags = data.get("flagPositions") or ([data["flagPosition"]] if data.get("flagPosition") else [])
        if flags:
            layout.flag_position = as_vertex(flags[0])

        if not layout.target_distance and layout.greens:
            # Distance falls back to the first green's centroid
            first = layout.greens[0]
            if isinstance(first, PolygonSurface) and first.vertices:
                layout.target_distance = float(np.mean([v.z for v in first.vertices]))
            elif not isinstance(first, PolygonSurface):
                layout.target_distance = first.center.z

        if weld:
            layout, merged = weld_shared_vertices(layout)
            if merged:
                logger.info("Merged %d groups of shared vertices", merged)

        return layout


def _polygon_slots(layout: HoleLayout) -> List[Tuple[str, Optional[int]]]:
    slots = []
    for attribute in ("background", "tee"):
        if isinstance(getattr(layout, attribute), PolygonSurface):
            slots.append((attribute, None))
    for attribute, _ in LAYOUT_CATEGORY_MAP.values():
        for i, surface in enumerate(getattr(layout, attribute)):
            if isinstance(surface, PolygonSurface):
                slots.append((attribute, i))
    return slots


def weld_shared_vertices(layout: HoleLayout, threshold: float = WELD_THRESHOLD) -> Tuple[HoleLayout, int]:
    """
    Snap polygon vertices that lie within ``threshold`` of each other in (x, z).

    Each unvisited vertex gathers every other unvisited vertex within the
    threshold; the group takes the average x, z and height. Surfaces are
    immutable, so a new layout is returned.

    Returns:
        Tuple of (welded layout, number of merged groups)
    """

    slots = _polygon_slots(layout)
    surfaces = [
        getattr(layout, attr) if index is None else getattr(layout, attr)[index]
        for attr, index in slots
    ]

    owners = []
    coords = []
    for s, surface in enumerate(surfaces):
        for v, vertex in enumerate(surface.vertices):
            owners.append((s, v))
            coords.append((vertex.x, vertex.z, vertex.y))

    if len(coords) < 2:
        return layout, 0

    points = np.asarray(coords, dtype=np.float64)
    # Columns are (x, z, y); neighbours are searched in the ground plane
    tree = cKDTree(points[:, :2])

    welded = points.copy()
    visited = np.zeros(len(points), dtype=bool)
    merged = 0
    for i in range(len(points)):
        if visited[i]:
            continue
        group = [j for j in tree.query_ball_point(points[i, :2], threshold) if not visited[j]]
        visited[group] = True
        if len(group) > 1:
            welded[group] = points[group].mean(axis=0)
            merged += 1

    if not merged:
        return layout, 0

    new_vertices = [list(s.vertices) for s in surfaces]
    for (s, v), (x, z, y) in zip(owners, welded):
        new_vertices[s][v] = Vertex(float(x), float(z), float(y))

    result = dataclasses.replace(layout)
    for (attribute, index), surface, vertices in zip(slots, surfaces, new_vertices):
        replacement = dataclasses.replace(surface, vertices=tuple(vertices))
        if index is None:
            setattr(result, attribute, replacement)
        else:
            items = list(getattr(result, attribute))
            items[index] = replacement
            setattr(result, attribute, items)

    return result, merged
