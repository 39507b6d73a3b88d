"""
Hole assembly.

Turns a HoleLayout into scene nodes: one mesh per surface in a fixed
category order, green anchors, the flagstick and cup, and the obstacle
field. All per-hole state lives on a HoleInstance so regeneration is a
clear() followed by load().
"""

import logging
import math
import random
import warnings
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import HoleConfiguration
from ..errors import InvalidGeometryError, MissingAnchorWarning, ResourceLoadError
from ..geometry import CircleSurface, EllipseSurface, HoleLayout, Mesh, PolygonSurface, Surface, Vertex, open_ring
from ..procgen.noise import SeededStream, seed_to_int
from ..procgen.shapes import generate_shape
from ..registry.obstacles import Obstacle
from .config_generator import HoleConfigGenerator
from .layout import LayoutBuilder
from .obstacle_placement import ObstaclePlacementEngine
from .scene import InMemoryBackend, RenderBackend, Scene, SceneNode, TextureLoader
from .terrain_height import TerrainHeightField
from .triangulator import build_disc, triangulate


logger = logging.getLogger(__name__)


# Back to front; later categories draw over earlier ones
CATEGORY_ORDER = (
    "background", "light_rough", "medium_rough", "thick_rough",
    "water_hazards", "bunkers", "fairways", "greens", "tee",
)

# Per-vertex color variation for the rough tiers
ROUGH_COLOR_VARIATION = {"noise_scale": 0.001, "variation_strength": 0.4}
RENDER_OPTIONS: Dict[str, Dict[str, Any]] = {
    "light_rough": ROUGH_COLOR_VARIATION,
    "medium_rough": ROUGH_COLOR_VARIATION,
    "thick_rough": ROUGH_COLOR_VARIATION,
}

FLAGSTICK = {
    "pole_height": 2.5,
    "pole_radius": 0.02,
    "cloth_width": 0.5,
    "cloth_height": 0.35,
    "cup_radius": 0.054,
    "cup_depth": 0.1,
    "cup_lift": 0.01,
}

DISC_SEGMENTS = 32

# Shape profile for seeded ellipse surfaces, by category
CATEGORY_SHAPES = {
    "greens": "green",
    "water_hazards": "water",
    "bunkers": "bunker",
    "fairways": "fairway",
    "tee": "tee",
}


class HoleInstance:
    """
    Scene nodes, anchors and obstacles of the currently loaded hole.

    Args:
        scene: Scene root the hole is added to
        backend: Mesh/material factory; in-memory when omitted
        texture_loader: Optional asynchronous texture source
        height_query: ``(x, z) -> y`` used to seat the cup; defaults to
            this hole's own terrain height field
        placement_engine: Obstacle scatter engine
    """

    def __init__(
        self,
        scene: Optional[Scene] = None,
        backend: Optional[RenderBackend] = None,
        texture_loader: Optional[TextureLoader] = None,
        height_query: Optional[Callable[[float, float], float]] = None,
        placement_engine: Optional[ObstaclePlacementEngine] = None
    ):
        self.scene = scene if scene is not None else Scene()
        self.backend = backend or InMemoryBackend()
        self.texture_loader = texture_loader
        self.placement_engine = placement_engine or ObstaclePlacementEngine()
        self.height_field = TerrainHeightField()
        self._height_query = height_query

        self.generation = 0
        self.layout: Optional[HoleLayout] = None
        self.nodes: List[SceneNode] = []
        self.obstacles: List[Obstacle] = []
        self.skipped_surfaces: List[str] = []
        self.flag_position: Optional[Vertex] = None
        self.green_center: Optional[Vertex] = None
        self.green_radius: Optional[float] = None

    def query_height(self, x: float, z: float) -> float:
        if self._height_query is not None:
            return self._height_query(x, z)
        return self.height_field.query_height(x, z)

    def clear(self) -> None:
        """Dispose every node and forget anchors and obstacles."""

        # Invalidate texture callbacks still in flight
        self.generation += 1

        for node in self.nodes:
            self.scene.remove(node)
            self.backend.dispose(node)

        disposed = len(self.nodes)
        self.nodes = []
        self.obstacles = []
        self.skipped_surfaces = []
        self.height_field.clear()
        self.layout = None
        self.flag_position = None
        self.green_center = None
        self.green_radius = None

        if disposed:
            logger.debug("Cleared hole: disposed %d nodes", disposed)

    def load(self, layout: HoleLayout, rng: Any = None) -> "HoleInstance":
        """
        Build the hole described by ``layout``, replacing any previous hole.

        Args:
            layout: Surfaces, flag position and optional authoritative obstacles
            rng: Random source for generated obstacles; defaults to a stream
                seeded with the layout's shape seed

        Returns:
            self
        """

        self.clear()
        self.layout = layout

        for category in CATEGORY_ORDER:
            for index, surface in enumerate(layout.surfaces(category)):
                self._add_surface(category, index, surface, layout)

        self._compute_green_anchors(layout)
        if self.green_center is not None:
            self._place_flag(layout)

        self._place_obstacles(layout, rng)

        logger.info(
            "Loaded hole: %d surfaces, %d skipped, %d obstacles",
            sum(1 for n in self.nodes if "category" in n.user_data),
            len(self.skipped_surfaces), len(self.obstacles)
        )
        return self

    # ------------------------------------------------------------------ surfaces

    def _build_mesh(self, category: str, surface: Surface, layout: HoleLayout) -> Mesh:
        if isinstance(surface, PolygonSurface):
            options = RENDER_OPTIONS.get(category)
            if options:
                return triangulate(
                    surface.vertices,
                    base_color=surface.surface.color,
                    noise_seed=seed_to_int(layout.shape_seed or 0),
                    **options
                )
            return triangulate(surface.vertices)

        if isinstance(surface, EllipseSurface):
            ring = self._organic_ring(category, surface, layout)
            if ring is not None:
                return triangulate(ring)
            return build_disc(surface.center, surface.radius_x, surface.radius_z, DISC_SEGMENTS)

        if isinstance(surface, CircleSurface):
            return build_disc(surface.center, surface.radius, segments=DISC_SEGMENTS)

        raise InvalidGeometryError(f"Unknown surface kind {getattr(surface, 'kind', type(surface).__name__)}")

    def _organic_ring(self, category: str, surface: EllipseSurface, layout: HoleLayout) -> Optional[Tuple[Vertex, ...]]:
        """Seeded ring for an ellipse surface, or None without a shape seed."""

        if layout.shape_seed is None:
            return None
        kind = CATEGORY_SHAPES.get(category)
        if kind is None:
            kind = "water" if surface.surface.key == "WATER" else "bunker"
        # Same ring every peer derives from the seed
        return generate_shape(
            kind, surface.center.x, surface.center.z,
            surface.radius_x, surface.radius_z,
            layout.shape_seed, height=surface.center.y
        )

    def _add_surface(self, category: str, index: int, surface: Surface, layout: HoleLayout) -> None:
        name = f"{category}_{index}"
        try:
            mesh = self._build_mesh(category, surface, layout)
        except InvalidGeometryError as exc:
            self.skipped_surfaces.append(name)
            logger.warning("Skipping surface %s: %s", name, exc)
            return

        props = surface.surface
        material = self.backend.flat_material(props.color, vertex_colors=mesh.colors is not None)
        node = self.backend.create_node(
            name, mesh, material,
            position=(0.0, props.height, 0.0),
            category=category, surface=props.key
        )
        self.scene.add(node)
        self.nodes.append(node)
        self.height_field.add_mesh(category, props, mesh)

        if props.texture_path and self.texture_loader is not None:
            self._request_texture(node, props.texture_path, props.color)

    def _request_texture(self, node: SceneNode, path: str, color: str) -> None:
        generation = self.generation

        def on_load(texture):
            if generation != self.generation or node.disposed:
                logger.debug("Dropping texture %s for a replaced hole", path)
                return
            flat = node.material
            node.material = self.backend.textured_material(color, texture)
            if flat is not None:
                flat.disposed = True

        def on_error(error):
            if generation != self.generation:
                return
            if not isinstance(error, ResourceLoadError):
                error = ResourceLoadError(path, error)
            logger.warning("%s; keeping flat color for %s", error, node.name)

        self.texture_loader.load(path, on_load, on_error)

    # ------------------------------------------------------------------ anchors

    def _compute_green_anchors(self, layout: HoleLayout) -> None:
        greens = layout.surfaces("greens")
        if not greens:
            message = "Hole has no green; flag and green anchors are unavailable"
            warnings.warn(message, MissingAnchorWarning, stacklevel=3)
            logger.warning(message)
            return

        # Boundary vertices of every green, as rendered
        ring: List[Vertex] = []
        for green in greens:
            if isinstance(green, PolygonSurface):
                ring.extend(open_ring(green.vertices))
            elif isinstance(green, EllipseSurface):
                organic = self._organic_ring("greens", green, layout)
                if organic is not None:
                    ring.extend(open_ring(organic))

        if ring:
            cx = sum(v.x for v in ring) / len(ring)
            cz = sum(v.z for v in ring) / len(ring)
            cy = sum(v.y for v in ring) / len(ring)
            self.green_center = Vertex(cx, cz, cy)
            self.green_radius = sum(math.hypot(v.x - cx, v.z - cz) for v in ring) / len(ring)
            return

        green = greens[0]
        if isinstance(green, EllipseSurface):
            self.green_center = green.center
            self.green_radius = (green.radius_x + green.radius_z) / 2
        else:
            self.green_center = green.center
            self.green_radius = green.radius

    def _place_flag(self, layout: HoleLayout) -> None:
        target = layout.flag_position or self.green_center
        ground = self.query_height(target.x, target.z)
        self.flag_position = Vertex(target.x, target.z, ground)

        parts = (
            ("flagstick", (target.x, ground, target.z),
             {"height": FLAGSTICK["pole_height"], "radius": FLAGSTICK["pole_radius"]}),
            ("flag_cloth", (target.x, ground + FLAGSTICK["pole_height"] - FLAGSTICK["cloth_height"] / 2, target.z),
             {"width": FLAGSTICK["cloth_width"], "height": FLAGSTICK["cloth_height"]}),
            ("cup", (target.x, ground + FLAGSTICK["cup_lift"], target.z),
             {"radius": FLAGSTICK["cup_radius"], "depth": FLAGSTICK["cup_depth"]}),
        )
        for name, position, data in parts:
            node = self.backend.create_node(name, None, self.backend.flat_material("#FFFFFF"), position, **data)
            self.scene.add(node)
            self.nodes.append(node)

    # ------------------------------------------------------------------ obstacles

    def _place_obstacles(self, layout: HoleLayout, rng: Any) -> None:
        engine = self.placement_engine
        if layout.obstacles is not None:
            self.obstacles = engine.place_authoritative(layout.obstacles)
        else:
            if rng is None:
                rng = SeededStream(layout.shape_seed) if layout.shape_seed is not None else random.Random()
            self.obstacles = engine.place_generative(
                layout.target_distance, self.green_center, self.green_radius,
                rng=rng, green_offset=layout.green_offset
            )

        for index, obstacle in enumerate(self.obstacles):
            ground = self.query_height(obstacle.x, obstacle.z)
            node = self.backend.create_node(
                f"obstacle_{index}", None,
                self.backend.flat_material(obstacle.properties.color),
                (obstacle.x, ground, obstacle.z),
                **obstacle.to_dict()
            )
            self.scene.add(node)
            self.nodes.append(node)

    # ------------------------------------------------------------------ accessors

    def get_flag_position(self) -> Optional[Vertex]:
        return self.flag_position

    def get_green_center(self) -> Optional[Vertex]:
        return self.green_center

    def get_green_radius(self) -> Optional[float]:
        return self.green_radius

    def get_obstacles(self) -> List[Obstacle]:
        return list(self.obstacles)

    def surface_nodes(self, category: str) -> List[SceneNode]:
        return [n for n in self.nodes if n.user_data.get("category") == category]

    def summary(self) -> Dict[str, Any]:
        """Plain-data view of the loaded hole."""

        return {
            "generation": self.generation,
            "target_distance": self.layout.target_distance if self.layout else None,
            "shape_seed": self.layout.shape_seed if self.layout else None,
            "flag_position": self.flag_position.to_dict() if self.flag_position else None,
            "green_center": self.green_center.to_dict() if self.green_center else None,
            "green_radius": self.green_radius,
            "surfaces": {
                category: [
                    {"name": n.name, "vertices": n.mesh.vertex_count, "triangles": n.mesh.triangle_count}
                    for n in self.surface_nodes(category)
                ]
                for category in CATEGORY_ORDER
            },
            "skipped_surfaces": list(self.skipped_surfaces),
            "obstacles": [o.to_dict() for o in self.obstacles],
        }


class HoleComposer:
    """
    Configuration -> layout -> loaded hole.

    Generates a configuration when none is supplied, so single-player holes
    and authoritative multiplayer holes go through the same path.
    """

    def __init__(
        self,
        layout_builder: Optional[LayoutBuilder] = None,
        placement_engine: Optional[ObstaclePlacementEngine] = None,
        config_generator: Optional[HoleConfigGenerator] = None
    ):
        self.layout_builder = layout_builder or LayoutBuilder()
        self.placement_engine = placement_engine or ObstaclePlacementEngine()
        self.config_generator = config_generator or HoleConfigGenerator()

    def compose(
        self,
        config: Optional[HoleConfiguration] = None,
        instance: Optional[HoleInstance] = None,
        target_distance: Optional[float] = None,
        rng: Any = None
    ) -> HoleInstance:
        """
        Build (or rebuild) a hole.

        Args:
            config: Hole configuration; generated when None
            instance: Existing hole to regenerate in place
            target_distance: Distance for a generated configuration
            rng: Random source for generated obstacles

        Returns:
            The loaded HoleInstance
        """

        if config is None:
            config = self.config_generator.generate(target_distance)

        layout = self.layout_builder.build(config)
        if instance is None:
            instance = HoleInstance(placement_engine=self.placement_engine)

        return instance.load(layout, rng=rng)
