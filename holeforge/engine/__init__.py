"""
Hole assembly engine.

Triangulates surfaces, places obstacles and assembles loaded holes from
configurations or layouts.
"""

from .triangulator import triangulate, build_disc, ear_clip
from .terrain_height import TerrainHeightField
from .obstacle_placement import ObstaclePlacementEngine
from .config_generator import HoleConfigGenerator
from .layout import LayoutBuilder
from .scene import (
    Scene, SceneNode, Material, RenderBackend, InMemoryBackend,
    TextureLoader, ImmediateTextureLoader, DeferredTextureLoader
)
from .hole_assembly import HoleInstance, HoleComposer, CATEGORY_ORDER

__all__ = [
    "triangulate", "build_disc", "ear_clip", "TerrainHeightField",
    "ObstaclePlacementEngine", "HoleConfigGenerator", "LayoutBuilder",
    "Scene", "SceneNode", "Material", "RenderBackend", "InMemoryBackend",
    "TextureLoader", "ImmediateTextureLoader", "DeferredTextureLoader",
    "HoleInstance", "HoleComposer", "CATEGORY_ORDER"
]
