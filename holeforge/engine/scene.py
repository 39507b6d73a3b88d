"""
Render-side collaborators of hole assembly.

The 3D graphics API lives outside this package. Assembly talks to it
through three small interfaces: a scene root (add/remove), a render backend
(nodes and materials) and a texture loader with completion callbacks.
In-memory implementations back the HTTP service, the dataset CLI and tests.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import ResourceLoadError
from ..geometry import Mesh


logger = logging.getLogger(__name__)


@dataclass
class Material:
    """Flat color or textured surface material."""

    color: str
    texture: Optional[Any] = None
    vertex_colors: bool = False
    disposed: bool = False

    @property
    def textured(self) -> bool:
        return self.texture is not None


@dataclass
class SceneNode:
    """One renderable object: a surface mesh, flagstick part or obstacle."""

    name: str
    mesh: Optional[Mesh]
    material: Optional[Material]
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    user_data: Dict[str, Any] = field(default_factory=dict)
    disposed: bool = False


class RenderBackend(ABC):
    """Mesh and material factory of the graphics layer."""

    @abstractmethod
    def create_node(
        self,
        name: str,
        mesh: Optional[Mesh],
        material: Optional[Material],
        position: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        **user_data
    ) -> SceneNode:
        pass

    @abstractmethod
    def flat_material(self, color: str, vertex_colors: bool = False) -> Material:
        pass

    @abstractmethod
    def textured_material(self, color: str, texture: Any) -> Material:
        pass

    @abstractmethod
    def dispose(self, node: SceneNode) -> None:
        """Release GPU-side resources of a node and its material."""
        pass


class InMemoryBackend(RenderBackend):
    """Backend that keeps everything in Python objects and counts live resources."""

    def __init__(self):
        self.created = 0
        self.disposed = 0

    def create_node(self, name, mesh, material, position=(0.0, 0.0, 0.0), **user_data):
        self.created += 1
        return SceneNode(name=name, mesh=mesh, material=material,
                         position=tuple(position), user_data=dict(user_data))

    def flat_material(self, color, vertex_colors=False):
        return Material(color=color, vertex_colors=vertex_colors)

    def textured_material(self, color, texture):
        return Material(color=color, texture=texture)

    def dispose(self, node):
        if node.disposed:
            return
        node.disposed = True
        if node.material is not None:
            node.material.disposed = True
        self.disposed += 1

    @property
    def live(self) -> int:
        return self.created - self.disposed


class Scene:
    """Scene root holding the nodes of the current hole."""

    def __init__(self):
        self.nodes: List[SceneNode] = []

    def add(self, node: SceneNode) -> None:
        self.nodes.append(node)

    def remove(self, node: SceneNode) -> None:
        if node in self.nodes:
            self.nodes.remove(node)

    def find(self, name: str) -> List[SceneNode]:
        return [n for n in self.nodes if n.name == name]

    def __len__(self) -> int:
        return len(self.nodes)


OnLoad = Callable[[Any], None]
OnError = Callable[[Exception], None]


class TextureLoader(ABC):
    """Fire-and-forget texture loading; exactly one callback fires per load."""

    @abstractmethod
    def load(self, path: str, on_load: OnLoad, on_error: OnError) -> None:
        pass


class ImmediateTextureLoader(TextureLoader):
    """
    Loads synchronously from a path -> texture mapping.

    Missing paths fail with ResourceLoadError.
    """

    def __init__(self, textures: Optional[Dict[str, Any]] = None):
        self.textures = textures or {}

    def load(self, path, on_load, on_error):
        if path in self.textures:
            on_load(self.textures[path])
        else:
            on_error(ResourceLoadError(path, "not found"))


class DeferredTextureLoader(TextureLoader):
    """Queues requests until ``resolve_all`` or ``fail_all`` is called."""

    def __init__(self):
        self.pending: List[Tuple[str, OnLoad, OnError]] = []

    def load(self, path, on_load, on_error):
        self.pending.append((path, on_load, on_error))

    def resolve_all(self, texture_factory: Callable[[str], Any] = lambda path: path) -> int:
        pending, self.pending = self.pending, []
        for path, on_load, _ in pending:
            on_load(texture_factory(path))
        return len(pending)

    def fail_all(self, cause: object = "load failed") -> int:
        pending, self.pending = self.pending, []
        for path, _, on_error in pending:
            on_error(ResourceLoadError(path, cause))
        return len(pending)
