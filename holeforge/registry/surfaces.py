"""
Surface property table.

Maps surface keys (GREEN, FAIRWAY, ...) to the physical parameters consumed
by the ball-flight simulator and the visual parameters used by assembly.
The ``height`` column is the rendering-layer offset that keeps stacked
surfaces from z-fighting.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


FRICTION_SCALING_FACTOR = 2.0


@dataclass(frozen=True)
class SurfaceProperties:
    """Physical and visual parameters for one surface type."""

    key: str
    name: str
    color: str
    height: float
    bounce: float
    roll_out: float
    spin_response: float = 1.0
    ball_lie_offset: float = 0.0
    texture_path: Optional[str] = None
    is_penalty: bool = False

    @property
    def friction(self) -> float:
        """Rolling friction coefficient derived from roll-out."""
        return max(0.01, FRICTION_SCALING_FACTOR * (1.0 - self.roll_out))

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "name": self.name,
            "color": self.color,
            "height": self.height,
            "bounce": self.bounce,
            "roll_out": self.roll_out,
            "spin_response": self.spin_response,
            "ball_lie_offset": self.ball_lie_offset,
            "texture_path": self.texture_path,
            "is_penalty": self.is_penalty,
            "friction": self.friction,
        }


SURFACES: Dict[str, SurfaceProperties] = {
    "TEE": SurfaceProperties(
        key="TEE", name="Tee Box", color="#6AC46A", height=0.03,
        bounce=0.18, roll_out=0.50, spin_response=1.2, ball_lie_offset=0.16
    ),
    "GREEN": SurfaceProperties(
        key="GREEN", name="Green", color="#3A9A3A", height=0.02,
        bounce=0.30, roll_out=0.90, spin_response=1.5, ball_lie_offset=0.12,
        texture_path="assets/textures/green.png"
    ),
    "FAIRWAY": SurfaceProperties(
        key="FAIRWAY", name="Fairway", color="#5DBB5D", height=0.01,
        bounce=0.18, roll_out=0.50, spin_response=1.0, ball_lie_offset=0.11,
        texture_path="assets/textures/fairway.png"
    ),
    "LIGHT_ROUGH": SurfaceProperties(
        key="LIGHT_ROUGH", name="Light Rough", color="#228b22", height=0.0,
        bounce=0.14, roll_out=0.35, spin_response=0.7, ball_lie_offset=0.08,
        texture_path="assets/textures/rough.png"
    ),
    "MEDIUM_ROUGH": SurfaceProperties(
        key="MEDIUM_ROUGH", name="Medium Rough", color="#228b22", height=0.0,
        bounce=0.11, roll_out=0.25, spin_response=0.5, ball_lie_offset=-0.05,
        texture_path="assets/textures/rough.png"
    ),
    "THICK_ROUGH": SurfaceProperties(
        key="THICK_ROUGH", name="Thick Rough", color="#228b22", height=0.0,
        bounce=0.08, roll_out=0.15, spin_response=0.3, ball_lie_offset=-0.15,
        texture_path="assets/textures/rough.png"
    ),
    "BUNKER": SurfaceProperties(
        key="BUNKER", name="Bunker", color="#F4A460", height=0.04,
        bounce=0.06, roll_out=0.10, spin_response=0.4, ball_lie_offset=0.08,
        texture_path="assets/textures/bunker.png"
    ),
    "WATER": SurfaceProperties(
        key="WATER", name="Water", color="#4682B4", height=0.005,
        bounce=-1.0, roll_out=-1.0, spin_response=0.0, ball_lie_offset=-1.0,
        is_penalty=True
    ),
    "OUT_OF_BOUNDS": SurfaceProperties(
        key="OUT_OF_BOUNDS", name="Out of Bounds", color="#808080", height=-0.01,
        bounce=-1.0, roll_out=-1.0, spin_response=0.0, ball_lie_offset=0.0,
        is_penalty=True
    ),
}

# Display name -> key, so "Light Rough" and "LIGHT_ROUGH" resolve alike
_NAME_INDEX: Dict[str, str] = {
    props.name.upper(): key for key, props in SURFACES.items()
}


def _normalize(name: str) -> str:
    return name.strip().upper().replace(" ", "_")


def get_surface(name: Optional[str]) -> Optional[SurfaceProperties]:
    """
    Look up a surface by key or display name (case-insensitive).

    Returns:
        The surface properties, or None when the name is unknown
    """

    if not name:
        return None

    key = _normalize(name)
    if key in SURFACES:
        return SURFACES[key]

    key = _NAME_INDEX.get(name.strip().upper())
    return SURFACES[key] if key else None


def is_penalty_surface(name: Optional[str]) -> bool:
    """Whether landing on this surface costs a penalty stroke. Unknown names are neutral."""
    surface = get_surface(name)
    return surface.is_penalty if surface else False


def hex_to_rgb(color: str) -> Tuple[float, float, float]:
    """Convert '#RRGGBB' to floats in [0, 1]."""

    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected #RRGGBB color, got {color!r}")

    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
